"""Pydantic schemas for patient registration."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, field_validator

from utils import parse_flexible_date

DATE_FORMAT_HINT = "Expected YYYY-MM-DD, MM/DD/YYYY or YYYYMMDD"


def coerce_date(value: Any) -> date:
    """Parse a request date or raise ValueError for pydantic to report."""
    if not isinstance(value, (str, date)):
        raise ValueError(f"Invalid date. {DATE_FORMAT_HINT}")
    parsed = parse_flexible_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date. {DATE_FORMAT_HINT}")
    return parsed


class PatientCreateRequest(BaseModel):
    """Patient demographics as sent by the front desk."""

    patient_id: str
    name: str
    date_of_birth: date

    @field_validator("patient_id", "name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be blank")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def parse_date_of_birth(cls, v: Any) -> date:
        return coerce_date(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v
