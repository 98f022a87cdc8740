"""Pydantic schemas for eligibility check endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import field_validator

from eligibility import VerificationRequest

from .patients import PatientCreateRequest, coerce_date


class EligibilityCheckRequest(PatientCreateRequest):
    """Request body for POST /api/eligibility/check."""

    service_date: date
    insurance_member_id: str | None = None
    insurance_company: str | None = None

    @field_validator("service_date", mode="before")
    @classmethod
    def parse_service_date(cls, v: Any) -> date:
        return coerce_date(v)

    def to_verification_request(self) -> VerificationRequest:
        return VerificationRequest(
            patient_id=self.patient_id,
            name=self.name,
            date_of_birth=self.date_of_birth,
            service_date=self.service_date,
            insurance_member_id=self.insurance_member_id,
            insurance_company=self.insurance_company,
        )
