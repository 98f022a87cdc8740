"""Data models for the eligibility verification engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from utils.money import calculate_remaining


class EligibilityStatus(str, Enum):
    """Outcome of an eligibility check."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Patient:
    """Canonical demographic record for a patient id."""

    patient_id: str
    name: str
    date_of_birth: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "patient_id": self.patient_id,
            "name": self.name,
            "date_of_birth": self.date_of_birth.isoformat(),
        }


@dataclass(frozen=True)
class Coverage:
    """Benefit figures returned for an active policy.

    All amounts are in dollars, rounded to cents.
    """

    deductible: float
    deductible_met: float
    copay: float
    out_of_pocket_max: float
    out_of_pocket_met: float

    @property
    def deductible_remaining(self) -> float:
        return calculate_remaining(self.deductible, self.deductible_met)

    @property
    def out_of_pocket_remaining(self) -> float:
        return calculate_remaining(self.out_of_pocket_max, self.out_of_pocket_met)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "deductible": self.deductible,
            "deductible_met": self.deductible_met,
            "deductible_remaining": self.deductible_remaining,
            "copay": self.copay,
            "out_of_pocket_max": self.out_of_pocket_max,
            "out_of_pocket_met": self.out_of_pocket_met,
            "out_of_pocket_remaining": self.out_of_pocket_remaining,
        }


@dataclass(frozen=True)
class VerificationError:
    """A code/message pair explaining a non-active result."""

    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class EligibilityRecord:
    """A single, immutable eligibility check result."""

    eligibility_id: str
    patient_id: str
    check_date_time: str  # ISO 8601, UTC
    status: EligibilityStatus
    insurance_member_id: str | None = None
    insurance_company: str | None = None
    service_date: str | None = None  # YYYY-MM-DD
    coverage: Coverage | None = None
    errors: tuple[VerificationError, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "eligibility_id": self.eligibility_id,
            "patient_id": self.patient_id,
            "check_date_time": self.check_date_time,
            "insurance_member_id": self.insurance_member_id,
            "insurance_company": self.insurance_company,
            "service_date": self.service_date,
            "status": self.status.value,
            "coverage": self.coverage.to_dict() if self.coverage else None,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass(frozen=True)
class VerificationRequest:
    """Inputs required to run one eligibility check."""

    patient_id: str
    name: str
    date_of_birth: date
    service_date: date
    insurance_member_id: str | None = None
    insurance_company: str | None = None
