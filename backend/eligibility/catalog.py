"""Recognized carriers and the fixed error catalogs for simulated payer responses.

Each catalog is an ``Enum`` whose members carry a ``code`` and a ``message``.
The outcome generator only ever draws errors from these enums, so the set of
possible results is closed.
"""

from __future__ import annotations

from enum import Enum

from .models import VerificationError


class InsuranceCarrier(str, Enum):
    """Carriers the simulated payer network can answer for."""

    UNITED_HEALTHCARE = "UnitedHealthCare"
    ELEVANCE_HEALTH = "Elevance Health"
    KAISER_PERMANENTE = "Kaiser Permanente"
    CIGNA = "Cigna"
    MOLINA_HEALTHCARE = "Molina Healthcare"
    BLUECROSS_BLUESHIELD = "BlueCross BlueShield"

    @classmethod
    def is_recognized(cls, company: str | None) -> bool:
        if not company:
            return False
        return any(company == carrier.value for carrier in cls)


class CatalogError(Enum):
    """Base for error catalogs; members are ``(code, message)`` pairs."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message

    def to_error(self) -> VerificationError:
        return VerificationError(code=self.code, message=self.message)


class UnrecognizedCarrier(CatalogError):
    UNKNOWN_INSURANCE = (
        "UNKNOWN_INSURANCE",
        "Insurance company is not recognized or is not supported for verification",
    )


class ApiFailure(CatalogError):
    """The payer could not be reached or returned garbage."""

    PAYER_TIMEOUT = (
        "PAYER_TIMEOUT",
        "The insurance company did not respond in time. Please try again later",
    )
    PAYER_UNAVAILABLE = (
        "PAYER_UNAVAILABLE",
        "The insurance company's eligibility service is temporarily unavailable",
    )
    INVALID_PAYER_RESPONSE = (
        "INVALID_PAYER_RESPONSE",
        "The insurance company returned a response that could not be processed",
    )
    CLEARINGHOUSE_ERROR = (
        "CLEARINGHOUSE_ERROR",
        "The clearinghouse rejected the eligibility inquiry due to an internal error",
    )


class VerificationIssue(CatalogError):
    """The payer answered but could not match the member."""

    MEMBER_NOT_FOUND = (
        "MEMBER_NOT_FOUND",
        "No member matching the supplied information was found",
    )
    MEMBER_ID_INVALID = (
        "MEMBER_ID_INVALID",
        "The insurance member ID is missing or has an invalid format",
    )
    SUBSCRIBER_NAME_MISMATCH = (
        "SUBSCRIBER_NAME_MISMATCH",
        "Patient name does not match the name on file with the insurance company",
    )
    SUBSCRIBER_DOB_MISMATCH = (
        "SUBSCRIBER_DOB_MISMATCH",
        "Patient date of birth does not match the date on file with the insurance company",
    )


class NotEligible(CatalogError):
    """The member was found but has no active coverage."""

    INSURANCE_EXPIRED = (
        "INSURANCE_EXPIRED",
        "Insurance policy has expired",
    )
    COVERAGE_TERMINATED = (
        "COVERAGE_TERMINATED",
        "Coverage was terminated by the plan sponsor",
    )
    PLAN_NOT_ACTIVE = (
        "PLAN_NOT_ACTIVE",
        "The member's plan is not yet active for the requested date",
    )
    SERVICE_NOT_COVERED = (
        "SERVICE_NOT_COVERED",
        "The requested service is not covered under the member's plan",
    )
