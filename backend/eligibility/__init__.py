"""Insurance eligibility verification engine.

Reconciles patient registrations, simulates payer eligibility responses and
keeps an append-only history of every check.
"""

from .exceptions import ConflictError, EligibilityError, StorageError
from .generator import OutcomeGenerator
from .history import HistoryStore
from .models import (
    Coverage,
    EligibilityRecord,
    EligibilityStatus,
    Patient,
    VerificationError,
    VerificationRequest,
)
from .registry import PatientRegistry
from .service import EligibilityService, get_service
from .store import EligibilityStore

__all__ = [
    "ConflictError",
    "Coverage",
    "EligibilityError",
    "EligibilityRecord",
    "EligibilityService",
    "EligibilityStatus",
    "EligibilityStore",
    "HistoryStore",
    "OutcomeGenerator",
    "Patient",
    "PatientRegistry",
    "StorageError",
    "VerificationError",
    "VerificationRequest",
    "get_service",
]
