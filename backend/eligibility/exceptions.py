"""Exceptions raised by the eligibility verification engine."""

from __future__ import annotations


class EligibilityError(Exception):
    """Base class for eligibility engine errors."""


class ConflictError(EligibilityError):
    """Raised when a patient id is re-registered with different demographics.

    Attributes:
        patient_id: Identifier of the already stored patient
        field: The mismatched field, ``"name"`` or ``"date of birth"``
    """

    def __init__(self, patient_id: str, field: str) -> None:
        self.patient_id = patient_id
        self.field = field
        super().__init__(
            f"Patient {patient_id} is already registered with a different {field}"
        )


class StorageError(EligibilityError):
    """Raised when the underlying store fails to read or write."""
