"""Patient registry: one canonical demographic record per patient id."""

from __future__ import annotations

import logging
from datetime import date

from .exceptions import ConflictError, StorageError
from .models import Patient
from .store import EligibilityStore

logger = logging.getLogger(__name__)


class PatientRegistry:
    """Reconciles incoming patient demographics with the stored record."""

    def __init__(self, store: EligibilityStore) -> None:
        self.store = store

    def reconcile(self, patient_id: str, name: str, date_of_birth: date) -> None:
        """Register a patient, or confirm an existing registration matches.

        The insert is attempted first and only compared on a miss, so two
        concurrent first registrations can't both win: the loser sees the
        winner's row and goes through the same comparison as any re-registration.

        Raises:
            ConflictError: The id is stored with a different name or date of birth
            StorageError: The store failed
        """
        incoming = Patient(patient_id=patient_id, name=name, date_of_birth=date_of_birth)
        if self.store.insert_patient_if_absent(incoming):
            logger.info(f"Registered new patient {patient_id}")
            return

        existing = self.store.get_patient(patient_id)
        if existing is None:
            # INSERT OR IGNORE skipped the row, so it must exist
            raise StorageError(f"Patient {patient_id} disappeared during registration")

        if existing.name != name:
            logger.warning(f"Patient {patient_id} re-registered with a different name")
            raise ConflictError(patient_id, "name")
        if existing.date_of_birth != date_of_birth:
            logger.warning(f"Patient {patient_id} re-registered with a different date of birth")
            raise ConflictError(patient_id, "date of birth")
