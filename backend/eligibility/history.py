"""Append-only history of eligibility checks."""

from __future__ import annotations

from datetime import date

from .models import EligibilityRecord, EligibilityStatus
from .store import EligibilityStore


class HistoryStore:
    """Records every eligibility check and serves them newest first."""

    def __init__(self, store: EligibilityStore) -> None:
        self.store = store

    def append(self, record: EligibilityRecord) -> None:
        self.store.append_record(record)

    def list_by_patient(self, patient_id: str) -> list[EligibilityRecord]:
        return self.store.query_records(patient_id=patient_id)

    def list_all(self) -> list[EligibilityRecord]:
        return self.store.query_records()

    def search(
        self,
        patient_id: str | None = None,
        status: EligibilityStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[EligibilityRecord]:
        """Filter checks by patient, status and check date (inclusive bounds)."""
        return self.store.query_records(
            patient_id=patient_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )

    def status_counts(self) -> dict[str, int]:
        """Number of recorded checks per status, zero-filled."""
        counts = self.store.count_by_status()
        return {status.value: counts.get(status.value, 0) for status in EligibilityStatus}
