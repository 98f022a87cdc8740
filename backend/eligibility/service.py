"""Eligibility verification orchestration.

Usage:
    service = get_service()
    record = service.verify(request)
    history = service.history_for("P123456")
"""

from __future__ import annotations

import logging
import threading

import config

from .generator import OutcomeGenerator
from .history import HistoryStore
from .models import EligibilityRecord, VerificationRequest
from .registry import PatientRegistry
from .store import EligibilityStore

logger = logging.getLogger(__name__)

_services: dict[str, EligibilityService] = {}
_services_lock = threading.Lock()


class EligibilityService:
    """Runs a verification request end to end.

    Every step depends on the previous one succeeding: a registry conflict
    or storage failure stops the pipeline before anything further happens.
    """

    def __init__(
        self,
        registry: PatientRegistry,
        generator: OutcomeGenerator,
        history: HistoryStore,
    ) -> None:
        self.registry = registry
        self.generator = generator
        self.history = history

    @classmethod
    def from_store(
        cls, store: EligibilityStore, generator: OutcomeGenerator | None = None
    ) -> EligibilityService:
        return cls(
            registry=PatientRegistry(store),
            generator=generator or OutcomeGenerator(),
            history=HistoryStore(store),
        )

    def verify(self, request: VerificationRequest) -> EligibilityRecord:
        """Check a patient's eligibility and record the result.

        Raises:
            ConflictError: The patient id is registered with other demographics
            StorageError: The registry or history store failed
        """
        self.registry.reconcile(
            request.patient_id, request.name, request.date_of_birth
        )

        record = self.generator.generate(
            request.patient_id,
            insurance_member_id=request.insurance_member_id,
            insurance_company=request.insurance_company,
            service_date=request.service_date,
        )

        self.history.append(record)
        logger.info(
            f"Eligibility check {record.eligibility_id} for patient "
            f"{record.patient_id}: {record.status.value}"
        )
        return record

    def history_for(self, patient_id: str) -> list[EligibilityRecord]:
        return self.history.list_by_patient(patient_id)

    def all_history(self) -> list[EligibilityRecord]:
        return self.history.list_all()


def get_service() -> EligibilityService:
    """Get or create the service for the configured database."""
    db_path = config.get_db_path()
    service = _services.get(db_path)
    if service is not None:
        return service

    with _services_lock:
        if db_path not in _services:
            _services[db_path] = EligibilityService.from_store(EligibilityStore(db_path))
        return _services[db_path]
