"""Tests for patient registration and conflict detection."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from eligibility import ConflictError, EligibilityStore, Patient, PatientRegistry


@pytest.fixture
def registry(store: EligibilityStore) -> PatientRegistry:
    return PatientRegistry(store)


class TestReconcile:
    """Test PatientRegistry.reconcile."""

    def test_first_registration_stores_patient(self, registry, store):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        assert store.get_patient("P1") == Patient("P1", "Jane Doe", date(1990, 1, 1))

    def test_identical_registration_is_idempotent(self, registry, store):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        assert store.list_patients() == [Patient("P1", "Jane Doe", date(1990, 1, 1))]

    def test_date_of_birth_mismatch_conflicts(self, registry, store):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        with pytest.raises(ConflictError) as exc_info:
            registry.reconcile("P1", "Jane Doe", date(1990, 1, 2))

        assert exc_info.value.field == "date of birth"
        assert exc_info.value.patient_id == "P1"
        assert store.get_patient("P1").date_of_birth == date(1990, 1, 1)

    def test_name_mismatch_conflicts(self, registry, store):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        with pytest.raises(ConflictError) as exc_info:
            registry.reconcile("P1", "Jane Smith", date(1990, 1, 1))

        assert exc_info.value.field == "name"
        assert store.get_patient("P1").name == "Jane Doe"

    def test_name_checked_before_date_of_birth(self, registry):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        with pytest.raises(ConflictError, match="different name"):
            registry.reconcile("P1", "Janet Doe", date(1991, 6, 6))

    def test_name_comparison_is_exact(self, registry):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        with pytest.raises(ConflictError):
            registry.reconcile("P1", "jane doe", date(1990, 1, 1))

    def test_different_ids_are_independent(self, registry, store):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))
        registry.reconcile("P2", "Jane Doe", date(1990, 1, 2))

        assert {p.patient_id for p in store.list_patients()} == {"P1", "P2"}

    def test_registration_survives_new_store_instance(self, registry, db_path):
        registry.reconcile("P1", "Jane Doe", date(1990, 1, 1))

        reopened = PatientRegistry(EligibilityStore(db_path))
        with pytest.raises(ConflictError):
            reopened.reconcile("P1", "Jane Doe", date(2000, 1, 1))


class TestConcurrentRegistration:
    """Racing first registrations for the same id."""

    def test_only_one_version_wins(self, registry, store):
        names = ["Jane Doe", "Janet Doe"] * 8

        def attempt(name: str) -> str:
            try:
                registry.reconcile("P-RACE", name, date(1990, 1, 1))
            except ConflictError:
                return "conflict"
            return name

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, names))

        winner = store.get_patient("P-RACE").name
        loser = "Janet Doe" if winner == "Jane Doe" else "Jane Doe"
        assert results.count(winner) == 8
        assert results.count("conflict") == 8
        assert loser not in results
        assert len(store.list_patients()) == 1
