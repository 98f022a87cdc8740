"""Pytest configuration and fixtures."""

from __future__ import annotations

import atexit
import itertools
import os
import sys
import tempfile
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add backend to path for imports
backend_path = str(Path(__file__).parent.parent / "backend")
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)

# Set test database path before importing app
_temp_db = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_temp_db_path = _temp_db.name
_temp_db.close()
os.environ["DB_PATH"] = _temp_db_path
os.environ.setdefault("ELIGIBILITY_RATE_LIMIT", "1000/minute")

from eligibility import (  # noqa: E402
    EligibilityService,
    EligibilityStore,
    OutcomeGenerator,
    VerificationRequest,
)


def _cleanup_test_db() -> None:
    """Clean up temporary test database file."""
    if os.path.exists(_temp_db_path):
        try:
            os.unlink(_temp_db_path)
        except OSError:
            pass  # File may already be deleted or locked


# Register cleanup to run at exit
atexit.register(_cleanup_test_db)


class SequenceRandom:
    """Random source that replays the given draws, cycling when exhausted."""

    def __init__(self, *values: float) -> None:
        self.values = values
        self._draws = itertools.cycle(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._draws)


class ExplodingRandom:
    """Random source that fails the test if anything draws from it."""

    def random(self) -> float:
        raise AssertionError("random source should not be used")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "eligibility.db")


@pytest.fixture
def store(db_path: str) -> EligibilityStore:
    return EligibilityStore(db_path)


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Clock that advances one minute per call, starting 2024-02-01 10:30 UTC."""
    start = datetime(2024, 2, 1, 10, 30, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"ELG-TEST-{next(counter):04d}"


@pytest.fixture
def make_service(
    store: EligibilityStore,
    ticking_clock: Callable[[], datetime],
    sequential_ids: Callable[[], str],
) -> Callable[..., EligibilityService]:
    """Build a service on the test store with the given draws."""

    def _make(*draws: float) -> EligibilityService:
        generator = OutcomeGenerator(
            rng=SequenceRandom(*draws) if draws else None,
            clock=ticking_clock,
            id_factory=sequential_ids,
        )
        return EligibilityService.from_store(store, generator=generator)

    return _make


@pytest.fixture
def jane_doe_request() -> VerificationRequest:
    """Sample verification request for a Cigna member."""
    return VerificationRequest(
        patient_id="P1",
        name="Jane Doe",
        date_of_birth=date(1990, 1, 1),
        service_date=date(2024, 2, 1),
        insurance_member_id="MBR001",
        insurance_company="Cigna",
    )


@pytest.fixture
def check_payload() -> dict[str, str]:
    """Sample JSON body for POST /api/eligibility/check."""
    return {
        "patient_id": "P123456",
        "name": "John Doe",
        "date_of_birth": "1985-03-15",
        "service_date": "2024-02-01",
        "insurance_member_id": "MBR001",
        "insurance_company": "Cigna",
    }


@pytest.fixture
def sequence_random() -> type[SequenceRandom]:
    return SequenceRandom


@pytest.fixture
def exploding_random() -> ExplodingRandom:
    return ExplodingRandom()
