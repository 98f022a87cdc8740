"""Simulated payer responses for eligibility checks.

The generator walks a fixed probability tree:

- unrecognized carrier: Unknown with ``UNKNOWN_INSURANCE`` (no draws)
- 75%: Active with randomly generated coverage
- 25%: failure, split into
    - 10% Unknown with an API failure
    - 20% Unknown with a verification issue
    - 70% Inactive with a not-eligible error

Randomness, time and id generation are constructor dependencies so tests can
pin every draw.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from collections.abc import Callable, Sequence
from datetime import date, datetime, timezone
from typing import Protocol, TypeVar

from utils.money import round_currency

from .catalog import (
    ApiFailure,
    InsuranceCarrier,
    NotEligible,
    UnrecognizedCarrier,
    VerificationIssue,
)
from .models import Coverage, EligibilityRecord, EligibilityStatus

logger = logging.getLogger(__name__)

# Percent thresholds on a [0, 100) scale
ACTIVE_THRESHOLD = 75.0
API_FAILURE_THRESHOLD = 10.0
VERIFICATION_ISSUE_THRESHOLD = 30.0

# Coverage ranges in dollars
DEDUCTIBLE_RANGE = (500.0, 3000.0)
COPAY_RANGE = (10.0, 50.0)
OUT_OF_POCKET_MAX_RANGE = (3000.0, 8000.0)

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with a ``random()`` returning floats in [0, 1)."""

    def random(self) -> float: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_eligibility_id() -> str:
    """Unique, time-ordered eligibility id, e.g. ``ELG-1706783400000000000-3F9A1C``."""
    return f"ELG-{time.time_ns()}-{uuid.uuid4().hex[:6].upper()}"


class OutcomeGenerator:
    """Produces eligibility records from a simulated payer network."""

    def __init__(
        self,
        rng: RandomSource | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_eligibility_id,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.id_factory = id_factory

    def generate(
        self,
        patient_id: str,
        insurance_member_id: str | None = None,
        insurance_company: str | None = None,
        service_date: date | None = None,
    ) -> EligibilityRecord:
        """Generate one eligibility result. Never raises for bad carrier input."""
        base = {
            "eligibility_id": self.id_factory(),
            "patient_id": patient_id,
            "check_date_time": self.clock().isoformat(),
            "insurance_member_id": insurance_member_id,
            "insurance_company": insurance_company,
            "service_date": service_date.isoformat() if service_date else None,
        }

        if not InsuranceCarrier.is_recognized(insurance_company):
            logger.info(f"Unrecognized insurance company for {base['eligibility_id']}")
            return EligibilityRecord(
                **base,
                status=EligibilityStatus.UNKNOWN,
                errors=(UnrecognizedCarrier.UNKNOWN_INSURANCE.to_error(),),
            )

        if self._percent() < ACTIVE_THRESHOLD:
            return EligibilityRecord(
                **base,
                status=EligibilityStatus.ACTIVE,
                coverage=self._coverage(),
            )

        failure = self._percent()
        if failure < API_FAILURE_THRESHOLD:
            status, error = EligibilityStatus.UNKNOWN, self._pick(list(ApiFailure))
        elif failure < VERIFICATION_ISSUE_THRESHOLD:
            status, error = EligibilityStatus.UNKNOWN, self._pick(list(VerificationIssue))
        else:
            status, error = EligibilityStatus.INACTIVE, self._pick(list(NotEligible))

        return EligibilityRecord(**base, status=status, errors=(error.to_error(),))

    def _percent(self) -> float:
        return self.rng.random() * 100

    def _uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.rng.random()

    def _pick(self, options: Sequence[T]) -> T:
        # min() guards against sources that return exactly 1.0
        index = min(int(self.rng.random() * len(options)), len(options) - 1)
        return options[index]

    def _coverage(self) -> Coverage:
        # "met" amounts are drawn against the rounded totals so they can't exceed them
        deductible = round_currency(self._uniform(*DEDUCTIBLE_RANGE))
        deductible_met = round_currency(self._uniform(0.0, deductible))
        copay = round_currency(self._uniform(*COPAY_RANGE))
        out_of_pocket_max = round_currency(self._uniform(*OUT_OF_POCKET_MAX_RANGE))
        out_of_pocket_met = round_currency(self._uniform(0.0, out_of_pocket_max))
        return Coverage(
            deductible=deductible,
            deductible_met=deductible_met,
            copay=copay,
            out_of_pocket_max=out_of_pocket_max,
            out_of_pocket_met=out_of_pocket_met,
        )
