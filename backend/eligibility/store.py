"""SQLite persistence for patients and eligibility checks.

Usage:
    store = EligibilityStore(db_path)
    inserted = store.insert_patient_if_absent(patient)
    store.append_record(record)
    records = store.query_records(patient_id="P123456")

Every call opens its own connection, so a store instance can be shared across
worker threads. Any ``sqlite3.Error`` surfaces as ``StorageError``.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from config import DB_TIMEOUT_SECONDS

from .exceptions import StorageError
from .models import (
    Coverage,
    EligibilityRecord,
    EligibilityStatus,
    Patient,
    VerificationError,
)

logger = logging.getLogger(__name__)

RECORD_COLUMNS = (
    "eligibility_id",
    "patient_id",
    "check_date_time",
    "insurance_member_id",
    "insurance_company",
    "service_date",
    "status",
    "deductible",
    "deductible_met",
    "copay",
    "out_of_pocket_max",
    "out_of_pocket_met",
    "errors",
)


class EligibilityStore:
    """Row store backing the patient registry and the check history.

    Attributes:
        db_path: Path to the SQLite database
        timeout: Seconds to wait on a locked database before failing
    """

    def __init__(self, db_path: str, timeout: float = DB_TIMEOUT_SECONDS) -> None:
        self.db_path = db_path
        self.timeout = timeout
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_tables()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and always close."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            logger.error(f"Could not open eligibility database {self.db_path}: {e}")
            raise StorageError(f"Could not open database: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Eligibility database operation failed: {e}")
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _init_tables(self) -> None:
        """Initialize database tables if they don't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS patients (
                    patient_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    date_of_birth TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS eligibility_checks (
                    eligibility_id TEXT PRIMARY KEY,
                    patient_id TEXT NOT NULL,
                    check_date_time TEXT NOT NULL,
                    insurance_member_id TEXT,
                    insurance_company TEXT,
                    service_date TEXT,
                    status TEXT NOT NULL,
                    deductible REAL,
                    deductible_met REAL,
                    copay REAL,
                    out_of_pocket_max REAL,
                    out_of_pocket_met REAL,
                    errors TEXT NOT NULL DEFAULT '[]',
                    FOREIGN KEY (patient_id) REFERENCES patients(patient_id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_checks_patient
                ON eligibility_checks(patient_id, check_date_time DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_checks_time
                ON eligibility_checks(check_date_time DESC)
            """)
            logger.info("Eligibility tables initialized")

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------

    def insert_patient_if_absent(self, patient: Patient) -> bool:
        """Atomically insert a patient unless the id already exists.

        Returns:
            True if this call created the row, False if a row was already there
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO patients (patient_id, name, date_of_birth, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    patient.patient_id,
                    patient.name,
                    patient.date_of_birth.isoformat(),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            return cursor.rowcount == 1

    def get_patient(self, patient_id: str) -> Patient | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT patient_id, name, date_of_birth FROM patients WHERE patient_id = ?",
                (patient_id,),
            ).fetchone()
        return _row_to_patient(row) if row else None

    def list_patients(self) -> list[Patient]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT patient_id, name, date_of_birth FROM patients ORDER BY created_at DESC"
            ).fetchall()
        return [_row_to_patient(row) for row in rows]

    # ------------------------------------------------------------------
    # Eligibility checks
    # ------------------------------------------------------------------

    def append_record(self, record: EligibilityRecord) -> None:
        coverage = record.coverage
        values = (
            record.eligibility_id,
            record.patient_id,
            record.check_date_time,
            record.insurance_member_id,
            record.insurance_company,
            record.service_date,
            record.status.value,
            coverage.deductible if coverage else None,
            coverage.deductible_met if coverage else None,
            coverage.copay if coverage else None,
            coverage.out_of_pocket_max if coverage else None,
            coverage.out_of_pocket_met if coverage else None,
            json.dumps([e.to_dict() for e in record.errors]),
        )
        placeholders = ", ".join("?" for _ in RECORD_COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO eligibility_checks ({', '.join(RECORD_COLUMNS)}) "
                f"VALUES ({placeholders})",
                values,
            )

    def query_records(
        self,
        patient_id: str | None = None,
        status: EligibilityStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[EligibilityRecord]:
        """Return matching records, newest check first.

        Date bounds are inclusive and compare against the calendar day of
        ``check_date_time``.
        """
        conditions: list[str] = []
        params: list[Any] = []

        if patient_id is not None:
            conditions.append("patient_id = ?")
            params.append(patient_id)
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if start_date is not None:
            conditions.append("substr(check_date_time, 1, 10) >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            conditions.append("substr(check_date_time, 1, 10) <= ?")
            params.append(end_date.isoformat())

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"""
            SELECT {', '.join(RECORD_COLUMNS)}
            FROM eligibility_checks
            {where}
            ORDER BY check_date_time DESC, rowid DESC
        """
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_record(row) for row in rows]

    def count_by_status(self) -> dict[str, int]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT status, COUNT(*) FROM eligibility_checks GROUP BY status"
            ).fetchall()
        return {row[0]: row[1] for row in rows}


def _row_to_patient(row: sqlite3.Row) -> Patient:
    return Patient(
        patient_id=row["patient_id"],
        name=row["name"],
        date_of_birth=date.fromisoformat(row["date_of_birth"]),
    )


def _row_to_record(row: sqlite3.Row) -> EligibilityRecord:
    coverage = None
    if row["deductible"] is not None:
        coverage = Coverage(
            deductible=row["deductible"],
            deductible_met=row["deductible_met"] or 0.0,
            copay=row["copay"] or 0.0,
            out_of_pocket_max=row["out_of_pocket_max"] or 0.0,
            out_of_pocket_met=row["out_of_pocket_met"] or 0.0,
        )

    try:
        raw_errors = json.loads(row["errors"] or "[]")
    except json.JSONDecodeError:
        logger.warning(f"Failed to parse errors for {row['eligibility_id']}")
        raw_errors = []

    return EligibilityRecord(
        eligibility_id=row["eligibility_id"],
        patient_id=row["patient_id"],
        check_date_time=row["check_date_time"],
        insurance_member_id=row["insurance_member_id"],
        insurance_company=row["insurance_company"],
        service_date=row["service_date"],
        status=EligibilityStatus(row["status"]),
        coverage=coverage,
        errors=tuple(
            VerificationError(code=e["code"], message=e["message"]) for e in raw_errors
        ),
    )
