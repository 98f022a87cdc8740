"""Tests for audit logging routes."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def test_db():
    """Create a temporary test database."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def client(test_db):
    """Create test client with patched database."""
    with patch.dict(os.environ, {"DB_PATH": test_db}):
        from app import app

        with TestClient(app) as client:
            yield client


class TestAuditLogEvent:
    """Tests for log_audit_event function."""

    def test_logs_basic_event(self, test_db):
        """Test logging a basic audit event."""
        with patch.dict(os.environ, {"DB_PATH": test_db}):
            from routes.audit import get_db, init_audit_table, log_audit_event

            conn = get_db()
            init_audit_table(conn)

            audit_id = log_audit_event(
                conn,
                action="eligibility.check",
                resource_type="eligibility",
                resource_id="ELG-1",
                details={"patient_id": "P1", "status": "Active"},
                ip_address="10.0.0.1",
            )

            assert len(audit_id) == 36  # UUID format

            row = conn.execute(
                "SELECT action, resource_type, resource_id, details, ip_address, status "
                "FROM audit_logs WHERE id = ?",
                (audit_id,),
            ).fetchone()
            conn.close()

        assert row[0] == "eligibility.check"
        assert row[1] == "eligibility"
        assert row[2] == "ELG-1"
        assert json.loads(row[3]) == {"patient_id": "P1", "status": "Active"}
        assert row[4] == "10.0.0.1"
        assert row[5] == "success"

    def test_table_created_once_per_database(self, test_db):
        """A second init on the same path skips the schema work."""
        with patch.dict(os.environ, {"DB_PATH": test_db}):
            import routes.audit as audit_module

            conn = audit_module.get_db()
            audit_module.init_audit_table(conn)
            assert test_db in audit_module._initialized_paths

            conn.execute("DROP TABLE audit_logs")
            audit_module.init_audit_table(conn)

            with pytest.raises(sqlite3.OperationalError):
                conn.execute("SELECT COUNT(*) FROM audit_logs")
            conn.close()
            audit_module._initialized_paths.discard(test_db)


class TestListAuditLogs:
    """Tests for the list_audit_logs endpoint."""

    def test_returns_empty_list_initially(self, client):
        response = client.get("/api/audit")
        assert response.status_code == 200

        data = response.json()
        assert data["entries"] == []
        assert data["total"] == 0
        assert data["limit"] == 50
        assert data["offset"] == 0

    def test_patient_registration_is_audited(self, client):
        client.post(
            "/api/patients",
            json={"patient_id": "P1", "name": "Jane Doe", "date_of_birth": "1990-01-01"},
        )

        data = client.get("/api/audit", params={"action": "patient.create"}).json()

        assert data["total"] == 1
        assert data["entries"][0]["resource_type"] == "patient"
        assert data["entries"][0]["resource_id"] == "P1"
        assert data["filters_applied"]["action"] == "patient.create"

    def test_pagination(self, client, test_db):
        with patch.dict(os.environ, {"DB_PATH": test_db}):
            from routes.audit import get_db, init_audit_table, log_audit_event

            conn = get_db()
            init_audit_table(conn)
            for i in range(25):
                log_audit_event(conn, action="eligibility.check", resource_id=f"ELG-{i}")
            conn.close()

        page = client.get("/api/audit", params={"limit": 10, "offset": 20}).json()

        assert page["total"] == 25
        assert len(page["entries"]) == 5

    def test_conflict_is_not_audited(self, client):
        body = {"patient_id": "P1", "name": "Jane Doe", "date_of_birth": "1990-01-01"}
        client.post("/api/patients", json=body)
        body["name"] = "Janet Doe"

        response = client.post("/api/patients", json=body)

        assert response.status_code == 409
        assert client.get("/api/audit").json()["total"] == 1
