"""Audit logging routes for HIPAA compliance.

Provides:
- ``log_audit_event`` for recording who touched which patient or check
- An endpoint listing audit log entries with filtering and pagination

Security Note:
    These endpoints should be protected by authentication middleware in
    production. Access to audit logs should be restricted to compliance staff.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audit", tags=["audit"])

# Databases whose audit table has already been created
_initialized_paths: set[str] = set()
_audit_table_lock = threading.Lock()


class AuditAction(str, Enum):
    """Types of auditable actions."""

    ELIGIBILITY_CHECK = "eligibility.check"
    PATIENT_CREATE = "patient.create"


class AuditLogEntry(BaseModel):
    """Single audit log entry."""

    id: str
    timestamp: str
    action: str
    resource_type: str | None = None
    resource_id: str | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    status: str = "success"


class AuditLogListResponse(BaseModel):
    """Response for audit log listing."""

    entries: list[AuditLogEntry]
    total: int
    limit: int
    offset: int
    filters_applied: dict[str, Any]


def get_db() -> sqlite3.Connection:
    """Get database connection."""
    return sqlite3.connect(
        config.get_db_path(), timeout=config.DB_TIMEOUT_SECONDS, check_same_thread=False
    )


def init_audit_table(conn: sqlite3.Connection, db_path: str | None = None) -> None:
    """Create the audit_logs table once per database.

    Thread-safe via _audit_table_lock so concurrent handlers don't race on
    the first CREATE TABLE.
    """
    db_path = db_path or config.get_db_path()

    # Fast path: already initialized (no lock needed for read)
    if db_path in _initialized_paths:
        return

    with _audit_table_lock:
        if db_path in _initialized_paths:
            return

        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS audit_logs (
                id TEXT PRIMARY KEY,
                timestamp TEXT NOT NULL,
                action TEXT NOT NULL,
                resource_type TEXT,
                resource_id TEXT,
                details TEXT,
                ip_address TEXT,
                user_agent TEXT,
                status TEXT DEFAULT 'success'
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_resource ON audit_logs(resource_type, resource_id)"
        )
        conn.commit()
        _initialized_paths.add(db_path)


def log_audit_event(
    conn: sqlite3.Connection,
    action: str,
    resource_type: str | None = None,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    status: str = "success",
) -> str:
    """Log an audit event to the database.

    Returns the audit log entry ID.
    """
    audit_id = str(uuid.uuid4())
    timestamp = datetime.now(timezone.utc).isoformat()

    conn.execute(
        """
        INSERT INTO audit_logs (
            id, timestamp, action, resource_type, resource_id,
            details, ip_address, user_agent, status
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            audit_id,
            timestamp,
            action,
            resource_type,
            resource_id,
            json.dumps(details) if details else None,
            ip_address,
            user_agent,
            status,
        ),
    )
    conn.commit()

    return audit_id


@router.get("", response_model=AuditLogListResponse)
def list_audit_logs(
    limit: int = Query(default=50, ge=1, le=config.AUDIT_MAX_ROWS),
    offset: int = Query(default=0, ge=0),
    action: str | None = Query(default=None, description="Filter by action type"),
    resource_type: str | None = Query(
        default=None, description="Filter by resource type"
    ),
    resource_id: str | None = Query(default=None, description="Filter by resource ID"),
) -> AuditLogListResponse:
    """List audit log entries with filtering and pagination."""
    conn = get_db()
    try:
        init_audit_table(conn)

        conditions = []
        params: list[Any] = []

        if action:
            conditions.append("action = ?")
            params.append(action)

        if resource_type:
            conditions.append("resource_type = ?")
            params.append(resource_type)

        if resource_id:
            conditions.append("resource_id = ?")
            params.append(resource_id)

        # Column names are hardcoded; user input only reaches the query as parameters
        where_clause = " AND ".join(conditions) if conditions else "1=1"

        cursor = conn.cursor()
        cursor.execute(f"SELECT COUNT(*) FROM audit_logs WHERE {where_clause}", params)
        total = cursor.fetchone()[0]

        cursor.execute(
            f"""
            SELECT id, timestamp, action, resource_type, resource_id,
                   details, ip_address, user_agent, status
            FROM audit_logs
            WHERE {where_clause}
            ORDER BY timestamp DESC
            LIMIT ? OFFSET ?
            """,
            params + [limit, offset],
        )
        rows = cursor.fetchall()
    finally:
        conn.close()

    entries = []
    for row in rows:
        details = None
        if row[5]:
            try:
                details = json.loads(row[5])
            except json.JSONDecodeError:
                details = {"raw": row[5]}

        entries.append(
            AuditLogEntry(
                id=row[0],
                timestamp=row[1],
                action=row[2],
                resource_type=row[3],
                resource_id=row[4],
                details=details,
                ip_address=row[6],
                user_agent=row[7],
                status=row[8] or "success",
            )
        )

    return AuditLogListResponse(
        entries=entries,
        total=total,
        limit=limit,
        offset=offset,
        filters_applied={
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
        },
    )


def record_request_event(
    request: Request,
    action: AuditAction,
    resource_type: str,
    resource_id: str,
    details: dict[str, Any] | None = None,
) -> str | None:
    """Audit an API action, tagging it with the caller's address and agent.

    The action being audited has already been committed, so a failed audit
    write is logged rather than raised.
    """
    try:
        conn = get_db()
        try:
            init_audit_table(conn)
            return log_audit_event(
                conn,
                action=action.value,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
            )
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning(f"Failed to write audit event {action.value} for {resource_id}: {e}")
        return None
