"""Shared configuration for the eligibility verification backend.

This module centralizes environment variable access and default values
to prevent drift between modules.
"""

import os

# Database configuration
DB_PATH = os.getenv("DB_PATH", "./data/eligibility.db")

# Seconds sqlite waits on a locked database before giving up
DB_TIMEOUT_SECONDS = float(os.getenv("DB_TIMEOUT_SECONDS", "5.0"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Rate limiting for eligibility checks (slowapi limit string)
ELIGIBILITY_RATE_LIMIT = os.getenv("ELIGIBILITY_RATE_LIMIT", "60/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# CORS configuration (comma-separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,"
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

# Maximum audit rows returned by a single listing
AUDIT_MAX_ROWS = int(os.getenv("AUDIT_MAX_ROWS", "1000"))


def get_db_path() -> str:
    """Current database path; re-read so tests can repoint DB_PATH."""
    return os.getenv("DB_PATH", DB_PATH)
