"""Insurance Eligibility Verification Backend Package.

This package provides the FastAPI backend for clinic insurance eligibility
checks, including:

- Patient registration with conflict detection
- Simulated payer eligibility responses
- Append-only eligibility check history
- HIPAA audit logging

Usage:
    # Development (from project root):
    PYTHONPATH=backend uvicorn app:app --reload --port 8080

Modules:
    app: FastAPI application entry point
    eligibility: Verification engine (registry, generator, history, service)
    routes: Eligibility, patient and audit routers
    schemas: Request validation models
    config: Environment-driven settings
"""

__version__ = "0.1.0"
