"""API route modules for the eligibility verification service.

Routers:
- eligibility: run checks and query the check history
- patients: patient registration and lookup
- audit: HIPAA audit trail listing
"""

from .audit import router as audit_router
from .eligibility import router as eligibility_router
from .patients import router as patients_router

__all__ = ["audit_router", "eligibility_router", "patients_router"]
