"""Shared Pydantic schemas for the eligibility backend.

This module centralizes request models used across multiple routers
to prevent drift between duplicate definitions.
"""

from .eligibility import EligibilityCheckRequest
from .patients import PatientCreateRequest

__all__ = ["EligibilityCheckRequest", "PatientCreateRequest"]
