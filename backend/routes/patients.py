"""Patient registration routes.

Registration goes through the same reconciliation an eligibility check uses,
so re-posting identical demographics is harmless and conflicting ones get 409.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from eligibility import ConflictError, EligibilityService, PatientRegistry, get_service
from schemas import PatientCreateRequest

from .audit import AuditAction, record_request_event


router = APIRouter(prefix="/api/patients", tags=["patients"])


def get_registry(service: EligibilityService = Depends(get_service)) -> PatientRegistry:
    return service.registry


@router.get("")
def list_patients(registry: PatientRegistry = Depends(get_registry)) -> dict[str, Any]:
    """List all registered patients."""
    patients = registry.store.list_patients()
    return {"count": len(patients), "data": [p.to_dict() for p in patients]}


@router.get("/{patient_id}")
def get_patient(
    patient_id: str,
    registry: PatientRegistry = Depends(get_registry),
) -> dict[str, Any]:
    if not patient_id.strip():
        raise HTTPException(status_code=400, detail="Patient ID parameter cannot be empty")

    patient = registry.store.get_patient(patient_id)
    if patient is None:
        raise HTTPException(
            status_code=404, detail=f"Patient with ID {patient_id} not found"
        )
    return patient.to_dict()


@router.post("", status_code=201)
def create_patient(
    request: Request,
    body: PatientCreateRequest,
    registry: PatientRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Register a patient without running an eligibility check."""
    try:
        registry.reconcile(body.patient_id, body.name, body.date_of_birth)
    except ConflictError as e:
        raise HTTPException(
            status_code=409, detail=f"Patient ID data mismatch: {e}"
        ) from e

    record_request_event(
        request,
        AuditAction.PATIENT_CREATE,
        resource_type="patient",
        resource_id=body.patient_id,
    )
    return {
        "message": "Patient registered successfully",
        "patient": {
            "patient_id": body.patient_id,
            "name": body.name,
            "date_of_birth": body.date_of_birth.isoformat(),
        },
    }
