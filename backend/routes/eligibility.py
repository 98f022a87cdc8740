"""Eligibility check routes.

POST /api/eligibility/check runs a verification; the GET endpoints read the
append-only check history, newest first.
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from config import ELIGIBILITY_RATE_LIMIT
from eligibility import ConflictError, EligibilityService, EligibilityStatus, get_service
from limiter import limiter
from schemas import EligibilityCheckRequest

from .audit import AuditAction, record_request_event


router = APIRouter(prefix="/api/eligibility", tags=["eligibility"])


def _require_patient_id(patient_id: str) -> str:
    if not patient_id.strip():
        raise HTTPException(status_code=400, detail="Patient ID parameter cannot be empty")
    return patient_id


@router.post("/check", status_code=201)
@limiter.limit(ELIGIBILITY_RATE_LIMIT)
def check_eligibility(
    request: Request,
    body: EligibilityCheckRequest,
    service: EligibilityService = Depends(get_service),
) -> dict[str, Any]:
    """Verify a patient's insurance eligibility for a service date.

    Unknown and Inactive outcomes are successful checks and return 201 like
    Active ones. A 409 means the patient id is already registered with a
    different name or date of birth and nothing was recorded.
    """
    try:
        record = service.verify(body.to_verification_request())
    except ConflictError as e:
        raise HTTPException(
            status_code=409, detail=f"Patient ID data mismatch: {e}"
        ) from e

    record_request_event(
        request,
        AuditAction.ELIGIBILITY_CHECK,
        resource_type="eligibility",
        resource_id=record.eligibility_id,
        details={"patient_id": record.patient_id, "status": record.status.value},
    )
    return record.to_dict()


@router.get("/all")
def list_all_checks(
    service: EligibilityService = Depends(get_service),
) -> dict[str, Any]:
    """List every eligibility check across all patients."""
    records = service.all_history()
    return {"count": len(records), "data": [r.to_dict() for r in records]}


@router.get("/history/{patient_id}")
def get_patient_history(
    patient_id: str,
    service: EligibilityService = Depends(get_service),
) -> list[dict[str, Any]]:
    """Get a patient's eligibility checks; empty list if they have none."""
    _require_patient_id(patient_id)
    return [r.to_dict() for r in service.history_for(patient_id)]


@router.get("/stats")
def get_eligibility_stats(
    service: EligibilityService = Depends(get_service),
) -> dict[str, Any]:
    """Count recorded checks per status."""
    by_status = service.history.status_counts()
    return {"total_checks": sum(by_status.values()), "by_status": by_status}


@router.get("")
def search_checks(
    patient_id: str | None = Query(default=None, description="Filter by patient ID"),
    status: EligibilityStatus | None = Query(
        default=None, description="Filter by status (Active, Inactive, Unknown)"
    ),
    start_date: date | None = Query(
        default=None, description="Checks performed on or after this date"
    ),
    end_date: date | None = Query(
        default=None, description="Checks performed on or before this date"
    ),
    service: EligibilityService = Depends(get_service),
) -> dict[str, Any]:
    """Search eligibility checks by patient, status and check date."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date must be on or before end_date"
        )

    records = service.history.search(
        patient_id=patient_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    return {
        "count": len(records),
        "data": [r.to_dict() for r in records],
        "filters_applied": {
            "patient_id": patient_id,
            "status": status.value if status else None,
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
        },
    }
