"""
Complaint Controllers (API Routes)
===================================

FastAPI routes for complaint intake, the staff queue and the audit feed.

Controllers are thin - they delegate to application services.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from hostel_triage.complaints.application import (
    AuditEventResponse,
    AuditEventService,
    ComplaintCreateRequest,
    ComplaintResponse,
    ComplaintService,
    ComplaintStatusUpdateRequest,
)
from hostel_triage.complaints.application.dto import ComplaintStatusStr
from hostel_triage.complaints.interfaces.dependencies import (
    get_audit_event_service,
    get_complaint_service,
)
from hostel_triage.config import ComplaintStatus, Severity
from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/complaints", tags=["Complaints"])
events_router = APIRouter(prefix="/events", tags=["Audit Events"])


# ========== Example payloads for Swagger ==========

COMPLAINT_CREATE_EXAMPLE = {
    "title": "Sparking near switchboard",
    "description": "Exposed wire behind the bed, smells like burning",
    "category": "Hostel Electrical Work",
    "location": "Block A, Room 214",
    "user_id": "student-42"
}

COMPLAINT_RESPONSE_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Sparking near switchboard",
    "description": "Exposed wire behind the bed, smells like burning",
    "category": "Hostel Electrical Work",
    "location": "Block A, Room 214",
    "user_id": "student-42",
    "image_url": None,
    "severity": "High",
    "ml_severity": "HIGH",
    "priority_score": 100,
    "sla_deadline": "2024-01-15T14:00:00Z",
    "status": "OPEN",
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-15T10:00:00Z"
}

EVENT_RESPONSE_EXAMPLE = {
    "id": "0b8f1c7e-3a55-4e3c-9d7e-5a1d2a6f9e10",
    "type": "PriorityCalculated",
    "complaint_id": "123e4567-e89b-12d3-a456-426614174000",
    "payload": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "score": 100,
        "details": {
            "rule_severity": "High",
            "ai_prediction": "HIGH",
            "sla_hours": 4,
            "rules_version": "2024.1",
            "algorithm": "Weighted Hybrid v2 (ML)"
        }
    },
    "created_at": "2024-01-15T10:00:00Z"
}


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=ComplaintResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Raise a complaint",
    description="""
    Raise a maintenance complaint. The triage engine:

    1. looks up the category's base severity and SLA hours,
    2. classifies `title + description` as `HIGH`, `MEDIUM` or `LOW`,
    3. computes the 0-100 hybrid priority score,
    4. sets the SLA deadline.

    `ComplaintRaised` and `PriorityCalculated` audit events are recorded.
    """,
    responses={
        201: {
            "description": "Complaint raised and scored",
            "content": {"application/json": {"example": COMPLAINT_RESPONSE_EXAMPLE}}
        },
        422: {"description": "Validation error"}
    }
)
async def raise_complaint(
    request: Request,
    payload: ComplaintCreateRequest,
    service: ComplaintService = Depends(get_complaint_service)
):
    complaint = await service.raise_complaint(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        location=payload.location,
        user_id=payload.user_id,
        image_url=payload.image_url,
        user_severity=Severity(payload.user_severity) if payload.user_severity else None,
    )

    logger.info(
        "Complaint intake",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "complaint_id": complaint.id,
            "priority_score": complaint.priority_score
        }
    )
    return ComplaintResponse.from_entity(complaint)


@router.get(
    "",
    response_model=List[ComplaintResponse],
    summary="List the complaint queue",
    description="Complaints ordered by `priority_score`, highest first. Filter by reporter or status."
)
async def list_complaints(
    user_id: Optional[str] = Query(None, description="Only this resident's complaints"),
    status_filter: Optional[ComplaintStatusStr] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: ComplaintService = Depends(get_complaint_service)
):
    complaints = await service.list_queue(
        user_id=user_id,
        status=ComplaintStatus(status_filter) if status_filter else None,
        limit=limit,
        offset=offset,
    )
    return [ComplaintResponse.from_entity(c) for c in complaints]


@router.get(
    "/{complaint_id}",
    response_model=ComplaintResponse,
    summary="Get a complaint",
    responses={404: {"description": "Complaint not found"}}
)
async def get_complaint(
    complaint_id: str,
    service: ComplaintService = Depends(get_complaint_service)
):
    return ComplaintResponse.from_entity(await service.get(complaint_id))


@router.patch(
    "/{complaint_id}",
    response_model=ComplaintResponse,
    summary="Update complaint status",
    description="Staff status change. Records a `ComplaintUpdated` audit event.",
    responses={404: {"description": "Complaint not found"}}
)
async def update_complaint_status(
    complaint_id: str,
    payload: ComplaintStatusUpdateRequest,
    service: ComplaintService = Depends(get_complaint_service)
):
    complaint = await service.update_status(complaint_id, ComplaintStatus(payload.status))
    return ComplaintResponse.from_entity(complaint)


@events_router.get(
    "",
    response_model=List[AuditEventResponse],
    summary="Recent audit events",
    description="Most recent audit events, newest first.",
    responses={
        200: {
            "description": "Audit events",
            "content": {"application/json": {"example": [EVENT_RESPONSE_EXAMPLE]}}
        }
    }
)
async def list_events(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=500),
    service: AuditEventService = Depends(get_audit_event_service)
):
    page_size = limit or request.app.state.settings.events_page_size
    events = await service.recent(page_size)
    return [AuditEventResponse.from_entity(e) for e in events]


# Export routers for inclusion in main app
complaints_router = router
