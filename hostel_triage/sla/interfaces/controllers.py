"""
SLA Controllers (API Routes)
=============================

FastAPI route for the escalation sweep.

Controllers are thin - they delegate to application services.
"""

import time

from fastapi import APIRouter, Depends, Request

from hostel_triage.complaints.domain import ScoringConfig
from hostel_triage.complaints.interfaces.dependencies import (
    Repositories,
    get_repositories,
    get_scoring_config,
)
from hostel_triage.shared.infrastructure.logging import get_logger
from hostel_triage.sla.application import SLAEscalationService, SweepResponse

logger = get_logger(__name__)
router = APIRouter(prefix="/sla", tags=["SLA Escalation"])


# ========== Example payloads for Swagger ==========

SWEEP_RESPONSE_EXAMPLE = {
    "started_at": "2024-01-15T10:00:00Z",
    "evaluated": 2,
    "escalated": 2,
    "skipped": 0,
    "failed": 0,
    "escalated_ids": [
        "123e4567-e89b-12d3-a456-426614174000",
        "9f1c2b7a-0d4e-4c51-8f3e-2b6d7c8e9a01"
    ],
    "errors": {}
}


# ========== Dependencies ==========

async def get_escalation_service(
    repos: Repositories = Depends(get_repositories),
    scoring: ScoringConfig = Depends(get_scoring_config)
) -> SLAEscalationService:
    """Get SLA escalation service instance."""
    return SLAEscalationService(repos.complaints, repos.events, scoring)


# ========== Route Handlers ==========

@router.post(
    "/sweep",
    response_model=SweepResponse,
    summary="Run the SLA escalation sweep",
    description="""
    Escalate every complaint whose SLA deadline has passed and whose status
    is not `RESOLVED` or `ESCALATED`.

    Each escalated complaint gets status `ESCALATED` and a +50 priority
    boost, and `SLABreached` plus `PriorityCalculated` events are recorded.

    **Idempotent**: a second sweep leaves escalated complaints untouched.
    Intended to be called by an external cron.
    """,
    responses={
        200: {
            "description": "Sweep completed",
            "content": {"application/json": {"example": SWEEP_RESPONSE_EXAMPLE}}
        }
    }
)
async def run_sweep(
    request: Request,
    service: SLAEscalationService = Depends(get_escalation_service)
):
    start_time = time.perf_counter()

    report = await service.sweep()

    logger.info(
        "SLA sweep triggered via API",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "escalated": report.escalated,
            "processing_time_ms": int((time.perf_counter() - start_time) * 1000)
        }
    )
    return SweepResponse.from_report(report)


# Export router for inclusion in main app
sla_router = router
