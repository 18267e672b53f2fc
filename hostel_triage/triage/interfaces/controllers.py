"""
Triage Controllers (API Routes)
================================

FastAPI routes for the severity classifier.

Controllers delegate to application services.
"""

import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from hostel_triage.shared.infrastructure.logging import get_logger
from hostel_triage.triage.application import (
    ClassificationResponse,
    ClassificationService,
    ClassifyRequest,
    SeverityClassifierProvider,
    StatsResponse,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/triage", tags=["Severity Triage"])


# ========== Example payloads for Swagger ==========

CLASSIFY_RESPONSE_EXAMPLE = {
    "severity": "HIGH",
    "confidence": 0.97,
    "probabilities": {"HIGH": 0.97, "MEDIUM": 0.02, "LOW": 0.01},
    "processing_time_ms": 2
}

STATS_RESPONSE_EXAMPLE = {
    "model_ready": True,
    "corpus_size": 1321,
    "vocabulary_size": 142,
    "label_distribution": {"HIGH": 292, "MEDIUM": 703, "LOW": 326}
}


# ========== Dependencies ==========

def get_classifier_provider(request: Request) -> SeverityClassifierProvider:
    """Get the application-owned classifier provider."""
    provider = getattr(request.app.state, "classifier_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Severity classifier not configured"
        )
    return provider


async def get_classification_service(
    provider: SeverityClassifierProvider = Depends(get_classifier_provider)
) -> ClassificationService:
    """Get classification service; trains the model off the event loop on first use."""
    model = await run_in_threadpool(provider.get)
    return ClassificationService(model)


# ========== Route Handlers ==========

@router.post(
    "/classify",
    response_model=ClassificationResponse,
    summary="Predict complaint severity",
    description="""
    Run the Naive Bayes severity classifier on a complaint title and
    description. Returns `HIGH`, `MEDIUM` or `LOW` with the posterior for
    every label.

    Blank text is classified as `LOW`.
    """,
    responses={
        200: {
            "description": "Complaint text classified",
            "content": {"application/json": {"example": CLASSIFY_RESPONSE_EXAMPLE}}
        },
        503: {"description": "Classifier not configured"}
    }
)
async def classify_complaint(
    request: Request,
    payload: ClassifyRequest,
    service: ClassificationService = Depends(get_classification_service)
):
    start_time = time.perf_counter()

    result = service.classify(payload.title, payload.description)

    total_time = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "Ad-hoc classification",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "severity": result.severity.value,
            "processing_time_ms": total_time
        }
    )

    return ClassificationResponse(
        severity=result.severity.value,
        confidence=result.confidence,
        probabilities={label.value: p for label, p in result.probabilities.items()},
        processing_time_ms=total_time
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Get classifier statistics",
    description="Corpus size, vocabulary size and label distribution of the trained model.",
    responses={
        200: {
            "description": "Classifier statistics",
            "content": {"application/json": {"example": STATS_RESPONSE_EXAMPLE}}
        }
    }
)
async def get_stats(
    provider: SeverityClassifierProvider = Depends(get_classifier_provider)
):
    if not provider.is_ready:
        return StatsResponse(model_ready=False)

    model = provider.get()
    return StatsResponse(
        model_ready=True,
        corpus_size=model.corpus_size,
        vocabulary_size=model.vocabulary_size,
        label_distribution={
            label.value: model.label_counts.get(label, 0) for label in model.labels
        }
    )


# Export router for inclusion in main app
triage_router = router
