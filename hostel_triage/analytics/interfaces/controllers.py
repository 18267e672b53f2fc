"""
Analytics Controllers (API Routes)
===================================

FastAPI routes for trend reporting.
"""

from fastapi import APIRouter, Depends, Request

from hostel_triage.analytics.application import TrendResponse, TrendService
from hostel_triage.complaints.interfaces.dependencies import Repositories, get_repositories

router = APIRouter(prefix="/analytics", tags=["Analytics"])


TREND_RESPONSE_EXAMPLE = {
    "riskiest_day": "Monday",
    "observation": "Historical data indicates a surge in reports on Mondays.",
    "day_counts": {"Monday": 31, "Tuesday": 18, "Friday": 12},
    "sample_size": 61
}


async def get_trend_service(
    request: Request,
    repos: Repositories = Depends(get_repositories)
) -> TrendService:
    """Get trend service instance."""
    settings = request.app.state.settings
    return TrendService(
        repos.complaints,
        reporting_timezone=settings.reporting_timezone,
        sample_size=settings.trend_sample_size,
    )


@router.get(
    "/predict",
    response_model=TrendResponse,
    summary="Predict the busiest reporting day",
    description="Day-of-week frequency over the most recent complaints. Defaults to Monday when there is no history.",
    responses={
        200: {
            "description": "Trend insight",
            "content": {"application/json": {"example": TREND_RESPONSE_EXAMPLE}}
        }
    }
)
async def predict_trend(service: TrendService = Depends(get_trend_service)):
    return TrendResponse.from_insight(await service.predict())


# Export router for inclusion in main app
analytics_router = router
