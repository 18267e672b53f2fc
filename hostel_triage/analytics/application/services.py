"""
Analytics Application Services
===============================

Trend reporting over the most recent complaints.
"""

from hostel_triage.analytics.domain import TrendInsight, analyze_trend
from hostel_triage.complaints.application.services import IComplaintRepository
from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class TrendService:
    """Analyses the newest `sample_size` complaints in the reporting timezone."""

    def __init__(
        self,
        complaint_repository: IComplaintRepository,
        reporting_timezone: str = "UTC",
        sample_size: int = 100
    ):
        self._complaint_repo = complaint_repository
        self._timezone = reporting_timezone
        self._sample_size = sample_size

    async def predict(self) -> TrendInsight:
        complaints = await self._complaint_repo.list_recent(self._sample_size)
        insight = analyze_trend(complaints, self._timezone)

        logger.info(
            "Trend analysed",
            extra={
                "riskiest_day": insight.riskiest_day,
                "sample_size": insight.sample_size,
                "timezone": self._timezone,
            }
        )
        return insight
