"""
Analytics Application DTOs
===========================

Data Transfer Objects for the analytics API layer.
"""

from typing import Dict, Literal

from pydantic import BaseModel, Field

from hostel_triage.analytics.domain import TrendInsight

DayNameStr = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class TrendResponse(BaseModel):
    """Response model for the trend insight."""
    riskiest_day: DayNameStr
    observation: str
    day_counts: Dict[str, int] = Field(default_factory=dict)
    sample_size: int = 0

    @classmethod
    def from_insight(cls, insight: TrendInsight) -> "TrendResponse":
        return cls(
            riskiest_day=insight.riskiest_day,
            observation=insight.observation,
            day_counts=dict(insight.day_counts),
            sample_size=insight.sample_size,
        )
