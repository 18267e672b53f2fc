"""
Analytics Domain Layer
======================

Read-only reporting over historical complaints.
"""

from hostel_triage.analytics.domain.trend import (
    DAY_NAMES,
    DEFAULT_RISKIEST_DAY,
    TrendInsight,
    analyze_trend,
    observation_for,
    parse_timestamp,
)

__all__ = [
    "DAY_NAMES",
    "DEFAULT_RISKIEST_DAY",
    "TrendInsight",
    "analyze_trend",
    "observation_for",
    "parse_timestamp",
]
