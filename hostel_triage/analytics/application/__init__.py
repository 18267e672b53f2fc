"""
Analytics Application Layer
============================

Contains:
- Services: TrendService
- DTOs: TrendResponse
"""

from hostel_triage.analytics.application.dto import TrendResponse
from hostel_triage.analytics.application.services import TrendService

__all__ = ["TrendResponse", "TrendService"]
