"""
Analytics Interfaces Layer
==========================

API controllers for the analytics module.
"""

from hostel_triage.analytics.interfaces.controllers import analytics_router

__all__ = ["analytics_router"]
