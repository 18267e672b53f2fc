"""
Complaints Interfaces Layer
============================

API controllers for the complaints module.
"""

from hostel_triage.complaints.interfaces.controllers import complaints_router, events_router

__all__ = ["complaints_router", "events_router"]
