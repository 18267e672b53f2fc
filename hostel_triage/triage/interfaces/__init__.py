"""
Triage Interfaces Layer
========================

Interface adapters (controllers) for the severity triage module.

Contains:
- Controllers: FastAPI route handlers
"""

from hostel_triage.triage.interfaces.controllers import triage_router

__all__ = ["triage_router"]
