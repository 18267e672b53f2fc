"""
SLA Application Layer
=====================

Application layer for the SLA escalation sweep.

Contains:
- Services: SLAEscalationService
- DTOs: Data transfer objects for API serialization
"""

from hostel_triage.sla.application.dto import SweepResponse
from hostel_triage.sla.application.services import ESCALATION_REASON, SLAEscalationService

__all__ = [
    # DTOs
    "SweepResponse",
    # Services
    "SLAEscalationService",
    "ESCALATION_REASON",
]
