"""
SLA Infrastructure Layer
========================

Infrastructure implementations for the SLA module.

Contains:
- SLAScheduler: APScheduler interval job for the escalation sweep
"""

from hostel_triage.sla.infrastructure.external import SLAScheduler

__all__ = ["SLAScheduler"]
