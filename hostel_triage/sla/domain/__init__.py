"""
SLA Domain Layer
================

Pure business logic for SLA deadlines and escalation.

Contains:
- Entities: BreachResult, SweepReport
- Value Objects: SLACalculator, SLADeadline
"""

from hostel_triage.sla.domain.entities import BreachResult, SweepReport
from hostel_triage.sla.domain.value_objects import SLACalculator, SLADeadline

__all__ = [
    # Entities
    "BreachResult",
    "SweepReport",
    # Value Objects
    "SLACalculator",
    "SLADeadline",
]
