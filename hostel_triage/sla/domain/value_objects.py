"""
SLA Value Objects
==================

Immutable value objects for the SLA domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class: all deadline arithmetic in one place.
    """

    @staticmethod
    def calculate_deadline(created_at: datetime, sla_hours: float) -> datetime:
        """
        Calculate the SLA deadline for a complaint.

        Args:
            created_at: When the complaint was raised
            sla_hours: Allowed resolution time from the category rule

        Returns:
            The SLA deadline
        """
        return created_at + timedelta(hours=sla_hours)

    @staticmethod
    def is_breached(deadline: datetime, now: datetime) -> bool:
        """A deadline is breached strictly after it passes."""
        return now > deadline

    @staticmethod
    def overdue_seconds(deadline: datetime, now: datetime) -> float:
        """Seconds past the deadline (0 if not yet due)."""
        return max(0.0, (now - deadline).total_seconds())

    @staticmethod
    def remaining_seconds(deadline: datetime, now: datetime) -> float:
        """Seconds left until the deadline (0 if breached)."""
        return max(0.0, (deadline - now).total_seconds())


@dataclass(frozen=True)
class SLADeadline:
    """
    Immutable value object representing an SLA deadline.

    The escalation sweep builds the SLABreached event payload from it.
    """
    complaint_id: str
    category: str
    deadline: datetime

    def overdue_seconds(self, now: datetime) -> float:
        return SLACalculator.overdue_seconds(self.deadline, now)

    def is_past(self, now: Optional[datetime] = None) -> bool:
        return SLACalculator.is_breached(self.deadline, now or datetime.now(timezone.utc))

    def to_payload(self, now: datetime) -> Dict[str, Any]:
        return {
            "id": self.complaint_id,
            "category": self.category,
            "sla_deadline": self.deadline.isoformat(),
            "overdue_seconds": self.overdue_seconds(now),
        }
