"""
Complaint Domain Entities
==========================

Pure Python domain entities for complaint intake and the staff queue.

Entities carry the business rules that touch a single complaint and are
free of infrastructure concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from hostel_triage.config import (
    ComplaintStatus,
    EventType,
    PredictedSeverity,
    Severity,
    TERMINAL_SWEEP_STATUSES,
)


@dataclass
class Complaint:
    """
    A maintenance complaint raised by a resident.

    `severity` is the user-facing severity (reported or taken from the
    category rule table); `ml_severity` is the classifier output kept for
    audit. `priority_score` only ever grows while the complaint is open.
    """

    id: str
    title: str
    description: str
    category: str
    location: str
    user_id: str
    severity: Severity
    ml_severity: PredictedSeverity
    priority_score: int
    sla_deadline: datetime
    status: ComplaintStatus
    created_at: datetime
    updated_at: datetime
    image_url: Optional[str] = None

    def __post_init__(self):
        if self.sla_deadline < self.created_at:
            raise ValueError("sla_deadline cannot be before created_at")

    @property
    def is_open(self) -> bool:
        return self.status in (ComplaintStatus.OPEN, ComplaintStatus.IN_PROGRESS)

    @property
    def is_escalatable(self) -> bool:
        """Whether the escalation sweep may still act on this complaint."""
        return self.status not in TERMINAL_SWEEP_STATUSES

    def is_overdue(self, now: datetime) -> bool:
        return self.is_escalatable and now > self.sla_deadline

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "location": self.location,
            "user_id": self.user_id,
            "image_url": self.image_url,
            "severity": self.severity.value,
            "ml_severity": self.ml_severity.value,
            "priority_score": self.priority_score,
            "sla_deadline": self.sla_deadline.isoformat(),
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class AuditEvent:
    """Append-only audit log entry."""

    id: Optional[str]
    type: EventType
    complaint_id: Optional[str]
    payload: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
