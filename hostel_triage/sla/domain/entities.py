"""
SLA Domain Entities
====================

Results of an escalation sweep.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List


@dataclass
class BreachResult:
    """One complaint escalated by a sweep."""

    complaint_id: str
    previous_score: int
    new_score: int
    overdue_seconds: float
    sla_deadline: datetime


@dataclass
class SweepReport:
    """
    Outcome of one escalation sweep.

    evaluated: open complaints past their deadline when the sweep started
    skipped: complaints another writer moved to a terminal status first
    """

    started_at: datetime
    evaluated: int = 0
    escalated: int = 0
    skipped: int = 0
    failed: int = 0
    escalated_ids: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    def record_breach(self, result: BreachResult) -> None:
        self.escalated += 1
        self.escalated_ids.append(result.complaint_id)

    def record_failure(self, complaint_id: str, error: Exception) -> None:
        self.failed += 1
        self.errors[complaint_id] = str(error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "evaluated": self.evaluated,
            "escalated": self.escalated,
            "skipped": self.skipped,
            "failed": self.failed,
            "escalated_ids": list(self.escalated_ids),
            "errors": dict(self.errors),
        }
