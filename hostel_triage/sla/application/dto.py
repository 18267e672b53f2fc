"""
SLA Application DTOs
=====================

Data Transfer Objects for the SLA API layer.
"""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from hostel_triage.sla.domain import SweepReport


class SweepResponse(BaseModel):
    """Response model for one escalation sweep."""
    started_at: datetime
    evaluated: int = Field(..., description="Overdue open complaints found")
    escalated: int = Field(..., description="Complaints moved to ESCALATED")
    skipped: int = Field(..., description="Complaints closed or escalated by another writer first")
    failed: int = Field(..., description="Complaints whose escalation raised an error")
    escalated_ids: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_report(cls, report: SweepReport) -> "SweepResponse":
        return cls(**report.to_dict())
