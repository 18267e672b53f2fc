"""
Complaint Application DTOs
===========================

Data Transfer Objects for the complaints API layer.

Pydantic models handle serialization/deserialization and validation
for API requests and responses.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from hostel_triage.complaints.domain import AuditEvent, Complaint


# ========== Type Aliases for Literals ==========
SeverityStr = Literal["Critical", "High", "Medium", "Low"]
PredictedSeverityStr = Literal["HIGH", "MEDIUM", "LOW"]
ComplaintStatusStr = Literal["OPEN", "IN_PROGRESS", "RESOLVED", "ESCALATED"]
EventTypeStr = Literal["ComplaintRaised", "PriorityCalculated", "ComplaintUpdated", "SLABreached"]


# ========== Request DTOs ==========

class ComplaintCreateRequest(BaseModel):
    """Request model for raising a complaint."""
    title: str = Field(..., min_length=1, max_length=200, description="Short summary")
    description: Optional[str] = Field(None, description="Free-text details")
    category: str = Field(
        ...,
        min_length=1,
        description="Maintenance category; unknown categories get Low severity and a 48h SLA"
    )
    location: str = Field(..., min_length=1, description="Room, block or area")
    user_id: str = Field(..., min_length=1, description="Reporting resident")
    image_url: Optional[str] = Field(None, description="URL of an uploaded photo")
    user_severity: Optional[SeverityStr] = Field(
        None,
        description="Overrides the category's base severity"
    )

    @field_validator("title", "category", "location", "user_id")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("description")
    @classmethod
    def validate_description_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 5000:
            raise ValueError("Description too long (max 5000 characters)")
        return v


class ComplaintStatusUpdateRequest(BaseModel):
    """Request model for a staff status change."""
    status: ComplaintStatusStr = Field(..., description="New status")


# ========== Response DTOs ==========

class ComplaintResponse(BaseModel):
    """Response model for a complaint."""
    id: str
    title: str
    description: str
    category: str
    location: str
    user_id: str
    image_url: Optional[str] = None
    severity: SeverityStr
    ml_severity: PredictedSeverityStr
    priority_score: int
    sla_deadline: datetime
    status: ComplaintStatusStr
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, complaint: Complaint) -> "ComplaintResponse":
        return cls(
            id=complaint.id,
            title=complaint.title,
            description=complaint.description,
            category=complaint.category,
            location=complaint.location,
            user_id=complaint.user_id,
            image_url=complaint.image_url,
            severity=complaint.severity.value,
            ml_severity=complaint.ml_severity.value,
            priority_score=complaint.priority_score,
            sla_deadline=complaint.sla_deadline,
            status=complaint.status.value,
            created_at=complaint.created_at,
            updated_at=complaint.updated_at,
        )


class AuditEventResponse(BaseModel):
    """Response model for an audit event."""
    id: str
    type: EventTypeStr
    complaint_id: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_entity(cls, event: AuditEvent) -> "AuditEventResponse":
        return cls(
            id=event.id,
            type=event.type.value,
            complaint_id=event.complaint_id,
            payload=event.payload,
            created_at=event.created_at,
        )
