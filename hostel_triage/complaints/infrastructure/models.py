"""
Complaint Infrastructure Models
================================

SQLAlchemy ORM models for the complaints module.

These are the database representations of our domain entities.
They belong in the infrastructure layer, not the domain layer.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hostel_triage.config import ComplaintStatus
from hostel_triage.infrastructure.database import Base


class ComplaintModel(Base):
    """
    Database model for Complaint entity.

    Maps to the 'complaints' table.
    """
    __tablename__ = "complaints"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Content
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # Triage output
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    ml_severity: Mapped[str] = mapped_column(String(20), nullable=False)
    priority_score: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    sla_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ComplaintStatus.OPEN.value, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class AuditEventModel(Base):
    """
    Database model for AuditEvent entity.

    Maps to the 'events' table.
    """
    __tablename__ = "events"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    complaint_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True, index=True)
    payload: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
