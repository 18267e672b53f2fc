"""
Complaint Application Services
===============================

Application services orchestrate business logic and coordinate between
domain entities and repositories.

- Single Responsibility: intake, queue reads and status changes
- Dependency Inversion: depend on repository abstractions, not SQLAlchemy
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, AsyncContextManager, Dict, List, Optional
from uuid import uuid4

from hostel_triage.complaints.domain import (
    AuditEvent,
    CategoryRuleTable,
    Complaint,
    PriorityScorer,
    ScoringConfig,
)
from hostel_triage.config import ComplaintStatus, EventType, Severity
from hostel_triage.core import ResourceNotFoundException
from hostel_triage.shared.infrastructure.logging import get_logger
from hostel_triage.sla.domain import SLACalculator
from hostel_triage.triage.application.services import ClassificationService
from hostel_triage.triage.domain import SeverityModel

logger = get_logger(__name__)

PRIORITY_ALGORITHM = "Weighted Hybrid v2 (ML)"


# ========== Repository Interfaces (Dependency Inversion) ==========

class IComplaintRepository(ABC):
    """Interface for complaint data access."""

    @abstractmethod
    def atomic(self) -> AsyncContextManager[None]:
        """Group the writes made inside the block into one unit."""

    @abstractmethod
    async def create(self, complaint: Complaint) -> Complaint:
        """Persist a new complaint."""

    @abstractmethod
    async def get_by_id(self, complaint_id: str) -> Optional[Complaint]:
        """Get complaint by ID."""

    @abstractmethod
    async def list(
        self,
        filters: Dict[str, Any],
        limit: int = 100,
        offset: int = 0
    ) -> List[Complaint]:
        """List complaints, highest priority_score first."""

    @abstractmethod
    async def list_recent(self, limit: int) -> List[Complaint]:
        """List the most recently raised complaints, newest first."""

    @abstractmethod
    async def update_status(
        self,
        complaint_id: str,
        status: ComplaintStatus,
        now: datetime
    ) -> Optional[Complaint]:
        """Set status; returns None if the complaint does not exist."""

    @abstractmethod
    async def list_overdue(self, now: datetime) -> List[Complaint]:
        """Complaints past their deadline whose status is not RESOLVED or ESCALATED."""

    @abstractmethod
    async def escalate_if_open(
        self,
        complaint_id: str,
        boost: int,
        now: datetime
    ) -> Optional[Complaint]:
        """
        Conditionally escalate one complaint.

        Sets status=ESCALATED and adds boost to priority_score in a single
        update guarded by "status not RESOLVED/ESCALATED". Returns the
        updated complaint, or None when the guard did not match.
        """


class IAuditEventRepository(ABC):
    """Interface for the audit event log."""

    @abstractmethod
    async def create(self, event: AuditEvent) -> AuditEvent:
        """Append an event."""

    @abstractmethod
    async def list_recent(self, limit: int = 50) -> List[AuditEvent]:
        """Most recent events, newest first."""


class ICategoryRuleProvider(ABC):
    """Interface for category rule table access."""

    @abstractmethod
    def get_table(self) -> CategoryRuleTable:
        """Get the current category rule table."""


class StaticCategoryRuleProvider(ICategoryRuleProvider):
    """Serves the built-in category rule table."""

    def __init__(self, table: Optional[CategoryRuleTable] = None):
        self._table = table or CategoryRuleTable()

    def get_table(self) -> CategoryRuleTable:
        return self._table


# ========== Application Services ==========

class ComplaintService:
    """
    Service for complaint intake and the staff queue.

    Intake runs the full triage pipeline: category rule lookup, text
    classification, hybrid scoring and deadline assignment, then appends
    the audit events.
    """

    def __init__(
        self,
        complaint_repository: IComplaintRepository,
        event_repository: IAuditEventRepository,
        model: SeverityModel,
        rule_provider: ICategoryRuleProvider,
        scoring: Optional[ScoringConfig] = None
    ):
        self._complaint_repo = complaint_repository
        self._event_repo = event_repository
        self._classifier = ClassificationService(model)
        self._rule_provider = rule_provider
        self._scorer = PriorityScorer(scoring)

    async def raise_complaint(
        self,
        title: str,
        category: str,
        location: str,
        user_id: str,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        user_severity: Optional[Severity] = None,
        now: Optional[datetime] = None
    ) -> Complaint:
        """
        Score, persist and audit a new complaint.

        Args:
            user_severity: Overrides the category's base severity when given
            now: Creation time (defaults to the current UTC time)

        Returns:
            The persisted complaint
        """
        now = now or datetime.now(timezone.utc)
        rules = self._rule_provider.get_table()

        rule = rules.get(category)
        severity = user_severity or rule.severity
        ml_severity = self._classifier.predict(title, description)
        score = self._scorer.score(severity, ml_severity, rule.sla_hours)

        complaint = Complaint(
            id=str(uuid4()),
            title=title,
            description=description or "",
            category=category,
            location=location,
            user_id=user_id,
            image_url=image_url,
            severity=severity,
            ml_severity=ml_severity,
            priority_score=score,
            sla_deadline=SLACalculator.calculate_deadline(now, rule.sla_hours),
            status=ComplaintStatus.OPEN,
            created_at=now,
            updated_at=now,
        )

        async with self._complaint_repo.atomic():
            complaint = await self._complaint_repo.create(complaint)

            await self._event_repo.create(AuditEvent(
                id=None,
                type=EventType.COMPLAINT_RAISED,
                complaint_id=complaint.id,
                payload={
                    "id": complaint.id,
                    "title": complaint.title,
                    "severity": complaint.severity.value,
                    "message": f"New complaint logged at {location}",
                },
                created_at=now,
            ))
            await self._event_repo.create(AuditEvent(
                id=None,
                type=EventType.PRIORITY_CALCULATED,
                complaint_id=complaint.id,
                payload={
                    "id": complaint.id,
                    "score": score,
                    "details": {
                        "rule_severity": severity.value,
                        "ai_prediction": ml_severity.value,
                        "sla_hours": rule.sla_hours,
                        "rules_version": rules.version,
                        "algorithm": PRIORITY_ALGORITHM,
                    },
                },
                created_at=now,
            ))

        logger.info(
            "Complaint raised",
            extra={
                "complaint_id": complaint.id,
                "category": category,
                "severity": severity.value,
                "ml_severity": ml_severity.value,
                "priority_score": score,
                "sla_hours": rule.sla_hours,
            }
        )
        return complaint

    async def get(self, complaint_id: str) -> Complaint:
        complaint = await self._complaint_repo.get_by_id(complaint_id)
        if complaint is None:
            raise ResourceNotFoundException("Complaint", complaint_id)
        return complaint

    async def list_queue(
        self,
        user_id: Optional[str] = None,
        status: Optional[ComplaintStatus] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Complaint]:
        """Staff queue ordered by priority_score, highest first."""
        filters: Dict[str, Any] = {}
        if user_id:
            filters["user_id"] = user_id
        if status:
            filters["status"] = status
        return await self._complaint_repo.list(filters, limit=limit, offset=offset)

    async def update_status(
        self,
        complaint_id: str,
        status: ComplaintStatus,
        now: Optional[datetime] = None
    ) -> Complaint:
        """
        Manual staff status change.

        Any transition is allowed here, including reopening a RESOLVED
        complaint; the escalation sweep never touches RESOLVED ones.
        """
        now = now or datetime.now(timezone.utc)

        async with self._complaint_repo.atomic():
            complaint = await self._complaint_repo.update_status(complaint_id, status, now)
            if complaint is None:
                raise ResourceNotFoundException("Complaint", complaint_id)

            await self._event_repo.create(AuditEvent(
                id=None,
                type=EventType.COMPLAINT_UPDATED,
                complaint_id=complaint.id,
                payload={
                    "id": complaint.id,
                    "status": complaint.status.value,
                    "message": f"Status updated to {status.value}",
                },
                created_at=now,
            ))

        logger.info(
            "Complaint status updated",
            extra={"complaint_id": complaint.id, "status": status.value}
        )
        return complaint


class AuditEventService:
    """Read access to the audit log."""

    def __init__(self, event_repository: IAuditEventRepository):
        self._event_repo = event_repository

    async def recent(self, limit: int = 50) -> List[AuditEvent]:
        return await self._event_repo.list_recent(limit)
