"""
SLA Application Services
=========================

Application services orchestrate business logic and coordinate between
domain entities and repositories.

- Single Responsibility: the escalation sweep only
- Dependency Inversion: depends on the complaint repository abstractions
"""

from datetime import datetime, timezone
from typing import Optional

from hostel_triage.complaints.application.services import (
    IAuditEventRepository,
    IComplaintRepository,
)
from hostel_triage.complaints.domain import AuditEvent, Complaint, ScoringConfig
from hostel_triage.config import EventType
from hostel_triage.shared.infrastructure.logging import get_logger
from hostel_triage.sla.domain import BreachResult, SLADeadline, SweepReport

logger = get_logger(__name__)

ESCALATION_REASON = "SLA Breach Auto-Escalation"


class SLAEscalationService:
    """
    Escalates complaints whose SLA deadline has passed.

    Run periodically (cron endpoint or the in-process scheduler). Each
    overdue complaint gets status ESCALATED and a fixed additive priority
    boost, recorded as SLABreached and PriorityCalculated events.
    """

    def __init__(
        self,
        complaint_repository: IComplaintRepository,
        event_repository: IAuditEventRepository,
        scoring: Optional[ScoringConfig] = None
    ):
        self._complaint_repo = complaint_repository
        self._event_repo = event_repository
        self._boost = (scoring or ScoringConfig()).breach_boost

    async def sweep(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Evaluate all open complaints once.

        A failure on one complaint is logged and counted; the sweep moves
        on to the next.

        Args:
            now: Evaluation time (defaults to the current UTC time)

        Returns:
            SweepReport with per-outcome counts
        """
        now = now or datetime.now(timezone.utc)
        report = SweepReport(started_at=now)

        overdue = await self._complaint_repo.list_overdue(now)
        report.evaluated = len(overdue)

        for complaint in overdue:
            try:
                result = await self._escalate(complaint, now)
            except Exception as e:
                report.record_failure(complaint.id, e)
                logger.error(
                    "SLA escalation failed",
                    extra={"complaint_id": complaint.id, "error": str(e)},
                    exc_info=True
                )
                continue

            if result is None:
                report.skipped += 1
                logger.debug(
                    "Complaint left terminal status before escalation",
                    extra={"complaint_id": complaint.id}
                )
            else:
                report.record_breach(result)

        logger.info(
            "SLA sweep completed",
            extra={
                "evaluated": report.evaluated,
                "escalated": report.escalated,
                "skipped": report.skipped,
                "failed": report.failed,
            }
        )
        return report

    async def _escalate(self, complaint: Complaint, now: datetime) -> Optional[BreachResult]:
        async with self._complaint_repo.atomic():
            updated = await self._complaint_repo.escalate_if_open(complaint.id, self._boost, now)
            if updated is None:
                return None

            deadline = SLADeadline(updated.id, updated.category, updated.sla_deadline)
            overdue_seconds = deadline.overdue_seconds(now)
            previous_score = updated.priority_score - self._boost

            await self._event_repo.create(AuditEvent(
                id=None,
                type=EventType.SLA_BREACHED,
                complaint_id=updated.id,
                payload={
                    **deadline.to_payload(now),
                    "title": updated.title,
                    "reason": ESCALATION_REASON,
                    "message": f"SLA Deadline passed by {overdue_seconds}s",
                },
                created_at=now,
            ))
            await self._event_repo.create(AuditEvent(
                id=None,
                type=EventType.PRIORITY_CALCULATED,
                complaint_id=updated.id,
                payload={
                    "id": updated.id,
                    "score": updated.priority_score,
                    "new_score": updated.priority_score,
                    "previous_score": previous_score,
                    "reason": ESCALATION_REASON,
                },
                created_at=now,
            ))

        logger.warning(
            "SLA breached, complaint escalated",
            extra={
                "complaint_id": updated.id,
                "overdue_seconds": overdue_seconds,
                "previous_score": previous_score,
                "new_score": updated.priority_score,
            }
        )
        return BreachResult(
            complaint_id=updated.id,
            previous_score=previous_score,
            new_score=updated.priority_score,
            overdue_seconds=overdue_seconds,
            sla_deadline=updated.sla_deadline,
        )
