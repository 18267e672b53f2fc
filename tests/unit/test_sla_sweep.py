"""
Unit tests for SLA breach detection and auto-escalation.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from hostel_triage.complaints.domain import Complaint
from hostel_triage.complaints.infrastructure import (
    InMemoryAuditEventRepository,
    InMemoryComplaintRepository,
    InMemoryStore,
)
from hostel_triage.config import ComplaintStatus, EventType
from hostel_triage.core import RepositoryException
from hostel_triage.sla.application import ESCALATION_REASON, SLAEscalationService
from hostel_triage.sla.domain import SLACalculator, SLADeadline
from hostel_triage.sla.infrastructure import SLAScheduler


class FlakyComplaintRepository(InMemoryComplaintRepository):
    """Fails escalation for one complaint id."""

    def __init__(self, store: InMemoryStore, failing_id: str):
        super().__init__(store)
        self._failing_id = failing_id

    async def escalate_if_open(self, complaint_id: str, boost: int, now: datetime) -> Optional[Complaint]:
        if complaint_id == self._failing_id:
            raise RepositoryException("database unavailable")
        return await super().escalate_if_open(complaint_id, boost, now)


class RacingComplaintRepository(InMemoryComplaintRepository):
    """Resolves every complaint between listing and escalating it."""

    async def escalate_if_open(self, complaint_id: str, boost: int, now: datetime) -> Optional[Complaint]:
        await self.update_status(complaint_id, ComplaintStatus.RESOLVED, now)
        return await super().escalate_if_open(complaint_id, boost, now)


class TestSweep:
    """Tests for SLAEscalationService.sweep."""

    async def test_overdue_complaint_is_escalated(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test status, boosted score and the two audit events."""
        complaint = await complaint_repo.create(make_complaint(deadline_offset=timedelta(minutes=-30)))
        service = SLAEscalationService(complaint_repo, event_repo)

        report = await service.sweep(now)

        stored = await complaint_repo.get_by_id(complaint.id)
        assert stored.status == ComplaintStatus.ESCALATED
        assert stored.priority_score == 110
        assert stored.updated_at == now
        assert report.evaluated == 1
        assert report.escalated == 1
        assert report.escalated_ids == [complaint.id]

        events = await event_repo.list_recent(10)
        types = {e.type for e in events}
        assert types == {EventType.SLA_BREACHED, EventType.PRIORITY_CALCULATED}

        breach = next(e for e in events if e.type == EventType.SLA_BREACHED)
        assert breach.complaint_id == complaint.id
        assert breach.payload["reason"] == ESCALATION_REASON
        assert breach.payload["overdue_seconds"] == 1800
        assert breach.payload["id"] == complaint.id
        assert breach.payload["category"] == "Plumbing"
        assert breach.payload["sla_deadline"] == complaint.sla_deadline.isoformat()

        priority = next(e for e in events if e.type == EventType.PRIORITY_CALCULATED)
        assert priority.payload["new_score"] == 110
        assert priority.payload["score"] == 110
        assert priority.payload["previous_score"] == 60

    async def test_second_sweep_is_a_no_op(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that an escalated complaint is boosted exactly once."""
        complaint = await complaint_repo.create(make_complaint())
        service = SLAEscalationService(complaint_repo, event_repo)

        await service.sweep(now)
        report = await service.sweep(now + timedelta(hours=2))

        stored = await complaint_repo.get_by_id(complaint.id)
        assert stored.priority_score == 110
        assert report.evaluated == 0
        assert report.escalated == 0
        assert len(await event_repo.list_recent(10)) == 2

    async def test_untouched_complaints(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that resolved, not-yet-due and exactly-due complaints stay put."""
        resolved = await complaint_repo.create(make_complaint(status=ComplaintStatus.RESOLVED))
        not_due = await complaint_repo.create(make_complaint(deadline_offset=timedelta(hours=1)))
        due_now = await complaint_repo.create(make_complaint(deadline_offset=timedelta(0)))

        report = await SLAEscalationService(complaint_repo, event_repo).sweep(now)

        assert report.evaluated == 0
        for original in (resolved, not_due, due_now):
            stored = await complaint_repo.get_by_id(original.id)
            assert stored.status == original.status
            assert stored.priority_score == original.priority_score
        assert await event_repo.list_recent(10) == []

    async def test_in_progress_is_escalated(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that work in progress still breaches its SLA."""
        complaint = await complaint_repo.create(make_complaint(status=ComplaintStatus.IN_PROGRESS))

        await SLAEscalationService(complaint_repo, event_repo).sweep(now)

        assert (await complaint_repo.get_by_id(complaint.id)).status == ComplaintStatus.ESCALATED

    async def test_score_is_not_clamped(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that the boost may take a score above 100."""
        complaint = await complaint_repo.create(make_complaint(priority_score=95))

        await SLAEscalationService(complaint_repo, event_repo).sweep(now)

        assert (await complaint_repo.get_by_id(complaint.id)).priority_score == 145

    async def test_failure_does_not_stop_the_sweep(
        self,
        memory_store: InMemoryStore,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that one failing complaint is counted and the rest escalate."""
        bad = make_complaint(deadline_offset=timedelta(hours=-3))
        good = make_complaint(deadline_offset=timedelta(hours=-1))
        repo = FlakyComplaintRepository(memory_store, failing_id=bad.id)
        await repo.create(bad)
        await repo.create(good)

        report = await SLAEscalationService(repo, event_repo).sweep(now)

        assert report.evaluated == 2
        assert report.escalated == 1
        assert report.failed == 1
        assert bad.id in report.errors
        assert (await repo.get_by_id(good.id)).status == ComplaintStatus.ESCALATED
        assert (await repo.get_by_id(bad.id)).status == ComplaintStatus.OPEN

    async def test_lost_race_is_skipped(
        self,
        memory_store: InMemoryStore,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that a complaint resolved mid-sweep is neither boosted nor failed."""
        repo = RacingComplaintRepository(memory_store)
        complaint = await repo.create(make_complaint())

        report = await SLAEscalationService(repo, event_repo).sweep(now)

        stored = await repo.get_by_id(complaint.id)
        assert stored.status == ComplaintStatus.RESOLVED
        assert stored.priority_score == 60
        assert report.skipped == 1
        assert report.escalated == 0
        assert report.failed == 0

    async def test_concurrent_sweeps_boost_once(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
        make_complaint: Callable[..., Complaint],
        now: datetime,
    ) -> None:
        """Test that overlapping sweeps never double-escalate."""
        complaint = await complaint_repo.create(make_complaint())
        service = SLAEscalationService(complaint_repo, event_repo)

        reports = await asyncio.gather(service.sweep(now), service.sweep(now))

        assert sum(r.escalated for r in reports) == 1
        assert (await complaint_repo.get_by_id(complaint.id)).priority_score == 110

    async def test_empty_store(
        self,
        complaint_repo: InMemoryComplaintRepository,
        event_repo: InMemoryAuditEventRepository,
    ) -> None:
        """Test a sweep with nothing to do, using the wall clock."""
        report = await SLAEscalationService(complaint_repo, event_repo).sweep()

        assert report.to_dict()["evaluated"] == 0
        assert report.started_at.tzinfo is not None


class TestSLACalculator:
    """Tests for deadline arithmetic."""

    def test_deadline(self) -> None:
        """Test that the deadline is created_at plus the SLA hours."""
        created = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

        assert SLACalculator.calculate_deadline(created, 4) == datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)

    def test_breach_is_strict(self) -> None:
        """Test that the deadline instant itself is not a breach."""
        deadline = datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)

        assert SLACalculator.is_breached(deadline, deadline) is False
        assert SLACalculator.is_breached(deadline, deadline + timedelta(seconds=1)) is True

    def test_overdue_and_remaining(self) -> None:
        """Test that both helpers floor at zero."""
        deadline = datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)
        later = deadline + timedelta(minutes=5)

        assert SLACalculator.overdue_seconds(deadline, later) == 300
        assert SLACalculator.remaining_seconds(deadline, later) == 0
        assert SLACalculator.overdue_seconds(later, deadline) == 0
        assert SLACalculator.remaining_seconds(later, deadline) == 300

    def test_sla_deadline_value_object(self) -> None:
        """Test SLADeadline against an explicit clock."""
        deadline = SLADeadline("c-1", "Plumbing", datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc))

        assert deadline.is_past(datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc)) is True
        assert deadline.overdue_seconds(datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc)) == 3600

    def test_sla_deadline_payload(self) -> None:
        """Test the breach event fields built from SLADeadline."""
        deadline = SLADeadline("c-1", "Plumbing", datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc))

        assert deadline.to_payload(datetime(2024, 1, 15, 14, 10, tzinfo=timezone.utc)) == {
            "id": "c-1",
            "category": "Plumbing",
            "sla_deadline": "2024-01-15T14:00:00+00:00",
            "overdue_seconds": 600,
        }


class TestSLAScheduler:
    """Tests for the in-process sweep trigger."""

    def test_rejects_non_positive_interval(self) -> None:
        """Test that a zero interval is refused."""
        with pytest.raises(ValueError):
            SLAScheduler(interval_seconds=0)

    async def test_start_and_stop(self) -> None:
        """Test the scheduler lifecycle and the next run time."""
        calls = []

        async def job() -> None:
            calls.append(1)

        scheduler = SLAScheduler(interval_seconds=3600)
        await scheduler.start(job)

        assert scheduler.is_running is True
        assert scheduler.next_run_time is not None

        await scheduler.stop()

        assert scheduler.is_running is False
        assert scheduler.next_run_time is None
        assert calls == []

    async def test_stop_without_start(self) -> None:
        """Test that stopping an idle scheduler is harmless."""
        scheduler = SLAScheduler(interval_seconds=60)

        await scheduler.stop()

        assert scheduler.is_running is False
