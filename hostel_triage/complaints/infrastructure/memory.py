"""
In-Memory Complaint Store
==========================

Process-local repository implementations for development and tests
(`STORAGE_BACKEND=memory`).

All row mutation goes through one asyncio.Lock so the conditional
escalation behaves like the SQL guarded UPDATE.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import uuid4

from hostel_triage.complaints.application.services import (
    IAuditEventRepository,
    IComplaintRepository,
)
from hostel_triage.complaints.domain import AuditEvent, Complaint
from hostel_triage.config import TERMINAL_SWEEP_STATUSES, ComplaintStatus


class InMemoryStore:
    """Shared state behind the in-memory repositories."""

    def __init__(self):
        self.complaints: Dict[str, Complaint] = {}
        self.events: List[AuditEvent] = []
        self.lock = asyncio.Lock()

    def clear(self) -> None:
        self.complaints.clear()
        self.events.clear()


class InMemoryComplaintRepository(IComplaintRepository):
    """Complaint repository over an InMemoryStore; returns copies, never live rows."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        yield

    async def create(self, complaint: Complaint) -> Complaint:
        async with self._store.lock:
            self._store.complaints[complaint.id] = replace(complaint)
        return replace(complaint)

    async def get_by_id(self, complaint_id: str) -> Optional[Complaint]:
        complaint = self._store.complaints.get(complaint_id)
        return replace(complaint) if complaint else None

    async def list(
        self,
        filters: Dict[str, Any],
        limit: int = 100,
        offset: int = 0
    ) -> List[Complaint]:
        items = list(self._store.complaints.values())

        if "user_id" in filters:
            items = [c for c in items if c.user_id == filters["user_id"]]
        if "status" in filters:
            wanted = filters["status"]
            wanted = [ComplaintStatus(s) for s in wanted] if isinstance(wanted, list) else [ComplaintStatus(wanted)]
            items = [c for c in items if c.status in wanted]
        if "category" in filters:
            items = [c for c in items if c.category == filters["category"]]

        items.sort(key=lambda c: (-c.priority_score, c.created_at))
        return [replace(c) for c in items[offset:offset + limit]]

    async def list_recent(self, limit: int) -> List[Complaint]:
        items = sorted(self._store.complaints.values(), key=lambda c: c.created_at, reverse=True)
        return [replace(c) for c in items[:limit]]

    async def update_status(
        self,
        complaint_id: str,
        status: ComplaintStatus,
        now: datetime
    ) -> Optional[Complaint]:
        async with self._store.lock:
            complaint = self._store.complaints.get(complaint_id)
            if complaint is None:
                return None
            complaint.status = status
            complaint.updated_at = now
            return replace(complaint)

    async def list_overdue(self, now: datetime) -> List[Complaint]:
        items = [c for c in self._store.complaints.values() if c.is_overdue(now)]
        items.sort(key=lambda c: c.sla_deadline)
        return [replace(c) for c in items]

    async def escalate_if_open(
        self,
        complaint_id: str,
        boost: int,
        now: datetime
    ) -> Optional[Complaint]:
        async with self._store.lock:
            complaint = self._store.complaints.get(complaint_id)
            if complaint is None or complaint.status in TERMINAL_SWEEP_STATUSES:
                return None
            complaint.status = ComplaintStatus.ESCALATED
            complaint.priority_score += boost
            complaint.updated_at = now
            return replace(complaint)


class InMemoryAuditEventRepository(IAuditEventRepository):
    """Append-only event log over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def create(self, event: AuditEvent) -> AuditEvent:
        if not event.id:
            event.id = str(uuid4())
        async with self._store.lock:
            self._store.events.append(replace(event))
        return event

    async def list_recent(self, limit: int = 50) -> List[AuditEvent]:
        # Stable sort keeps insertion order for events sharing a timestamp
        ordered = sorted(
            enumerate(self._store.events),
            key=lambda pair: (pair[1].created_at, pair[0]),
            reverse=True
        )
        return [replace(event) for _, event in ordered[:limit]]
