"""
Complaint Infrastructure Repositories
======================================

Concrete implementations of repository interfaces using SQLAlchemy,
plus the YAML-backed category rule provider.

This layer contains the data access logic - how we store and retrieve
entities from the database.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import UUID, uuid4

import yaml
from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_triage.complaints.application.services import (
    IAuditEventRepository,
    ICategoryRuleProvider,
    IComplaintRepository,
)
from hostel_triage.complaints.domain import (
    AuditEvent,
    CategoryRule,
    CategoryRuleTable,
    Complaint,
)
from hostel_triage.complaints.infrastructure.models import AuditEventModel, ComplaintModel
from hostel_triage.config import (
    TERMINAL_SWEEP_STATUSES,
    ComplaintStatus,
    EventType,
    PredictedSeverity,
    Severity,
)
from hostel_triage.core import ConfigurationException, RepositoryException
from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

_TERMINAL = [s.value for s in TERMINAL_SWEEP_STATUSES]


def _as_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def complaint_to_entity(model: ComplaintModel) -> Complaint:
    return Complaint(
        id=str(model.id),
        title=model.title,
        description=model.description,
        category=model.category,
        location=model.location,
        user_id=model.user_id,
        image_url=model.image_url,
        severity=Severity(model.severity),
        ml_severity=PredictedSeverity(model.ml_severity),
        priority_score=model.priority_score,
        sla_deadline=_utc(model.sla_deadline),
        status=ComplaintStatus(model.status),
        created_at=_utc(model.created_at),
        updated_at=_utc(model.updated_at),
    )


class SQLAlchemyComplaintRepository(IComplaintRepository):
    """
    SQLAlchemy implementation of complaint repository.

    Handles persistence of Complaint entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """SAVEPOINT around the block; the request session commits at the end."""
        async with self._session.begin_nested():
            yield

    async def create(self, complaint: Complaint) -> Complaint:
        model = ComplaintModel(
            id=_as_uuid(complaint.id) or uuid4(),
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

        self._session.add(model)
        await self._session.flush()

        return complaint_to_entity(model)

    async def _get_model(self, complaint_id: str) -> Optional[ComplaintModel]:
        complaint_uuid = _as_uuid(complaint_id)
        if complaint_uuid is None:
            return None

        stmt = select(ComplaintModel).where(ComplaintModel.id == complaint_uuid)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, complaint_id: str) -> Optional[Complaint]:
        model = await self._get_model(complaint_id)
        return complaint_to_entity(model) if model else None

    async def list(
        self,
        filters: Dict[str, Any],
        limit: int = 100,
        offset: int = 0
    ) -> List[Complaint]:
        stmt = select(ComplaintModel)

        conditions = []
        if "user_id" in filters:
            conditions.append(ComplaintModel.user_id == filters["user_id"])

        if "status" in filters:
            status_filter = filters["status"]
            if isinstance(status_filter, list):
                conditions.append(ComplaintModel.status.in_([ComplaintStatus(s).value for s in status_filter]))
            else:
                conditions.append(ComplaintModel.status == ComplaintStatus(status_filter).value)

        if "category" in filters:
            conditions.append(ComplaintModel.category == filters["category"])

        if conditions:
            stmt = stmt.where(and_(*conditions))

        stmt = stmt.order_by(ComplaintModel.priority_score.desc(), ComplaintModel.created_at.asc())
        stmt = stmt.limit(limit).offset(offset)

        result = await self._session.execute(stmt)
        return [complaint_to_entity(m) for m in result.scalars().all()]

    async def list_recent(self, limit: int) -> List[Complaint]:
        stmt = select(ComplaintModel).order_by(ComplaintModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [complaint_to_entity(m) for m in result.scalars().all()]

    async def update_status(
        self,
        complaint_id: str,
        status: ComplaintStatus,
        now: datetime
    ) -> Optional[Complaint]:
        model = await self._get_model(complaint_id)
        if model is None:
            return None

        model.status = status.value
        model.updated_at = now
        await self._session.flush()

        return complaint_to_entity(model)

    async def list_overdue(self, now: datetime) -> List[Complaint]:
        stmt = (
            select(ComplaintModel)
            .where(and_(
                ComplaintModel.sla_deadline < now,
                ComplaintModel.status.not_in(_TERMINAL),
            ))
            .order_by(ComplaintModel.sla_deadline.asc())
        )
        result = await self._session.execute(stmt)
        return [complaint_to_entity(m) for m in result.scalars().all()]

    async def escalate_if_open(
        self,
        complaint_id: str,
        boost: int,
        now: datetime
    ) -> Optional[Complaint]:
        complaint_uuid = _as_uuid(complaint_id)
        if complaint_uuid is None:
            raise RepositoryException(f"Invalid complaint ID: {complaint_id}")

        stmt = (
            update(ComplaintModel)
            .where(and_(
                ComplaintModel.id == complaint_uuid,
                ComplaintModel.status.not_in(_TERMINAL),
            ))
            .values(
                status=ComplaintStatus.ESCALATED.value,
                priority_score=ComplaintModel.priority_score + boost,
                updated_at=now,
            )
            .returning(ComplaintModel)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return complaint_to_entity(model) if model else None


class SQLAlchemyAuditEventRepository(IAuditEventRepository):
    """
    SQLAlchemy implementation of the audit event log.

    Append-only: events are never updated or deleted.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, event: AuditEvent) -> AuditEvent:
        model = AuditEventModel(
            id=uuid4() if not event.id else UUID(event.id),
            type=event.type.value,
            complaint_id=_as_uuid(event.complaint_id) if event.complaint_id else None,
            payload=event.payload,
            created_at=event.created_at,
        )

        self._session.add(model)
        await self._session.flush()

        event.id = str(model.id)
        return event

    async def list_recent(self, limit: int = 50) -> List[AuditEvent]:
        stmt = select(AuditEventModel).order_by(AuditEventModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)

        return [
            AuditEvent(
                id=str(m.id),
                type=EventType(m.type),
                complaint_id=str(m.complaint_id) if m.complaint_id else None,
                payload=m.payload or {},
                created_at=_utc(m.created_at),
            )
            for m in result.scalars().all()
        ]


class YAMLCategoryRuleProvider(ICategoryRuleProvider):
    """
    Category rule provider that loads from YAML.

    Expected layout:

        version: "2024.2"
        categories:
          Plumbing: {severity: High, sla_hours: 4}

    A missing file falls back to the built-in table.
    """

    def __init__(self, config_path: str):
        self._config_path = Path(config_path)
        self._table: Optional[CategoryRuleTable] = None
        self._load_config()

    def _load_config(self) -> None:
        if not self._config_path.exists():
            logger.warning(
                "Category rules file not found, using built-in table",
                extra={"path": str(self._config_path)}
            )
            self._table = CategoryRuleTable()
            return

        with open(self._config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationException(f"Invalid YAML in {self._config_path}: {e}")

        categories = data.get("categories")
        if not isinstance(categories, dict) or not categories:
            raise ConfigurationException(
                f"{self._config_path} must define a non-empty 'categories' mapping"
            )

        rules = {name: self._parse_rule(name, entry) for name, entry in categories.items()}
        version = str(data.get("version", "unversioned"))
        self._table = CategoryRuleTable(rules, version=version)

        logger.info(
            "Category rules loaded",
            extra={
                "path": str(self._config_path),
                "version": version,
                "categories": len(rules),
            }
        )

    @staticmethod
    def _parse_rule(name: str, entry: Any) -> CategoryRule:
        if not isinstance(entry, dict):
            raise ConfigurationException(f"Category '{name}' must be a mapping")

        try:
            severity = Severity(entry.get("severity"))
        except ValueError:
            raise ConfigurationException(
                f"Category '{name}' has invalid severity {entry.get('severity')!r}",
                details={"allowed": [s.value for s in Severity]}
            )

        sla_hours = entry.get("sla_hours")
        if isinstance(sla_hours, bool) or not isinstance(sla_hours, int) or sla_hours <= 0:
            raise ConfigurationException(
                f"Category '{name}' must have a positive integer sla_hours, got {sla_hours!r}"
            )

        return CategoryRule(severity=severity, sla_hours=sla_hours)

    def get_table(self) -> CategoryRuleTable:
        return self._table

    def reload(self) -> None:
        """Reload rules from file."""
        self._load_config()
