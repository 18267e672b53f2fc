"""
Complaint API Dependencies
===========================

FastAPI dependencies that pick the storage backend configured on the
application and build the complaint services on top of it.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from fastapi import Depends, Request

from hostel_triage.complaints.application import (
    AuditEventService,
    ComplaintService,
    IAuditEventRepository,
    ICategoryRuleProvider,
    IComplaintRepository,
    StaticCategoryRuleProvider,
)
from hostel_triage.complaints.domain import ScoringConfig
from hostel_triage.complaints.infrastructure import (
    InMemoryAuditEventRepository,
    InMemoryComplaintRepository,
    SQLAlchemyAuditEventRepository,
    SQLAlchemyComplaintRepository,
)
from hostel_triage.infrastructure.database import get_session_context
from hostel_triage.triage.application import ClassificationService
from hostel_triage.triage.interfaces.controllers import get_classification_service


@dataclass
class Repositories:
    complaints: IComplaintRepository
    events: IAuditEventRepository


@asynccontextmanager
async def open_repositories(state: Any) -> AsyncIterator[Repositories]:
    """Repositories over the configured backend; the database session commits on exit."""
    store = getattr(state, "memory_store", None)
    if store is not None:
        yield Repositories(
            complaints=InMemoryComplaintRepository(store),
            events=InMemoryAuditEventRepository(store),
        )
        return

    async with get_session_context() as session:
        yield Repositories(
            complaints=SQLAlchemyComplaintRepository(session),
            events=SQLAlchemyAuditEventRepository(session),
        )


async def get_repositories(request: Request) -> AsyncIterator[Repositories]:
    """Repositories for one request."""
    async with open_repositories(request.app.state) as repos:
        yield repos


def get_rule_provider(request: Request) -> ICategoryRuleProvider:
    provider = getattr(request.app.state, "rule_provider", None)
    return provider or StaticCategoryRuleProvider()


def get_scoring_config(request: Request) -> ScoringConfig:
    return getattr(request.app.state, "scoring_config", None) or ScoringConfig()


async def get_complaint_service(
    repos: Repositories = Depends(get_repositories),
    classification: ClassificationService = Depends(get_classification_service),
    rule_provider: ICategoryRuleProvider = Depends(get_rule_provider),
    scoring: ScoringConfig = Depends(get_scoring_config)
) -> ComplaintService:
    """Get complaint service instance."""
    return ComplaintService(
        repos.complaints,
        repos.events,
        classification.model,
        rule_provider,
        scoring,
    )


async def get_audit_event_service(
    repos: Repositories = Depends(get_repositories)
) -> AuditEventService:
    """Get audit event service instance."""
    return AuditEventService(repos.events)
