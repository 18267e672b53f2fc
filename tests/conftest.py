"""
Test Configuration
==================

Pytest fixtures for Hostel Triage tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before settings are first read
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SLA_SWEEP_INTERVAL"] = "0"

from hostel_triage.complaints.application import ComplaintService, StaticCategoryRuleProvider  # noqa: E402
from hostel_triage.complaints.domain import Complaint  # noqa: E402
from hostel_triage.complaints.infrastructure import (  # noqa: E402
    InMemoryAuditEventRepository,
    InMemoryComplaintRepository,
    InMemoryStore,
)
from hostel_triage.config import ComplaintStatus, PredictedSeverity, Settings, Severity  # noqa: E402
from hostel_triage.triage.application import SeverityClassifierProvider  # noqa: E402
from hostel_triage.triage.domain import SeverityModel, TrainingExample, generate_corpus, train  # noqa: E402
from hostel_triage.triage.infrastructure import GeneratedCorpusSource  # noqa: E402

CORPUS_SEED = 42

# Monday 10:00 UTC
FIXED_NOW = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def corpus() -> list[TrainingExample]:
    """Seeded training corpus."""
    return generate_corpus(seed=CORPUS_SEED)


@pytest.fixture(scope="session")
def model(corpus: list[TrainingExample]) -> SeverityModel:
    """Severity model trained once per test session."""
    return train(corpus)


@pytest.fixture(scope="session")
def classifier_provider() -> SeverityClassifierProvider:
    """Trained provider shared by every app instance."""
    provider = SeverityClassifierProvider(GeneratedCorpusSource(seed=CORPUS_SEED))
    provider.get()
    return provider


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def complaint_repo(memory_store: InMemoryStore) -> InMemoryComplaintRepository:
    return InMemoryComplaintRepository(memory_store)


@pytest.fixture
def event_repo(memory_store: InMemoryStore) -> InMemoryAuditEventRepository:
    return InMemoryAuditEventRepository(memory_store)


@pytest.fixture
def complaint_service(
    complaint_repo: InMemoryComplaintRepository,
    event_repo: InMemoryAuditEventRepository,
    model: SeverityModel,
) -> ComplaintService:
    return ComplaintService(complaint_repo, event_repo, model, StaticCategoryRuleProvider())


@pytest.fixture
def make_complaint(now: datetime) -> Callable[..., Complaint]:
    """Factory for complaints with a deadline relative to the fixed clock."""

    def _make(
        deadline_offset: timedelta = timedelta(hours=-1),
        status: ComplaintStatus = ComplaintStatus.OPEN,
        priority_score: int = 60,
        created_at: Optional[datetime] = None,
        category: str = "Plumbing",
    ) -> Complaint:
        created = created_at or (now + deadline_offset - timedelta(hours=4))
        return Complaint(
            id=str(uuid4()),
            title="Burst pipe",
            description="Water everywhere",
            category=category,
            location="Block B",
            user_id="student-1",
            severity=Severity.HIGH,
            ml_severity=PredictedSeverity.HIGH,
            priority_score=priority_score,
            sla_deadline=now + deadline_offset,
            status=status,
            created_at=created,
            updated_at=created,
        )

    return _make


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        environment="testing",
        storage_backend="memory",
        sla_sweep_interval=0,
    )


@pytest.fixture
def app(app_settings: Settings, classifier_provider: SeverityClassifierProvider):
    """Fresh application with an empty in-memory store."""
    from hostel_triage.main import create_app

    return create_app(app_settings, classifier_provider=classifier_provider)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the application lifespan running."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client
