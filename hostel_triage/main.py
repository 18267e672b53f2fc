"""
Hostel Triage - Main Application
=================================

Hostel maintenance ticketing backend with automatic triage.

Modules:
- Triage: Naive Bayes severity classifier
- Complaints: intake, hybrid priority scoring, staff queue, audit log
- SLA: deadline tracking and auto-escalation sweep
- Analytics: day-of-week trend reporting

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database, in-memory store, corpus storage, scheduler
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

# Configuration and Core
from hostel_triage.config import Settings, get_settings
from hostel_triage.core import ApplicationException

# Infrastructure
from hostel_triage.infrastructure.database import close_database, create_tables, init_database

# Complaints Module
from hostel_triage.complaints.application import StaticCategoryRuleProvider
from hostel_triage.complaints.domain import ScoringConfig
from hostel_triage.complaints.infrastructure import InMemoryStore, YAMLCategoryRuleProvider
from hostel_triage.complaints.interfaces.dependencies import open_repositories

# SLA Module
from hostel_triage.sla.application import SLAEscalationService
from hostel_triage.sla.infrastructure import SLAScheduler

# Triage Module
from hostel_triage.triage.application import SeverityClassifierProvider
from hostel_triage.triage.infrastructure import FileOrGeneratedCorpusSource

# Module Routers
from hostel_triage.analytics.interfaces import analytics_router
from hostel_triage.complaints.interfaces import complaints_router, events_router
from hostel_triage.sla.interfaces import sla_router
from hostel_triage.triage.interfaces import triage_router

# Middleware and Logging
from hostel_triage.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from hostel_triage.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Open the complaint store (database or in-memory)
    3. Load the category rule table and scoring constants
    4. Train the severity classifier
    5. Start the SLA sweep scheduler

    SHUTDOWN:
    1. Stop the SLA scheduler
    2. Close database connections
    """
    settings: Settings = app.state.settings

    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment, service=settings.app_name)
    logger.info("Starting Hostel Triage Service", extra={
        "version": settings.app_version,
        "environment": settings.environment,
        "storage_backend": settings.storage_backend
    })

    use_database = settings.storage_backend == "database"
    if use_database:
        app.state.memory_store = None
        logger.info("Initializing database")
        init_database(settings.database_url, settings)

        # Create tables (for development - use Alembic in production)
        try:
            await create_tables()
        except Exception as e:
            logger.warning(
                "Database not available - running in degraded mode",
                extra={"error": str(e)}
            )
    elif getattr(app.state, "memory_store", None) is None:
        app.state.memory_store = InMemoryStore()

    if settings.category_rules_path:
        app.state.rule_provider = YAMLCategoryRuleProvider(str(settings.category_rules_path))
    else:
        app.state.rule_provider = StaticCategoryRuleProvider()
    app.state.scoring_config = ScoringConfig.from_settings(settings)

    # Invalid corpus is fatal: no untrained fallback
    logger.info("Training severity classifier")
    await run_in_threadpool(app.state.classifier_provider.get)

    sla_scheduler = None
    if settings.sla_sweep_interval > 0:
        async def sla_sweep_job():
            """Background SLA escalation sweep."""
            async with open_repositories(app.state) as repos:
                service = SLAEscalationService(
                    repos.complaints, repos.events, app.state.scoring_config
                )
                await service.sweep()

        sla_scheduler = SLAScheduler(interval_seconds=settings.sla_sweep_interval)
        await sla_scheduler.start(sla_sweep_job)
    app.state.sla_scheduler = sla_scheduler

    logger.info("Hostel Triage Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Hostel Triage Service")

    if sla_scheduler:
        await sla_scheduler.stop()

    if use_database:
        await close_database()

    logger.info("Hostel Triage Service shutdown complete")


def build_classifier_provider(settings: Settings) -> SeverityClassifierProvider:
    corpus_source = FileOrGeneratedCorpusSource(settings.training_data_path, settings.corpus_seed)
    return SeverityClassifierProvider(corpus_source, alpha=settings.classifier_alpha)


def create_app(
    settings: Optional[Settings] = None,
    classifier_provider: Optional[SeverityClassifierProvider] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Defaults to the cached environment settings
        classifier_provider: Pre-built provider (tests share one trained model)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Hostel Triage API",
        description="""
        ## Hostel Maintenance Triage Service

        Residents raise maintenance complaints; the triage engine assigns a
        severity, a 0-100 priority score and an SLA deadline; staff work the
        queue highest priority first; overdue complaints auto-escalate.

        ---

        ### Priority score

        `round(((user_weight + 1.5 * ml_weight) / 2 + sla_bonus) * 2)`, clamped to 0-100.

        | Severity | Weight |
        |----------|--------|
        | Critical | 50 |
        | High / HIGH | 40 |
        | Medium / MEDIUM | 20 |
        | Low / LOW | 10 |

        SLA bonus: +50 for SLA <= 1h, +30 for <= 4h, +10 for <= 12h.

        ---

        ### SLA escalation

        `POST /sla/sweep` escalates every open complaint past its deadline:
        status `ESCALATED`, priority +50.
        """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.classifier_provider = classifier_provider or build_classifier_provider(settings)

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(complaints_router)
    app.include_router(events_router)
    app.include_router(sla_router)
    app.include_router(analytics_router)
    app.include_router(triage_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], responses={
        200: {
            "description": "Service is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {
                            "storage": "database",
                            "classifier": "ready",
                            "category_rules": "2024.1",
                            "sla_scheduler": "running"
                        }
                    }
                }
            }
        }
    })
    async def health_check(request: Request):
        """
        Health check endpoint for load balancers and orchestrators.

        Reports storage backend, classifier readiness, rule table version
        and scheduler state.
        """
        state = request.app.state
        scheduler = getattr(state, "sla_scheduler", None)
        rule_provider = getattr(state, "rule_provider", None)
        checks = {
            "storage": settings.storage_backend,
            "classifier": "ready" if state.classifier_provider.is_ready else "not_trained",
            "category_rules": rule_provider.get_table().version if rule_provider else "not_loaded",
            "sla_scheduler": "running" if scheduler and scheduler.is_running else "stopped"
        }

        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "checks": checks
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "Hostel Triage Service",
            "version": settings.app_version,
            "architecture": "Clean Architecture / Modular Monolith",
            "docs": "/docs",
            "health": "/health",
            "modules": {
                "complaints": {
                    "prefix": "/complaints",
                    "endpoints": [
                        "POST /complaints - Raise a complaint",
                        "GET /complaints - Priority queue",
                        "GET /complaints/{id} - Get complaint",
                        "PATCH /complaints/{id} - Update status",
                        "GET /events - Recent audit events"
                    ]
                },
                "sla": {
                    "prefix": "/sla",
                    "endpoints": ["POST /sla/sweep - Run escalation sweep"]
                },
                "analytics": {
                    "prefix": "/analytics",
                    "endpoints": ["GET /analytics/predict - Busiest reporting day"]
                },
                "triage": {
                    "prefix": "/triage",
                    "endpoints": [
                        "POST /triage/classify - Classify complaint text",
                        "GET /triage/stats - Classifier statistics"
                    ]
                }
            }
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "hostel_triage.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.environment == "development",
        log_level=_settings.log_level.lower()
    )
