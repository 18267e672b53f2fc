"""
Structured Logging
==================

JSON log lines via python-json-logger, one object per record.

Every record carries the service name, environment and, while a request
is being served, its correlation ID, so that the intake, escalation and
status-change lines of one request can be joined with its audit events.

Usage:
    from hostel_triage.shared.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Complaint raised", extra={"complaint_id": "..."})
"""

import logging
import re
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

_URL_CREDENTIALS = re.compile(r"//([^:/@]+):([^@]+)@")

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "apscheduler")


class TriageJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for service logs.

    Adds a UTC timestamp and masks passwords embedded in connection URLs
    (database_url is logged at startup in degraded mode).
    """

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())

        for key, value in log_record.items():
            if isinstance(value, str) and "://" in value:
                log_record[key] = _URL_CREDENTIALS.sub(r"//\1:***@", value)


class ContextFilter(logging.Filter):
    """Stamps records with service, environment and the current correlation ID."""

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        if not hasattr(record, "correlation_id"):
            correlation_id = correlation_id_var.get()
            if correlation_id is not None:
                record.correlation_id = correlation_id
        return True


def setup_logging(
    level: str = "INFO",
    environment: str = "development",
    service: str = "hostel-triage",
) -> None:
    """
    Route all logging to stdout as JSON.

    Replaces any handlers already on the root logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter(service, environment))
    handler.setFormatter(
        TriageJsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_latency(logger: logging.Logger, operation: str, **extra_context: Any):
    """
    Log how long the wrapped block took, in milliseconds.

    Usage:
        with log_latency(logger, "classifier_training", corpus_size=1200):
            model = train(corpus)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.info(
            f"{operation} finished",
            extra={
                "operation": operation,
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                **extra_context,
            },
        )
