"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="hostel-triage", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Storage ==========
    storage_backend: str = Field(
        default="database",
        description="Complaint store: 'database' (SQLAlchemy) or 'memory' (in-process)"
    )
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/hostel",
        description="PostgreSQL connection URL (async)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Severity Classifier ==========
    training_data_path: Path = Field(
        default=Path("training_data.json"),
        description="Labelled corpus (JSON). Generated in memory when the file is absent"
    )
    corpus_seed: Optional[int] = Field(
        default=42,
        description="Seed for corpus sampling and shuffling (None = unseeded)"
    )
    classifier_alpha: float = Field(
        default=1.0,
        description="Additive smoothing for the Naive Bayes model",
        gt=0.0
    )

    # ========== Priority Scoring ==========
    score_ml_multiplier: float = Field(
        default=1.5,
        description="Weight of the classifier severity relative to the user severity",
        ge=0.0
    )
    score_scale: float = Field(
        default=2.0,
        description="Final scale-up applied before clamping",
        gt=0.0
    )
    sla_breach_boost: int = Field(
        default=50,
        description="Priority points added when an SLA deadline is missed",
        ge=0
    )

    # ========== Category Rules ==========
    category_rules_path: Optional[Path] = Field(
        default=None,
        description="Optional YAML file overriding the built-in category rule table"
    )

    # ========== SLA Sweep ==========
    sla_sweep_interval: int = Field(
        default=300,
        description="Seconds between in-process SLA sweeps (0 disables the scheduler)",
        ge=0
    )

    # ========== Analytics ==========
    reporting_timezone: str = Field(
        default="UTC",
        description="IANA timezone used to bucket complaints by weekday"
    )
    trend_sample_size: int = Field(
        default=100,
        description="Number of recent complaints analysed for trends",
        ge=1
    )

    # ========== API ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )
    events_page_size: int = Field(
        default=50,
        description="Audit events returned by GET /events",
        ge=1,
        le=500
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "testing"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        allowed = {"database", "memory"}
        if v not in allowed:
            raise ValueError(f"storage_backend must be one of {allowed}")
        return v

    @field_validator("reporting_timezone")
    @classmethod
    def validate_reporting_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Severity(str, Enum):
    """User-facing severity, written on the complaint."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class PredictedSeverity(str, Enum):
    """Coarse severity emitted by the text classifier."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ComplaintStatus(str, Enum):
    """Complaint lifecycle statuses."""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    ESCALATED = "ESCALATED"


class EventType(str, Enum):
    """Audit event types."""
    COMPLAINT_RAISED = "ComplaintRaised"
    PRIORITY_CALCULATED = "PriorityCalculated"
    COMPLAINT_UPDATED = "ComplaintUpdated"
    SLA_BREACHED = "SLABreached"


# ========== Lists for validation ==========

VALID_SEVERITIES = [
    Severity.CRITICAL, Severity.HIGH,
    Severity.MEDIUM, Severity.LOW
]
# Tie-break order for the classifier: earlier wins
PREDICTED_SEVERITY_ORDER = [
    PredictedSeverity.HIGH, PredictedSeverity.MEDIUM, PredictedSeverity.LOW
]
VALID_STATUSES = [
    ComplaintStatus.OPEN, ComplaintStatus.IN_PROGRESS,
    ComplaintStatus.RESOLVED, ComplaintStatus.ESCALATED
]
# Statuses the escalation sweep never touches
TERMINAL_SWEEP_STATUSES = [ComplaintStatus.RESOLVED, ComplaintStatus.ESCALATED]
