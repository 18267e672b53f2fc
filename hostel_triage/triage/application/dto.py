"""
Triage Application DTOs
========================

Data Transfer Objects for Triage API layer.

Pydantic models for request/response validation.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ========== Type Aliases for Literals ==========
PredictedSeverityStr = Literal["HIGH", "MEDIUM", "LOW"]


# ========== Request DTOs ==========

class ClassifyRequest(BaseModel):
    """Request model for POST /triage/classify."""
    title: str = Field(..., min_length=1, description="Complaint title")
    description: Optional[str] = Field(None, description="Complaint description")

    @field_validator("description")
    @classmethod
    def validate_description_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 5000:
            raise ValueError("Description too long (max 5000 characters)")
        return v


# ========== Response DTOs ==========

class ClassificationResponse(BaseModel):
    """Response model for POST /triage/classify."""
    severity: PredictedSeverityStr
    confidence: float = Field(..., ge=0.0, le=1.0)
    probabilities: Dict[str, float]
    processing_time_ms: int


class StatsResponse(BaseModel):
    """Response model for classifier statistics."""
    model_config = ConfigDict(protected_namespaces=())

    model_ready: bool
    corpus_size: int = 0
    vocabulary_size: int = 0
    label_distribution: Dict[str, int] = Field(default_factory=dict)
