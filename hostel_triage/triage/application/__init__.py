"""
Triage Application Layer
=========================

Application layer for the severity triage module.

Contains:
- Services: model lifecycle and classification
- DTOs: Data transfer objects for API serialization
"""

from hostel_triage.triage.application.dto import (
    ClassifyRequest,
    ClassificationResponse,
    StatsResponse,
)
from hostel_triage.triage.application.services import (
    ClassificationService,
    SeverityClassifierProvider,
    ICorpusSource,
)

__all__ = [
    # DTOs
    "ClassifyRequest",
    "ClassificationResponse",
    "StatsResponse",
    # Services
    "ClassificationService",
    "SeverityClassifierProvider",
    # Interfaces
    "ICorpusSource",
]
