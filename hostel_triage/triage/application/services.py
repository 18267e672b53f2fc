"""
Triage Application Services
============================

Application services for severity classification.

Owns the lifecycle of the trained model: built on first use, then shared.
"""

import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from hostel_triage.config import PredictedSeverity
from hostel_triage.shared.infrastructure.logging import get_logger, log_latency
from hostel_triage.triage.domain import (
    ClassificationResult,
    SeverityModel,
    TrainingExample,
    train,
)

logger = get_logger(__name__)


# ========== Corpus Source Interface ==========

class ICorpusSource(ABC):
    """Interface for obtaining the training corpus."""

    @abstractmethod
    def load(self) -> List[TrainingExample]:
        """Return the labelled training examples."""


# ========== Application Services ==========

class SeverityClassifierProvider:
    """
    Builds the severity model lazily and caches it for its own lifetime.

    The first caller of get() trains; concurrent callers wait on the lock
    and receive the same model. Training never runs twice for one provider.
    """

    def __init__(self, corpus_source: ICorpusSource, alpha: float = 1.0):
        self._corpus_source = corpus_source
        self._alpha = alpha
        self._model: Optional[SeverityModel] = None
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    def get(self) -> SeverityModel:
        model = self._model
        if model is not None:
            return model

        with self._lock:
            if self._model is None:
                corpus = self._corpus_source.load()
                with log_latency(logger, "classifier_training", corpus_size=len(corpus)):
                    self._model = train(corpus, alpha=self._alpha)
                logger.info(
                    "Severity model trained",
                    extra={
                        "corpus_size": self._model.corpus_size,
                        "vocabulary_size": self._model.vocabulary_size,
                        "labels": [label.value for label in self._model.labels],
                    }
                )
            return self._model


class ClassificationService:
    """
    Service for complaint severity classification.

    Works against an explicitly supplied model.
    """

    def __init__(self, model: SeverityModel):
        self._model = model

    @property
    def model(self) -> SeverityModel:
        return self._model

    def predict(self, title: str, description: Optional[str] = None) -> PredictedSeverity:
        """Predict severity from a complaint's title and description."""
        return self._model.predict(self.combined_text(title, description))

    def classify(self, title: str, description: Optional[str] = None) -> ClassificationResult:
        result = self._model.classify(self.combined_text(title, description))
        logger.debug(
            "Complaint text classified",
            extra={
                "severity": result.severity.value,
                "confidence": round(result.confidence, 4),
                "latency_ms": result.latency_ms,
            }
        )
        return result

    @staticmethod
    def combined_text(title: str, description: Optional[str] = None) -> str:
        return f"{title} {description or ''}".strip()
