"""
Triage Domain Entities
======================

Domain entities for the severity triage module.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict

from hostel_triage.config import PredictedSeverity


@dataclass(frozen=True)
class TrainingExample:
    """
    A single labelled complaint text used to train the classifier.

    Immutable; corpus order carries no meaning.
    """
    text: str
    label: PredictedSeverity

    def to_dict(self) -> dict:
        return {"text": self.text, "label": self.label.value}

    @classmethod
    def from_dict(cls, data: dict) -> "TrainingExample":
        return cls(text=str(data["text"]), label=PredictedSeverity(data["label"]))


@dataclass
class ClassificationResult:
    """
    Result of classifying one complaint text.

    Contains the winning label and the posterior for every label the
    model knows about.
    """
    severity: PredictedSeverity
    probabilities: Dict[PredictedSeverity, float]
    latency_ms: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def confidence(self) -> float:
        """Posterior of the winning label (0.0 when the text was empty)."""
        return self.probabilities.get(self.severity, 0.0)
