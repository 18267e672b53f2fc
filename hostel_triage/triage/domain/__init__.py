"""
Triage Domain Layer
===================

Domain layer for the severity triage module.

Contains:
- Entities: TrainingExample, ClassificationResult
- Corpus generation: vocabulary templates and fixed edge cases
- Classifier: Naive Bayes training and prediction (SeverityModel)
"""

from hostel_triage.triage.domain.entities import (
    TrainingExample,
    ClassificationResult,
)
from hostel_triage.triage.domain.corpus import CorpusGenerator, generate_corpus
from hostel_triage.triage.domain.classifier import (
    SeverityModel,
    train,
    predict,
)

__all__ = [
    "TrainingExample",
    "ClassificationResult",
    "CorpusGenerator",
    "generate_corpus",
    "SeverityModel",
    "train",
    "predict",
]
