"""
Severity Classifier
===================

Multinomial Naive Bayes over word counts, mapping free-text complaint
descriptions to HIGH, MEDIUM or LOW.

Prediction picks the label with the highest posterior. Exact ties go to
the more severe label (HIGH, then MEDIUM, then LOW). Blank text is LOW.
"""

import math
import time
from typing import Dict, Iterable, List, Sequence

from sklearn.feature_extraction.text import CountVectorizer
from sklearn.naive_bayes import MultinomialNB

from hostel_triage.config import PREDICTED_SEVERITY_ORDER, PredictedSeverity
from hostel_triage.core import InvalidCorpusException
from hostel_triage.triage.domain.entities import ClassificationResult, TrainingExample

DEFAULT_SEVERITY = PredictedSeverity.LOW


class SeverityModel:
    """
    Trained severity classifier.

    Built by train(); callers hold an instance and pass it where
    predictions are needed.
    """

    def __init__(
        self,
        vectorizer: CountVectorizer,
        classifier: MultinomialNB,
        corpus_size: int,
        label_counts: Dict[PredictedSeverity, int],
    ):
        self._vectorizer = vectorizer
        self._classifier = classifier
        self.corpus_size = corpus_size
        self.label_counts = label_counts
        # Column index of each label in the classifier output
        self._label_index = {
            PredictedSeverity(label): i for i, label in enumerate(classifier.classes_)
        }

    @property
    def labels(self) -> List[PredictedSeverity]:
        """Labels seen during training, most severe first."""
        return [label for label in PREDICTED_SEVERITY_ORDER if label in self._label_index]

    @property
    def vocabulary_size(self) -> int:
        return len(self._vectorizer.vocabulary_)

    def _log_posteriors(self, text: str) -> Dict[PredictedSeverity, float]:
        features = self._vectorizer.transform([text])
        log_proba = self._classifier.predict_log_proba(features)[0]
        return {label: float(log_proba[i]) for label, i in self._label_index.items()}

    def predict(self, text: str) -> PredictedSeverity:
        """Return the most probable severity for text; never raises on blank input."""
        if not text or not text.strip():
            return DEFAULT_SEVERITY

        log_posteriors = self._log_posteriors(text)
        best_label = DEFAULT_SEVERITY
        best_score = -math.inf
        for label in PREDICTED_SEVERITY_ORDER:
            score = log_posteriors.get(label)
            if score is not None and score > best_score:
                best_label = label
                best_score = score
        return best_label

    def predict_proba(self, text: str) -> Dict[PredictedSeverity, float]:
        """Posterior per label; empty for blank text."""
        if not text or not text.strip():
            return {}
        return {
            label: math.exp(score)
            for label, score in self._log_posteriors(text).items()
        }

    def classify(self, text: str) -> ClassificationResult:
        start = time.perf_counter()
        severity = self.predict(text)
        probabilities = self.predict_proba(text)
        return ClassificationResult(
            severity=severity,
            probabilities=probabilities,
            latency_ms=int((time.perf_counter() - start) * 1000),
        )


def _validated(corpus: Iterable[TrainingExample]) -> List[TrainingExample]:
    examples = list(corpus)
    if not examples:
        raise InvalidCorpusException("corpus is empty")

    validated = []
    for example in examples:
        try:
            label = PredictedSeverity(example.label)
        except ValueError:
            raise InvalidCorpusException(
                f"unknown label {example.label!r}", corpus_size=len(examples)
            )
        validated.append(TrainingExample(text=example.text, label=label))
    return validated


def train(corpus: Sequence[TrainingExample], alpha: float = 1.0) -> SeverityModel:
    """
    Train a SeverityModel from labelled examples.

    Args:
        corpus: Labelled examples; order does not affect the model
        alpha: Additive (Laplace) smoothing

    Raises:
        InvalidCorpusException: Empty corpus, unknown label, or no usable words
    """
    examples = _validated(corpus)

    vectorizer = CountVectorizer(lowercase=True)
    try:
        features = vectorizer.fit_transform([e.text for e in examples])
    except ValueError as e:
        # CountVectorizer refuses an empty vocabulary
        raise InvalidCorpusException(str(e), corpus_size=len(examples))

    labels = [e.label.value for e in examples]
    classifier = MultinomialNB(alpha=alpha)
    classifier.fit(features, labels)

    label_counts: Dict[PredictedSeverity, int] = {}
    for example in examples:
        label_counts[example.label] = label_counts.get(example.label, 0) + 1

    return SeverityModel(
        vectorizer=vectorizer,
        classifier=classifier,
        corpus_size=len(examples),
        label_counts=label_counts,
    )


def predict(model: SeverityModel, text: str) -> PredictedSeverity:
    """Predict the severity of text with a trained model."""
    return model.predict(text)
