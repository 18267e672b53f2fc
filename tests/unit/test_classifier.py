"""
Unit tests for the Naive Bayes severity classifier and its provider.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from hostel_triage.config import PredictedSeverity
from hostel_triage.core import InvalidCorpusException
from hostel_triage.triage.application import ClassificationService, ICorpusSource, SeverityClassifierProvider
from hostel_triage.triage.domain import SeverityModel, TrainingExample, predict, train


class CountingCorpusSource(ICorpusSource):
    """Corpus source that records how often it is loaded."""

    def __init__(self, corpus: list[TrainingExample]):
        self._corpus = corpus
        self.loads = 0
        self._lock = threading.Lock()

    def load(self) -> list[TrainingExample]:
        with self._lock:
            self.loads += 1
        return list(self._corpus)


class TestPrediction:
    """Tests for predictions of a model trained on the seeded corpus."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("fire detected", PredictedSeverity.HIGH),
            ("gas leak happening", PredictedSeverity.HIGH),
            ("fan is not working", PredictedSeverity.MEDIUM),
            ("wifi is very slow", PredictedSeverity.MEDIUM),
            ("curtain is torn", PredictedSeverity.LOW),
            ("mirror is dusty", PredictedSeverity.LOW),
        ],
    )
    def test_canonical_phrases(self, model: SeverityModel, text: str, expected: PredictedSeverity) -> None:
        """Test that vocabulary phrases classify to their own tier."""
        assert model.predict(text) == expected

    def test_case_insensitive(self, model: SeverityModel) -> None:
        """Test that tokenisation ignores case."""
        assert model.predict("FIRE DETECTED") == model.predict("fire detected")

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_is_low(self, model: SeverityModel, text: str) -> None:
        """Test that blank input returns LOW instead of raising."""
        assert predict(model, text) == PredictedSeverity.LOW
        assert model.predict_proba(text) == {}

    def test_unknown_words_still_return_a_label(self, model: SeverityModel) -> None:
        """Test that out-of-vocabulary text gets one of the three labels."""
        assert model.predict("zzzz qqqq") in set(PredictedSeverity)

    def test_probabilities_sum_to_one(self, model: SeverityModel) -> None:
        """Test that the posterior covers every label and is normalised."""
        proba = model.predict_proba("light is flickering in the corridor")

        assert set(proba) == set(PredictedSeverity)
        assert sum(proba.values()) == pytest.approx(1.0)

    def test_model_metadata(self, model: SeverityModel, corpus: list[TrainingExample]) -> None:
        """Test corpus size, labels and vocabulary bookkeeping."""
        assert model.corpus_size == len(corpus)
        assert model.labels == [PredictedSeverity.HIGH, PredictedSeverity.MEDIUM, PredictedSeverity.LOW]
        assert sum(model.label_counts.values()) == len(corpus)
        assert model.vocabulary_size > 0

    def test_retraining_is_idempotent(self, corpus: list[TrainingExample]) -> None:
        """Test that the same corpus content gives the same predictions."""
        first = train(corpus)
        second = train(list(reversed(corpus)))
        texts = ["fire detected", "tap is leaking", "paint is peeling off", "room full of water"]

        assert [first.predict(t) for t in texts] == [second.predict(t) for t in texts]


class TestTieBreak:
    """Tests for the fixed HIGH > MEDIUM > LOW tie-break."""

    def test_high_beats_low_on_exact_tie(self) -> None:
        """Test that identical evidence resolves to the more severe label."""
        model = train([
            TrainingExample("alpha", PredictedSeverity.HIGH),
            TrainingExample("alpha", PredictedSeverity.LOW),
        ])
        assert model.predict("alpha") == PredictedSeverity.HIGH

    def test_medium_beats_low_on_exact_tie(self) -> None:
        """Test that MEDIUM wins a tie against LOW."""
        model = train([
            TrainingExample("alpha", PredictedSeverity.LOW),
            TrainingExample("alpha", PredictedSeverity.MEDIUM),
        ])
        assert model.predict("alpha") == PredictedSeverity.MEDIUM


class TestTraining:
    """Tests for training failure modes."""

    def test_empty_corpus_raises(self) -> None:
        """Test that training on nothing is rejected."""
        with pytest.raises(InvalidCorpusException):
            train([])

    def test_unknown_label_raises(self) -> None:
        """Test that labels outside HIGH/MEDIUM/LOW are rejected."""
        with pytest.raises(InvalidCorpusException):
            train([TrainingExample("fire detected", "URGENT")])

    def test_no_vocabulary_raises(self) -> None:
        """Test that a corpus without usable words is rejected."""
        with pytest.raises(InvalidCorpusException):
            train([TrainingExample("!", PredictedSeverity.LOW), TrainingExample("?", PredictedSeverity.HIGH)])


class TestClassifierProvider:
    """Tests for lazy, thread-safe model construction."""

    def test_not_ready_until_first_use(self, corpus: list[TrainingExample]) -> None:
        """Test that construction alone does not train."""
        source = CountingCorpusSource(corpus)
        provider = SeverityClassifierProvider(source)

        assert provider.is_ready is False
        assert source.loads == 0

    def test_trains_once_and_caches(self, corpus: list[TrainingExample]) -> None:
        """Test that repeated calls return the same model."""
        source = CountingCorpusSource(corpus)
        provider = SeverityClassifierProvider(source)

        assert provider.get() is provider.get()
        assert provider.is_ready is True
        assert source.loads == 1

    def test_concurrent_callers_share_one_training(self, corpus: list[TrainingExample]) -> None:
        """Test that concurrent first calls train exactly once."""
        source = CountingCorpusSource(corpus)
        provider = SeverityClassifierProvider(source)

        with ThreadPoolExecutor(max_workers=8) as pool:
            models = list(pool.map(lambda _: provider.get(), range(16)))

        assert source.loads == 1
        assert all(m is models[0] for m in models)

    def test_invalid_corpus_propagates(self) -> None:
        """Test that training errors surface and leave the provider untrained."""
        provider = SeverityClassifierProvider(CountingCorpusSource([]))

        with pytest.raises(InvalidCorpusException):
            provider.get()
        assert provider.is_ready is False


class TestClassificationService:
    """Tests for title/description classification."""

    def test_combined_text(self) -> None:
        """Test that title and description are joined with a space."""
        assert ClassificationService.combined_text("Fire", "in block A") == "Fire in block A"
        assert ClassificationService.combined_text("Fire", None) == "Fire"

    def test_classify_returns_confidence(self, model: SeverityModel) -> None:
        """Test that the result carries the winning posterior."""
        result = ClassificationService(model).classify("Smoke", "coming out")

        assert result.severity == PredictedSeverity.HIGH
        assert 0.0 < result.confidence <= 1.0
        assert result.confidence == result.probabilities[PredictedSeverity.HIGH]
