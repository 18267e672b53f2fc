"""
Unit tests for training corpus generation and storage.
"""

import json
from pathlib import Path

import pytest

from hostel_triage.config import PredictedSeverity
from hostel_triage.core import InvalidCorpusException
from hostel_triage.triage.domain import CorpusGenerator, TrainingExample, generate_corpus
from hostel_triage.triage.domain.corpus import (
    EDGE_CASES,
    HIGH_SUBJECTS,
    HIGH_URGENCY,
    HIGH_VERBS,
    LOW_SUBJECTS,
    LOW_VERBS,
    MEDIUM_SUBJECTS,
    MEDIUM_VERBS,
)
from hostel_triage.triage.infrastructure import (
    FileOrGeneratedCorpusSource,
    JSONCorpusStore,
    load_or_generate,
)


class TestCorpusGenerator:
    """Tests for the template-based corpus generator."""

    def test_seeded_corpus_is_reproducible(self) -> None:
        """Test that the same seed yields the same corpus, order included."""
        assert generate_corpus(seed=7) == generate_corpus(seed=7)

    def test_generator_instance_is_reusable(self) -> None:
        """Test that generate() restarts from the seed on every call."""
        generator = CorpusGenerator(seed=3)
        assert generator.generate() == generator.generate()

    def test_every_high_template_is_emitted(self, corpus: list[TrainingExample]) -> None:
        """Test that all subject x verb and urgency x subject HIGH texts exist."""
        high = {e.text for e in corpus if e.label == PredictedSeverity.HIGH}

        for subject in HIGH_SUBJECTS:
            for verb in HIGH_VERBS:
                assert f"{subject} {verb}" in high
            for urgency in HIGH_URGENCY:
                assert f"{urgency} {subject}" in high

    def test_every_medium_and_low_template_is_emitted(self, corpus: list[TrainingExample]) -> None:
        """Test that the mandatory '{subject} is {verb}' forms exist."""
        medium = {e.text for e in corpus if e.label == PredictedSeverity.MEDIUM}
        low = {e.text for e in corpus if e.label == PredictedSeverity.LOW}

        for subject in MEDIUM_SUBJECTS:
            for verb in MEDIUM_VERBS:
                assert f"{subject} is {verb}" in medium
        for subject in LOW_SUBJECTS:
            for verb in LOW_VERBS:
                assert f"{subject} is {verb}" in low

    def test_edge_cases_present(self, corpus: list[TrainingExample]) -> None:
        """Test that the fixed edge cases are appended with their labels."""
        examples = {(e.text, e.label) for e in corpus}
        for text, label in EDGE_CASES:
            assert (text, label) in examples

    def test_minimum_size_per_label(self, corpus: list[TrainingExample]) -> None:
        """Test the deterministic lower bound of examples per label."""
        counts = {label: 0 for label in PredictedSeverity}
        for example in corpus:
            counts[example.label] += 1

        assert counts[PredictedSeverity.HIGH] >= len(HIGH_SUBJECTS) * (len(HIGH_VERBS) + len(HIGH_URGENCY)) + 3
        assert counts[PredictedSeverity.MEDIUM] >= len(MEDIUM_SUBJECTS) * len(MEDIUM_VERBS)
        assert counts[PredictedSeverity.LOW] >= len(LOW_SUBJECTS) * len(LOW_VERBS) + 2

    def test_texts_are_trimmed(self, corpus: list[TrainingExample]) -> None:
        """Test that the empty location never leaves trailing whitespace."""
        assert all(e.text == e.text.strip() for e in corpus)


class TestCorpusStore:
    """Tests for JSON corpus persistence."""

    def test_save_then_load(self, tmp_path: Path) -> None:
        """Test that a saved corpus loads back unchanged."""
        store = JSONCorpusStore(tmp_path / "data" / "training_data.json")
        corpus = generate_corpus(seed=1)

        store.save(corpus)

        assert store.exists()
        assert store.load() == corpus

    def test_file_format(self, tmp_path: Path) -> None:
        """Test that the file is a JSON array of text/label objects."""
        path = tmp_path / "training_data.json"
        JSONCorpusStore(path).save([TrainingExample("fire detected", PredictedSeverity.HIGH)])

        assert json.loads(path.read_text()) == [{"text": "fire detected", "label": "HIGH"}]

    def test_malformed_file_raises(self, tmp_path: Path) -> None:
        """Test that an entry with an unknown label is rejected."""
        path = tmp_path / "training_data.json"
        path.write_text(json.dumps([{"text": "fire", "label": "URGENT"}]))

        with pytest.raises(InvalidCorpusException):
            JSONCorpusStore(path).load()

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        """Test that a truncated file is reported as an invalid corpus."""
        path = tmp_path / "training_data.json"
        path.write_text('[{"text": "fire", "label": ')

        with pytest.raises(InvalidCorpusException):
            JSONCorpusStore(path).load()

    def test_non_array_file_raises(self, tmp_path: Path) -> None:
        """Test that a JSON object instead of an array is rejected."""
        path = tmp_path / "training_data.json"
        path.write_text(json.dumps({"text": "fire", "label": "HIGH"}))

        with pytest.raises(InvalidCorpusException):
            JSONCorpusStore(path).load()

    def test_falls_back_to_generation(self, tmp_path: Path) -> None:
        """Test that a missing file means an in-memory corpus."""
        source = FileOrGeneratedCorpusSource(tmp_path / "missing.json", seed=5)

        assert source.load() == generate_corpus(seed=5)

    def test_prefers_file_when_present(self, tmp_path: Path) -> None:
        """Test that an existing file wins over generation."""
        path = tmp_path / "training_data.json"
        corpus = [TrainingExample("lizard in room", PredictedSeverity.LOW)]
        JSONCorpusStore(path).save(corpus)

        assert load_or_generate(path, seed=5) == corpus
