"""
Training Corpus Storage
=======================

Corpus sources for the severity classifier:
- JSONCorpusStore: a persisted training_data.json
- GeneratedCorpusSource: generates the corpus in memory
- FileOrGeneratedCorpusSource: prefers the file, falls back to generation
"""

import json
from pathlib import Path
from typing import List, Optional

from hostel_triage.core import InvalidCorpusException
from hostel_triage.shared.infrastructure.logging import get_logger
from hostel_triage.triage.application.services import ICorpusSource
from hostel_triage.triage.domain import TrainingExample, generate_corpus

logger = get_logger(__name__)


class JSONCorpusStore(ICorpusSource):
    """Reads and writes the corpus as a JSON array of {text, label} objects."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> List[TrainingExample]:
        with open(self._path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidCorpusException(f"{self._path} is not valid JSON: {e}")

        if not isinstance(data, list):
            raise InvalidCorpusException(f"{self._path} does not contain a JSON array")

        try:
            return [TrainingExample.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCorpusException(
                f"malformed entry in {self._path}: {e}", corpus_size=len(data)
            )

    def save(self, corpus: List[TrainingExample]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump([example.to_dict() for example in corpus], f, indent=4)
        logger.info(
            "Training corpus saved",
            extra={"path": str(self._path), "corpus_size": len(corpus)}
        )


class GeneratedCorpusSource(ICorpusSource):
    """Generates the corpus from vocabulary templates on each load()."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed

    def load(self) -> List[TrainingExample]:
        return generate_corpus(seed=self._seed)


class FileOrGeneratedCorpusSource(ICorpusSource):
    """Loads the persisted corpus when present, otherwise generates one."""

    def __init__(self, path: Path, seed: Optional[int] = None):
        self._store = JSONCorpusStore(path)
        self._generator = GeneratedCorpusSource(seed)

    def load(self) -> List[TrainingExample]:
        if self._store.exists():
            logger.info("Loading training corpus", extra={"path": str(self._store.path)})
            return self._store.load()

        logger.info(
            "Training corpus file not found, generating in memory",
            extra={"path": str(self._store.path)}
        )
        return self._generator.load()


def load_or_generate(path: Path, seed: Optional[int] = None) -> List[TrainingExample]:
    """Read the corpus at path if it exists, otherwise generate it."""
    return FileOrGeneratedCorpusSource(path, seed).load()
