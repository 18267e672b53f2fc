"""
Triage Infrastructure Layer
============================

Infrastructure implementations for the severity triage module.

Contains:
- Corpus storage: JSON file and in-memory generated sources
"""

from hostel_triage.triage.infrastructure.corpus_store import (
    JSONCorpusStore,
    GeneratedCorpusSource,
    FileOrGeneratedCorpusSource,
    load_or_generate,
)

__all__ = [
    "JSONCorpusStore",
    "GeneratedCorpusSource",
    "FileOrGeneratedCorpusSource",
    "load_or_generate",
]
