#!/usr/bin/env python3
"""
Generate Training Data
======================

Writes the labelled severity corpus to a JSON file that the service
loads at startup instead of generating it in memory.

Usage:
    python scripts/generate_training_data.py --output training_data.json --seed 42
"""

import argparse
import sys
from collections import Counter
from pathlib import Path

from hostel_triage.config import get_settings
from hostel_triage.triage.domain import generate_corpus
from hostel_triage.triage.infrastructure import JSONCorpusStore


def parse_args(argv=None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Generate the severity classifier training corpus.")
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.training_data_path,
        help=f"Output JSON file (default: {settings.training_data_path})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.corpus_seed,
        help="Random seed; omit for the configured default"
    )
    parser.add_argument(
        "--unseeded",
        action="store_true",
        help="Ignore --seed and generate a non-reproducible corpus"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    seed = None if args.unseeded else args.seed

    corpus = generate_corpus(seed=seed)
    JSONCorpusStore(args.output).save(corpus)

    counts = Counter(example.label.value for example in corpus)
    print(f"Generated {len(corpus)} examples -> {args.output}")
    for label in ("HIGH", "MEDIUM", "LOW"):
        print(f"  {label}: {counts.get(label, 0)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
