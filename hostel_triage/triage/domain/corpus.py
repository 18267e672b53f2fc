"""
Training Corpus Generator
=========================

Builds the labelled corpus the severity classifier learns from by pairing
subject, verb and urgency vocabulary per severity tier.

Every "verb alone" and "subject is verb" pairing is emitted; location
variants are sampled so that the label signal stays concentrated on the
literal vocabulary.
"""

import random
from typing import List, Optional

from hostel_triage.config import PredictedSeverity
from hostel_triage.triage.domain.entities import TrainingExample


LOCATIONS = [
    "in my room", "in the bathroom", "in the corridor", "in the common area",
    "in the pantry", "on the 2nd floor", "near the entrance", "in block A", "",
]

# HIGH: safety, power, water damage
HIGH_SUBJECTS = [
    "fire", "smoke", "sparking", "short circuit", "gas leak", "explosion",
    "burning smell", "exposed wire", "flooding", "burst pipe", "ceiling collapse",
    "broken glass", "main door broken", "lock broken", "elevator stuck",
    "no electricity",
]
HIGH_VERBS = [
    "detected", "happening", "started", "coming out", "is dangerous", "exploded",
    "collapsed", "shattered", "not locking", "stuck with people",
]
HIGH_URGENCY = [
    "emergency", "urgent help needed", "danger", "critical situation",
    "help immediately",
]

# MEDIUM: functional and comfort fixtures
MEDIUM_SUBJECTS = [
    "fan", "light", "tube light", "ac", "air conditioner", "cooler", "water tap",
    "shower", "flush", "sink", "internet", "wifi", "lan port", "bed", "mattress",
    "table", "chair", "cupboard",
]
MEDIUM_VERBS = [
    "not working", "broken", "leaking", "dripping", "slow", "flickering",
    "making noise", "wobbly", "jammed", "clogged", "no water", "very slow",
    "disconnected",
]

# LOW: cosmetic and minor
LOW_SUBJECTS = [
    "curtain", "curtain rod", "mirror", "dustbin", "paint", "wall", "floor tile",
    "window net", "notice board", "doormat", "soap stand", "towel rail",
]
LOW_VERBS = [
    "dirty", "stained", "peeling off", "missing", "torn", "loose", "dusty",
    "needs cleaning", "slightly broken", "old",
]

EDGE_CASES = [
    ("water is flooded in our room", PredictedSeverity.HIGH),
    ("room full of water", PredictedSeverity.HIGH),
    ("bathroom flooded", PredictedSeverity.HIGH),
    ("lizard in room", PredictedSeverity.LOW),
    ("ants on the table", PredictedSeverity.LOW),
]

# Probability of emitting an optional variant
HIGH_LOCATION_RATE = 0.3
MEDIUM_SHORT_FORM_RATE = 0.5
MEDIUM_LOCATION_RATE = 0.2
LOW_LOCATION_RATE = 0.2


class CorpusGenerator:
    """
    Generates a shuffled list of TrainingExample.

    Pass a seed for a reproducible corpus; without one, sampling and
    shuffling differ between runs.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)
        self._examples: List[TrainingExample] = []

    def generate(self) -> List[TrainingExample]:
        self._rng = random.Random(self.seed)
        self._examples = []

        self._generate_high()
        self._generate_medium()
        self._generate_low()

        for text, label in EDGE_CASES:
            self._add(text, label)

        corpus = self._examples
        self._rng.shuffle(corpus)
        self._examples = []
        return corpus

    def _add(self, text: str, label: PredictedSeverity) -> None:
        self._examples.append(TrainingExample(text=text.strip(), label=label))

    def _sampled(self, rate: float) -> bool:
        return self._rng.random() < rate

    def _generate_high(self) -> None:
        for subject in HIGH_SUBJECTS:
            for verb in HIGH_VERBS:
                self._add(f"{subject} {verb}", PredictedSeverity.HIGH)
                for location in LOCATIONS:
                    if self._sampled(HIGH_LOCATION_RATE):
                        self._add(f"{subject} {verb} {location}", PredictedSeverity.HIGH)
            for urgency in HIGH_URGENCY:
                self._add(f"{urgency} {subject}", PredictedSeverity.HIGH)

    def _generate_medium(self) -> None:
        for subject in MEDIUM_SUBJECTS:
            for verb in MEDIUM_VERBS:
                self._add(f"{subject} is {verb}", PredictedSeverity.MEDIUM)
                if self._sampled(MEDIUM_SHORT_FORM_RATE):
                    self._add(f"{subject} {verb}", PredictedSeverity.MEDIUM)
                for location in LOCATIONS:
                    if self._sampled(MEDIUM_LOCATION_RATE):
                        self._add(f"{subject} {verb} {location}", PredictedSeverity.MEDIUM)

    def _generate_low(self) -> None:
        for subject in LOW_SUBJECTS:
            for verb in LOW_VERBS:
                self._add(f"{subject} is {verb}", PredictedSeverity.LOW)
                for location in LOCATIONS:
                    if self._sampled(LOW_LOCATION_RATE):
                        self._add(f"{subject} {verb} {location}", PredictedSeverity.LOW)


def generate_corpus(seed: Optional[int] = None) -> List[TrainingExample]:
    """Generate a shuffled training corpus."""
    return CorpusGenerator(seed=seed).generate()
