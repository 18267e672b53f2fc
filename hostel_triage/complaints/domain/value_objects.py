"""
Complaint Value Objects
=======================

Immutable value objects for complaint scoring.

- CategoryRuleTable: category -> base severity and SLA hours
- ScoringConfig: the constants of the hybrid priority formula
- PriorityScorer: the formula itself

Hybrid priority:
    base  = (user_weight + ml_multiplier * ml_weight) / 2
    total = base + urgency_bonus(sla_hours)
    score = clamp(round_half_up(total * scale), 0, 100)
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

from hostel_triage.config import PredictedSeverity, Severity
from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Category Rules ==========

@dataclass(frozen=True)
class CategoryRule:
    """Base severity and SLA for one complaint category."""
    severity: Severity
    sla_hours: int

    def __post_init__(self):
        if self.sla_hours <= 0:
            raise ValueError("sla_hours must be a positive integer")


DEFAULT_CATEGORY_RULE = CategoryRule(severity=Severity.LOW, sla_hours=48)

DEFAULT_RULES_VERSION = "2024.1"

CATEGORY_RULES: Mapping[str, CategoryRule] = MappingProxyType({
    "Air Conditioner (AC)": CategoryRule(Severity.HIGH, 4),
    "Carpentry": CategoryRule(Severity.MEDIUM, 24),
    "CCTV Complaints": CategoryRule(Severity.HIGH, 4),
    "Civil Maintenance": CategoryRule(Severity.MEDIUM, 24),
    "Electrical Maintenance": CategoryRule(Severity.HIGH, 4),
    "Facility Management": CategoryRule(Severity.LOW, 48),
    "Hostel AC Complaint": CategoryRule(Severity.HIGH, 4),
    "Hostel Caretaker / Assistant wa": CategoryRule(Severity.MEDIUM, 12),
    "Hostel Carpentry Work": CategoryRule(Severity.MEDIUM, 24),
    "Hostel Electrical Work": CategoryRule(Severity.HIGH, 4),
    "Hostel Food & Service": CategoryRule(Severity.MEDIUM, 12),
    "Hostel Housekeeping": CategoryRule(Severity.MEDIUM, 12),
    "Hostel Laundry Service": CategoryRule(Severity.MEDIUM, 24),
    "Hostel Mess Hall Cleanliness": CategoryRule(Severity.MEDIUM, 12),
    "Hostel Plumbing Work": CategoryRule(Severity.HIGH, 4),
    "Hostel Wifi": CategoryRule(Severity.HIGH, 4),
    "KMCH Medical Equipment": CategoryRule(Severity.CRITICAL, 1),
    "Network and Internet": CategoryRule(Severity.HIGH, 4),
    "Plumbing": CategoryRule(Severity.HIGH, 4),
    "Printer Service": CategoryRule(Severity.LOW, 48),
    "System Service": CategoryRule(Severity.LOW, 48),
    "Toner Refilling": CategoryRule(Severity.LOW, 48),
    "Website Updates": CategoryRule(Severity.LOW, 72),
})

CATEGORIES: List[str] = list(CATEGORY_RULES)


class CategoryRuleTable:
    """
    Versioned category rule lookup.

    Unknown categories resolve to DEFAULT_CATEGORY_RULE so that every
    complaint stays scorable.
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, CategoryRule]] = None,
        version: str = DEFAULT_RULES_VERSION
    ):
        self._rules = MappingProxyType(dict(CATEGORY_RULES if rules is None else rules))
        self.version = version

    @property
    def categories(self) -> List[str]:
        return list(self._rules)

    def __contains__(self, category: str) -> bool:
        return category in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, category: str) -> CategoryRule:
        rule = self._rules.get(category)
        if rule is None:
            logger.debug(
                "Unknown category, using default rule",
                extra={"category": category}
            )
            return DEFAULT_CATEGORY_RULE
        return rule


def get_base_severity_and_sla(
    category: str,
    table: Optional[CategoryRuleTable] = None
) -> CategoryRule:
    """Look up base severity and SLA hours for a category ({Low, 48} if unknown)."""
    return (table or _DEFAULT_TABLE).get(category)


_DEFAULT_TABLE = CategoryRuleTable()


# ========== Scoring ==========

DEFAULT_SEVERITY_WEIGHTS: Dict[str, int] = {
    Severity.CRITICAL.value: 50,
    Severity.HIGH.value: 40,
    PredictedSeverity.HIGH.value: 40,
    Severity.MEDIUM.value: 20,
    PredictedSeverity.MEDIUM.value: 20,
    Severity.LOW.value: 10,
    PredictedSeverity.LOW.value: 10,
}


class UrgencyBonus(BaseModel):
    """Points added when the SLA is at most max_hours."""
    max_hours: float = Field(gt=0)
    bonus: int = Field(ge=0)


class ScoringConfig(BaseModel):
    """
    Constants of the hybrid priority formula.

    Defaults reproduce the production formula exactly.
    """
    severity_weights: Dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_WEIGHTS),
        description="Weight per severity label (user and classifier labels)"
    )
    default_weight: int = Field(default=10, description="Weight for unrecognised labels")
    ml_multiplier: float = Field(default=1.5, ge=0.0)
    scale: float = Field(default=2.0, gt=0.0)
    urgency_bonuses: List[UrgencyBonus] = Field(
        default_factory=lambda: [
            UrgencyBonus(max_hours=1, bonus=50),
            UrgencyBonus(max_hours=4, bonus=30),
            UrgencyBonus(max_hours=12, bonus=10),
        ],
        description="Checked tightest first; first match wins"
    )
    min_score: int = 0
    max_score: int = 100
    breach_boost: int = Field(default=50, ge=0)

    @field_validator("urgency_bonuses")
    @classmethod
    def sort_bonuses(cls, v: List[UrgencyBonus]) -> List[UrgencyBonus]:
        return sorted(v, key=lambda b: b.max_hours)

    @classmethod
    def from_settings(cls, settings) -> "ScoringConfig":
        return cls(
            ml_multiplier=settings.score_ml_multiplier,
            scale=settings.score_scale,
            breach_boost=settings.sla_breach_boost,
        )


SeverityLabel = Union[Severity, PredictedSeverity, str, None]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


class PriorityScorer:
    """
    Pure priority calculations.

    Stateless apart from its ScoringConfig; all scoring logic in one place.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def weight_of(self, label: SeverityLabel) -> int:
        key = label.value if isinstance(label, Enum) else label
        weight = self.config.severity_weights.get(key) if key is not None else None
        if weight is None:
            logger.warning(
                "Unrecognised severity label, using default weight",
                extra={"label": str(key), "default_weight": self.config.default_weight}
            )
            return self.config.default_weight
        return weight

    def urgency_bonus(self, sla_hours: float) -> int:
        for rule in self.config.urgency_bonuses:
            if sla_hours <= rule.max_hours:
                return rule.bonus
        return 0

    def score(
        self,
        user_severity: SeverityLabel,
        ml_severity: SeverityLabel,
        sla_hours: float
    ) -> int:
        """
        Combine user severity, classifier severity and SLA urgency.

        Returns:
            Integer priority in [min_score, max_score]
        """
        user_weight = self.weight_of(user_severity)
        ml_weight = self.weight_of(ml_severity)

        total = (user_weight + self.config.ml_multiplier * ml_weight) / 2
        total += self.urgency_bonus(sla_hours)

        scaled = round_half_up(total * self.config.scale)
        return max(self.config.min_score, min(scaled, self.config.max_score))

    def escalate(self, current_score: int) -> int:
        """Score after an SLA breach: additive boost, never a recompute."""
        return current_score + self.config.breach_boost


def calculate_smart_priority(
    user_severity: SeverityLabel,
    ml_severity: SeverityLabel,
    sla_hours: float,
    config: Optional[ScoringConfig] = None
) -> int:
    """Hybrid priority score with the given (or default) constants."""
    return PriorityScorer(config).score(user_severity, ml_severity, sla_hours)
