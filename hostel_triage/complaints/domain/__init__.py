"""
Complaints Domain Layer
========================

Pure business logic for complaint intake and prioritisation.

Contains:
- Entities: Complaint, AuditEvent
- Value Objects: CategoryRuleTable, ScoringConfig, PriorityScorer
"""

from hostel_triage.complaints.domain.entities import AuditEvent, Complaint
from hostel_triage.complaints.domain.value_objects import (
    CATEGORIES,
    CATEGORY_RULES,
    DEFAULT_CATEGORY_RULE,
    CategoryRule,
    CategoryRuleTable,
    PriorityScorer,
    ScoringConfig,
    UrgencyBonus,
    calculate_smart_priority,
    get_base_severity_and_sla,
    round_half_up,
)

__all__ = [
    # Entities
    "Complaint",
    "AuditEvent",
    # Value Objects
    "CATEGORIES",
    "CATEGORY_RULES",
    "DEFAULT_CATEGORY_RULE",
    "CategoryRule",
    "CategoryRuleTable",
    "PriorityScorer",
    "ScoringConfig",
    "UrgencyBonus",
    "calculate_smart_priority",
    "get_base_severity_and_sla",
    "round_half_up",
]
