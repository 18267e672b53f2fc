"""
Complaints Infrastructure Layer
================================

Infrastructure implementations for the complaints module.

Contains:
- Models: SQLAlchemy ORM models
- Repositories: SQLAlchemy and in-memory data access
- YAMLCategoryRuleProvider: category rule table from YAML
"""

from hostel_triage.complaints.infrastructure.memory import (
    InMemoryAuditEventRepository,
    InMemoryComplaintRepository,
    InMemoryStore,
)
from hostel_triage.complaints.infrastructure.models import AuditEventModel, ComplaintModel
from hostel_triage.complaints.infrastructure.repositories import (
    SQLAlchemyAuditEventRepository,
    SQLAlchemyComplaintRepository,
    YAMLCategoryRuleProvider,
)

__all__ = [
    # Models
    "AuditEventModel",
    "ComplaintModel",
    # Repositories
    "InMemoryAuditEventRepository",
    "InMemoryComplaintRepository",
    "InMemoryStore",
    "SQLAlchemyAuditEventRepository",
    "SQLAlchemyComplaintRepository",
    # Configuration
    "YAMLCategoryRuleProvider",
]
