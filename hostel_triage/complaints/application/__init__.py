"""
Complaints Application Layer
=============================

Application layer for complaint intake, the staff queue and the audit log.

Contains:
- Services: orchestrate domain logic
- DTOs: Data transfer objects for API serialization
- Interfaces: repository and rule provider abstractions
"""

from hostel_triage.complaints.application.dto import (
    AuditEventResponse,
    ComplaintCreateRequest,
    ComplaintResponse,
    ComplaintStatusUpdateRequest,
)
from hostel_triage.complaints.application.services import (
    PRIORITY_ALGORITHM,
    AuditEventService,
    ComplaintService,
    IAuditEventRepository,
    ICategoryRuleProvider,
    IComplaintRepository,
    StaticCategoryRuleProvider,
)

__all__ = [
    # DTOs
    "AuditEventResponse",
    "ComplaintCreateRequest",
    "ComplaintResponse",
    "ComplaintStatusUpdateRequest",
    # Services
    "AuditEventService",
    "ComplaintService",
    "PRIORITY_ALGORITHM",
    # Interfaces
    "IAuditEventRepository",
    "ICategoryRuleProvider",
    "IComplaintRepository",
    "StaticCategoryRuleProvider",
]
