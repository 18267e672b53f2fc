"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (Triage,
Complaints, SLA Escalation and Analytics).

Architecture Pattern: Modular Monolith
- Each module is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add scoring, classification or escalation logic to the shared kernel.
"""

__version__ = "1.0.0"
