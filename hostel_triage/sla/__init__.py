"""
SLA Escalation Module
=====================

Bounded Context for complaint SLA deadlines and auto-escalation.

Responsibilities:
- Deadline arithmetic (SLACalculator)
- Periodic sweep escalating overdue complaints with a priority boost
- Cron endpoint and optional in-process scheduler
"""
