"""
Hostel Triage Service
=====================

Hostel maintenance ticketing backend: severity triage, hybrid priority
scoring, SLA auto-escalation and trend analytics.
"""

__version__ = "1.0.0"
