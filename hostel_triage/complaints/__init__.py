"""
Complaints Module
=================

Complaint intake, hybrid priority scoring and the staff queue.
"""
