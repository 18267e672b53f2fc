"""
Analytics Module
================

Day-of-week trend reporting over recent complaints.
"""
