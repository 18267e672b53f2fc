"""
Triage Module
=============

Bounded Context for text-based severity classification of complaints.

Responsibilities:
- Generate the labelled training corpus
- Train the Naive Bayes severity model once per process
- Predict HIGH / MEDIUM / LOW severity for complaint text
- Expose ad-hoc classification for staff tooling
"""

__version__ = "1.0.0"
