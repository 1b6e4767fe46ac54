"""
Initial stage classification.

Maps an analyzer fit score onto the board bucket a new candidate starts
in.  The rule never assigns ``Offer``; that stage is only reachable
through a manual board move.
"""

from __future__ import annotations

from typing import Optional

from .schema import Stage

INTERVIEW_THRESHOLD = 80
SCREENING_THRESHOLD = 50


def classify(score: Optional[float]) -> Stage:
    """Return the starting stage for a fit score (``None`` counts as 0)."""
    score = score or 0
    if score >= INTERVIEW_THRESHOLD:
        return Stage.INTERVIEW
    if score >= SCREENING_THRESHOLD:
        return Stage.SCREENING
    return Stage.NEW_APPLICATIONS
