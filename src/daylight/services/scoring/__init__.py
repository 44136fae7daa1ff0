"""Candidate scoring services."""

from .availability import is_open_now
from .scorer import rationale, score_candidates

__all__ = ["score_candidates", "is_open_now", "rationale"]
