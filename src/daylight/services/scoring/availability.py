"""Open-now resolution for candidate stops."""

from __future__ import annotations

from datetime import datetime

from ...models.domain import CandidateStop
from ..validation import coerce_instant


def is_open_now(candidate: CandidateStop, instant: datetime) -> bool:
    """Return True if ``instant`` falls inside any declared open window.

    Candidates without declared windows are treated as open.
    """

    if not candidate.open_windows:
        return True
    instant = coerce_instant(instant)
    return any(window.contains(instant) for window in candidate.open_windows)
