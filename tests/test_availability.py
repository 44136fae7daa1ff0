from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from daylight.models.domain import CandidateStop, TimeWindow
from daylight.services.scoring import is_open_now
from daylight.services.validation import PlanningInputError

OPENS = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
CLOSES = datetime(2025, 6, 1, 17, 0, tzinfo=timezone.utc)


def _candidate(*windows: TimeWindow) -> CandidateStop:
    return CandidateStop(
        candidate_id="museum",
        name="Museum",
        latitude=34.06,
        longitude=-118.36,
        open_windows=tuple(windows),
    )


@pytest.mark.parametrize(
    "instant",
    [
        datetime(1999, 1, 1, tzinfo=timezone.utc),
        datetime(2025, 6, 1, 3, 0, tzinfo=timezone.utc),
        datetime(2040, 12, 31, 23, 59, tzinfo=timezone.utc),
    ],
)
def test_no_declared_windows_means_open(instant):
    assert is_open_now(_candidate(), instant) is True


def test_window_bounds_are_inclusive():
    candidate = _candidate(TimeWindow(start=OPENS, end=CLOSES))

    assert is_open_now(candidate, OPENS)
    assert is_open_now(candidate, CLOSES)
    assert is_open_now(candidate, OPENS + timedelta(hours=3))
    assert not is_open_now(candidate, OPENS - timedelta(seconds=1))
    assert not is_open_now(candidate, CLOSES + timedelta(seconds=1))


def test_any_matching_window_is_enough():
    morning = TimeWindow(start=OPENS, end=OPENS + timedelta(hours=3))
    evening = TimeWindow(start=CLOSES, end=CLOSES + timedelta(hours=4))
    candidate = _candidate(morning, evening)

    assert is_open_now(candidate, CLOSES + timedelta(hours=1))
    assert not is_open_now(candidate, OPENS + timedelta(hours=5))


def test_naive_instants_are_read_as_utc():
    candidate = _candidate(TimeWindow(start=OPENS, end=CLOSES))

    assert is_open_now(candidate, datetime(2025, 6, 1, 12, 0))
    assert not is_open_now(candidate, datetime(2025, 6, 1, 20, 0))


def test_other_timezones_compare_by_instant():
    candidate = _candidate(TimeWindow(start=OPENS, end=CLOSES))
    pacific = timezone(timedelta(hours=-7))

    # 08:00 in UTC-7 is 15:00 UTC
    assert is_open_now(candidate, datetime(2025, 6, 1, 8, 0, tzinfo=pacific))


def test_inverted_window_is_rejected():
    with pytest.raises(PlanningInputError):
        TimeWindow(start=CLOSES, end=OPENS)


def test_time_window_is_immutable():
    window = TimeWindow(start=datetime(2025, 6, 1, 9, 0), end=CLOSES)

    assert window.start == OPENS
    with pytest.raises(FrozenInstanceError):
        window.end = OPENS
