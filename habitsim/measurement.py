"""
habitsim/measurement.py - Habit History Measurement

Pure functions turning timestamps into day buckets and completion rates.
"""

import math
from datetime import datetime
from typing import List, Sequence

from .constants import SECONDS_PER_DAY, MIN_DAYS_FOR_RATE
from .types_state import HabitInput


def day_bucket(ts: datetime) -> int:
    """
    Whole UTC epoch day containing a timestamp.

    Naive datetimes are interpreted the way datetime.timestamp() does
    (local time).

    Examples:
        >>> from datetime import datetime, timezone
        >>> day_bucket(datetime(1970, 1, 2, 12, tzinfo=timezone.utc))
        1
    """
    return int(math.floor(ts.timestamp() / SECONDS_PER_DAY))


def day_buckets(timestamps: Sequence[datetime]) -> List[int]:
    """Sorted day buckets for a completion sequence (input order not assumed)."""
    return sorted(day_bucket(ts) for ts in timestamps)


def days_since_creation(habit: HabitInput, now: datetime) -> float:
    return (now.timestamp() - habit.created_at.timestamp()) / SECONDS_PER_DAY


def expected_completions(habit: HabitInput, now: datetime) -> float:
    """Completions a perfectly consistent user would have logged by `now`."""
    return days_since_creation(habit, now) / habit.frequency.days_per_period


def completion_rate(habit: HabitInput, completions: Sequence[datetime], now: datetime) -> float:
    """
    Fraction of expected completions achieved, clamped to [0, 1].

    Args:
        habit: Habit record
        completions: Completion timestamps for this habit
        now: Reference time

    Returns:
        float: 0.0 for no completions or habits younger than one day
    """
    if not completions:
        return 0.0
    if days_since_creation(habit, now) < MIN_DAYS_FOR_RATE:
        return 0.0

    expected = expected_completions(habit, now)
    if expected <= 0:
        return 0.0
    return min(max(len(completions) / expected, 0.0), 1.0)
