"""
Shared pytest fixtures for habit-state engine tests.

Provides deterministic inputs:
- now: Fixed, timezone-aware reference time
- make_habit: Factory for HabitInput records
- days_ago: Completion timestamps at whole-day offsets from `now`
- habit_batch: Five habits with mixed histories
- correlated_batch: Two habits sharing 8 of 10 days plus one disjoint habit
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest

from habitsim import Frequency, HabitInput


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_habit():
    """Factory: make_habit("id", streak=..., age_days=..., frequency=...)."""
    def _make(
        habit_id: str,
        streak: int = 0,
        difficulty_ordinal: int = 2,
        frequency: Frequency = Frequency.DAILY,
        age_days: float = 30.0
    ) -> HabitInput:
        return HabitInput(
            id=habit_id,
            streak=streak,
            difficulty_ordinal=difficulty_ordinal,
            frequency=frequency,
            created_at=NOW - timedelta(days=age_days)
        )
    return _make


@pytest.fixture
def days_ago():
    """Factory: days_ago([1, 2, 3]) -> completion timestamps at noon UTC."""
    def _days(offsets) -> List[datetime]:
        return [NOW - timedelta(days=d) for d in offsets]
    return _days


@pytest.fixture
def habit_batch(make_habit, days_ago):
    habits = [
        make_habit("meditate", streak=12, difficulty_ordinal=3),
        make_habit("run", streak=4, difficulty_ordinal=4),
        make_habit("read", streak=0, difficulty_ordinal=1, frequency=Frequency.WEEKLY, age_days=28),
        make_habit("journal", streak=7),
        make_habit("stretch", streak=2, frequency=Frequency.MONTHLY, age_days=90),
    ]
    completions: Dict[str, List[datetime]] = {
        "meditate": days_ago(range(1, 21)),
        "run": days_ago(range(1, 30, 2)),
        "read": days_ago([3, 10, 17]),
        "journal": days_ago(range(5, 13)),
        "stretch": days_ago([2, 40]),
    }
    return habits, completions


@pytest.fixture
def correlated_batch(make_habit, days_ago):
    habits = [
        make_habit("alpha", streak=5),
        make_habit("beta", streak=3),
        make_habit("gamma", streak=1),
    ]
    completions = {
        "alpha": days_ago(range(1, 11)),
        "beta": days_ago(list(range(1, 9)) + [11, 12]),
        "gamma": days_ago(range(21, 31)),
    }
    return habits, completions
