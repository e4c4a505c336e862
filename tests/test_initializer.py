"""
tests/test_initializer.py - Completion Rates, Initial Qubits, Energy Levels

Validates:
- completion_rate for daily/weekly/monthly/custom cadences
- Young habits and empty histories give 0.0
- Initial amplitude/phase mapping and normalization
- Truncation at capacity and the all-zero degenerate batch
- Initial energy levels
"""

import math
from datetime import timedelta

import pytest

from habitsim import (
    Frequency,
    Difficulty,
    SimConfig,
    completion_rate,
    expected_completions,
    initialize,
    initialize_state_vector,
    initial_energy_levels,
    is_normalized,
)
from habitsim.state_init import initial_energy_level, initial_qubit
from receipts import filter_receipts


class TestCompletionRate:
    """Fraction of expected completions, clamped to [0, 1]."""

    def test_daily(self, make_habit, days_ago, now):
        habit = make_habit("h", age_days=30)
        rate = completion_rate(habit, days_ago(range(1, 16)), now)
        assert rate == pytest.approx(0.5), f"15 of 30 daily should be 0.5, got {rate}"

    def test_weekly(self, make_habit, days_ago, now):
        habit = make_habit("h", frequency=Frequency.WEEKLY, age_days=28)
        assert expected_completions(habit, now) == pytest.approx(4.0)
        assert completion_rate(habit, days_ago([3, 10, 17]), now) == pytest.approx(0.75)

    def test_monthly(self, make_habit, days_ago, now):
        habit = make_habit("h", frequency=Frequency.MONTHLY, age_days=90)
        assert completion_rate(habit, days_ago([2, 40]), now) == pytest.approx(2 / 3)

    def test_custom_counts_as_daily(self, make_habit, days_ago, now):
        daily = make_habit("d", age_days=10)
        custom = make_habit("c", frequency=Frequency.CUSTOM, age_days=10)
        history = days_ago(range(1, 6))
        assert completion_rate(custom, history, now) == completion_rate(daily, history, now)

    def test_clamped_to_one(self, make_habit, days_ago, now):
        habit = make_habit("h", age_days=5)
        history = days_ago([0.1 * i for i in range(1, 30)])
        assert completion_rate(habit, history, now) == 1.0

    def test_no_completions(self, make_habit, now):
        assert completion_rate(make_habit("h"), [], now) == 0.0

    def test_young_habit(self, make_habit, now):
        """Habit younger than one day has rate 0 even with completions."""
        habit = make_habit("h", age_days=0.5)
        assert completion_rate(habit, [now - timedelta(hours=1)], now) == 0.0


class TestInitialQubit:
    """amplitude = sqrt(rate), phase = streak * pi / 10."""

    def test_amplitude_and_phase(self, make_habit, days_ago, now):
        habit = make_habit("h", streak=5, age_days=4)
        qubit = initial_qubit(habit, days_ago([1]), now)
        assert qubit.magnitude() == pytest.approx(0.5)
        assert qubit.phase() == pytest.approx(math.pi / 2)

    def test_state_is_normalized(self, habit_batch, now):
        habits, completions = habit_batch
        state = initialize_state_vector(habits, completions, SimConfig(), now)
        assert len(state) == 8
        assert is_normalized(state)
        assert state.habit_ids == tuple(h.id for h in habits)

    def test_unmapped_slots_are_zero(self, habit_batch, now):
        habits, completions = habit_batch
        state = initialize_state_vector(habits, completions, SimConfig(), now)
        for index in range(len(habits), len(state)):
            assert state[index].magnitude() == 0.0

    def test_no_history_gives_zero_vector(self, make_habit, now):
        habits = [make_habit("a"), make_habit("b")]
        state = initialize_state_vector(habits, {}, SimConfig(), now)
        assert state.total_probability() == 0.0


class TestTruncation:
    """Habits beyond capacity are ignored."""

    def test_ten_habits_into_eight(self, make_habit, days_ago, now):
        habits = [make_habit(f"h{i}") for i in range(10)]
        completions = {h.id: days_ago(range(1, 5 + i)) for i, h in enumerate(habits)}

        session = initialize(habits, completions, SimConfig(), now=now)

        assert len(session.state) == 8
        assert session.state.index_of("h8") == -1
        assert session.state.index_of("h9") == -1
        assert set(session.energy_levels) == {f"h{i}" for i in range(8)}
        assert is_normalized(session.state)

        truncations = filter_receipts(session.receipt_ledger, "truncation")
        assert len(truncations) == 1
        assert truncations[0]["ignored_habit_ids"] == ["h8", "h9"]

    def test_no_truncation_receipt_under_capacity(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SimConfig(), now=now)
        assert filter_receipts(session.receipt_ledger, "truncation") == []


class TestEnergyLevels:
    """min(streak // 5 + difficulty // 2, max_level)."""

    def test_formula(self, make_habit):
        habit = make_habit("h", streak=12, difficulty_ordinal=Difficulty.HARD.value)
        assert initial_energy_level(habit, 5) == 3

    def test_clamped(self, make_habit):
        habit = make_habit("h", streak=40, difficulty_ordinal=Difficulty.VERY_HARD.value)
        assert initial_energy_level(habit, 5) == 5

    def test_zero(self, make_habit):
        habit = make_habit("h", streak=0, difficulty_ordinal=Difficulty.EASY.value)
        assert initial_energy_level(habit, 5) == 0

    def test_only_mapped_habits(self, make_habit):
        habits = [make_habit(f"h{i}", streak=i) for i in range(4)]
        levels = initial_energy_levels(habits, SimConfig(n_qubits=2))
        assert set(levels) == {"h0", "h1"}
