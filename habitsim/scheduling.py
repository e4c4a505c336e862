"""
habitsim/scheduling.py - Scheduler and Success Predictor

Ranks habits by qubit magnitude plus entanglement bonus and estimates
per-habit success. Habits not mapped into the state vector get 0.0 or are
left out of the ranking; nothing here raises on unknown habits.
"""

import math
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

from .constants import (
    ENTANGLEMENT_PRIORITY_WEIGHT, SUCCESS_RATE_WEIGHT, SUCCESS_AMPLITUDE_WEIGHT,
    SUCCESS_STREAK_WEIGHT, STREAK_SATURATION, EFFECT_AMPLITUDE_WEIGHT,
    EFFECT_PHASE_WEIGHT,
)
from .measurement import completion_rate
from .types_state import HabitInput, SessionHandle


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def habit_priority(session: SessionHandle, habit_id: str) -> float:
    """|qubit| + sum(strength * 0.2) over links touching the habit; 0.0 if unmapped."""
    index = session.state.index_of(habit_id)
    if index < 0:
        return 0.0

    priority = session.state[index].magnitude()
    for link in session.entanglements:
        if link.touches(habit_id):
            priority += link.strength * ENTANGLEMENT_PRIORITY_WEIGHT
    return priority


def optimal_schedule(session: SessionHandle, habits: Sequence[HabitInput]) -> List[Tuple[HabitInput, float]]:
    """
    Habits ranked by priority, highest first.

    Ties keep input order (sorted() is stable). Habits without a qubit are
    omitted, and a repeated id is ranked once.

    Args:
        session: Current SessionHandle
        habits: Habits to rank

    Returns:
        List of (habit, priority) pairs
    """
    ranked = []
    seen = set()
    for habit in habits:
        if habit.id in seen or session.state.index_of(habit.id) < 0:
            continue
        seen.add(habit.id)
        ranked.append((habit, habit_priority(session, habit.id)))
    return sorted(ranked, key=lambda pair: pair[1], reverse=True)


def predict_success(session: SessionHandle, habit: HabitInput, completions: Sequence[datetime]) -> float:
    """
    0.3 * completion_rate + 0.4 * |qubit| + 0.3 * min(streak / 10, 1), in [0, 1].

    Returns 0.0 for habits not present in the state vector.
    """
    index = session.state.index_of(habit.id)
    if index < 0:
        return 0.0

    amplitude = session.state[index].magnitude()
    rate = completion_rate(habit, completions, session.now)
    streak_factor = min(habit.streak / STREAK_SATURATION, 1.0)

    return _clamp_unit(
        SUCCESS_RATE_WEIGHT * rate
        + SUCCESS_AMPLITUDE_WEIGHT * amplitude
        + SUCCESS_STREAK_WEIGHT * streak_factor
    )


def apply_quantum_effect(
    session: SessionHandle,
    habits: Sequence[HabitInput],
    completions: Dict[str, Sequence[datetime]]
) -> Dict[str, float]:
    """
    One-shot enhanced probability per mapped habit.

    For each of the first min(len(habits), n_qubits) slots that maps to a
    habit present in `habits`: clamp(rate + |q| * 0.3 + sin(phase) * 0.1).

    Args:
        session: Current SessionHandle
        habits: Habit batch
        completions: habit_id -> completion timestamps

    Returns:
        Dict habit_id -> probability in [0, 1]
    """
    by_id = {}
    for habit in habits:
        by_id.setdefault(habit.id, habit)
    results = {}

    for index in range(min(len(habits), len(session.state))):
        habit_id = session.state.habit_at(index)
        if habit_id is None or habit_id not in by_id:
            continue

        qubit = session.state[index]
        rate = completion_rate(by_id[habit_id], completions.get(habit_id, ()), session.now)
        results[habit_id] = _clamp_unit(
            rate
            + qubit.magnitude() * EFFECT_AMPLITUDE_WEIGHT
            + math.sin(qubit.phase()) * EFFECT_PHASE_WEIGHT
        )

    return results
