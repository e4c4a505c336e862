"""
habitsim/state_init.py - State Initializer

Maps a habit batch and its completion history into initial qubit amplitudes
and phases, plus the initial energy-level map.
"""

import math
from datetime import datetime
from typing import Dict, Sequence

from .constants import STREAK_PHASE_DIVISOR, STREAK_PER_LEVEL, DIFFICULTY_PER_LEVEL
from .measurement import completion_rate
from .types_config import SimConfig
from .types_state import ComplexScalar, HabitInput, StateVector


def initial_qubit(habit: HabitInput, completions: Sequence[datetime], now: datetime) -> ComplexScalar:
    """
    Qubit for one habit.

    amplitude = sqrt(completion_rate), phase = streak * pi / 10.
    """
    amplitude = math.sqrt(completion_rate(habit, completions, now))
    phase = habit.streak * math.pi / STREAK_PHASE_DIVISOR
    return ComplexScalar.from_polar(amplitude, phase)


def initialize_state_vector(
    habits: Sequence[HabitInput],
    completions: Dict[str, Sequence[datetime]],
    config: SimConfig,
    now: datetime
) -> StateVector:
    """
    Build a normalized StateVector from a habit batch.

    Habits past index n_qubits - 1 are ignored. If no habit has any
    history the vector stays all-zero.

    Args:
        habits: Habit batch in qubit order
        completions: habit_id -> completion timestamps
        config: SimConfig (capacity)
        now: Reference time for completion rates

    Returns:
        StateVector of length config.n_qubits
    """
    kept = list(habits)[:config.n_qubits]
    state = StateVector(config.n_qubits, [h.id for h in kept])

    for index, habit in enumerate(kept):
        state.set(index, initial_qubit(habit, completions.get(habit.id, ()), now))

    state.normalize()
    return state


def initial_energy_level(habit: HabitInput, max_level: int) -> int:
    """min(streak // 5 + difficulty // 2, max_level), floored at 0."""
    level = habit.streak // STREAK_PER_LEVEL + habit.difficulty_ordinal // DIFFICULTY_PER_LEVEL
    return min(max(level, 0), max_level)


def initial_energy_levels(habits: Sequence[HabitInput], config: SimConfig) -> Dict[str, int]:
    """Energy level for each habit that fits in the state vector."""
    return {
        habit.id: initial_energy_level(habit, config.max_energy_level)
        for habit in list(habits)[:config.n_qubits]
    }
