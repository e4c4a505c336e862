"""
habitsim/entanglement.py - Habit Correlation and Entanglement Links

Same-day correlation between completion histories, link derivation above a
threshold, the per-tick controlled flip, and bounded strength fluctuation.
"""

import math
import random
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Sequence

from .constants import (
    CONTROL_MAGNITUDE, STRENGTH_FLUCTUATION, STRENGTH_FLUCTUATION_RATE,
    STRENGTH_FLOOR, STRENGTH_CEILING,
)
from .measurement import day_buckets
from .palette import blend_colors, color_for_qubit
from .types_config import SimConfig
from .types_state import ComplexScalar, EntanglementLink, HabitInput, StateVector, make_id


def same_day_count(days_a: Sequence[int], days_b: Sequence[int]) -> int:
    """
    Merge walk over two sorted day-bucket sequences.

    Advances the pointer on the smaller day; equal days count one match
    and advance both.
    """
    i = 0
    j = 0
    matches = 0
    while i < len(days_a) and j < len(days_b):
        if days_a[i] == days_b[j]:
            matches += 1
            i += 1
            j += 1
        elif days_a[i] < days_b[j]:
            i += 1
        else:
            j += 1
    return matches


def habit_correlation(completions_a: Sequence[datetime], completions_b: Sequence[datetime]) -> float:
    """
    Correlation = 2 * same_day_count / (len_a + len_b), in [0, 1].

    Symmetric in its arguments. Empty histories correlate at 0.0.
    """
    if not completions_a or not completions_b:
        return 0.0

    matches = same_day_count(day_buckets(completions_a), day_buckets(completions_b))
    total = len(completions_a) + len(completions_b)
    return min(max(2.0 * matches / total, 0.0), 1.0)


def derive_entanglements(
    habits: Sequence[HabitInput],
    completions: Dict[str, Sequence[datetime]],
    config: SimConfig,
    rng: random.Random
) -> List[EntanglementLink]:
    """
    Build links for every habit pair whose correlation exceeds the threshold.

    Only the first min(len(habits), n_qubits) habits take part.

    Args:
        habits: Habit batch in qubit order
        completions: habit_id -> completion timestamps
        config: SimConfig (threshold, capacity)
        rng: Session random source (link ids)

    Returns:
        List of EntanglementLink, ordered by (i, j)
    """
    links = []
    n = min(len(habits), config.n_qubits)

    for i in range(n):
        for j in range(i + 1, n):
            habit_a = habits[i]
            habit_b = habits[j]
            correlation = habit_correlation(
                completions.get(habit_a.id, ()),
                completions.get(habit_b.id, ())
            )
            if correlation > config.entanglement_threshold:
                links.append(EntanglementLink(
                    id=make_id(rng),
                    qubit_index_a=i,
                    qubit_index_b=j,
                    habit_id_a=habit_a.id,
                    habit_id_b=habit_b.id,
                    strength=correlation,
                    color=blend_colors(
                        color_for_qubit(i, config.n_qubits),
                        color_for_qubit(j, config.n_qubits)
                    ),
                    correlation=correlation
                ))

    return links


def propagate_entanglement(state: StateVector, links: Sequence[EntanglementLink]) -> int:
    """
    Controlled flip along every link, then one normalization.

    When |qubit_a| > CONTROL_MAGNITUDE, qubit_b's real and imaginary parts
    swap. Links referencing out-of-range indices are skipped.

    Args:
        state: StateVector (mutated in place)
        links: Current entanglement links

    Returns:
        int: Number of flips applied
    """
    flips = 0
    for link in links:
        a = link.qubit_index_a
        b = link.qubit_index_b
        if not (state.in_bounds(a) and state.in_bounds(b)):
            continue
        if state[a].magnitude() > CONTROL_MAGNITUDE:
            target = state[b]
            state.set(b, ComplexScalar(target.imag, target.real))
            flips += 1

    state.normalize()
    return flips


def fluctuate_strengths(links: Sequence[EntanglementLink], simulation_time: float) -> List[EntanglementLink]:
    """Strength = correlation + sin(3t) * 0.1, clamped to [0.1, 1.0]."""
    offset = math.sin(simulation_time * STRENGTH_FLUCTUATION_RATE) * STRENGTH_FLUCTUATION
    return [
        replace(link, strength=min(max(link.correlation + offset, STRENGTH_FLOOR), STRENGTH_CEILING))
        for link in links
    ]
