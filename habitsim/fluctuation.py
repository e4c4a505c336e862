"""
habitsim/fluctuation.py - Random Fluctuation and Energy Perturbation

Small random rotations keep the state from settling into a fixed point.
All randomness comes from the session's injected random source.
"""

import math
import random
from typing import Dict, Optional, Tuple

from receipts import emit_receipt

from .constants import FLUCTUATION_MAX_ANGLE, TENANT_ID
from .dynamics_gates import rotate
from .types_state import SessionHandle, StateVector


def fluctuate_qubit(state: StateVector, rng: random.Random) -> Tuple[int, float]:
    """
    Rotate one random qubit by an angle in [0, pi/10), then renormalize.

    Args:
        state: StateVector (mutated in place)
        rng: Random source

    Returns:
        Tuple of (qubit index, angle)
    """
    index = rng.randrange(len(state))
    angle = rng.random() * FLUCTUATION_MAX_ANGLE
    state.set(index, rotate(state[index], angle))
    state.normalize()
    return index, angle


def maybe_fluctuate(session: SessionHandle) -> Optional[dict]:
    """
    Roll for a fluctuation event this tick.

    Args:
        session: Current SessionHandle (mutated in place if the event fires)

    Returns:
        Receipt dict if a fluctuation occurred, None otherwise
    """
    if session.rng.random() >= session.config.fluctuation_probability:
        return None

    index, angle = fluctuate_qubit(session.state, session.rng)
    session.fluctuation_count += 1

    receipt = emit_receipt("fluctuation", {
        "tenant_id": TENANT_ID,
        "tick": session.tick,
        "qubit_index": index,
        "angle": angle
    })
    session.receipt_ledger.append(receipt)
    return receipt


def perturbed_energy_levels(state: StateVector, max_level: int) -> Dict[str, int]:
    """
    Energy level from the live qubit: int(|q| * max_level + sin(phase)).

    Clamped to [0, max_level]. Only habits mapped into the vector appear.
    """
    levels = {}
    for index, habit_id in enumerate(state.habit_ids):
        qubit = state[index]
        raw = int(qubit.magnitude() * max_level + math.sin(qubit.phase()))
        levels[habit_id] = min(max(raw, 0), max_level)
    return levels
