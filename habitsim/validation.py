"""
habitsim/validation.py - Invariant Checks

Normalization invariant and link/particle index sanity checks.
Pure functions with receipts.
"""

from typing import List

from receipts import emit_receipt, StopRule

from .constants import NORMALIZATION_EPSILON, TENANT_ID
from .types_state import SessionHandle, StateVector


def normalization_error(state: StateVector) -> float:
    """|sum(|q|^2) - 1|, or 0.0 for the degenerate all-zero vector."""
    total = state.total_probability()
    if total == 0:
        return 0.0
    return abs(total - 1.0)


def is_normalized(state: StateVector, epsilon: float = NORMALIZATION_EPSILON) -> bool:
    return normalization_error(state) < epsilon


def validate_normalization(session: SessionHandle, strict: bool = False) -> bool:
    """
    Check the normalization invariant for a session.

    Args:
        session: Current SessionHandle
        strict: Raise StopRule on violation instead of recording it

    Returns:
        bool: True if valid, False if violated

    Raises:
        StopRule: If strict and the invariant is broken
    """
    error = normalization_error(session.state)
    is_valid = error < NORMALIZATION_EPSILON

    if not is_valid:
        if strict:
            raise StopRule(
                f"normalization invariant broken at tick {session.tick}: error={error:.3e}"
            )
        receipt = emit_receipt("sim_violation", {
            "tenant_id": TENANT_ID,
            "tick": session.tick,
            "violation_type": "normalization",
            "total_probability": session.state.total_probability(),
            "error": error,
            "epsilon": NORMALIZATION_EPSILON
        })
        session.receipt_ledger.append(receipt)
        session.violations.append({
            "tick": session.tick,
            "type": "normalization_violation",
            "error": error
        })

    return is_valid


def dangling_link_ids(session: SessionHandle) -> List[str]:
    """Links whose qubit indices fall outside the current state vector."""
    n = len(session.state)
    return [
        link.id for link in session.entanglements
        if not (0 <= link.qubit_index_a < n and 0 <= link.qubit_index_b < n)
    ]


def orphan_particle_count(session: SessionHandle) -> int:
    """Particles bound to qubit indices outside the current state vector."""
    n = len(session.state)
    return sum(1 for p in session.particles if not 0 <= p.qubit_index < n)
