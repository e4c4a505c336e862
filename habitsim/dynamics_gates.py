"""
habitsim/dynamics_gates.py - Single-Qubit Gates

Hadamard-style mix and phase rotation. Each gate transforms one slot in
place, then renormalizes the whole vector. Out-of-range indices are a
silent no-op so the tick loop can never crash on a gate target.
"""

import math

from .constants import INV_SQRT2
from .types_state import ComplexScalar, StateVector


def rotate(qubit: ComplexScalar, theta: float) -> ComplexScalar:
    """2D rotation of (real, imag) by theta radians."""
    c = math.cos(theta)
    s = math.sin(theta)
    return ComplexScalar(
        qubit.real * c - qubit.imag * s,
        qubit.real * s + qubit.imag * c
    )


def hadamard(qubit: ComplexScalar) -> ComplexScalar:
    return ComplexScalar(
        (qubit.real + qubit.imag) * INV_SQRT2,
        (qubit.real - qubit.imag) * INV_SQRT2
    )


def apply_hadamard_gate(state: StateVector, index: int) -> bool:
    """
    Apply the Hadamard-style gate to one qubit.

    Args:
        state: StateVector (mutated in place)
        index: Target qubit

    Returns:
        bool: True if applied, False if index was out of bounds
    """
    if not state.in_bounds(index):
        return False
    state.set(index, hadamard(state[index]))
    state.normalize()
    return True


def apply_phase_gate(state: StateVector, index: int, theta: float) -> bool:
    """
    Rotate one qubit by theta radians.

    Args:
        state: StateVector (mutated in place)
        index: Target qubit
        theta: Rotation angle (the tick loop passes cumulative simulation time)

    Returns:
        bool: True if applied, False if index was out of bounds
    """
    if not state.in_bounds(index):
        return False
    state.set(index, rotate(state[index], theta))
    state.normalize()
    return True
