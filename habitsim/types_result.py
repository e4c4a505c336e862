"""
habitsim/types_result.py - Result and Snapshot Dataclasses

Immutable containers handed to the rendering layer.
"""

from dataclasses import dataclass
from typing import Tuple

from .types_config import SimConfig
from .types_state import EntanglementLink, Particle, SessionHandle


@dataclass(frozen=True)
class VisualizationSummary:
    """Aggregate view over the whole state vector."""
    avg_amplitude: float
    avg_phase: float
    particle_count: int
    entanglement_count: int
    avg_energy_level: int


@dataclass(frozen=True)
class HabitVisualization:
    """Per-habit view: its qubit, particles and links."""
    habit_id: str
    amplitude: float
    phase: float
    particles: Tuple[Particle, ...]
    entanglements: Tuple[EntanglementLink, ...]
    energy_level: int


@dataclass(frozen=True)
class SimResult:
    """Immutable simulation result."""
    final_state: SessionHandle
    all_traces: dict
    violations: list
    statistics: dict
    config: SimConfig
