"""
habitsim/types_state.py - State Dataclasses

Value types (complex scalar, habit, particle, entanglement link) and the
mutable containers a session owns (state vector, session handle).
"""

import math
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .constants import Frequency, PARTICLE_SIZE
from .types_config import SimConfig


# =============================================================================
# VALUE TYPES
# =============================================================================

@dataclass(frozen=True)
class ComplexScalar:
    """Minimal complex amplitude: one qubit slot."""
    real: float = 0.0
    imag: float = 0.0

    def magnitude(self) -> float:
        return math.sqrt(self.real * self.real + self.imag * self.imag)

    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imag * self.imag

    def phase(self) -> float:
        return math.atan2(self.imag, self.real)

    def scaled(self, factor: float) -> "ComplexScalar":
        return ComplexScalar(self.real * factor, self.imag * factor)

    @classmethod
    def from_polar(cls, amplitude: float, phase: float) -> "ComplexScalar":
        return cls(amplitude * math.cos(phase), amplitude * math.sin(phase))


@dataclass(frozen=True)
class HabitInput:
    """Habit record supplied by the collaborator layer.

    Attributes:
        id: Habit identifier
        streak: Current streak in periods
        difficulty_ordinal: Difficulty ordinal (see constants.Difficulty)
        frequency: Expected completion cadence
        created_at: Creation timestamp (timezone-aware preferred)
    """
    id: str
    streak: int
    difficulty_ordinal: int
    frequency: Frequency
    created_at: datetime


Vec2 = Tuple[float, float]


@dataclass(frozen=True)
class Particle:
    """Visual particle bound to one qubit index."""
    id: str
    position: Vec2
    velocity: Vec2
    amplitude: float
    phase: float
    qubit_index: int
    habit_id: Optional[str]
    color: str
    size: float = PARTICLE_SIZE


@dataclass(frozen=True)
class EntanglementLink:
    """Correlation link between two habits' qubits.

    `correlation` is the value derived at initialization; `strength` starts
    equal to it and fluctuates per tick within a bounded band.
    """
    id: str
    qubit_index_a: int
    qubit_index_b: int
    habit_id_a: str
    habit_id_b: str
    strength: float
    color: str
    correlation: float

    def touches(self, habit_id: str) -> bool:
        return self.habit_id_a == habit_id or self.habit_id_b == habit_id


def make_id(rng: random.Random) -> str:
    """UUID4 string drawn from the session random source (reproducible under a seed)."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


# =============================================================================
# STATE VECTOR
# =============================================================================

class StateVector:
    """Fixed-capacity sequence of qubits with an index -> habit mapping.

    Owns the normalization invariant: after every mutating engine step the
    total probability is 1 within NORMALIZATION_EPSILON, unless it is 0.
    """

    def __init__(self, capacity: int, habit_ids: Sequence[str] = ()):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.qubits: List[ComplexScalar] = [ComplexScalar() for _ in range(capacity)]
        # Truncate to capacity
        self.habit_ids: Tuple[str, ...] = tuple(habit_ids)[:capacity]

    def __len__(self) -> int:
        return len(self.qubits)

    def __getitem__(self, index: int) -> ComplexScalar:
        return self.qubits[index]

    def __iter__(self) -> Iterator[ComplexScalar]:
        return iter(self.qubits)

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self.qubits)

    def set(self, index: int, value: ComplexScalar) -> None:
        self.qubits[index] = value

    def habit_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.habit_ids):
            return self.habit_ids[index]
        return None

    def index_of(self, habit_id: str) -> int:
        """Qubit index for a habit, or -1 when the habit is not mapped."""
        try:
            return self.habit_ids.index(habit_id)
        except ValueError:
            return -1

    def total_probability(self) -> float:
        return sum(q.magnitude_squared() for q in self.qubits)

    def normalize(self) -> None:
        """Scale to unit total probability. An all-zero vector is left as is."""
        total = self.total_probability()
        if total > 0:
            factor = 1.0 / math.sqrt(total)
            self.qubits = [q.scaled(factor) for q in self.qubits]

    def magnitudes(self) -> np.ndarray:
        return np.array([q.magnitude() for q in self.qubits], dtype=np.float64)

    def phases(self) -> np.ndarray:
        return np.array([q.phase() for q in self.qubits], dtype=np.float64)

    def probabilities(self) -> np.ndarray:
        return np.array([q.magnitude_squared() for q in self.qubits], dtype=np.float64)

    def copy(self) -> "StateVector":
        clone = StateVector(self.capacity, self.habit_ids)
        clone.qubits = list(self.qubits)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        return self.qubits == other.qubits and self.habit_ids == other.habit_ids

    def __repr__(self) -> str:
        return f"StateVector(capacity={self.capacity}, habits={len(self.habit_ids)})"


# =============================================================================
# SESSION HANDLE
# =============================================================================

@dataclass
class SessionHandle:
    """Mutable simulation session (single writer).

    All arrays are owned here and mutated in place by the engine; readers
    go through the snapshot functions in cycle.py.
    """
    config: SimConfig
    rng: random.Random
    now: datetime
    state: StateVector
    particles: List[Particle] = field(default_factory=list)
    entanglements: List[EntanglementLink] = field(default_factory=list)
    energy_levels: Dict[str, int] = field(default_factory=dict)
    simulation_time: float = 0.0
    tick: int = 0
    fluctuation_count: int = 0
    receipt_ledger: List[dict] = field(default_factory=list)

    # Traces, appended once per tick
    total_probability_trace: List[float] = field(default_factory=list)
    avg_amplitude_trace: List[float] = field(default_factory=list)
    violations: List[dict] = field(default_factory=list)
