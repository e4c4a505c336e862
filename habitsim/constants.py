"""
habitsim/constants.py - Simulation Constants

All constants for the habit-state engine. Centralized for tuning.
Pure data, no behavior.
"""

import math
from enum import Enum

# =============================================================================
# STATE VECTOR
# =============================================================================

NUM_QUBITS = 8                 # Default capacity Q
NORMALIZATION_EPSILON = 1e-6   # |sum(|q|^2) - 1| tolerance
INV_SQRT2 = 1.0 / math.sqrt(2.0)

# =============================================================================
# INITIALIZER
# =============================================================================

STREAK_PHASE_DIVISOR = 10.0    # phase = streak * pi / 10
MIN_DAYS_FOR_RATE = 1.0        # Younger habits have completion rate 0
SECONDS_PER_DAY = 86400
DAYS_PER_PERIOD = {
    "DAILY": 1.0,
    "WEEKLY": 7.0,
    "MONTHLY": 30.0,
    "CUSTOM": 1.0,
}

# =============================================================================
# ENTANGLEMENT
# =============================================================================

ENTANGLEMENT_THRESHOLD = 0.7   # Strictly greater creates a link
CONTROL_MAGNITUDE = 0.5        # |qubit_a| above this flips qubit_b
STRENGTH_FLUCTUATION = 0.1     # Per-tick strength band around the correlation
STRENGTH_FLUCTUATION_RATE = 3.0
STRENGTH_FLOOR = 0.1
STRENGTH_CEILING = 1.0

# =============================================================================
# PARTICLES
# =============================================================================

NUM_PARTICLES = 100
SUPERPOSITION_FACTOR = 0.5
INTERFERENCE_FACTOR = 0.3
INTERFERENCE_WAVELENGTH = 20.0
VISUALIZATION_SCALE = 100.0
TIME_STEP = 0.05
AMPLITUDE_PULL = 0.1           # Exponential pull toward live |qubit|
AMPLITUDE_FLOOR = 0.1
AMPLITUDE_CEILING = 1.0
PHASE_DRIFT = 0.1
BASE_SPEED = 10.0
PARTICLE_SIZE = 5.0

# =============================================================================
# FLUCTUATION
# =============================================================================

FLUCTUATION_PROBABILITY = 0.05  # 5% chance per tick
FLUCTUATION_MAX_ANGLE = math.pi * 0.1

# =============================================================================
# ENERGY LEVELS
# =============================================================================

MAX_ENERGY_LEVEL = 5
STREAK_PER_LEVEL = 5
DIFFICULTY_PER_LEVEL = 2

# =============================================================================
# SCHEDULER / PREDICTOR WEIGHTS
# =============================================================================

ENTANGLEMENT_PRIORITY_WEIGHT = 0.2
SUCCESS_RATE_WEIGHT = 0.3
SUCCESS_AMPLITUDE_WEIGHT = 0.4
SUCCESS_STREAK_WEIGHT = 0.3
STREAK_SATURATION = 10.0
EFFECT_AMPLITUDE_WEIGHT = 0.3
EFFECT_PHASE_WEIGHT = 0.1

# =============================================================================
# RECEIPT SCHEMA
# =============================================================================

TENANT_ID = "habitsim"

RECEIPT_SCHEMA = [
    "sim_config", "sim_init", "truncation", "entanglement_derived",
    "duplicate_habit", "fluctuation", "sim_tick", "sim_violation", "sim_result",
    "session_export",
]


# =============================================================================
# HABIT ENUMS
# =============================================================================

class Frequency(Enum):
    """How often a habit is expected to be completed."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"  # Custom schedules count as daily

    @property
    def days_per_period(self) -> float:
        return DAYS_PER_PERIOD[self.value]


class Difficulty(Enum):
    """Habit difficulty. Ordinal feeds the initial energy level."""
    VERY_EASY = 0
    EASY = 1
    MEDIUM = 2
    HARD = 3
    VERY_HARD = 4
