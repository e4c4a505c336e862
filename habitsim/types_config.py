"""
habitsim/types_config.py - SimConfig Dataclass and Scenario Presets

Immutable configuration for simulation sessions.
Frozen dataclass, validated on construction.
"""

from dataclasses import dataclass

from .constants import (
    NUM_QUBITS, NUM_PARTICLES, ENTANGLEMENT_THRESHOLD, SUPERPOSITION_FACTOR,
    INTERFERENCE_FACTOR, VISUALIZATION_SCALE, TIME_STEP, MAX_ENERGY_LEVEL,
    FLUCTUATION_PROBABILITY,
)


@dataclass(frozen=True)
class SimConfig:
    """Simulation configuration (immutable)."""
    n_qubits: int = NUM_QUBITS
    n_particles: int = NUM_PARTICLES
    entanglement_threshold: float = ENTANGLEMENT_THRESHOLD
    superposition_factor: float = SUPERPOSITION_FACTOR
    interference_factor: float = INTERFERENCE_FACTOR
    visualization_scale: float = VISUALIZATION_SCALE
    time_step: float = TIME_STEP
    max_energy_level: int = MAX_ENERGY_LEVEL
    fluctuation_probability: float = FLUCTUATION_PROBABILITY
    # Fixed gate targets; out-of-range targets make the gate a no-op
    hadamard_index: int = 0
    phase_index: int = 1
    perturb_energy_levels: bool = True
    emit_tick_receipts: bool = False
    n_ticks: int = 600  # ~10 seconds at 60 Hz, used by run_simulation
    random_seed: int = 42
    scenario_name: str = "DEMO"

    def __post_init__(self) -> None:
        if self.n_qubits < 1:
            raise ValueError(f"n_qubits must be >= 1, got {self.n_qubits}")
        if self.n_particles < 0:
            raise ValueError(f"n_particles must be >= 0, got {self.n_particles}")
        if not 0.0 <= self.entanglement_threshold <= 1.0:
            raise ValueError(
                f"entanglement_threshold must be in [0, 1], got {self.entanglement_threshold}"
            )
        if self.time_step <= 0.0:
            raise ValueError(f"time_step must be > 0, got {self.time_step}")
        if self.max_energy_level < 0:
            raise ValueError(f"max_energy_level must be >= 0, got {self.max_energy_level}")
        if not 0.0 <= self.fluctuation_probability <= 1.0:
            raise ValueError(
                f"fluctuation_probability must be in [0, 1], got {self.fluctuation_probability}"
            )
        if self.n_ticks < 0:
            raise ValueError(f"n_ticks must be >= 0, got {self.n_ticks}")


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

SCENARIO_DEMO = SimConfig(scenario_name="DEMO")

# No random fluctuation events: ticks depend only on gates and links
SCENARIO_STILL = SimConfig(
    fluctuation_probability=0.0,
    perturb_energy_levels=False,
    random_seed=43,
    scenario_name="STILL"
)

SCENARIO_DENSE = SimConfig(
    n_qubits=16,
    n_particles=400,
    random_seed=44,
    scenario_name="DENSE"
)

SCENARIOS = {
    "DEMO": SCENARIO_DEMO,
    "STILL": SCENARIO_STILL,
    "DENSE": SCENARIO_DENSE,
}
