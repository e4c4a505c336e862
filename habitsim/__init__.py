"""
habitsim - Habit-State Simulation Package

Public API for the habit-state engine: complex-amplitude state vector,
gates, entanglement links, particle dynamics, scheduling.
Flat, focused files. One file = one responsibility.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    SimConfig,
    SCENARIO_DEMO,
    SCENARIO_STILL,
    SCENARIO_DENSE,
    SCENARIOS,
)
from .types_state import (
    ComplexScalar,
    StateVector,
    HabitInput,
    Particle,
    EntanglementLink,
    SessionHandle,
)
from .types_result import SimResult, VisualizationSummary, HabitVisualization

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    Frequency,
    Difficulty,
    RECEIPT_SCHEMA,
    NUM_QUBITS,
    ENTANGLEMENT_THRESHOLD,
    MAX_ENERGY_LEVEL,
    NORMALIZATION_EPSILON,
)

# =============================================================================
# SESSION LIFECYCLE
# =============================================================================
from .cycle import (
    initialize,
    reinitialize,
    advance_tick,
    particles,
    entanglements,
    energy_levels,
    qubits,
    visualization_summary,
    habit_visualization,
    run_simulation,
    run_multiverse,
)

# =============================================================================
# DYNAMICS
# =============================================================================
from .dynamics_gates import apply_hadamard_gate, apply_phase_gate, rotate
from .entanglement import (
    habit_correlation,
    derive_entanglements,
    propagate_entanglement,
    fluctuate_strengths,
)
from .particles import initialize_particles, integrate_particles
from .fluctuation import fluctuate_qubit, maybe_fluctuate, perturbed_energy_levels
from .state_init import initialize_state_vector, initial_energy_levels

# =============================================================================
# MEASUREMENT / VALIDATION
# =============================================================================
from .measurement import completion_rate, day_bucket, expected_completions
from .validation import normalization_error, is_normalized, validate_normalization

# =============================================================================
# SCHEDULING
# =============================================================================
from .scheduling import optimal_schedule, predict_success, apply_quantum_effect, habit_priority

# =============================================================================
# EXPORT
# =============================================================================
from .export import export_session, export_result, generate_report

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Types
    "SimConfig",
    "SimResult",
    "VisualizationSummary",
    "HabitVisualization",
    "ComplexScalar",
    "StateVector",
    "HabitInput",
    "Particle",
    "EntanglementLink",
    "SessionHandle",
    # Scenario presets
    "SCENARIO_DEMO",
    "SCENARIO_STILL",
    "SCENARIO_DENSE",
    "SCENARIOS",
    # Constants
    "Frequency",
    "Difficulty",
    "RECEIPT_SCHEMA",
    "NUM_QUBITS",
    "ENTANGLEMENT_THRESHOLD",
    "MAX_ENERGY_LEVEL",
    "NORMALIZATION_EPSILON",
    # Session lifecycle
    "initialize",
    "reinitialize",
    "advance_tick",
    "particles",
    "entanglements",
    "energy_levels",
    "qubits",
    "visualization_summary",
    "habit_visualization",
    "run_simulation",
    "run_multiverse",
    # Dynamics
    "apply_hadamard_gate",
    "apply_phase_gate",
    "rotate",
    "habit_correlation",
    "derive_entanglements",
    "propagate_entanglement",
    "fluctuate_strengths",
    "initialize_particles",
    "integrate_particles",
    "fluctuate_qubit",
    "maybe_fluctuate",
    "perturbed_energy_levels",
    "initialize_state_vector",
    "initial_energy_levels",
    # Measurement / validation
    "completion_rate",
    "day_bucket",
    "expected_completions",
    "normalization_error",
    "is_normalized",
    "validate_normalization",
    # Scheduling
    "optimal_schedule",
    "predict_success",
    "apply_quantum_effect",
    "habit_priority",
    # Export
    "export_session",
    "export_result",
    "generate_report",
]
