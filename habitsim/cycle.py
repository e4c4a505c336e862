"""
habitsim/cycle.py - Session Lifecycle and Tick Loop

Entry points: initialize, reinitialize, advance_tick, run_simulation, and the
read-only snapshot accessors the rendering layer consumes.

Single writer: one execution context calls initialize/advance_tick. Snapshot
accessors return tuples of frozen values or read-only mappings, so a reader
holding an earlier snapshot is never affected by later ticks.
"""

import random
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from receipts import emit_receipt

from .constants import TENANT_ID
from .dynamics_gates import apply_hadamard_gate, apply_phase_gate
from .entanglement import derive_entanglements, propagate_entanglement, fluctuate_strengths
from .fluctuation import maybe_fluctuate, perturbed_energy_levels
from .particles import initialize_particles, integrate_particles
from .state_init import initialize_state_vector, initial_energy_levels
from .types_config import SimConfig, SCENARIO_DEMO
from .types_result import HabitVisualization, SimResult, VisualizationSummary
from .types_state import (
    ComplexScalar, EntanglementLink, HabitInput, Particle, SessionHandle, StateVector,
)
from .validation import normalization_error, validate_normalization


Completions = Dict[str, Sequence[datetime]]


def _unique_habits(habits: Sequence[HabitInput]) -> Tuple[List[HabitInput], List[str]]:
    """First record per habit id in input order, plus the ids of dropped repeats."""
    seen = set()
    unique = []
    repeated = []
    for habit in habits:
        if habit.id in seen:
            repeated.append(habit.id)
            continue
        seen.add(habit.id)
        unique.append(habit)
    return unique, repeated


def _populate(session: SessionHandle, habits: Sequence[HabitInput], completions: Completions) -> None:
    """Build state, particles, links and energy levels into a session."""
    config = session.config
    supplied = len(habits)
    habits, repeated = _unique_habits(habits)

    session.state = initialize_state_vector(habits, completions, config, session.now)
    session.particles = initialize_particles(session.state, config, session.rng)
    session.entanglements = derive_entanglements(habits, completions, config, session.rng)
    session.energy_levels = initial_energy_levels(habits, config)
    session.simulation_time = 0.0
    session.tick = 0
    session.fluctuation_count = 0
    session.total_probability_trace = []
    session.avg_amplitude_trace = []
    session.violations = []

    if repeated:
        receipt = emit_receipt("duplicate_habit", {
            "tenant_id": TENANT_ID,
            "supplied": supplied,
            "dropped_habit_ids": repeated
        })
        session.receipt_ledger.append(receipt)

    if len(habits) > config.n_qubits:
        receipt = emit_receipt("truncation", {
            "tenant_id": TENANT_ID,
            "capacity": config.n_qubits,
            "supplied": len(habits),
            "ignored_habit_ids": [h.id for h in habits[config.n_qubits:]]
        })
        session.receipt_ledger.append(receipt)

    if session.entanglements:
        receipt = emit_receipt("entanglement_derived", {
            "tenant_id": TENANT_ID,
            "pairs": [[link.habit_id_a, link.habit_id_b, link.correlation]
                      for link in session.entanglements],
            "threshold": config.entanglement_threshold
        })
        session.receipt_ledger.append(receipt)

    receipt = emit_receipt("sim_init", {
        "tenant_id": TENANT_ID,
        "scenario": config.scenario_name,
        "habits_supplied": supplied,
        "habits_mapped": len(session.state.habit_ids),
        "total_probability": session.state.total_probability(),
        "particle_count": len(session.particles),
        "entanglement_count": len(session.entanglements)
    })
    session.receipt_ledger.append(receipt)


def initialize(
    habits: Sequence[HabitInput],
    completions: Completions,
    config: SimConfig = SCENARIO_DEMO,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None
) -> SessionHandle:
    """
    Create a session from a habit batch.

    Args:
        habits: Habit records; repeated ids keep their first record, and only
            the first config.n_qubits distinct habits are used
        completions: habit_id -> completion timestamps
        config: SimConfig with parameters
        rng: Random source; defaults to random.Random(config.random_seed)
        now: Reference time for completion rates; defaults to current UTC time

    Returns:
        SessionHandle with normalized state, particles, links, energy levels
    """
    if rng is None:
        rng = random.Random(config.random_seed)
    if now is None:
        now = datetime.now(timezone.utc)

    # Placeholder state; _populate replaces it wholesale
    session = SessionHandle(config=config, rng=rng, now=now, state=StateVector(config.n_qubits))
    session.receipt_ledger.append(emit_receipt("sim_config", {
        "tenant_id": TENANT_ID,
        "scenario": config.scenario_name,
        "n_qubits": config.n_qubits,
        "n_particles": config.n_particles,
        "random_seed": config.random_seed
    }))
    _populate(session, habits, completions)
    return session


def reinitialize(
    session: SessionHandle,
    habits: Sequence[HabitInput],
    completions: Completions,
    now: Optional[datetime] = None
) -> SessionHandle:
    """Replace the session's state wholesale from a new habit batch. Keeps rng and ledger."""
    if now is not None:
        session.now = now
    _populate(session, habits, completions)
    return session


def advance_tick(session: SessionHandle) -> None:
    """
    One simulation step.

    Order: advance time, Hadamard-style gate, phase gate, entanglement
    propagation, particle integration, link strength fluctuation, energy
    perturbation, random fluctuation event, invariant check.

    Args:
        session: Current SessionHandle (mutated in place)
    """
    config = session.config
    session.simulation_time += config.time_step

    apply_hadamard_gate(session.state, config.hadamard_index)
    apply_phase_gate(session.state, config.phase_index, session.simulation_time)
    flips = propagate_entanglement(session.state, session.entanglements)

    session.particles = integrate_particles(
        session.particles, session.state, session.simulation_time, config
    )
    session.entanglements = fluctuate_strengths(session.entanglements, session.simulation_time)

    if config.perturb_energy_levels:
        levels = dict(session.energy_levels)
        levels.update(perturbed_energy_levels(session.state, config.max_energy_level))
        session.energy_levels = levels

    maybe_fluctuate(session)
    validate_normalization(session)

    session.total_probability_trace.append(session.state.total_probability())
    session.avg_amplitude_trace.append(float(np.mean(session.state.magnitudes())))

    if config.emit_tick_receipts:
        session.receipt_ledger.append(emit_receipt("sim_tick", {
            "tenant_id": TENANT_ID,
            "tick": session.tick,
            "simulation_time": session.simulation_time,
            "flips": flips,
            "total_probability": session.total_probability_trace[-1]
        }))

    session.tick += 1


# =============================================================================
# SNAPSHOTS
# =============================================================================

def particles(session: SessionHandle) -> Tuple[Particle, ...]:
    return tuple(session.particles)


def entanglements(session: SessionHandle) -> Tuple[EntanglementLink, ...]:
    return tuple(session.entanglements)


def energy_levels(session: SessionHandle) -> Mapping[str, int]:
    return MappingProxyType(dict(session.energy_levels))


def qubits(session: SessionHandle) -> Tuple[ComplexScalar, ...]:
    return tuple(session.state.qubits)


def visualization_summary(session: SessionHandle) -> VisualizationSummary:
    """Averages over all qubit slots (including unmapped ones) and the energy map."""
    levels = list(session.energy_levels.values())
    return VisualizationSummary(
        avg_amplitude=float(np.mean(session.state.magnitudes())),
        avg_phase=float(np.mean(session.state.phases())),
        particle_count=len(session.particles),
        entanglement_count=len(session.entanglements),
        avg_energy_level=int(np.mean(levels)) if levels else 0
    )


def habit_visualization(session: SessionHandle, habit_id: str) -> Optional[HabitVisualization]:
    """Per-habit view, or None when the habit has no qubit."""
    index = session.state.index_of(habit_id)
    if index < 0:
        return None

    qubit = session.state[index]
    return HabitVisualization(
        habit_id=habit_id,
        amplitude=qubit.magnitude(),
        phase=qubit.phase(),
        particles=tuple(p for p in session.particles if p.habit_id == habit_id),
        entanglements=tuple(link for link in session.entanglements if link.touches(habit_id)),
        energy_level=session.energy_levels.get(habit_id, 0)
    )


# =============================================================================
# BATCH RUNS
# =============================================================================

def run_simulation(
    config: SimConfig,
    habits: Sequence[HabitInput],
    completions: Completions,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> SimResult:
    """
    Initialize and run config.n_ticks ticks.

    Args:
        config: SimConfig with parameters
        habits: Habit batch
        completions: habit_id -> completion timestamps
        now: Reference time (defaults to current UTC time)
        rng: Random source (defaults to seeded from config)

    Returns:
        SimResult with final session, traces, violations, and statistics
    """
    session = initialize(habits, completions, config, rng=rng, now=now)

    max_error = normalization_error(session.state)
    for _ in range(config.n_ticks):
        advance_tick(session)
        max_error = max(max_error, normalization_error(session.state))

    amplitude_trace = np.asarray(session.avg_amplitude_trace, dtype=np.float64)
    statistics = {
        "ticks": session.tick,
        "simulation_time": session.simulation_time,
        "fluctuations": session.fluctuation_count,
        "final_total_probability": session.state.total_probability(),
        "max_normalization_error": max_error,
        "particle_count": len(session.particles),
        "entanglement_count": len(session.entanglements),
        "mean_avg_amplitude": float(amplitude_trace.mean()) if amplitude_trace.size else 0.0,
        "std_avg_amplitude": float(amplitude_trace.std()) if amplitude_trace.size else 0.0,
    }

    all_traces = {
        "total_probability_trace": list(session.total_probability_trace),
        "avg_amplitude_trace": list(session.avg_amplitude_trace)
    }

    session.receipt_ledger.append(emit_receipt("sim_result", {
        "tenant_id": TENANT_ID,
        "scenario": config.scenario_name,
        **statistics
    }))

    return SimResult(
        final_state=session,
        all_traces=all_traces,
        violations=list(session.violations),
        statistics=statistics,
        config=config
    )


def run_multiverse(
    configs: Sequence[SimConfig],
    habits: Sequence[HabitInput],
    completions: Completions,
    now: Optional[datetime] = None
) -> List[SimResult]:
    """Run the same habit batch under several configs, in sequence."""
    return [run_simulation(config, habits, completions, now=now) for config in configs]
