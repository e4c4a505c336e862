"""
tests/test_cycle.py - Session Lifecycle and Tick Loop

Validates:
- Normalization after initialization and after every tick
- Degenerate all-zero sessions tick without error
- Fluctuation probability 1.0 / 0.0
- Seeded runs are reproducible
- Snapshots are immutable and unaffected by later ticks
- reinitialize, run_simulation, run_multiverse
"""

import dataclasses
import random

import pytest

from habitsim import (
    SCENARIO_DEMO,
    SCENARIO_STILL,
    SimConfig,
    advance_tick,
    energy_levels,
    entanglements,
    habit_visualization,
    initialize,
    is_normalized,
    particles,
    qubits,
    reinitialize,
    run_multiverse,
    run_simulation,
    validate_normalization,
    visualization_summary,
)
from habitsim.types_state import ComplexScalar
from habitsim.validation import dangling_link_ids, orphan_particle_count
from receipts import StopRule, filter_receipts


class TestInitialize:
    """Session creation."""

    def test_normalized_after_init(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        assert is_normalized(session.state)
        assert session.tick == 0
        assert session.simulation_time == 0.0

    def test_receipts_emitted(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        types = [r["receipt_type"] for r in session.receipt_ledger]
        assert types[0] == "sim_config"
        assert "sim_init" in types

    def test_entanglement_receipt(self, correlated_batch, now):
        habits, completions = correlated_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        derived = filter_receipts(session.receipt_ledger, "entanglement_derived")
        assert len(derived) == 1
        assert derived[0]["pairs"][0][:2] == ["alpha", "beta"]

    def test_repeated_ids_keep_first(self, make_habit, days_ago, now):
        """Repeated ids map once; no link joins a habit to itself."""
        habits = [make_habit("a", streak=1), make_habit("a", streak=9), make_habit("b")]
        completions = {"a": days_ago(range(1, 11)), "b": days_ago(range(1, 11))}
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)

        assert session.state.habit_ids == ("a", "b")
        assert set(session.energy_levels) == {"a", "b"}
        assert all(l.habit_id_a != l.habit_id_b for l in session.entanglements)
        assert [(l.habit_id_a, l.habit_id_b) for l in session.entanglements] == [("a", "b")]

        dropped = filter_receipts(session.receipt_ledger, "duplicate_habit")
        assert len(dropped) == 1
        assert dropped[0]["dropped_habit_ids"] == ["a"]
        assert filter_receipts(session.receipt_ledger, "sim_init")[0]["habits_supplied"] == 3

    def test_no_duplicate_receipt_for_unique_ids(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        assert filter_receipts(session.receipt_ledger, "duplicate_habit") == []

    def test_indices_consistent(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        for _ in range(5):
            advance_tick(session)
        assert dangling_link_ids(session) == []
        assert orphan_particle_count(session) == 0


class TestAdvanceTick:
    """Tick loop invariants."""

    def test_normalized_every_tick(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        for _ in range(200):
            advance_tick(session)
            assert is_normalized(session.state), f"tick {session.tick}: {session.state.total_probability()}"
        assert session.violations == []

    def test_time_and_tick_advance(self, habit_batch, now):
        habits, completions = habit_batch
        config = SimConfig(time_step=0.1)
        session = initialize(habits, completions, config, now=now)
        for _ in range(10):
            advance_tick(session)
        assert session.tick == 10
        assert session.simulation_time == pytest.approx(1.0)
        assert len(session.total_probability_trace) == 10

    def test_particle_count_constant(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        count = len(session.particles)
        for _ in range(50):
            advance_tick(session)
        assert len(session.particles) == count

    def test_degenerate_all_zero(self, make_habit, now):
        """Habits with no history: zero vector, no particles, ticks still run."""
        habits = [make_habit("a"), make_habit("b")]
        config = SimConfig(fluctuation_probability=1.0)
        session = initialize(habits, {}, config, now=now)

        assert session.state.total_probability() == 0.0
        assert session.particles == []
        for _ in range(20):
            advance_tick(session)
        assert session.state.total_probability() == 0.0
        assert session.violations == []
        assert visualization_summary(session).avg_amplitude == 0.0

    def test_fluctuation_every_tick(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SimConfig(fluctuation_probability=1.0), now=now)
        for _ in range(30):
            advance_tick(session)
            assert is_normalized(session.state)
        assert session.fluctuation_count == 30
        assert len(filter_receipts(session.receipt_ledger, "fluctuation")) == 30

    def test_no_fluctuation(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SimConfig(fluctuation_probability=0.0), now=now)
        for _ in range(30):
            advance_tick(session)
        assert session.fluctuation_count == 0

    def test_out_of_range_gate_targets(self, habit_batch, now):
        habits, completions = habit_batch
        config = SimConfig(hadamard_index=99, phase_index=-1)
        session = initialize(habits, completions, config, now=now)
        for _ in range(10):
            advance_tick(session)
        assert is_normalized(session.state)

    def test_energy_levels_in_range(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        for _ in range(40):
            advance_tick(session)
            assert all(0 <= level <= 5 for level in session.energy_levels.values())

    def test_energy_levels_frozen_when_perturbation_off(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_STILL, now=now)
        before = dict(session.energy_levels)
        for _ in range(20):
            advance_tick(session)
        assert session.energy_levels == before

    def test_tick_receipts(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SimConfig(emit_tick_receipts=True), now=now)
        for _ in range(3):
            advance_tick(session)
        ticks = filter_receipts(session.receipt_ledger, "sim_tick")
        assert [r["tick"] for r in ticks] == [0, 1, 2]


class TestReproducibility:
    """Seeded random source gives identical runs."""

    def test_same_seed_same_state(self, habit_batch, now):
        habits, completions = habit_batch
        config = SimConfig(fluctuation_probability=0.5)

        runs = []
        for _ in range(2):
            session = initialize(habits, completions, config, rng=random.Random(11), now=now)
            for _ in range(50):
                advance_tick(session)
            runs.append(session)

        assert qubits(runs[0]) == qubits(runs[1])
        assert particles(runs[0]) == particles(runs[1])
        assert runs[0].fluctuation_count == runs[1].fluctuation_count


class TestValidation:
    """Normalization check handling."""

    def test_violation_recorded(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        session.state.set(0, ComplexScalar(5.0, 0.0))

        assert validate_normalization(session) is False
        assert len(session.violations) == 1
        assert len(filter_receipts(session.receipt_ledger, "sim_violation")) == 1

    def test_strict_raises(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        session.state.set(0, ComplexScalar(5.0, 0.0))
        with pytest.raises(StopRule):
            validate_normalization(session, strict=True)


class TestSnapshots:
    """Read-only views handed to the rendering layer."""

    def test_snapshot_unaffected_by_later_ticks(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        snap_particles = particles(session)
        snap_qubits = qubits(session)
        first_position = snap_particles[0].position

        for _ in range(10):
            advance_tick(session)

        assert snap_particles[0].position == first_position
        assert qubits(session) != snap_qubits
        assert snap_qubits == qubits(initialize(habits, completions, SCENARIO_DEMO, now=now))

    def test_energy_levels_read_only(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        levels = energy_levels(session)
        with pytest.raises(TypeError):
            levels["meditate"] = 0

    def test_frozen_values(self, correlated_batch, now):
        habits, completions = correlated_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        link = entanglements(session)[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            link.strength = 0.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            particles(session)[0].amplitude = 0.0

    def test_visualization_summary(self, habit_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        summary = visualization_summary(session)

        assert summary.particle_count == len(session.particles)
        assert summary.entanglement_count == len(session.entanglements)
        assert 0.0 < summary.avg_amplitude <= 1.0
        assert isinstance(summary.avg_energy_level, int)

    def test_habit_visualization(self, correlated_batch, now):
        habits, completions = correlated_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)

        view = habit_visualization(session, "alpha")
        assert view.habit_id == "alpha"
        assert view.amplitude == pytest.approx(session.state[0].magnitude())
        assert all(p.habit_id == "alpha" for p in view.particles)
        assert len(view.entanglements) == 1

        assert habit_visualization(session, "gamma").entanglements == ()
        assert habit_visualization(session, "missing") is None


class TestReinitialize:
    """Wholesale state replacement."""

    def test_replaces_state(self, habit_batch, correlated_batch, now):
        habits, completions = habit_batch
        session = initialize(habits, completions, SCENARIO_DEMO, now=now)
        for _ in range(5):
            advance_tick(session)

        new_habits, new_completions = correlated_batch
        reinitialize(session, new_habits, new_completions)

        assert session.tick == 0
        assert session.state.habit_ids == ("alpha", "beta", "gamma")
        assert len(session.entanglements) == 1
        assert set(session.energy_levels) == {"alpha", "beta", "gamma"}
        assert is_normalized(session.state)
        assert len(filter_receipts(session.receipt_ledger, "sim_init")) == 2


class TestRunSimulation:
    """Batch runs."""

    def test_statistics(self, habit_batch, now):
        habits, completions = habit_batch
        config = SimConfig(n_ticks=50)
        result = run_simulation(config, habits, completions, now=now)

        stats = result.statistics
        assert stats["ticks"] == 50
        assert stats["max_normalization_error"] < 1e-6
        assert stats["final_total_probability"] == pytest.approx(1.0)
        assert len(result.all_traces["avg_amplitude_trace"]) == 50
        assert result.violations == []
        assert filter_receipts(result.final_state.receipt_ledger, "sim_result")

    def test_zero_ticks(self, habit_batch, now):
        habits, completions = habit_batch
        result = run_simulation(SimConfig(n_ticks=0), habits, completions, now=now)
        assert result.statistics["ticks"] == 0
        assert result.statistics["mean_avg_amplitude"] == 0.0

    def test_multiverse(self, habit_batch, now):
        habits, completions = habit_batch
        configs = [SimConfig(n_ticks=10), SimConfig(n_ticks=20, random_seed=1)]
        results = run_multiverse(configs, habits, completions, now=now)
        assert [r.statistics["ticks"] for r in results] == [10, 20]
