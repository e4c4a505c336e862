"""
habitsim/particles.py - Particle System

Population creation from the state vector and per-tick integration.
Particles are frozen; each tick replaces every particle with an updated copy.
"""

import math
import random
from dataclasses import replace
from typing import List, Sequence

from .constants import (
    AMPLITUDE_PULL, AMPLITUDE_FLOOR, AMPLITUDE_CEILING, PHASE_DRIFT,
    BASE_SPEED, INTERFERENCE_WAVELENGTH,
)
from .palette import color_for_qubit
from .types_config import SimConfig
from .types_state import Particle, StateVector, make_id


def population_for_qubit(magnitude_squared: float, config: SimConfig) -> int:
    """int(|q|^2 * n_particles / n_qubits)."""
    return int(magnitude_squared * config.n_particles / config.n_qubits)


def initialize_particles(state: StateVector, config: SimConfig, rng: random.Random) -> List[Particle]:
    """
    Create the particle population for a freshly initialized state.

    Placement is a random angle and radius scaled by the qubit amplitude;
    heading is the qubit phase plus that angle, speed in [10, 20).

    Args:
        state: Normalized StateVector
        config: SimConfig (population, scale)
        rng: Session random source

    Returns:
        List of Particle grouped by qubit index
    """
    particles = []

    for index in range(len(state)):
        qubit = state[index]
        amplitude = qubit.magnitude()
        phase = qubit.phase()
        habit_id = state.habit_at(index)
        color = color_for_qubit(index, config.n_qubits)

        for _ in range(population_for_qubit(qubit.magnitude_squared(), config)):
            angle = rng.random() * 2 * math.pi
            radius = rng.random() * config.visualization_scale * amplitude
            speed = (1.0 + rng.random()) * BASE_SPEED

            particles.append(Particle(
                id=make_id(rng),
                position=(math.cos(angle) * radius, math.sin(angle) * radius),
                velocity=(math.cos(phase + angle) * speed, math.sin(phase + angle) * speed),
                amplitude=amplitude,
                phase=phase,
                qubit_index=index,
                habit_id=habit_id,
                color=color
            ))

    return particles


def integrate_particle(
    particle: Particle,
    state: StateVector,
    simulation_time: float,
    config: SimConfig
) -> Particle:
    """
    Advance one particle by one time step.

    Amplitude is pulled 10% toward the owning qubit's live magnitude and
    clamped to [0.1, 1.0]. The velocity keeps its speed; its heading turns by
    the superposition and interference terms.
    """
    x, y = particle.position
    vx, vy = particle.velocity
    dt = config.time_step

    amplitude = particle.amplitude
    if state.in_bounds(particle.qubit_index):
        target = state[particle.qubit_index].magnitude()
        amplitude = amplitude + (target - amplitude) * AMPLITUDE_PULL
        amplitude = min(max(amplitude, AMPLITUDE_FLOOR), AMPLITUDE_CEILING)

    phase = particle.phase + PHASE_DRIFT * math.sin(simulation_time)

    superposition = math.sin(simulation_time * 2) * config.superposition_factor
    interference = (math.cos(x / INTERFERENCE_WAVELENGTH + simulation_time)
                    * config.interference_factor)

    speed = math.hypot(vx, vy)
    direction = math.atan2(vy, vx) + superposition + interference

    return replace(
        particle,
        position=(x + vx * dt, y + vy * dt),
        velocity=(speed * math.cos(direction), speed * math.sin(direction)),
        amplitude=amplitude,
        phase=phase
    )


def integrate_particles(
    particles: Sequence[Particle],
    state: StateVector,
    simulation_time: float,
    config: SimConfig
) -> List[Particle]:
    """Integrate the whole population. Count and order are preserved."""
    return [integrate_particle(p, state, simulation_time, config) for p in particles]
