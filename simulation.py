# simulation.py
"""
Handles the core simulation logic.

This module defines the Simulation class, which is responsible for
advancing the state of the particle system by one discrete step, and for
deciding from wall-clock time whether a step is due.
"""
import logging
import time
import numpy as np
from typing import Any, Callable, Dict, Optional
from numba import jit
from particle import ParticleSystem, _tick_particle_numba
from constants import DOMAIN_HALF_EXTENT, PROXIMITY_THRESHOLD, TICK_INTERVAL

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any], clock: Callable[[], float] = time.perf_counter):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "domain_half_extent": float
#         - "proximity_threshold": float
#         - "tick_interval": float, seconds between steps
#       - clock: monotonic time source in seconds.
#     - Side Effects: Stores references to particles and parameters.
#
#   - step(self, completed_at: Optional[float] = None) -> None:
#     - Side Effects: Modifies positions and velocities of the internal
#       ParticleSystem; records the completion time.
#     - Invariants: Particle count remains constant. Every particle is
#       checked against the positions all particles had before the step.
#
#   - maybe_step(self, now: Optional[float] = None) -> bool:
#     - Outputs: True if a step was taken.


@jit(nopython=True)
def _step_numba(positions, velocities, snapshot, half_extent, threshold):
    """
    Numba-jitted synchronous update of every particle.

    `snapshot` holds the pre-step positions and is never written, so the
    order in which particles are visited does not change the result.
    """
    for i in range(positions.shape[0]):
        _tick_particle_numba(
            positions[i], velocities[i], snapshot, i, half_extent, threshold
        )


class Simulation:
    """
    Advances the particle system in fixed steps gated by wall-clock time.
    """
    def __init__(
        self,
        particles: ParticleSystem,
        params: Dict[str, Any],
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initializes the simulation.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
            clock (Callable[[], float]): Monotonic time source in seconds.
        """
        self.particles = particles
        self.half_extent = float(params.get('domain_half_extent', DOMAIN_HALF_EXTENT))
        self.proximity_threshold = float(params.get('proximity_threshold', PROXIMITY_THRESHOLD))
        self.tick_interval = float(params.get('tick_interval', TICK_INTERVAL))
        self.clock = clock

        self.step_count = 0
        self.last_tick = self.clock()

        logging.info("Simulation logic initialized.")
        logging.info(
            f"Stepping {len(self.particles)} particles every {self.tick_interval:.3f}s "
            f"in [-{self.half_extent:g}, {self.half_extent:g}]², "
            f"proximity threshold {self.proximity_threshold:g}."
        )

    def step(self, completed_at: Optional[float] = None):
        """
        Executes one time step of the simulation.

        `completed_at` is recorded as the step time; defaults to the clock.
        """
        # 1. Freeze the pre-step positions
        snapshot = self.particles.snapshot()

        # 2. Update every particle against the frozen snapshot (using Numba)
        _step_numba(
            self.particles.positions, self.particles.velocities, snapshot,
            self.half_extent, self.proximity_threshold
        )

        self.step_count += 1
        self.last_tick = completed_at if completed_at is not None else self.clock()

    def maybe_step(self, now: Optional[float] = None) -> bool:
        """
        Steps once if at least `tick_interval` seconds have passed since the
        last step. Called once per rendered frame.
        """
        if now is None:
            now = self.clock()
        if now - self.last_tick >= self.tick_interval:
            self.step(completed_at=now)
            return True
        return False

    def mean_speed(self) -> float:
        """Average velocity magnitude, for diagnostics."""
        return float(np.mean(np.linalg.norm(self.particles.velocities, axis=1)))
