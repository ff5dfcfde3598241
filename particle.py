# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the per-particle update rule, the Particle view type,
and the ParticleSystem class, which is responsible for initializing and
storing particle data (position, velocity, color, identifier) in dense
NumPy arrays.
"""
import logging
import math
import numpy as np
from numba import jit
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from constants import (
    DEFAULT_LAYOUT, DEFAULT_PARTICLE_COUNT, DOMAIN_HALF_EXTENT,
    INITIAL_VELOCITY, PROXIMITY_THRESHOLD, RING_OFFSET, VIBRANT_COLORS
)
from vector import Vector2

# --- Data Contracts ---
#
# _tick_particle_numba(position, velocity, others, skip, half_extent, threshold) -> None:
#   - Inputs:
#     - position, velocity: float64 arrays of shape (2,), mutated in place.
#     - others: float64 array of shape (M, 2), read-only snapshot of peers.
#     - skip: row of `others` to ignore (the particle itself), or -1.
#   - Invariants: `others` is never written to.
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], palette: Optional[Callable] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int | None
#         - "particle_count": int
#         - "layout": "random" | "ring"
#       - palette: callable(count, rng) -> list of RGB triples.
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.colors is a NumPy array of shape (N, 3) of dtype uint8.
#       - N never changes after construction.

Color = Tuple[int, int, int]


@jit(nopython=True)
def _tick_particle_numba(position, velocity, others, skip, half_extent, threshold):
    """
    Numba-jitted update of a single particle.

    Integrates one unit of time, reflects off the domain walls and reverses
    on close approach to any peer in `others`. Each reversal moves the
    particle one extra step with its new velocity, and later proximity
    checks in the same call see that new position.
    """
    position[0] += velocity[0]
    position[1] += velocity[1]

    # x reflects on >= but y only on >.
    if abs(position[0]) >= half_extent:
        velocity[0] = velocity[0] * -1.0
    if abs(position[1]) > half_extent:
        velocity[1] = velocity[1] * -1.0

    for j in range(others.shape[0]):
        if j == skip:
            continue
        # Axis-aligned box test, not a Euclidean radius.
        x_diff = abs(position[0] - others[j, 0])
        y_diff = abs(position[1] - others[j, 1])
        if x_diff <= threshold and y_diff <= threshold:
            velocity[0] = velocity[0] * -1.0
            velocity[1] = velocity[1] * -1.0
            position[0] += velocity[0]
            position[1] += velocity[1]


class Particle:
    """
    A single particle: identifier, position, velocity and a fixed color.

    When owned by a ParticleSystem, `position` and `velocity` are views
    onto the system's arrays, so mutating them updates the system.
    """
    def __init__(self, uid: str, position: Vector2, velocity: Vector2, color: Optional[Color] = None):
        self.uid = uid
        self.position = position
        self.velocity = velocity
        self._color = tuple(int(c) for c in color) if color is not None else None

    @property
    def color(self) -> Optional[Color]:
        return self._color

    def tick(
        self,
        others: Sequence["Particle"],
        half_extent: float = DOMAIN_HALF_EXTENT,
        threshold: float = PROXIMITY_THRESHOLD,
    ) -> None:
        """
        Advances this particle by one step against a snapshot of `others`.

        The peers' positions are copied once, before this particle moves,
        so the check never sees a peer that was updated mid-call.
        """
        snapshot = np.array(
            [other.position.as_tuple() for other in others], dtype=np.float64
        ).reshape(-1, 2)
        _tick_particle_numba(
            self.position.array, self.velocity.array, snapshot,
            -1, half_extent, threshold
        )

    def __repr__(self):
        return (
            f"Particle(uid={self.uid!r}, pos=({self.position.x:.2f}, {self.position.y:.2f}), "
            f"vel=({self.velocity.x:.2f}, {self.velocity.y:.2f}), color={self.color})"
        )


def ring_positions(count: int, offset: float = RING_OFFSET) -> np.ndarray:
    """
    Places `count` points by rotating (offset, offset) about the origin in
    equal angular steps. Returns an array of shape (count, 2).
    """
    positions = np.empty((count, 2), dtype=np.float64)
    step = 2.0 * math.pi / count
    for k in range(count):
        point = Vector2(offset, offset)
        point.rotate(k * step)
        positions[k] = point.array
    return positions


def default_palette(count: int, rng: Optional[np.random.Generator] = None) -> List[Color]:
    """Cycles the curated vibrant colors; `rng` is accepted but unused."""
    return [VIBRANT_COLORS[i % len(VIBRANT_COLORS)] for i in range(count)]


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], palette: Optional[Callable] = None):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            palette (Callable, optional): Produces `count` RGB colors from
                the system's RNG. Defaults to the curated vibrant colors.
        """
        self.particle_count = int(params.get('particle_count', DEFAULT_PARTICLE_COUNT))
        self.half_extent = float(params.get('domain_half_extent', DOMAIN_HALF_EXTENT))
        self.layout = params.get('layout', DEFAULT_LAYOUT)
        self.seed = params.get('seed')

        # All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(self.seed)

        if self.layout == "ring":
            self.positions = ring_positions(
                self.particle_count, float(params.get('ring_offset', RING_OFFSET))
            )
        else:
            self.positions = self.rng.uniform(
                low=-self.half_extent,
                high=self.half_extent,
                size=(self.particle_count, 2)
            )
        initial_velocity = params.get('initial_velocity', INITIAL_VELOCITY)
        self.velocities = np.tile(
            np.asarray(initial_velocity, dtype=np.float64), (self.particle_count, 1)
        )

        palette = palette if palette is not None else default_palette
        colors = list(palette(self.particle_count, self.rng))
        if len(colors) != self.particle_count:
            raise ValueError(
                f"Palette returned {len(colors)} colors for {self.particle_count} particles."
            )
        self.colors = np.array(colors, dtype=np.uint8).reshape(self.particle_count, 3)
        self.colors.setflags(write=False)

        self.uids = self._generate_uids(self.particle_count)
        self.particles = [
            Particle(
                self.uids[i],
                Vector2.view(self.positions[i]),
                Vector2.view(self.velocities[i]),
                tuple(self.colors[i]),
            )
            for i in range(self.particle_count)
        ]
        self._index = {uid: i for i, uid in enumerate(self.uids)}

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles in a '{self.layout}' layout."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Colors shape: {self.colors.shape}"
        )

    def _new_uid(self) -> str:
        high, low = self.rng.integers(
            0, np.iinfo(np.uint64).max, size=2, dtype=np.uint64, endpoint=True
        )
        return f"{high}-{low}"

    def _generate_uids(self, count: int) -> List[str]:
        uids: List[str] = []
        seen = set()
        while len(uids) < count:
            uid = self._new_uid()
            if uid in seen:
                logging.warning(f"Identifier collision on {uid}; drawing another.")
                continue
            seen.add(uid)
            uids.append(uid)
        return uids

    def snapshot(self) -> np.ndarray:
        """Returns a frozen copy of all positions."""
        return self.positions.copy()

    def get(self, uid: str) -> Particle:
        """Looks a particle up by identifier. Raises KeyError if unknown."""
        return self.particles[self._index[uid]]

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]

    def __iter__(self):
        return iter(self.particles)

    def __len__(self) -> int:
        return self.particle_count
