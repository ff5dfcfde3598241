import math

import numpy as np
import pytest

from particle import Particle, ParticleSystem
from simulation import Simulation
from vector import Vector2


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def make_system(positions, velocities):
    system = ParticleSystem({'seed': 0, 'particle_count': len(positions)})
    system.positions[:] = positions
    system.velocities[:] = velocities
    return system


def test_population_is_constant():
    system = ParticleSystem({'seed': 11, 'particle_count': 100})
    sim = Simulation(system, {})
    for _ in range(50):
        sim.step()
        assert len(system) == 100
        assert system.positions.shape == (100, 2)
    assert sim.step_count == 50


def test_pair_both_reverse():
    system = make_system([[0.0, 0.0], [1.0, 0.0]], [[1.0, 0.0], [0.0, 0.0]])
    before = system.velocities.copy()
    Simulation(system, {}).step()

    assert np.array_equal(system.velocities, -before)
    # A moved forward by its old velocity and back by the reversed one.
    assert system.positions[0].tolist() == [0.0, 0.0]
    assert system.positions[1].tolist() == [1.0, 0.0]


def test_neighbours_are_seen_at_their_pre_step_positions():
    # B ends up 2.5 from A's new position, but started 9.5 away.
    a, b, c = [0.0, 0.0], [10.0, 0.0], [50.0, 50.0]
    va, vb, vc = [0.5, 0.0], [-7.0, 0.0], [0.0, 0.0]
    system = make_system([a, b, c], [va, vb, vc])
    Simulation(system, {}).step()

    assert system.positions[0].tolist() == [0.5, 0.0]
    assert system.velocities[0].tolist() == [0.5, 0.0]
    assert system.positions[1].tolist() == [3.0, 0.0]
    assert system.velocities[1].tolist() == [-7.0, 0.0]


def test_visit_order_does_not_change_the_result():
    a, b, c = [0.0, 0.0], [10.0, 0.0], [1.0, 1.0]
    va, vb, vc = [0.5, 0.0], [-7.0, 0.0], [-1.0, 0.5]
    forward = make_system([a, b, c], [va, vb, vc])
    reversed_ = make_system([c, b, a], [vc, vb, va])
    Simulation(forward, {}).step()
    Simulation(reversed_, {}).step()

    assert np.array_equal(forward.positions, reversed_.positions[::-1])
    assert np.array_equal(forward.velocities, reversed_.velocities[::-1])


def test_step_matches_particle_tick_against_a_frozen_copy():
    system = ParticleSystem({'seed': 5, 'particle_count': 100})
    frozen = [
        Particle(p.uid, p.position.copy(), p.velocity.copy(), p.color) for p in system
    ]
    expected = []
    for i, original in enumerate(frozen):
        particle = Particle(original.uid, original.position.copy(), original.velocity.copy())
        particle.tick([other for j, other in enumerate(frozen) if j != i])
        expected.append((particle.position.as_tuple(), particle.velocity.as_tuple()))

    Simulation(system, {}).step()

    for particle, (position, velocity) in zip(system, expected):
        assert particle.position.as_tuple() == position
        assert particle.velocity.as_tuple() == velocity


def test_step_records_completion_time():
    clock = FakeClock(1.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {}, clock=clock)
    assert sim.last_tick == 1.0
    clock.now = 4.0
    sim.step()
    assert sim.last_tick == 4.0


def test_maybe_step_waits_for_the_interval():
    clock = FakeClock(0.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {'tick_interval': 0.1}, clock=clock)

    clock.now = 0.05
    assert not sim.maybe_step()
    assert sim.step_count == 0

    clock.now = 0.1
    assert sim.maybe_step()
    assert sim.step_count == 1

    clock.now = 0.15
    assert not sim.maybe_step()

    clock.now = 0.25
    assert sim.maybe_step()
    assert sim.step_count == 2


def test_maybe_step_is_independent_of_frame_rate():
    clock = FakeClock(0.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {}, clock=clock)
    # Many frames within one interval still produce a single step.
    for frame in range(1, 200):
        clock.now = 0.1 + frame * 0.0001
        sim.maybe_step()
    assert sim.step_count == 1


def test_maybe_step_accepts_explicit_time():
    clock = FakeClock(0.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {}, clock=clock)
    assert not sim.maybe_step(now=0.01)
    assert sim.maybe_step(now=0.5)


def test_explicit_time_is_recorded_as_the_step_time():
    clock = FakeClock(0.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {'tick_interval': 0.1}, clock=clock)
    assert sim.maybe_step(now=0.5)
    assert sim.last_tick == 0.5
    # 10 ms later is still inside the interval.
    assert not sim.maybe_step(now=0.51)
    assert sim.step_count == 1
    assert sim.maybe_step(now=0.65)
    assert sim.step_count == 2


def test_step_accepts_a_completion_time():
    clock = FakeClock(1.0)
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 3}), {}, clock=clock)
    sim.step(completed_at=7.5)
    assert sim.last_tick == 7.5


def test_mean_speed():
    sim = Simulation(ParticleSystem({'seed': 0, 'particle_count': 4}), {})
    assert sim.mean_speed() == pytest.approx(math.hypot(1.5, 1.5))


def test_parameters_from_config():
    system = make_system([[0.0, 0.0], [4.0, 0.0]], [[0.0, 0.0], [0.0, 0.0]])
    sim = Simulation(system, {'proximity_threshold': 5.0, 'domain_half_extent': 50.0, 'tick_interval': 0.5})
    assert sim.tick_interval == 0.5
    assert sim.half_extent == 50.0
    sim.step()
    assert np.all(system.velocities == 0.0)
    assert np.all(np.signbit(system.velocities))
