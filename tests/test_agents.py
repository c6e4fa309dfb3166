import numpy as np

from flocksim.agents import (
    Kind,
    Viewport,
    init_leaders,
    init_normals,
    init_obstacles,
    init_predators,
    init_wind_zones,
)
from flocksim.signals import SignalChannel


VP = Viewport(300.0, 200.0)


def test_init_normals_inside_viewport():
    rng = np.random.default_rng(0)
    boids = init_normals(40, VP, history_len=10, max_init_speed=5.0, rng=rng)
    assert len(boids) == 40
    for b in boids:
        assert b.kind is Kind.NORMAL
        assert 0.0 <= b.pos[0] <= VP.width
        assert 0.0 <= b.pos[1] <= VP.height
        assert np.all(np.abs(b.vel) <= 5.0)
        assert b.history.maxlen == 10
        assert len(b.history) == 0


def test_init_kinds_and_counts():
    rng = np.random.default_rng(0)
    assert all(p.kind is Kind.PREDATOR for p in init_predators(3, VP, rng=rng))
    assert all(l.kind is Kind.LEADER for l in init_leaders(2, VP, rng=rng))
    assert init_normals(0, VP, rng=rng) == []


def test_agents_do_not_share_state():
    boids = init_normals(2, VP, rng=np.random.default_rng(3))
    boids[0].vel += 100.0
    boids[0].history.append((1.0, 1.0))
    assert np.all(np.abs(boids[1].vel) <= 5.0)
    assert len(boids[1].history) == 0


def test_obstacles_and_wind_zones():
    rng = np.random.default_rng(0)
    obstacles = init_obstacles(4, VP, max_radius=40.0, rng=rng)
    zones = init_wind_zones(4, VP, max_radius=40.0, max_drift=20.0, rng=rng)
    assert len(obstacles) == 4 and len(zones) == 4
    assert all(0.0 <= o.r < 40.0 for o in obstacles)
    for z in zones:
        assert 0.0 <= z.r < 40.0
        assert np.all((z.drift >= 0.0) & (z.drift < 20.0))


def test_signal_channel_seeded_from_leaders():
    leaders = init_leaders(2, VP, rng=np.random.default_rng(5))
    channel = SignalChannel()
    channel.reset(leaders)
    assert len(channel.signals) == 2
    for leader, signal in zip(leaders, channel.signals):
        assert np.allclose(signal.pos, leader.pos)
        assert np.allclose(signal.vel, leader.vel)


def test_signal_is_a_snapshot():
    leaders = init_leaders(1, VP, rng=np.random.default_rng(5))
    channel = SignalChannel()
    channel.reset(leaders)
    before = channel.signals[0].pos.copy()

    leaders[0].pos = leaders[0].pos + 50.0
    assert np.allclose(channel.signals[0].pos, before)

    channel.broadcast(leaders)
    assert np.allclose(channel.signals[0].pos, leaders[0].pos)
    assert channel.broadcasts == 1
