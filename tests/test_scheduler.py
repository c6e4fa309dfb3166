import numpy as np

from flocksim.scheduler import FrameScheduler, RunState
from flocksim.sim import FlockParams, FlockSim, SimConfig


class RecordingRenderer:
    def __init__(self):
        self.drawn = []
        self.resets = 0

    def draw(self, frame):
        self.drawn.append(frame["tick"])

    def reset(self, frame):
        self.resets += 1


class CountingPlotter:
    def __init__(self):
        self.updates = 0

    def update(self, history):
        self.updates += 1


def _scheduler(**cfg_kw):
    cfg = SimConfig(seed=9, n_boids=10, **cfg_kw)
    sim = FlockSim(cfg, FlockParams(use_leaders=True))
    sim.reset()
    return FrameScheduler(sim, renderer=RecordingRenderer(), plotter=CountingPlotter())


def test_running_frame_steps_and_renders():
    sch = _scheduler()
    frame = sch.on_frame()
    assert frame["tick"] == 1
    assert sch.sim.tick == 1
    assert sch.renderer.drawn == [1]


def test_paused_frame_skips_work_but_is_still_scheduled():
    sch = _scheduler()
    sch.pause()
    assert sch.state is RunState.PAUSED

    for _ in range(5):
        assert sch.on_frame() is None
    assert sch.frames_seen == 5
    assert sch.sim.tick == 0
    assert sch.renderer.drawn == []

    sch.resume()
    sch.on_frame()
    assert sch.sim.tick == 1


def test_toggle_pause():
    sch = _scheduler()
    assert sch.toggle_pause() is RunState.PAUSED
    assert sch.toggle_pause() is RunState.RUNNING


def test_signal_timer_fires_while_paused():
    sch = _scheduler()
    sch.on_frame()
    leader = sch.sim.leaders[0]
    sch.pause()

    leader.pos = leader.pos + 123.0
    sch.on_signal()
    assert np.allclose(sch.sim.signal_channel.signals[0].pos, leader.pos)


def test_headless_timers_follow_their_own_cadence():
    sch = _scheduler(frame_interval_ms=10.0, signal_interval_ms=50.0, plot_interval_ms=100.0)
    history = sch.run_headless(100)

    assert len(history) == 100
    assert sch.sim.tick == 100
    assert sch.sim.signal_channel.broadcasts == 20
    assert sch.plotter.updates == 10


def test_headless_keep_every():
    sch = _scheduler()
    history = sch.run_headless(10, keep_every=5)
    assert [f["tick"] for f in history] == [1, 6]


def test_reset_redraws_and_replots():
    sch = _scheduler()
    sch.run_headless(5)
    sch.reset()
    assert sch.sim.tick == 0
    assert sch.renderer.resets == 1
    assert sch.plotter.updates >= 1
