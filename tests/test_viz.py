from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from flocksim.scheduler import FrameScheduler
from flocksim.sim import FlockParams, FlockSim, SimConfig
from flocksim.viz import (
    FlockRenderer,
    LiveView,
    MetricsPlot,
    heading_triangles,
    plot_metrics,
    render_gif,
)


def _sim(**params):
    sim = FlockSim(SimConfig(n_boids=12, seed=21), FlockParams(**params))
    sim.reset()
    return sim


def test_heading_triangles_point_along_velocity():
    tri = heading_triangles(np.array([[0.0, 0.0]]), np.array([[1.0, 0.0]]))
    assert tri.shape == (1, 3, 2)
    assert np.allclose(tri[0], [[0.0, 0.0], [-15.0, 5.0], [-15.0, -5.0]])

    assert heading_triangles(np.zeros((0, 2)), np.zeros((0, 2))).shape == (0, 3, 2)


def test_renderer_draws_every_kind():
    sim = _sim(use_obstacles=True, use_leaders=True, use_predators=True)
    fig, ax = plt.subplots()
    r = FlockRenderer(ax, sim.cfg.width, sim.cfg.height)
    r.reset(sim.frame())
    for _ in range(3):
        r.draw(sim.step())
    fig.canvas.draw()

    assert len(r.bodies["boids"].get_paths()) == len(sim.boids)
    assert len(r.bodies["leaders"].get_paths()) == len(sim.leaders)
    assert r.obstacle_patches.get_visible()
    assert r.trails["boids"].get_visible()
    plt.close(fig)


def test_renderer_hides_disabled_features():
    sim = _sim(hide_trail=True)
    fig, ax = plt.subplots()
    r = FlockRenderer(ax, sim.cfg.width, sim.cfg.height)
    r.reset(sim.frame())
    r.draw(sim.step())

    assert not r.trails["boids"].get_visible()
    assert not r.bodies["predators"].get_visible()
    assert not r.signals.get_visible()
    assert not r.obstacle_patches.get_visible()
    assert not r.global_vector.get_visible()
    plt.close(fig)


def test_metrics_plot_tracks_history():
    sim = _sim()
    for _ in range(7):
        sim.step()
    fig, (a1, a2) = plt.subplots(2, 1)
    mp = MetricsPlot(a1, a2)
    mp.update(sim.metrics)
    assert len(mp.ext_line.get_xdata()) == 7
    assert list(mp.alive_line.get_ydata()) == [12] * 7
    plt.close(fig)


def test_plot_metrics_and_gif_written(tmp_path):
    sim = _sim()
    sch = FrameScheduler(sim)
    history = sch.run_headless(6)

    png = tmp_path / "metrics.png"
    gif = tmp_path / "flock.gif"
    plot_metrics(sim.cfg, sim.metrics, png.as_posix())
    render_gif(sim.cfg, history, gif.as_posix(), every_n=2)

    assert png.stat().st_size > 0
    assert gif.stat().st_size > 0


def test_live_view_controls_write_params():
    sim = _sim()
    sch = FrameScheduler(sim)
    view = LiveView(sch)
    panel = view.controls

    panel.sliders["coherence"].set_val(0.02)
    assert sim.params.coherence == 0.02

    panel._on_check("Predators")
    assert sim.params.use_predators

    panel._on_pause()
    assert not sch.running
    assert panel.btn_pause.label.get_text() == "Play"

    tick = sim.tick
    view._on_frame(0)
    assert sim.tick == tick

    panel._on_pause()
    view._on_frame(1)
    assert sim.tick == tick + 1

    panel._on_reset()
    assert sim.tick == 0
    assert len(sim.metrics) == 0
    plt.close(view.fig)


def test_live_view_resize_follows_canvas_slot():
    sim = _sim()
    view = LiveView(FrameScheduler(sim))
    before = np.array([b.pos for b in sim.boids])

    view._on_resize(SimpleNamespace(width=1000, height=600))
    slot = view.renderer.ax.get_position(original=True)
    assert sim.viewport.width == pytest.approx(slot.width * 1000)
    assert sim.viewport.height == pytest.approx(slot.height * 600)
    assert view.renderer.ax.get_xlim() == pytest.approx((0.0, sim.viewport.width))
    assert view.renderer.ax.get_ylim() == pytest.approx((sim.viewport.height, 0.0))
    assert np.allclose(before, [b.pos for b in sim.boids])

    # a minimized window leaves the viewport alone
    width = sim.viewport.width
    view._on_resize(SimpleNamespace(width=0, height=0))
    assert sim.viewport.width == width
    plt.close(view.fig)
