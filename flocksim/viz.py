import logging
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.collections import LineCollection, PatchCollection, PolyCollection
from matplotlib.lines import Line2D
from matplotlib.widgets import Button, CheckButtons, Slider

log = logging.getLogger(__name__)

# ---------- Palette ----------
YELLOW = "#f4df55"
BLUE = "#558cf4"
GREEN = "#63D471"
RED = "#d8315b"
ALPHA_BLUE = "#558cf466"
ALPHA_GREEN = "#63D47166"
ALPHA_RED = "#d8315b66"
ALPHA_YELLOW = "#f4df5566"

BODY_COLORS = {"boids": BLUE, "predators": RED, "leaders": YELLOW}
TRAIL_COLORS = {"boids": ALPHA_BLUE, "predators": ALPHA_RED, "leaders": ALPHA_YELLOW}

# arrow body in local coords, tip at the agent position, pointing along +x
_TRIANGLE = np.array([[0.0, 0.0], [-15.0, 5.0], [-15.0, -5.0]], dtype=float)


def heading_triangles(pos: np.ndarray, vel: np.ndarray, scale: float = 1.0) -> np.ndarray:
    """(n, 3, 2) triangle vertices, each rotated to its velocity heading."""
    pos = np.asarray(pos, dtype=float).reshape(-1, 2)
    vel = np.asarray(vel, dtype=float).reshape(-1, 2)
    th = np.arctan2(vel[:, 1], vel[:, 0])
    c, s = np.cos(th)[:, None], np.sin(th)[:, None]
    lx = _TRIANGLE[None, :, 0] * scale
    ly = _TRIANGLE[None, :, 1] * scale
    rx = lx * c - ly * s
    ry = lx * s + ly * c
    return pos[:, None, :] + np.stack([rx, ry], axis=2)


class FlockRenderer:
    """Draws one frame snapshot (see FlockSim.frame) onto a canvas axes."""

    def __init__(self, ax, width: float, height: float):
        self.ax = ax
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)  # canvas convention: y grows downward
        ax.set_aspect("equal", "box")
        ax.set_xticks([])
        ax.set_yticks([])

        self.wind_patches = PatchCollection([], facecolor=ALPHA_YELLOW, edgecolor="none")
        self.obstacle_patches = PatchCollection([], facecolor="black", edgecolor="none")
        ax.add_collection(self.wind_patches)
        ax.add_collection(self.obstacle_patches)

        self.trails = {}
        self.bodies = {}
        for kind in ("boids", "predators", "leaders"):
            trail = LineCollection([], colors=TRAIL_COLORS[kind], linewidths=1)
            body = PolyCollection([], facecolors=BODY_COLORS[kind], edgecolors="none")
            ax.add_collection(trail)
            ax.add_collection(body)
            self.trails[kind] = trail
            self.bodies[kind] = body

        self.signals = PolyCollection([], facecolors=ALPHA_YELLOW, edgecolors="none")
        self.global_vector = PolyCollection([], facecolors=ALPHA_GREEN, edgecolors="none")
        ax.add_collection(self.signals)
        ax.add_collection(self.global_vector)

        self.hud = ax.text(0.01, 0.99, "", transform=ax.transAxes, va="top", fontsize=9)

    def artists(self):
        return [
            self.wind_patches, self.obstacle_patches,
            *self.trails.values(), *self.bodies.values(),
            self.signals, self.global_vector, self.hud,
        ]

    def set_viewport(self, width: float, height: float):
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

    def reset(self, frame):
        """Rebuild the static hazards; called after every simulation reset."""
        self.obstacle_patches.set_paths(
            [plt.Circle((x, y), r) for (x, y, r) in frame["obstacles"]]
        )
        self.wind_patches.set_paths(
            [plt.Circle((x, y), r) for (x, y, r, _, _) in frame["wind_zones"]]
        )
        self.draw(frame)

    def draw(self, frame):
        visible = {
            "boids": True,
            "predators": frame["use_predators"],
            "leaders": frame["use_leaders"],
        }
        for kind, show in visible.items():
            agents = frame[kind]
            self.bodies[kind].set_verts(list(heading_triangles(agents["pos"], agents["vel"])))
            self.bodies[kind].set_visible(show)
            self.trails[kind].set_segments([t for t in agents["trails"] if len(t) > 1])
            self.trails[kind].set_visible(show and not frame["hide_trail"])

        self.obstacle_patches.set_visible(frame["use_obstacles"])
        self.wind_patches.set_visible(frame["use_obstacles"])

        sig = np.array(frame["signals"], dtype=float).reshape(-1, 4)
        self.signals.set_verts(list(heading_triangles(sig[:, :2], sig[:, 2:])))
        self.signals.set_visible(frame["use_leaders"])

        gv = np.array(frame["global_vector"], dtype=float).reshape(1, 4)
        self.global_vector.set_verts(list(heading_triangles(gv[:, :2], gv[:, 2:], scale=2.0)))
        self.global_vector.set_visible(frame["see_global_vector"] and frame["alive"] > 0)

        self.hud.set_text(
            f"tick={frame['tick']} | boids alive={frame['alive']} | extension={frame['extension']:.1f}"
        )
        return self.artists()


class MetricsPlot:
    """Extension and boids-alive histories, one axes each."""

    def __init__(self, ax_ext, ax_alive):
        self.ax_ext = ax_ext
        self.ax_alive = ax_alive
        (self.ext_line,) = ax_ext.plot([], [], color=GREEN, label="Extension")
        (self.alive_line,) = ax_alive.plot([], [], color=RED, label="Boids alive")
        ax_ext.legend(loc="upper right", frameon=False)
        ax_alive.legend(loc="upper right", frameon=False)
        ax_alive.set_xlabel("tick")

    def update(self, history):
        ticks, ext, alive = history.as_arrays()
        self.ext_line.set_data(ticks, ext)
        self.alive_line.set_data(ticks, alive)
        for ax in (self.ax_ext, self.ax_alive):
            ax.relim()
            ax.autoscale_view()
        self.ax_ext.figure.canvas.draw_idle()


class ControlPanel:
    """Sliders, toggles and buttons writing into FlockParams / the scheduler."""

    SLIDERS = [
        # attr, label, lo, hi
        ("coherence", "Coherence", 0.0, 0.1),
        ("separation", "Separation", 0.0, 1.0),
        ("alignment", "Alignment", 0.0, 1.0),
        ("visual_range", "Visual range", 0.0, 200.0),
        ("predation", "Predation", 0.0, 0.1),
        ("avoid_predator", "Avoid predator", 0.0, 1.0),
    ]

    TOGGLES = [
        ("use_obstacles", "Obstacles & wind"),
        ("use_leaders", "Leaders"),
        ("use_predators", "Predators"),
        ("see_global_vector", "Global vector"),
        ("hide_trail", "Hide trail"),
    ]

    def __init__(self, fig, scheduler, renderer, left=0.06, bottom=0.03):
        self.fig = fig
        self.scheduler = scheduler
        self.renderer = renderer
        params = scheduler.sim.params

        w, h, dy = 0.28, 0.022, 0.03
        self.sliders = {}
        for k, (attr, label, lo, hi) in enumerate(self.SLIDERS):
            col, row = divmod(k, 3)
            ax = fig.add_axes([left + 0.02 + col * 0.40, bottom + (2 - row) * dy, w, h])
            s = Slider(ax, label, lo, hi, valinit=getattr(params, attr))
            s.on_changed(self._slider_setter(attr))
            self.sliders[attr] = s

        ax_checks = fig.add_axes([0.80, bottom, 0.11, 0.11], frameon=False)
        self._toggle_attrs = {label: attr for attr, label in self.TOGGLES}
        self.checks = CheckButtons(
            ax_checks,
            [label for _, label in self.TOGGLES],
            [getattr(params, attr) for attr, _ in self.TOGGLES],
        )
        self.checks.on_clicked(self._on_check)

        self.btn_reset = Button(fig.add_axes([0.92, bottom + 0.06, 0.06, 0.035]), "Reset")
        self.btn_pause = Button(fig.add_axes([0.92, bottom + 0.015, 0.06, 0.035]), "Pause")
        self.btn_reset.on_clicked(self._on_reset)
        self.btn_pause.on_clicked(self._on_pause)

    def _slider_setter(self, attr):
        def _set(val):
            setattr(self.scheduler.sim.params, attr, float(val))
        return _set

    def _on_check(self, label):
        attr = self._toggle_attrs[label]
        params = self.scheduler.sim.params
        setattr(params, attr, not getattr(params, attr))
        # redraw immediately so toggles are visible while paused
        self.renderer.draw(self.scheduler.sim.frame())
        self.fig.canvas.draw_idle()

    def _on_reset(self, _event=None):
        self.scheduler.reset()
        self.fig.canvas.draw_idle()

    def _on_pause(self, _event=None):
        self.scheduler.toggle_pause()
        self.btn_pause.label.set_text("Pause" if self.scheduler.running else "Play")
        self.fig.canvas.draw_idle()


class LiveView:
    """Interactive window: canvas, live plots and controls, driven by matplotlib timers."""

    def __init__(self, scheduler):
        sim = scheduler.sim
        cfg = sim.cfg
        self.scheduler = scheduler

        self.fig = plt.figure(figsize=(13, 8))
        gs = self.fig.add_gridspec(2, 2, width_ratios=[3, 1], left=0.03, right=0.98,
                                   top=0.96, bottom=0.17, wspace=0.15, hspace=0.25)
        ax_canvas = self.fig.add_subplot(gs[:, 0])
        ax_ext = self.fig.add_subplot(gs[0, 1])
        ax_alive = self.fig.add_subplot(gs[1, 1])
        ax_canvas.set_title("Boids")

        self.renderer = FlockRenderer(ax_canvas, sim.viewport.width, sim.viewport.height)
        self.plotter = MetricsPlot(ax_ext, ax_alive)
        scheduler.renderer = self.renderer
        scheduler.plotter = self.plotter
        self.controls = ControlPanel(self.fig, scheduler, self.renderer)

        legend_elems = [
            Line2D([0], [0], marker=">", linestyle="None", color=BLUE, label="boid"),
            Line2D([0], [0], marker=">", linestyle="None", color=RED, label="predator"),
            Line2D([0], [0], marker=">", linestyle="None", color=YELLOW, label="leader"),
        ]
        ax_canvas.legend(handles=legend_elems, loc="lower right", frameon=False)

        self.renderer.reset(sim.frame())

        # Frame loop keeps running while paused so resume is immediate.
        self.anim = FuncAnimation(
            self.fig, self._on_frame, init_func=self.renderer.artists,
            interval=cfg.frame_interval_ms, blit=False, cache_frame_data=False,
        )
        self.signal_timer = self.fig.canvas.new_timer(interval=int(cfg.signal_interval_ms))
        self.signal_timer.add_callback(scheduler.on_signal)
        self.plot_timer = self.fig.canvas.new_timer(interval=int(cfg.plot_interval_ms))
        self.plot_timer.add_callback(scheduler.on_plot)
        self.fig.canvas.mpl_connect("resize_event", self._on_resize)

    def _on_frame(self, _frame_idx):
        self.scheduler.on_frame()
        return self.renderer.artists()

    def _on_resize(self, event):
        # world units follow the canvas slot in pixels; agents keep their positions
        slot = self.renderer.ax.get_position(original=True)
        width, height = slot.width * event.width, slot.height * event.height
        if width <= 0 or height <= 0:
            return
        self.scheduler.sim.resize(width, height)
        self.renderer.set_viewport(width, height)
        log.debug("viewport resized to %.0fx%.0f", width, height)

    def show(self):
        self.signal_timer.start()
        self.plot_timer.start()
        log.info("live view started")
        plt.show()


def render_gif(cfg, history, out_path: str, every_n: int = 2):
    frames = history[::every_n]
    if not frames:
        raise ValueError("no frames to render")

    fig, ax = plt.subplots(figsize=(9, 6))
    ax.set_title("Boids: cohesion / separation / alignment")
    renderer = FlockRenderer(ax, cfg.width, cfg.height)

    def init():
        return renderer.reset(frames[0])

    def update(frame_idx):
        return renderer.draw(frames[frame_idx])

    ani = FuncAnimation(fig, update, frames=len(frames), init_func=init, blit=False, interval=50)
    ani.save(out_path, writer=PillowWriter(fps=18))
    plt.close(fig)


def plot_metrics(cfg, history, out_path: str):
    ticks, ext, alive = history.as_arrays()

    fig = plt.figure(figsize=(9, 6))
    ax1 = fig.add_subplot(2, 1, 1)
    ax2 = fig.add_subplot(2, 1, 2, sharex=ax1)

    ax1.plot(ticks, ext, color=GREEN, label="Extension")
    ax1.set_ylabel("Mean distance to centroid")
    ax1.set_title("Flock metrics")
    ax1.legend()

    ax2.plot(ticks, alive, color=RED, label="Boids alive")
    ax2.axhline(cfg.n_boids, linestyle="--", color="grey", label="initial")
    ax2.set_xlabel("Tick")
    ax2.set_ylabel("Count")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
