from dataclasses import dataclass, replace
import logging
import numpy as np

from .agents import (
    Viewport,
    init_leaders,
    init_normals,
    init_obstacles,
    init_predators,
    init_wind_zones,
)
from .behaviors import apply_rules
from .integrator import advance, integrate, keep_within_bounds, limit_speed
from .metrics import GlobalVector, MetricsHistory, compute_global_vector
from .predation import find_prey_in_range, resolve_predation
from .signals import SignalChannel

log = logging.getLogger(__name__)


@dataclass
class SimConfig:
    # populations
    n_boids: int = 50
    n_predators: int = 1
    n_leaders: int = 1
    n_obstacles: int = 4
    n_wind_zones: int = 4

    # viewport (world units == canvas pixels)
    width: float = 1200.0
    height: float = 800.0

    # dynamics
    speed_limit: float = 6.0
    max_init_speed: float = 5.0
    margin: float = 200.0
    turn_factor: float = 2.0
    min_separation: float = 20.0

    # perception multipliers
    leader_sees_predator_mult: float = 3.0
    predator_sees_boid_mult: float = 1.5
    predator_alignment_correction: float = 0.5
    boid_sees_leader_mult: float = 3.0

    # hazards
    max_obstacle_radius: float = 40.0
    max_wind_radius: float = 40.0
    max_wind_drift: float = 20.0

    # bookkeeping
    history_len: int = 50
    max_plot_len: int = 10_000

    # timers (ms)
    frame_interval_ms: float = 1000.0 / 60.0
    signal_interval_ms: float = 500.0
    plot_interval_ms: float = 1000.0

    seed: int = None

    def __post_init__(self):
        for name in ("n_boids", "n_predators", "n_leaders", "n_obstacles", "n_wind_zones"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ("width", "height", "speed_limit", "history_len", "max_plot_len",
                     "frame_interval_ms", "signal_interval_ms", "plot_interval_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")


@dataclass
class FlockParams:
    """Runtime parameters; the control panel edits these between ticks."""
    coherence: float = 0.005
    separation: float = 0.05
    alignment: float = 0.05
    visual_range: float = 75.0

    predation: float = 0.01
    avoid_predator: float = 0.05
    eat_range: float = 40.0
    follow_leader: float = 0.5

    use_obstacles: bool = False
    use_leaders: bool = False
    use_predators: bool = False
    see_global_vector: bool = False
    hide_trail: bool = False


class FlockSim:
    def __init__(self, cfg: SimConfig, params: FlockParams = None):
        self.cfg = cfg
        self.params = params if params is not None else FlockParams()
        self.viewport = Viewport(cfg.width, cfg.height)
        self.rng = np.random.default_rng(cfg.seed) if cfg.seed is not None else np.random

        self.boids = []
        self.predators = []
        self.leaders = []
        self.obstacles = []
        self.wind_zones = []
        self.signal_channel = SignalChannel()

        self.metrics = MetricsHistory(cfg.max_plot_len)
        self.global_vector = GlobalVector()
        self.tick = 0

    def reset(self):
        cfg = self.cfg
        vp = self.viewport
        rng = self.rng

        self.boids = init_normals(cfg.n_boids, vp, cfg.history_len, cfg.max_init_speed, rng)
        self.predators = init_predators(cfg.n_predators, vp, cfg.history_len, cfg.max_init_speed, rng)
        self.leaders = init_leaders(cfg.n_leaders, vp, cfg.history_len, cfg.max_init_speed, rng)
        self.obstacles = init_obstacles(cfg.n_obstacles, vp, cfg.max_obstacle_radius, rng)
        self.wind_zones = init_wind_zones(
            cfg.n_wind_zones, vp, cfg.max_wind_radius, cfg.max_wind_drift, rng
        )
        self.signal_channel.reset(self.leaders)

        self.metrics.clear()
        self.global_vector = GlobalVector()
        self.tick = 0
        log.info(
            "reset: %d boids, %d predators, %d leaders in %.0fx%.0f",
            len(self.boids), len(self.predators), len(self.leaders), vp.width, vp.height,
        )

    def resize(self, width: float, height: float):
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport must be positive, got {width}x{height}")
        self.viewport = Viewport(float(width), float(height))

    def broadcast_signals(self):
        self.signal_channel.broadcast(self.leaders)

    def _bound(self, agent):
        keep_within_bounds(agent, self.viewport, self.cfg.margin, self.cfg.turn_factor)

    def step(self):
        cfg = self.cfg
        # parameter edits made mid-tick only apply from the next tick
        params = replace(self.params)

        # Sequential in-place update: later agents see earlier ones already moved.
        for boid in self.boids:
            self._bound(boid)
            apply_rules(boid, self, params)
            integrate(boid, cfg.speed_limit)

        marked = set()
        for predator in self.predators:
            self._bound(predator)
            apply_rules(predator, self, params)
            limit_speed(predator, cfg.speed_limit)
            if params.use_predators:
                marked.update(find_prey_in_range(predator, self.boids, params.eat_range))
            advance(predator)
        self.boids = resolve_predation(marked, self.boids)

        for leader in self.leaders:
            self._bound(leader)
            apply_rules(leader, self, params)
            integrate(leader, cfg.speed_limit)

        self.global_vector, extension = compute_global_vector(self.boids)
        self.tick += 1
        self.metrics.record(self.tick, extension, len(self.boids))

        return self.frame(params)

    def frame(self, params: FlockParams = None):
        """Read-only snapshot of everything the renderer draws."""
        params = params if params is not None else self.params

        def pack(agents):
            return {
                "pos": np.array([a.pos for a in agents], dtype=float).reshape(-1, 2),
                "vel": np.array([a.vel for a in agents], dtype=float).reshape(-1, 2),
                "trails": [a.trail() for a in agents],
            }

        gv = self.global_vector
        return {
            "tick": self.tick,
            "boids": pack(self.boids),
            "predators": pack(self.predators),
            "leaders": pack(self.leaders),
            "obstacles": [(o.pos[0], o.pos[1], o.r) for o in self.obstacles],
            "wind_zones": [(w.pos[0], w.pos[1], w.r, w.drift[0], w.drift[1]) for w in self.wind_zones],
            "signals": [(s.pos[0], s.pos[1], s.vel[0], s.vel[1]) for s in self.signal_channel.signals],
            "global_vector": (gv.x, gv.y, gv.dx, gv.dy),
            "extension": self.metrics.extension[-1] if len(self.metrics) else 0.0,
            "alive": len(self.boids),

            "use_obstacles": params.use_obstacles,
            "use_leaders": params.use_leaders,
            "use_predators": params.use_predators,
            "see_global_vector": params.see_global_vector,
            "hide_trail": params.hide_trail,
        }
