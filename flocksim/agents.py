from collections import deque
from dataclasses import dataclass, field
from enum import Enum
import numpy as np


class Kind(Enum):
    NORMAL = "normal"
    PREDATOR = "predator"
    LEADER = "leader"


@dataclass(eq=False)
class Agent:
    kind: Kind
    pos: np.ndarray  # shape (2,)
    vel: np.ndarray  # shape (2,)
    history: deque = field(default_factory=lambda: deque(maxlen=50))

    def trail(self) -> np.ndarray:
        if not self.history:
            return np.zeros((0, 2), dtype=float)
        return np.array(self.history, dtype=float)


@dataclass
class Obstacle:
    pos: np.ndarray
    r: float


@dataclass
class WindZone:
    pos: np.ndarray
    r: float
    drift: np.ndarray


@dataclass
class Viewport:
    width: float
    height: float

    def random_positions(self, count: int, rng) -> np.ndarray:
        pos = np.zeros((count, 2), dtype=float)
        pos[:, 0] = rng.uniform(0.0, self.width, size=(count,))
        pos[:, 1] = rng.uniform(0.0, self.height, size=(count,))
        return pos


def _init_agents(kind: Kind, count: int, viewport: Viewport, history_len: int,
                 max_init_speed: float, rng):
    rng = np.random if rng is None else rng
    pos = viewport.random_positions(count, rng)
    vel = rng.uniform(-max_init_speed, max_init_speed, size=(count, 2))

    agents = []
    for i in range(count):
        agents.append(
            Agent(
                kind=kind,
                pos=pos[i].copy(),
                vel=vel[i].copy(),
                history=deque(maxlen=history_len),
            )
        )
    return agents


def init_normals(count: int, viewport: Viewport, history_len: int = 50,
                 max_init_speed: float = 5.0, rng=None):
    return _init_agents(Kind.NORMAL, count, viewport, history_len, max_init_speed, rng)


def init_predators(count: int, viewport: Viewport, history_len: int = 50,
                   max_init_speed: float = 5.0, rng=None):
    return _init_agents(Kind.PREDATOR, count, viewport, history_len, max_init_speed, rng)


def init_leaders(count: int, viewport: Viewport, history_len: int = 50,
                 max_init_speed: float = 5.0, rng=None):
    # Signal snapshots are seeded from these by SignalChannel.reset()
    return _init_agents(Kind.LEADER, count, viewport, history_len, max_init_speed, rng)


def init_obstacles(count: int, viewport: Viewport, max_radius: float = 40.0, rng=None):
    rng = np.random if rng is None else rng
    pos = viewport.random_positions(count, rng)
    radii = rng.uniform(0.0, max_radius, size=(count,))
    return [Obstacle(pos=pos[i].copy(), r=float(radii[i])) for i in range(count)]


def init_wind_zones(count: int, viewport: Viewport, max_radius: float = 40.0,
                    max_drift: float = 20.0, rng=None):
    rng = np.random if rng is None else rng
    pos = viewport.random_positions(count, rng)
    radii = rng.uniform(0.0, max_radius, size=(count,))
    drift = rng.uniform(0.0, max_drift, size=(count, 2))
    return [
        WindZone(pos=pos[i].copy(), r=float(radii[i]), drift=drift[i].copy())
        for i in range(count)
    ]
