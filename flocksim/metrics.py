from collections import deque
from dataclasses import dataclass
import numpy as np


@dataclass
class GlobalVector:
    x: float = 0.0
    y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0


def compute_global_vector(boids):
    """
    Flock centroid and mean velocity, plus the mean distance of each boid to
    the centroid ("extension"). An empty flock yields zeros.
    """
    if not boids:
        return GlobalVector(), 0.0

    pos = np.array([b.pos for b in boids], dtype=float)
    vel = np.array([b.vel for b in boids], dtype=float)
    center = np.mean(pos, axis=0)
    mean_vel = np.mean(vel, axis=0)

    extension = float(np.mean(np.linalg.norm(pos - center[None, :], axis=1)))
    gv = GlobalVector(
        x=float(center[0]),
        y=float(center[1]),
        dx=float(mean_vel[0]),
        dy=float(mean_vel[1]),
    )
    return gv, extension


class MetricsHistory:
    """Sliding windows of the per-tick flock metrics, oldest sample dropped first."""

    def __init__(self, max_len: int = 10_000):
        self.max_len = max_len
        self.ticks = deque(maxlen=max_len)
        self.extension = deque(maxlen=max_len)
        self.boids_alive = deque(maxlen=max_len)

    def __len__(self):
        return len(self.extension)

    def record(self, tick: int, extension: float, alive: int):
        self.ticks.append(tick)
        self.extension.append(extension)
        self.boids_alive.append(alive)

    def clear(self):
        self.ticks.clear()
        self.extension.clear()
        self.boids_alive.clear()

    def as_arrays(self):
        return (
            np.array(self.ticks, dtype=int),
            np.array(self.extension, dtype=float),
            np.array(self.boids_alive, dtype=int),
        )
