import math
import numpy as np


def set_seed(seed: int) -> None:
    np.random.seed(seed)


def clip_norm(v: np.ndarray, max_norm: float) -> np.ndarray:
    n = np.linalg.norm(v)
    if n <= max_norm:
        return v
    if n < 1e-9:
        return v
    return v * (max_norm / n)


def position_distance(p: np.ndarray, q: np.ndarray) -> float:
    # hot path: called for every agent pair by every rule
    return math.hypot(p[0] - q[0], p[1] - q[1])


def distance(a, b):
    """
    Euclidean distance between two entities carrying a ``pos`` vector.

    Returns None if either entity is missing (e.g. an index past the end of a
    population that shrank this tick). Callers skip the comparison in that case.
    """
    if a is None or b is None:
        return None
    return position_distance(a.pos, b.pos)


def within(a, b, radius: float) -> bool:
    d = distance(a, b)
    return d is not None and d < radius
