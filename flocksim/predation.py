import logging

from .utils import distance

log = logging.getLogger(__name__)


def find_prey_in_range(predator, boids, eat_range: float):
    """Indices of the boids the predator can reach this tick. Read-only."""
    caught = []
    for i, prey in enumerate(boids):
        d = distance(predator, prey)
        if d is not None and d < eat_range:
            caught.append(i)
    return caught


def resolve_predation(marked, boids):
    """
    Remove every marked boid in one pass after all predators have scanned.

    Rebuilding the list instead of swapping with the last element keeps each
    index pointing at the agent it was marked for, even when several predators
    mark the same boid or marks run past the shrinking end.
    """
    if not marked:
        return boids
    survivors = [b for i, b in enumerate(boids) if i not in marked]
    log.debug("predation: %d eaten, %d left", len(boids) - len(survivors), len(survivors))
    return survivors
