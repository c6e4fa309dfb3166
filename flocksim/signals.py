from dataclasses import dataclass
import logging
import numpy as np

log = logging.getLogger(__name__)


@dataclass
class Signal:
    """Last heading broadcast by a leader: where it was and how it was moving."""
    pos: np.ndarray
    vel: np.ndarray


class SignalChannel:
    """
    Delayed leader -> follower communication.

    Leaders publish a snapshot of their position/velocity only when
    ``broadcast`` is called, on a cadence owned by the scheduler's signal
    timer. Followers read ``signals`` through the signal reaction rule, so they
    always react to a heading that may be several ticks old.
    """

    def __init__(self):
        self.signals = []
        self.broadcasts = 0

    def reset(self, leaders):
        self.broadcasts = 0
        self._publish(leaders)

    def broadcast(self, leaders):
        self.broadcasts += 1
        self._publish(leaders)
        log.debug("leader signal #%d published (%d leaders)", self.broadcasts, len(leaders))

    def _publish(self, leaders):
        self.signals = [Signal(pos=leader.pos.copy(), vel=leader.vel.copy()) for leader in leaders]
