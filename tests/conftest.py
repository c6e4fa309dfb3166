import matplotlib

matplotlib.use("Agg")

from collections import deque

import numpy as np
import pytest

from flocksim.agents import Agent, Kind
from flocksim.sim import FlockParams, FlockSim, SimConfig


def make_agent(x, y, dx=0.0, dy=0.0, kind=Kind.NORMAL, history_len=50):
    return Agent(
        kind=kind,
        pos=np.array([x, y], dtype=float),
        vel=np.array([dx, dy], dtype=float),
        history=deque(maxlen=history_len),
    )


@pytest.fixture
def params():
    return FlockParams()


@pytest.fixture
def sim():
    s = FlockSim(SimConfig(seed=1))
    s.reset()
    return s
