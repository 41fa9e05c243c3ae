import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from envs.grid import make_grid


@pytest.fixture
def maze():
    """Default 5x5 maze: start (0,0), goal (4,4), four wall cells."""
    return make_grid(5, 5)


@pytest.fixture
def rng():
    return np.random.default_rng(0)
