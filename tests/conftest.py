import numpy as np
import pytest

from boxcorr import lorenz_trajectory


@pytest.fixture
def random_points():
    """200 uniform points in the unit cube."""
    rng = np.random.default_rng(42)
    return rng.random((200, 3))


@pytest.fixture(scope="session")
def lorenz():
    """10,000 samples on the Lorenz attractor."""
    return lorenz_trajectory(n_points=10000, dt=0.1)
