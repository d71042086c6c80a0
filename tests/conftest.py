"""Shared fixtures for the python_sofm test suite."""

import numpy as np
import pytest


@pytest.fixture
def square_corners() -> np.ndarray:
    """The four corners of the unit square."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])


@pytest.fixture
def blobs() -> np.ndarray:
    """Three well separated gaussian blobs in 3D, 20 points each."""
    rng = np.random.RandomState(7)
    centers = np.array([[0.0, 0.0, 0.0], [5.0, 5.0, 0.0], [0.0, 5.0, 5.0]])
    return np.concatenate([center + 0.3 * rng.standard_normal((20, 3)) for center in centers])
