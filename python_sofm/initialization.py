"""Initial weights of the neurons of the self-organizing feature map."""

from typing import Callable

import numpy as np
from sklearn.utils import check_random_state  # type: ignore

from .exceptions import InvalidInputError
from .lattice import Lattice
from .parameters import InitType, as_init_type

# Relative size of the perturbation around the centroid for 'random_centroid'
CENTROID_SPREAD = 0.05


class DimensionInfo:
    """Per-dimension bounds of a dataset."""

    def __init__(self, data: np.ndarray) -> None:
        """
        :param data: np.ndarray: Dataset of shape (n_samples, n_features).
        :raises InvalidInputError: If data is empty.
        """
        if len(data) == 0:
            raise InvalidInputError("Cannot initialize weights from an empty dataset")
        self.minimum = data.min(axis=0)
        self.maximum = data.max(axis=0)
        self.width = self.maximum - self.minimum
        self.center = data.mean(axis=0)

    @property
    def dimensions(self) -> int:
        return len(self.minimum)


def _random(
    info: DimensionInfo, lattice: Lattice, random_state: np.random.RandomState
) -> np.ndarray:
    """Uniform in [0, width) of each dimension."""
    return random_state.uniform(size=(lattice.size, info.dimensions)) * info.width


def _random_centroid(
    info: DimensionInfo, lattice: Lattice, random_state: np.random.RandomState
) -> np.ndarray:
    """Centroid of the data, perturbed by up to CENTROID_SPREAD of the width of each dimension."""
    spread = CENTROID_SPREAD * info.width
    return info.center + random_state.uniform(
        -spread, spread, size=(lattice.size, info.dimensions)
    )


def _random_surface(
    info: DimensionInfo, lattice: Lattice, random_state: np.random.RandomState
) -> np.ndarray:
    """Uniform over the bounding box of the data."""
    return random_state.uniform(
        info.minimum, info.maximum, size=(lattice.size, info.dimensions)
    )


def _uniform_grid(
    info: DimensionInfo, lattice: Lattice, random_state: np.random.RandomState
) -> np.ndarray:
    """
    Deterministic initialization: the lattice axes with more than one neuron (rows first,
    then columns) are spread over the range of the first data dimensions, in order.
    The remaining dimensions are set to the center of the data.

    On a single row or column map the first dimension follows the neurons of the chain.
    """
    weights = np.tile(info.center, (lattice.size, 1))
    spread_axes = [axis for axis, axis_len in enumerate(lattice.shape) if axis_len > 1]
    for dim, axis in zip(range(info.dimensions), spread_axes):
        step = info.width[dim] / (lattice.shape[axis] - 1)
        weights[:, dim] = info.minimum[dim] + step * lattice.locations[:, axis]
    return weights


_INITIALIZERS: dict[InitType, Callable[..., np.ndarray]] = {
    InitType.RANDOM: _random,
    InitType.RANDOM_CENTROID: _random_centroid,
    InitType.RANDOM_SURFACE: _random_surface,
    InitType.UNIFORM_GRID: _uniform_grid,
}


def initialize_weights(
    data: np.ndarray,
    lattice: Lattice,
    init_type: InitType | str = InitType.UNIFORM_GRID,
    random_state: int | np.random.RandomState | None = None,
) -> np.ndarray:
    """
    Creates the initial weights of every neuron of a lattice.

    :param data: np.ndarray: Dataset of shape (n_samples, n_features).
    :param lattice: Lattice: Lattice of the map.
    :param init_type: InitType or str: Initialization strategy.
        May be either 'random', 'random_centroid', 'random_surface' or 'uniform_grid'.
    :param random_state: int, RandomState or None: Seed or generator for the random strategies.
    :return: np.ndarray: Weights of shape (lattice.size, n_features).
    :raises InvalidInputError: If data is empty.
    """
    info = DimensionInfo(np.asarray(data, dtype=float))
    init_type = as_init_type(init_type)
    return _INITIALIZERS[init_type](info, lattice, check_random_state(random_state))
