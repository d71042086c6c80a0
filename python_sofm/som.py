"""This module contains the implementation of the self-organizing feature map.

The map is trained on a fixed dataset with stepwise (sequential) competitive learning:
for every pattern the winner neuron is selected and the winner and its lattice neighborhood
are moved towards the pattern. The learning rate and neighborhood radius decay with the epochs.

Features:
    - Grid four, grid eight, honeycomb and function-neighbor connectivity
    - Random, random centroid, random surface and uniform grid weight initialization
    - Autostop when the maximal weight adaptation of an epoch falls below a threshold
    - Support for custom decay functions
    - Captured objects and awards of each neuron
    - U-matrix and winner matrix
    - Support for NumPy arrays, Pandas DataFrames and regular lists of values

Reference:
T. Kohonen,
The Self-Organizing Map,
Proceedings of the IEEE,
Volume 78,
1990,
Pages 1464-1480.
"""

# %%
import dataclasses
import logging
import math
from typing import Callable

import numpy as np
import pandas as pd
import sklearn.utils  # type: ignore
import tqdm

from .exceptions import ConfigurationError, InvalidInputError
from .initialization import initialize_weights
from .lattice import Lattice, neighbor_weight
from .parameters import (
    ConnectionType,
    SOMParameters,
    TrainingState,
    as_connection_type,
    default_init_radius,
)

logger = logging.getLogger(__name__)


# %%
def exponential_decay(x: float, t: int, max_t: int, factor: float = 5.0) -> float:
    """
    Exponential decay function. Can be used for both the learning_rate or the neighborhood_radius.

    Equals x at t == 0 and has decayed to exp(-factor) of x when t reaches max_t.

    :param x: float: Initial x parameter
    :param t: int: Current iteration
    :param max_t: int: Maximum number of iterations
    :param factor: float: Exponential decay factor. Defaults to 5.0.
    :return: float: Current state of x after t iterations
    """
    return x * math.exp(-factor * t / max_t)


def linear_decay(x: float, t: int, max_t: int) -> float:
    """
    Linear decay function. Can be used for both the learning_rate or the neighborhood_radius.

    :param x: float: Initial x parameter
    :param t: int: Current iteration
    :param max_t: int: Maximum number of iterations
    :return: float: Current state of x after t iterations
    """
    return x * max(0.0, 1.0 - t / max_t)


def _squared_euclidean_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Squared euclidean distances between the elements of the last dimension of a and b."""
    diff = np.subtract(a, b)
    return np.sum(diff * diff, axis=-1)


class SOM:
    """Self-organizing feature map with a fixed rows x cols lattice of neurons.

    The engine owns the lattice, the weights and the bookkeeping of awards and captured
    objects; the dataset is converted once at construction and never modified.

    Reference:
    T. Kohonen, E. Oja, O. Simula, A. Visa, J. Kangas,
    Engineering Applications of the Self-Organizing Map,
    Proceedings of the IEEE,
    Volume 84,
    1996,
    Pages 1358-1384.
    """

    def __init__(
        self,
        data: np.ndarray | pd.DataFrame | list,
        rows: int,
        cols: int,
        epochs: int,
        conn_type: ConnectionType | str = ConnectionType.GRID_EIGHT,
        parameters: SOMParameters | None = None,
        learning_rate_decay: Callable[[float, int, int], float] = exponential_decay,
        neighborhood_radius_decay: Callable[[float, int, int], float] = exponential_decay,
    ) -> None:
        """
        Constructor for the self-organizing feature map class.

        :param data: array-like: Dataset for training, of shape (n_samples, n_features).
            Must be non-empty, numeric, and all rows must have the same length.
        :param rows: int: Number of rows of neurons. Should be larger than 0.
        :param cols: int: Number of columns of neurons. Should be larger than 0.
        :param epochs: int: Number of epochs for training. Should be larger than 0.
        :param conn_type: ConnectionType or str: Connection between neurons of the map.
            May be either 'grid_four', 'grid_eight', 'honeycomb' or 'func_neighbor'.
            Defaults to 'grid_eight'.
        :param parameters: SOMParameters or None: Training parameters. Defaults to SOMParameters().
        :param learning_rate_decay: function: Decay function for the learning rate.
            May be a predefined one from this package, or a custom function, with the same
            parameters and return type. Defaults to exponential_decay.
        :param neighborhood_radius_decay: function: Decay function for the neighborhood radius.
            Defaults to exponential_decay.
        :raises InvalidInputError: If the dataset is empty or not a 2D numeric array.
        :raises ConfigurationError: If rows, cols or epochs is 0, or a parameter is invalid.
        """
        # The dataset is checked before anything is allocated
        self._data = self._data_to_numpy(data)
        self._data.setflags(write=False)

        if int(epochs) <= 0:
            raise ConfigurationError(f"Number of epochs must be positive, got {epochs}")
        self._epochs = int(epochs)

        self._params = (
            SOMParameters() if parameters is None else dataclasses.replace(parameters)
        )
        self._params.validate()

        self._lattice = Lattice(rows, cols, as_connection_type(conn_type))
        if self._params.init_radius is None:
            self._params.init_radius = default_init_radius(rows, cols)

        self._learning_rate_decay = learning_rate_decay
        self._neighborhood_radius_decay = neighborhood_radius_decay
        self._adaptation = {
            ConnectionType.FUNC_NEIGHBOR: self._adaptation_function_neighbor,
        }.get(self._lattice.conn_type, self._adaptation_fixed_neighbors)

        self._weights = initialize_weights(
            self._data, self._lattice, self._params.init_type, self._params.random_seed
        )

        self._learn_rate = self._params.init_learn_rate
        # Kept squared, as the grid distances it is compared with
        self._local_radius = self._params.init_radius**2
        self._maximal_adaptation: float | None = None
        self._state = TrainingState.IDLE

        self._awards = np.zeros(self._lattice.size, dtype=int)
        self._capture_objects: list[list[int]] = [[] for _ in range(self._lattice.size)]

    def get_size(self) -> int:
        """
        Gets the number of neurons of the network.

        :return: int: rows * cols.
        """
        return self._lattice.size

    def get_shape(self) -> tuple[int, int]:
        """
        Gets the shape of the network.

        :return: tuple(int, int): Number of rows and columns.
        """
        return self._lattice.shape

    def get_weights(self) -> np.ndarray:
        """
        Gets a copy of the weights of the network.

        :return: np.ndarray: Weights of shape (size, n_features), row i is neuron i.
        """
        return self._weights.copy()

    def get_locations(self) -> np.ndarray:
        """
        Gets the (row, col) location of each neuron on the lattice.

        :return: np.ndarray: Locations of shape (size, 2).
        """
        return self._lattice.locations.copy()

    def get_neighbors(self) -> list[tuple[int, ...]]:
        """
        Gets the neighbor indices of each neuron.
        Empty for every neuron when the connection type is 'func_neighbor'.

        :return: list: Tuple of neighbor indices for each neuron.
        """
        return [tuple(neighbors) for neighbors in self._lattice.neighbors]

    def get_awards(self) -> np.ndarray:
        """
        Gets the number of patterns captured by each neuron in the last winner assignment.

        :return: np.ndarray: Awards of shape (size,).
        """
        return self._awards.copy()

    def get_capture_objects(self) -> list[tuple[int, ...]]:
        """
        Gets the indices of the patterns captured by each neuron in the last winner assignment.

        :return: list: Tuple of dataset indices for each neuron, in dataset order.
        """
        return [tuple(objects) for objects in self._capture_objects]

    def get_epochs(self) -> int:
        """
        Gets the epoch budget of the training process.

        :return: int: Maximum number of epochs.
        """
        return self._epochs

    def get_learn_rate(self) -> float:
        """
        Gets the learning rate of the current (or last) epoch.

        :return: float: Current learning rate.
        """
        return self._learn_rate

    def get_local_radius(self) -> float:
        """
        Gets the current neighborhood radius, in lattice units.

        :return: float: Current radius.
        """
        return math.sqrt(self._local_radius)

    def get_state(self) -> TrainingState:
        """
        Gets the state of the training process.

        :return: TrainingState: IDLE before training, RUNNING while training, CONVERGED or
            EPOCH_LIMIT_REACHED once training has finished.
        """
        return self._state

    def get_maximal_adaptation(self) -> float | None:
        """
        Gets the maximal weight adaptation measured after the last epoch trained with autostop.

        :return: float or None: None if no epoch has been trained with autostop.
        """
        return self._maximal_adaptation

    def get_winner_number(self) -> int:
        """
        Gets the number of neurons that captured at least one pattern in the last winner
        assignment.

        :return: int: Number of winner neurons.
        """
        return int(np.count_nonzero(self._awards))

    def train(self, autostop: bool = False, verbose: bool = False) -> int:
        """
        Trains the self-organizing feature map on its dataset.

        :param autostop: bool: Activate to stop the training process when the maximal
            adaptation of the weights in an epoch is below the adaptation threshold.
        :param verbose: bool: Activate to display the progress of the training process.
        :return: int: Number of epochs executed.
        """
        logger.info(
            "Training %dx%d map (%s) on %d patterns for up to %d epochs",
            *self._lattice.shape,
            self._lattice.conn_type.value,
            len(self._data),
            self._epochs,
        )
        self._state = TrainingState.RUNNING
        self._maximal_adaptation = None
        iterator: range | tqdm.tqdm = range(1, self._epochs + 1)
        if verbose:
            iterator = tqdm.tqdm(iterator, total=self._epochs, desc="Training")

        epoch = 0
        for epoch in iterator:
            # Calculating decaying learning rate and radius, the first epoch uses the initial values
            self._learn_rate = self._learning_rate_decay(
                self._params.init_learn_rate, epoch - 1, self._epochs
            )
            self._local_radius = (
                self._neighborhood_radius_decay(self._params.init_radius, epoch - 1, self._epochs)
                ** 2
            )

            previous_weights = self._weights.copy() if autostop else None

            for pattern in self._data:
                winner = self._competition(pattern)
                self._adaptation(winner, pattern)

            if previous_weights is not None:
                self._maximal_adaptation = self.calculate_maximal_adaptation(previous_weights)
                logger.debug(
                    "Epoch %d: learn rate %.6f, radius %.6f, maximal adaptation %.6f",
                    epoch,
                    self._learn_rate,
                    self.get_local_radius(),
                    self._maximal_adaptation,
                )
                if self._maximal_adaptation < self._params.adaptation_threshold:
                    self._state = TrainingState.CONVERGED
                    logger.info("Converged after %d epochs", epoch)
                    break
            else:
                logger.debug(
                    "Epoch %d: learn rate %.6f, radius %.6f",
                    epoch,
                    self._learn_rate,
                    self.get_local_radius(),
                )
        else:
            self._state = TrainingState.EPOCH_LIMIT_REACHED

        if verbose:
            iterator.close()  # type: ignore

        self._update_winners()
        logger.info(
            "Training finished after %d epochs, %d winner neurons", epoch, self.get_winner_number()
        )
        return epoch

    def simulate(self, pattern: np.ndarray | list) -> int:
        """
        Calculates the winner neuron of a pattern, without adapting the network.

        :param pattern: array-like: Pattern with n_features values.
        :return: int: Index of the winner neuron.
        :raises InvalidInputError: If the pattern dimension does not match the dataset.
        """
        pattern_array = np.asarray(pattern, dtype=float)
        if pattern_array.shape != (self._weights.shape[1],):
            raise InvalidInputError(
                f"Pattern must have {self._weights.shape[1]} features, "
                f"got shape {pattern_array.shape}"
            )
        return self._competition(pattern_array)

    def calculate_maximal_adaptation(self, previous_weights: np.ndarray) -> float:
        """
        Calculates the maximal change of any weight component with respect to previous_weights.

        :param previous_weights: np.ndarray: Weights of the network before adaptation.
        :return: float: Maximal absolute difference between current and previous weights.
        """
        return float(np.max(np.abs(self._weights - previous_weights)))

    def quantization_error(self, data: np.ndarray | pd.DataFrame | list | None = None) -> float:
        """Calculates average distance of the patterns to the weights of their winner neurons.
        This error is a quality measure for the training process.

        :param data: array-like or None: Dataset to evaluate. Defaults to the training dataset.
        :return: float: Quantization error.
        """
        data_array = self._data if data is None else self._data_to_numpy(data)
        if data_array.shape[1] != self._weights.shape[1]:
            raise InvalidInputError(
                f"Data must have {self._weights.shape[1]} features, got {data_array.shape[1]}"
            )
        winners = [self._competition(pattern) for pattern in data_array]
        return float(
            np.mean(np.sqrt(_squared_euclidean_distance(data_array, self._weights[winners])))
        )

    def get_winner_matrix(self) -> np.ndarray:
        """
        Gets the awards of the neurons arranged as the lattice.

        :return: np.ndarray: Matrix of shape (rows, cols).
        """
        return self._awards.reshape(self._lattice.shape).copy()

    def get_distance_matrix(self) -> np.ndarray:
        """
        Calculates U-matrix of the current state of the network,
        i.e., the mean distance between the weights of each neuron and its neighbors.
        Neighbors of a 'func_neighbor' map are the neurons of its 8-neighborhood.

        :return: np.ndarray: U-matrix of shape (rows, cols).
        """
        um = np.zeros(self._lattice.size)
        for index in range(self._lattice.size):
            if self._lattice.conn_type == ConnectionType.FUNC_NEIGHBOR:
                neighbors = self._lattice.neighbors_within(index, 2.0 + 1e-9)
            else:
                neighbors = np.asarray(self._lattice.neighbors[index], dtype=int)
            if len(neighbors) > 0:
                um[index] = np.mean(
                    np.sqrt(
                        _squared_euclidean_distance(
                            self._weights[index], self._weights[neighbors]
                        )
                    )
                )
        return um.reshape(self._lattice.shape)

    def _competition(self, pattern: np.ndarray) -> int:
        """
        Calculates the winner neuron of a pattern, i.e., the neuron with the nearest weights.
        Ties are won by the lowest neuron index.

        :param pattern: np.ndarray: Pattern with n_features values.
        :return: int: Index of the winner neuron.
        """
        distances = _squared_euclidean_distance(pattern, self._weights)
        winner = int(distances.argmin())
        if logger.isEnabledFor(logging.DEBUG):
            ties = np.count_nonzero(distances == distances[winner])
            if ties > 1:
                logger.debug("%d neurons tied for pattern, neuron %d wins", ties, winner)
        return winner

    def _adaptation_fixed_neighbors(self, winner: int, pattern: np.ndarray) -> None:
        """
        Moves the winner and its connected neighbors inside the current radius towards pattern.

        :param winner: int: Index of the winner neuron.
        :param pattern: np.ndarray: Pattern captured by the winner.
        """
        self._weights[winner] += self._learn_rate * (pattern - self._weights[winner])
        for neighbor in self._lattice.neighbors[winner]:
            distance = self._lattice.sqrt_distances[winner, neighbor]
            if distance < self._local_radius:
                influence = neighbor_weight(distance, self._local_radius)
                self._weights[neighbor] += (
                    self._learn_rate * influence * (pattern - self._weights[neighbor])
                )

    def _adaptation_function_neighbor(self, winner: int, pattern: np.ndarray) -> None:
        """
        Moves every neuron towards pattern, weighted by its grid distance to the winner.

        :param winner: int: Index of the winner neuron.
        :param pattern: np.ndarray: Pattern captured by the winner.
        """
        influence = neighbor_weight(self._lattice.sqrt_distances[winner], self._local_radius)
        self._weights += self._learn_rate * influence[:, None] * (pattern - self._weights)

    def _update_winners(self) -> None:
        """Rebuilds awards and captured objects from the winner of every pattern."""
        self._awards = np.zeros(self._lattice.size, dtype=int)
        self._capture_objects = [[] for _ in range(self._lattice.size)]
        for i, pattern in enumerate(self._data):
            winner = self._competition(pattern)
            self._awards[winner] += 1
            self._capture_objects[winner].append(i)

    def _data_to_numpy(self, data: np.ndarray | pd.DataFrame | list) -> np.ndarray:
        """
        Converts data to a 2D numpy array of floats.

        :param data: array-like: Dataset.
        :return: np.ndarray: Numpy array of the dataset.
        :raises InvalidInputError: If the dataset is empty, ragged or non-numeric.
        """
        if isinstance(data, pd.DataFrame):
            data = data.to_numpy()
        try:
            return sklearn.utils.check_array(data, dtype=np.float64, copy=True)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid dataset: {exc}") from exc
