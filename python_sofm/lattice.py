"""Lattice of neurons of the self-organizing feature map.

Neurons are stored in row-major order: neuron i is located at (i // cols, i % cols).
Grid distances between neurons are kept squared, as are the neighborhood radii
they are compared with. On a honeycomb lattice distances are measured between
hexagon centers: odd rows are shifted half a neuron to the left and rows are
sqrt(3) / 2 apart, so all six neighbors of a neuron are at distance 1.
"""

import numpy as np

from .exceptions import ConfigurationError
from .parameters import ConnectionType, as_connection_type


def neighbor_weight(sqr_distance: float | np.ndarray, sqr_radius: float) -> float | np.ndarray:
    """
    Truncated gaussian influence of a neuron on another one.

    Equals 1 at distance 0, decreases monotonically with the distance and is 0 at and
    beyond the radius.

    :param sqr_distance: float or np.ndarray: Squared grid distance(s) between neurons.
    :param sqr_radius: float: Squared neighborhood radius.
    :return: float or np.ndarray: Influence, in [0, 1].
    """
    sqr_distance = np.asarray(sqr_distance, dtype=float)
    if sqr_radius <= 0.0:
        return np.where(sqr_distance == 0.0, 1.0, 0.0)
    return np.where(
        sqr_distance < sqr_radius, np.exp(-sqr_distance / (2.0 * sqr_radius)), 0.0
    )


class Lattice:
    """Topology of a rows x cols map: neuron locations, grid distances and neighbors."""

    def __init__(
        self, rows: int, cols: int, conn_type: ConnectionType | str = ConnectionType.GRID_EIGHT
    ) -> None:
        """
        :param rows: int: Number of rows of the map. Should be larger than 0.
        :param cols: int: Number of columns of the map. Should be larger than 0.
        :param conn_type: ConnectionType or str: Connectivity between neurons.
        :raises ConfigurationError: If rows or cols is not a positive integer.
        """
        if int(rows) <= 0 or int(cols) <= 0:
            raise ConfigurationError(
                f"Map dimensions must be positive, got rows={rows}, cols={cols}"
            )
        self.rows = int(rows)
        self.cols = int(cols)
        self.size = self.rows * self.cols
        self.conn_type = as_connection_type(conn_type)

        self.locations = self._create_locations()
        self.sqrt_distances = self._create_distances()
        self.neighbors = self._create_connections()

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def _create_locations(self) -> np.ndarray:
        rows, cols = np.meshgrid(np.arange(self.rows), np.arange(self.cols), indexing="ij")
        return np.stack([rows.ravel(), cols.ravel()], axis=1).astype(float)

    def _create_distances(self) -> np.ndarray:
        # Squared euclidean grid distance between every pair of neurons
        points = self.locations
        if self.conn_type == ConnectionType.HONEYCOMB:
            points = np.stack(
                [
                    points[:, 0] * np.sqrt(3) / 2,
                    points[:, 1] - 0.5 * (points[:, 0] % 2),
                ],
                axis=1,
            )
        diff = points[:, None, :] - points[None, :, :]
        return np.sum(diff * diff, axis=-1)

    def _create_connections(self) -> list[list[int]]:
        """
        Creates the list of neighbors of each neuron, in line with the connection type.

        :return: list: Ascending neighbor indices of each neuron.
            Empty lists for the function-neighbor connection type.
        """
        offsets = {
            ConnectionType.GRID_FOUR: self._grid_four_offsets,
            ConnectionType.GRID_EIGHT: self._grid_eight_offsets,
            ConnectionType.HONEYCOMB: self._honeycomb_offsets,
        }
        neighbors: list[list[int]] = [[] for _ in range(self.size)]
        if self.conn_type not in offsets:
            return neighbors

        for index in range(self.size):
            row, col = divmod(index, self.cols)
            for d_row, d_col in offsets[self.conn_type](row):
                n_row, n_col = row + d_row, col + d_col
                if 0 <= n_row < self.rows and 0 <= n_col < self.cols:
                    neighbors[index].append(self.index(n_row, n_col))
            neighbors[index].sort()
        return neighbors

    @staticmethod
    def _grid_four_offsets(row: int) -> list[tuple[int, int]]:
        return [(-1, 0), (1, 0), (0, -1), (0, 1)]

    @staticmethod
    def _grid_eight_offsets(row: int) -> list[tuple[int, int]]:
        return Lattice._grid_four_offsets(row) + [(-1, -1), (-1, 1), (1, -1), (1, 1)]

    @staticmethod
    def _honeycomb_offsets(row: int) -> list[tuple[int, int]]:
        # Odd rows are shifted half a neuron to the left of even rows
        if row % 2 == 0:
            diagonals = [(-1, 0), (-1, 1), (1, 0), (1, 1)]
        else:
            diagonals = [(-1, -1), (-1, 0), (1, -1), (1, 0)]
        return [(0, -1), (0, 1)] + diagonals

    def neighbors_within(self, index: int, sqr_radius: float) -> np.ndarray:
        """
        Indices of the neurons, other than index, whose squared grid distance to index is
        below sqr_radius. Used when the lattice has no fixed adjacency.

        :param index: int: Index of the central neuron.
        :param sqr_radius: float: Squared radius.
        :return: np.ndarray: Ascending neuron indices.
        """
        mask = self.sqrt_distances[index] < sqr_radius
        mask[index] = False
        return np.flatnonzero(mask)
