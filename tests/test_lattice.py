"""Tests for the lattice topology of the map."""

import numpy as np
import pytest

from python_sofm import ConfigurationError, ConnectionType, Lattice, neighbor_weight

FIXED_CONNECTIONS = [
    ConnectionType.GRID_FOUR,
    ConnectionType.GRID_EIGHT,
    ConnectionType.HONEYCOMB,
]


def _neighbor_counts(lattice: Lattice) -> np.ndarray:
    return np.array([len(n) for n in lattice.neighbors]).reshape(lattice.shape)


class TestLatticeGeometry:
    @pytest.mark.parametrize("rows, cols", [(1, 1), (1, 7), (4, 1), (3, 5), (6, 6)])
    @pytest.mark.parametrize("conn_type", list(ConnectionType))
    def test_size(self, rows, cols, conn_type):
        lattice = Lattice(rows, cols, conn_type)
        assert lattice.size == rows * cols
        assert lattice.locations.shape == (rows * cols, 2)
        assert len(lattice.neighbors) == rows * cols

    def test_locations_are_row_major(self):
        lattice = Lattice(2, 3)
        assert lattice.locations.tolist() == [
            [0.0, 0.0], [0.0, 1.0], [0.0, 2.0], [1.0, 0.0], [1.0, 1.0], [1.0, 2.0]
        ]
        assert lattice.index(1, 2) == 5

    def test_squared_distances(self):
        lattice = Lattice(3, 4)
        assert np.allclose(lattice.sqrt_distances, lattice.sqrt_distances.T)
        assert np.all(np.diag(lattice.sqrt_distances) == 0.0)
        # (0, 0) to (2, 3)
        assert lattice.sqrt_distances[0, 11] == 13.0

    @pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (0, 0)])
    def test_zero_dimension_fails(self, rows, cols):
        with pytest.raises(ConfigurationError):
            Lattice(rows, cols)

    def test_string_connection_type(self):
        assert Lattice(2, 2, "honeycomb").conn_type is ConnectionType.HONEYCOMB

    def test_invalid_connection_type(self):
        with pytest.raises(ConfigurationError):
            Lattice(2, 2, "triangle")


class TestLatticeConnections:
    @pytest.mark.parametrize("conn_type", FIXED_CONNECTIONS)
    @pytest.mark.parametrize("rows, cols", [(1, 5), (2, 2), (4, 5), (7, 3)])
    def test_neighbors_are_symmetric(self, conn_type, rows, cols):
        lattice = Lattice(rows, cols, conn_type)
        for index, neighbors in enumerate(lattice.neighbors):
            assert index not in neighbors
            for neighbor in neighbors:
                assert 0 <= neighbor < lattice.size
                assert index in lattice.neighbors[neighbor]

    def test_grid_four_counts(self):
        counts = _neighbor_counts(Lattice(4, 5, ConnectionType.GRID_FOUR))
        assert counts[0, 0] == counts[0, -1] == counts[-1, 0] == counts[-1, -1] == 2
        assert np.all(counts[0, 1:-1] == 3)
        assert np.all(counts[-1, 1:-1] == 3)
        assert np.all(counts[1:-1, 0] == 3)
        assert np.all(counts[1:-1, -1] == 3)
        assert np.all(counts[1:-1, 1:-1] == 4)

    def test_grid_four_neighbors(self):
        lattice = Lattice(3, 3, ConnectionType.GRID_FOUR)
        assert lattice.neighbors[4] == [1, 3, 5, 7]
        assert lattice.neighbors[0] == [1, 3]

    def test_grid_eight_counts(self):
        counts = _neighbor_counts(Lattice(4, 5, ConnectionType.GRID_EIGHT))
        assert counts[0, 0] == counts[0, -1] == counts[-1, 0] == counts[-1, -1] == 3
        assert np.all(counts[0, 1:-1] == 5)
        assert np.all(counts[1:-1, 0] == 5)
        assert np.all(counts[1:-1, 1:-1] == 8)

    def test_honeycomb_counts(self):
        counts = _neighbor_counts(Lattice(5, 5, ConnectionType.HONEYCOMB))
        assert np.all(counts[1:-1, 1:-1] == 6)
        assert counts.max() == 6
        assert counts[0, 0] == 3
        assert counts[0, -1] == 2

    def test_honeycomb_row_parity(self):
        lattice = Lattice(4, 4, ConnectionType.HONEYCOMB)
        # (2, 1) is on an even row: diagonals on columns 1 and 2
        assert lattice.neighbors[lattice.index(2, 1)] == sorted(
            [
                lattice.index(2, 0), lattice.index(2, 2),
                lattice.index(1, 1), lattice.index(1, 2),
                lattice.index(3, 1), lattice.index(3, 2),
            ]
        )
        # (1, 1) is on an odd row: diagonals on columns 0 and 1
        assert lattice.neighbors[lattice.index(1, 1)] == sorted(
            [
                lattice.index(1, 0), lattice.index(1, 2),
                lattice.index(0, 0), lattice.index(0, 1),
                lattice.index(2, 0), lattice.index(2, 1),
            ]
        )

    def test_honeycomb_neighbors_are_equidistant(self):
        lattice = Lattice(5, 5, ConnectionType.HONEYCOMB)
        for index, neighbors in enumerate(lattice.neighbors):
            assert np.allclose(lattice.sqrt_distances[index, neighbors], 1.0)
            others = [i for i in range(lattice.size) if i != index and i not in neighbors]
            assert np.all(lattice.sqrt_distances[index, others] > 1.0 + 1e-9)

    def test_single_row_has_no_wraparound(self):
        lattice = Lattice(1, 4, ConnectionType.GRID_EIGHT)
        assert lattice.neighbors == [[1], [0, 2], [1, 3], [2]]

    def test_function_neighbor_has_no_adjacency(self):
        lattice = Lattice(3, 3, ConnectionType.FUNC_NEIGHBOR)
        assert all(neighbors == [] for neighbors in lattice.neighbors)

    def test_neighbors_within(self):
        lattice = Lattice(3, 3, ConnectionType.FUNC_NEIGHBOR)
        assert lattice.neighbors_within(4, 1.5).tolist() == [1, 3, 5, 7]
        assert lattice.neighbors_within(0, 2.5).tolist() == [1, 3, 4]


class TestNeighborWeight:
    def test_unit_at_zero_distance(self):
        assert neighbor_weight(0.0, 4.0) == 1.0
        assert neighbor_weight(0.0, 0.0) == 1.0

    def test_zero_at_and_beyond_radius(self):
        assert neighbor_weight(4.0, 4.0) == 0.0
        assert neighbor_weight(9.0, 4.0) == 0.0
        assert neighbor_weight(1.0, 0.0) == 0.0

    def test_monotonically_decreasing(self):
        distances = np.linspace(0.0, 5.0, 51)
        weights = neighbor_weight(distances, 4.0)
        assert np.all(np.diff(weights) <= 0.0)
        assert np.all((weights >= 0.0) & (weights <= 1.0))
