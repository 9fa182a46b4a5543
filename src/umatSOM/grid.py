## Distance matrices in weight space and grid space, and the 2D layout of the
## map units for the supported topologies.

from enum import Enum

import numpy as np
from numba import njit, prange
from sklearn.metrics.pairwise import euclidean_distances, manhattan_distances

from .errors import UnknownMetricError, UnsupportedTopologyError


class Metric(str, Enum):
    """Distance metrics available for codebook and grid distances."""

    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"

    @classmethod
    def from_name(cls, name):
        """Convert a metric name (case-insensitive) to a Metric.

        Args:
                name (str | Metric): The metric name, or a Metric member.

        Returns:
                Metric: The matching member.

        Raises:
                UnknownMetricError: If the name is not a known metric.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise UnknownMetricError(f"unknown distance metric: {name!r}") from None


class Topology(str, Enum):
    """Layout rule of the map units."""

    RECTANGLE = "rectangle"
    HEXAGON = "hexagon"

    @classmethod
    def from_name(cls, name):
        """Convert a topology name (case-insensitive) to a Topology.

        Args:
                name (str | Topology): The topology name, or a Topology member.

        Returns:
                Topology: The matching member.

        Raises:
                UnsupportedTopologyError: If the name is not a known topology.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise UnsupportedTopologyError(
                f"unsupported grid topology: {name!r}"
            ) from None


_PAIRWISE = {
    Metric.EUCLIDEAN: euclidean_distances,
    Metric.MANHATTAN: manhattan_distances,
}


def distance_matrix(metric, matrix: np.ndarray) -> np.ndarray:
    """
    Compute the pairwise distance between every pair of rows of a matrix.

    Args:
            metric (str | Metric): The distance metric.
            matrix (np.ndarray): N x f array, one vector per row.

    Returns:
            np.ndarray: N x N symmetric distance matrix with a zero diagonal.
    """
    metric = Metric.from_name(metric)
    matrix = np.asarray(matrix, dtype=np.float64)

    d = _PAIRWISE[metric](matrix, matrix)
    # sklearn's dot-product trick can leave rounding noise off the diagonal
    d = np.maximum(0.5 * (d + d.T), 0.0)
    np.fill_diagonal(d, 0.0)

    return d


def point_distance(metric, vec_a: np.ndarray, vec_b: np.ndarray) -> float:
    """
    Compute the distance between two vectors.

    The U-matrix reads pair distances from distance_matrix instead; this is
    kept as the single-pair counterpart for callers.

    Args:
            metric (str | Metric): The distance metric.
            vec_a (np.ndarray): 1d array.
            vec_b (np.ndarray): 1d array with the same length as vec_a.

    Returns:
            float: distance between vec_a and vec_b
    """
    metric = Metric.from_name(metric)
    a = np.reshape(np.asarray(vec_a, dtype=np.float64), (1, -1))
    b = np.reshape(np.asarray(vec_b, dtype=np.float64), (1, -1))

    return float(_PAIRWISE[metric](a, b)[0, 0])


@njit(parallel=True)
def _coordinate(number_of_units: int, cols: int, hexagonal: bool) -> np.ndarray:
    coords = np.zeros((number_of_units, 2))

    for k in prange(number_of_units):
        x = k % cols
        y = k // cols
        if hexagonal:
            # odd rows are shifted half a unit to the right
            coords[k, 0] = x + 0.5 * (y % 2)
            coords[k, 1] = y * np.sqrt(0.75)
        else:
            coords[k, 0] = x
            coords[k, 1] = y

    return coords


def grid_coordinates(topology, dims) -> np.ndarray:
    """
    Lay out the units of a rows x cols map, in row-major unit order.

    Unit i sits in column i % cols and row i // cols. For a hexagonal map the
    odd rows are shifted by half a unit and rows are sqrt(0.75) apart, so all
    six immediate neighbors of a unit are at distance 1.

    Args:
            topology (str | Topology): The grid topology.
            dims (tuple[int, int]): (rows, cols) of the map.

    Returns:
            np.ndarray: N x 2 array with the (x, y) position of each unit.
    """
    topology = Topology.from_name(topology)
    rows, cols = check_dims(dims)

    return _coordinate(rows * cols, cols, topology == Topology.HEXAGON)


def check_dims(dims):
    """Validate (rows, cols) grid dims and return them as ints."""
    if len(dims) != 2:
        raise ValueError(f"grid dims must be (rows, cols), got {dims!r}")
    rows, cols = int(dims[0]), int(dims[1])
    if rows < 1 or cols < 1:
        raise ValueError(f"grid dims must be positive, got {dims!r}")
    return rows, cols
