## U-matrix of a trained SOM codebook: each unit is shaded by the average
## codebook distance to its grid neighbors, and the result is drawn as one
## grey polygon per unit in an SVG document.

import sys
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numba import njit, prange

from .errors import DegenerateInputError
from .grid import Metric, Topology, check_dims, distance_matrix, grid_coordinates
from .svg import build_document, write_document

# captures the 8 surrounding units of a unit-spaced rectangular grid and the
# 6 of a unit-spaced hexagonal grid
DEFAULT_RADIUS = np.sqrt(2.0) * 1.01


class IsolatedPolicy(str, Enum):
    """What to do with a unit that has no grid neighbor within the radius."""

    MAX_DISSIMILARITY = "max"
    RAISE = "raise"


@dataclass(frozen=True)
class UMatrixConfig:
    """Layout and neighborhood parameters of the U-matrix.

    Args:
            scale (float): Canvas units per grid unit. Default is 20.
            offset (float): Margin added around the grid on the canvas, at least scale / 2. Default is 10.
            radius (float): Grid distance below which two units are neighbors. Default is sqrt(2) * 1.01.
            isolated_policy (IsolatedPolicy): Handling of units without neighbors. Default is "max",
                which gives them the largest codebook distance (drawn black); "raise" rejects the input.
    """

    scale: float = 20.0
    offset: float = 10.0
    radius: float = DEFAULT_RADIUS
    isolated_policy: IsolatedPolicy = IsolatedPolicy.MAX_DISSIMILARITY

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        # the first row and column reach half a unit past their centres
        if not self.offset >= 0.5 * self.scale:
            raise ValueError(
                f"offset must be at least half the scale ({0.5 * self.scale}), "
                f"got {self.offset}"
            )
        if not self.radius > 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        object.__setattr__(
            self, "isolated_policy", IsolatedPolicy(self.isolated_policy)
        )


@njit()
def rows_in_radius(row: int, radius: float, dist_mat: np.ndarray):
    """
    Find all units closer than radius to the selected unit. This is a rough
    approximation of grid adjacency and assumes unit-spaced grid coordinates.

    Args:
            row (int): The selected unit.
            radius (float): Exclusive distance threshold.
            dist_mat (np.ndarray): Grid-space distance matrix.

    Returns:
            tuple[np.ndarray, np.ndarray]: indices of the units within the radius (the
            selected unit included) and their distances to it
    """
    row_dist = dist_mat[row]
    rows = np.nonzero(row_dist < radius)[0]
    return rows, row_dist[rows]


@njit(parallel=True)
def neighbor_dissimilarity(
    weight_dist: np.ndarray, grid_dist: np.ndarray, radius: float
):
    """
    Average codebook distance from each unit to its grid neighbors.

    Args:
            weight_dist (np.ndarray): Weight-space distance matrix.
            grid_dist (np.ndarray): Grid-space distance matrix.
            radius (float): Neighborhood radius in grid space.

    Returns:
            tuple[np.ndarray, np.ndarray]: mean distance per unit (NaN for units without
            neighbors) and the number of neighbors per unit
    """
    number_of_units = weight_dist.shape[0]
    mean = np.zeros(number_of_units)
    count = np.zeros(number_of_units, dtype=np.int64)

    for row in prange(number_of_units):
        rows, dists = rows_in_radius(row, radius, grid_dist)
        total = 0.0
        k = 0
        for i in range(rows.shape[0]):
            # skip the unit itself
            if dists[i] > 0.0:
                total += weight_dist[row, rows[i]]
                k += 1
        count[row] = k
        if k > 0:
            mean[row] = total / k
        else:
            mean[row] = np.nan

    return mean, count


def unit_intensity(dissimilarity: float, max_distance: float) -> int:
    """
    Map a unit's dissimilarity to a grey level; the largest codebook
    distance is black and zero dissimilarity is white.

    Args:
            dissimilarity (float): Average codebook distance to the neighbors.
            max_distance (float): Largest pairwise codebook distance.

    Returns:
            int: grey level in [0, 255]
    """
    if not np.isfinite(max_distance) or max_distance <= 0.0:
        raise DegenerateInputError(
            "all codebook vectors are identical, the U-matrix has no contrast"
        )
    value = round(float((1.0 - dissimilarity / max_distance) * 255.0))
    return min(max(value, 0), 255)


def unit_polygon(coord, topology, scale: float, offset: float) -> list:
    """
    Outline of a unit on the canvas, as a closed list of 5 points.

    Rectangular units are squares of side scale. Hexagonal units keep the
    width but are squashed to the row spacing of the hexagonal grid; they are
    drawn as boxes, not as true hexagons.

    Args:
            coord (np.ndarray): (x, y) grid position of the unit.
            topology (str | Topology): The grid topology.
            scale (float): Canvas units per grid unit.
            offset (float): Canvas margin.

    Returns:
            list[tuple[float, float]]: the 5 corner points, first one repeated last
    """
    topology = Topology.from_name(topology)
    x = scale * float(coord[0]) + offset
    y = scale * float(coord[1]) + offset
    x_offset = 0.5 * scale
    y_offset = 0.5 * scale
    if topology == Topology.HEXAGON:
        y_offset = np.sqrt(0.75) / 2.0 * scale

    return [
        (x + x_offset, y + y_offset),
        (x + x_offset, y - y_offset),
        (x - x_offset, y - y_offset),
        (x - x_offset, y + y_offset),
        (x + x_offset, y + y_offset),
    ]


def canvas_size(dims, scale: float, offset: float):
    """Width and height of the canvas holding a rows x cols map."""
    rows, cols = check_dims(dims)
    return cols * scale + 2 * offset, rows * scale + 2 * offset


class UMatrix:
    def __init__(self, codebook: np.ndarray, dims, topology="rectangle", config=None):
        """Prepare the U-matrix of a trained codebook.

        Args:
                codebook (np.ndarray): N x f array, row i holds the weights of unit i.
                dims (tuple[int, int]): (rows, cols) of the map, rows * cols must equal N.
                topology (str | Topology): "rectangle" or "hexagon". Default is "rectangle".
                config (UMatrixConfig, optional): Layout parameters. Defaults to UMatrixConfig().

        """
        self.topology = Topology.from_name(topology)
        self.config = config if config is not None else UMatrixConfig()
        self.rows, self.cols = check_dims(dims)

        codebook = np.array(codebook, dtype=np.float64)
        if codebook.ndim != 2:
            raise ValueError(
                f"codebook must be a 2D array, got {codebook.ndim} dimensions"
            )
        if codebook.shape[0] != self.rows * self.cols:
            raise ValueError(
                f"codebook has {codebook.shape[0]} units, "
                f"a {self.rows}x{self.cols} map needs {self.rows * self.cols}"
            )
        codebook.setflags(write=False)
        self.codebook = codebook

    def compute_distances(self):
        """
        Compute the codebook distances and the grid distances between all units.

        Returns:
                tuple[np.ndarray, np.ndarray, np.ndarray]: weight-space distance
                matrix, grid coordinates, grid-space distance matrix
        """
        weight_dist = distance_matrix(Metric.EUCLIDEAN, self.codebook)
        coords = grid_coordinates(self.topology, (self.rows, self.cols))
        grid_dist = distance_matrix(Metric.EUCLIDEAN, coords)

        return weight_dist, coords, grid_dist

    def compute_heat(self, weight_dist: np.ndarray, grid_dist: np.ndarray) -> np.ndarray:
        """
        Average codebook distance of every unit to its grid neighbors, with
        the isolated unit policy applied.

        Args:
                weight_dist (np.ndarray): Weight-space distance matrix.
                grid_dist (np.ndarray): Grid-space distance matrix.

        Returns:
                np.ndarray: 1d array with one value per unit
        """
        heat, count = neighbor_dissimilarity(
            weight_dist, grid_dist, float(self.config.radius)
        )

        isolated = np.flatnonzero(count == 0)
        if len(isolated) > 0:
            if self.config.isolated_policy == IsolatedPolicy.RAISE:
                raise DegenerateInputError(
                    f"units {isolated.tolist()} have no grid neighbor "
                    f"within radius {self.config.radius}"
                )
            heat[isolated] = np.max(weight_dist)

        return heat

    def compute_umat(self) -> np.ndarray:
        """
        Compute the unified distance matrix.

        Returns:
                np.ndarray: rows x cols array with the U-matrix value of each unit.
        """
        weight_dist, _, grid_dist = self.compute_distances()
        heat = self.compute_heat(weight_dist, grid_dist)

        return np.reshape(heat, (self.rows, self.cols))

    def polygons(self) -> list:
        """
        Outline and grey level of every unit, in unit order.

        Returns:
                list[tuple[list, int]]: (points, intensity) per unit
        """
        weight_dist, coords, grid_dist = self.compute_distances()
        heat = self.compute_heat(weight_dist, grid_dist)

        # the largest codebook distance is drawn black
        max_distance = np.max(weight_dist)
        scale = self.config.scale
        offset = self.config.offset

        return [
            (
                unit_polygon(coords[row], self.topology, scale, offset),
                unit_intensity(heat[row], max_distance),
            )
            for row in range(len(heat))
        ]

    def to_svg(self, title: str) -> str:
        """Serialize the U-matrix with the given title heading."""
        width, height = canvas_size(
            (self.rows, self.cols), self.config.scale, self.config.offset
        )
        return build_document(title, width, height, self.polygons())


def render_umatrix_svg(
    codebook: np.ndarray,
    dims,
    topology,
    title: str,
    sink,
    config: UMatrixConfig = None,
    verbose: bool = False,
):
    """
    Render the U-matrix of a codebook as an SVG document and write it to a sink.

    Nothing is written unless the whole document could be built.

    Args:
            codebook (np.ndarray): N x f array, row i holds the weights of unit i.
            dims (tuple[int, int]): (rows, cols) of the map.
            topology (str | Topology): "rectangle" or "hexagon".
            title (str): Title heading of the document.
            sink (io.TextIOBase | str | os.PathLike): Output stream or file path.
            config (UMatrixConfig, optional): Layout parameters. Defaults to UMatrixConfig().
            verbose (bool, optional): Print progress to stderr. Defaults to False.

    Raises:
            UnsupportedTopologyError: If the topology is unknown.
            DegenerateInputError: If the codebook has no contrast, or a unit has no
                neighbors and the policy is "raise".
            WriteFailureError: If the sink rejects the document.
    """
    umat = UMatrix(codebook, dims, topology, config)
    if verbose:
        print(
            f"Rendering U-matrix of a {umat.rows}x{umat.cols} {umat.topology.value} map",
            file=sys.stderr,
            flush=True,
        )

    document = umat.to_svg(title)
    write_document(document, sink)

    if verbose:
        print("U-matrix written", file=sys.stderr, flush=True)
