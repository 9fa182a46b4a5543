from .errors import (
    UMatrixError,
    UnknownMetricError,
    UnsupportedTopologyError,
    DegenerateInputError,
    WriteFailureError,
)
from .grid import Metric, Topology, distance_matrix, point_distance, grid_coordinates
from .umatrix import (
    DEFAULT_RADIUS,
    IsolatedPolicy,
    UMatrixConfig,
    UMatrix,
    render_umatrix_svg,
)
