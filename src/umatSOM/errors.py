## Error kinds raised while building a U-matrix document


class UMatrixError(Exception):
    """Base class for every error raised by umatSOM."""


class UnknownMetricError(UMatrixError, ValueError):
    """The requested distance metric is not implemented."""


class UnsupportedTopologyError(UMatrixError, ValueError):
    """The requested grid topology is not implemented."""


class DegenerateInputError(UMatrixError, ValueError):
    """The codebook or grid cannot produce a meaningful U-matrix,
    e.g. all weight vectors are identical or a unit has no grid neighbors."""


class WriteFailureError(UMatrixError, IOError):
    """The output sink rejected the document."""
