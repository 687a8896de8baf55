"""
covdist - Distance metrics and covariance weight functions for
cover-tree accelerated Gaussian-process inference.

Example:
    >>> from covdist import CovarianceFunction, Point
    >>>
    >>> # Bind a metric and a weight function once per problem
    >>> cov = CovarianceFunction("lld", "compact2", scales=[100.0, 20.0],
    ...                          weight_params=[1.5, 1])
    >>>
    >>> k = cov.weight([10.0, 45.0, 5.0], [10.5, 45.2, 8.0])
    >>> dk = cov.deriv_wrt_scale([10.0, 45.0, 5.0], [10.5, 45.2, 8.0], 0)
"""

from .core import (
    # Points
    Point,
    PairPoint,
    CallCounter,
    DimsContext,
    # Exceptions
    CovDistError,
    InvalidArgumentError,
    UnsupportedAxisError,
    ValidationError,
    UnknownFunctionError,
    ConfigurationError,
)
from .core.covariance import CovarianceFunction

from .distance import (
    dist_km,
    dist_euclidean,
    dist_3d_km,
    dist_6d_km,
    get_metric,
    get_metric_fn,
    list_metrics,
    DistanceMetric,
    pairwise_distances,
    covariance_matrix,
    BatchKernelCalculator,
)

from .kernels import (
    w_se,
    w_e,
    w_matern32,
    w_compact_q0,
    w_compact_q2,
    get_weight,
    get_weight_fn,
    list_weights,
    WeightFunction,
)

__version__ = "0.1.0"

__all__ = [
    # Points
    "Point",
    "PairPoint",
    "CallCounter",
    "DimsContext",
    # Covariance
    "CovarianceFunction",
    # Exceptions
    "CovDistError",
    "InvalidArgumentError",
    "UnsupportedAxisError",
    "ValidationError",
    "UnknownFunctionError",
    "ConfigurationError",
    # Distance functions
    "dist_km",
    "dist_euclidean",
    "dist_3d_km",
    "dist_6d_km",
    "get_metric",
    "get_metric_fn",
    "list_metrics",
    "DistanceMetric",
    "pairwise_distances",
    "covariance_matrix",
    "BatchKernelCalculator",
    # Weight functions
    "w_se",
    "w_e",
    "w_matern32",
    "w_compact_q0",
    "w_compact_q2",
    "get_weight",
    "get_weight_fn",
    "list_weights",
    "WeightFunction",
]
