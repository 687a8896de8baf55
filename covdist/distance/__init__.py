"""
Distance metrics and their derivatives.

Supported Metrics:
    - euclidean: scaled planar distance over the first d coordinates
    - km: scaled great-circle distance on (lon, lat)
    - 3d_km: great-circle distance and depth in quadrature
    - 6d_km: two (lon, lat, depth) sub-points in quadrature

Example:
    >>> from covdist.distance import dist_3d_km, get_metric
    >>>
    >>> a = [10.0, 45.0, 5.0]
    >>> b = [10.5, 45.0, 8.0]
    >>>
    >>> # Direct function call
    >>> d = dist_3d_km(a, b, None, [50.0, 10.0])
    >>>
    >>> # Using registry
    >>> info = get_metric("lld")
    >>> dd = info.deriv_wrt_theta(a, b, 0, d, None, [50.0, 10.0], None)
"""

from .geo import (
    AVG_EARTH_RADIUS_KM,
    radians,
    degrees,
    dist_km,
    dist_km_deriv_wrt_xi,
    dist_km_deriv_wrt_xi_empirical,
)

from .metrics import (
    # Euclidean
    sqdist_euclidean,
    dist_euclidean,
    dist_euclidean_deriv_wrt_xi,
    dist_euclidean_deriv_wrt_theta,
    pair_dist_euclidean,
    # Great-circle only
    dist_geo_km,
    dist_geo_deriv_wrt_xi,
    dist_geo_deriv_wrt_theta,
    # 3D
    distsq_3d_km,
    dist_3d_km,
    dist3d_deriv_wrt_xi,
    dist3d_deriv_wrt_theta,
    pair_dist_3d_km,
    # 6D
    distsq_6d_km,
    dist_6d_km,
    dist6d_deriv_wrt_xi,
    dist6d_deriv_wrt_theta,
    pair_dist_6d_km,
)

from .registry import (
    DistanceMetric,
    MetricInfo,
    get_metric,
    get_metric_fn,
    register_metric,
    list_metrics,
    metric_exists,
)

from .batch import (
    BatchKernelCalculator,
    pairwise_distances,
    covariance_matrix,
)

__all__ = [
    # Geodesic helpers
    "AVG_EARTH_RADIUS_KM",
    "radians",
    "degrees",
    "dist_km",
    "dist_km_deriv_wrt_xi",
    "dist_km_deriv_wrt_xi_empirical",
    # Euclidean
    "sqdist_euclidean",
    "dist_euclidean",
    "dist_euclidean_deriv_wrt_xi",
    "dist_euclidean_deriv_wrt_theta",
    "pair_dist_euclidean",
    # Great-circle only
    "dist_geo_km",
    "dist_geo_deriv_wrt_xi",
    "dist_geo_deriv_wrt_theta",
    # 3D
    "distsq_3d_km",
    "dist_3d_km",
    "dist3d_deriv_wrt_xi",
    "dist3d_deriv_wrt_theta",
    "pair_dist_3d_km",
    # 6D
    "distsq_6d_km",
    "dist_6d_km",
    "dist6d_deriv_wrt_xi",
    "dist6d_deriv_wrt_theta",
    "pair_dist_6d_km",
    # Registry
    "DistanceMetric",
    "MetricInfo",
    "get_metric",
    "get_metric_fn",
    "register_metric",
    "list_metrics",
    "metric_exists",
    # Batch
    "BatchKernelCalculator",
    "pairwise_distances",
    "covariance_matrix",
]
