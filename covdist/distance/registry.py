"""
Distance metric registry and factory.

Provides a unified interface for looking up a distance function together
with its derivatives by name, so a metric is chosen once per problem
instead of once per call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.exceptions import UnknownFunctionError
from .metrics import (
    dist_euclidean,
    sqdist_euclidean,
    dist_euclidean_deriv_wrt_xi,
    dist_euclidean_deriv_wrt_theta,
    pair_dist_euclidean,
    dist_3d_km,
    distsq_3d_km,
    dist3d_deriv_wrt_xi,
    dist3d_deriv_wrt_theta,
    pair_dist_3d_km,
    dist_6d_km,
    distsq_6d_km,
    dist6d_deriv_wrt_xi,
    dist6d_deriv_wrt_theta,
    pair_dist_6d_km,
    dist_geo_km,
    dist_geo_deriv_wrt_xi,
    dist_geo_deriv_wrt_theta,
)


# Type aliases
DistanceFunction = Callable[..., float]
DerivativeFunction = Callable[..., float]


class DistanceMetric(str, Enum):
    """Enumeration of built-in distance metrics."""

    EUCLIDEAN = "euclidean"
    GREAT_CIRCLE = "km"
    GREAT_CIRCLE_DEPTH = "3d_km"
    TWO_BODY = "6d_km"

    def __str__(self) -> str:
        return self.value


@dataclass
class MetricInfo:
    """
    Information about a distance metric.

    ``n_scales`` is None when the metric takes one scale per coordinate
    (the Euclidean family); ``xi_axes`` likewise is None when every
    coordinate up to the dimensionality is differentiable.
    """

    name: str
    function: DistanceFunction
    sqdist_function: Optional[DistanceFunction]
    deriv_wrt_xi: DerivativeFunction
    deriv_wrt_theta: DerivativeFunction
    pair_function: Optional[DistanceFunction]
    n_scales: Optional[int]
    xi_axes: Optional[Tuple[int, ...]]
    description: str
    point_length: Optional[int] = None

    def theta_axes(self, dimensionality: Optional[int] = None) -> Tuple[int, ...]:
        """Scale indices this metric can be differentiated against."""
        n = self.n_scales if self.n_scales is not None else dimensionality
        return tuple(range(n or 0))

    def coordinate_axes(self, dimensionality: Optional[int] = None) -> Tuple[int, ...]:
        """Input indices this metric can be differentiated against."""
        if self.xi_axes is not None:
            return self.xi_axes
        return tuple(range(dimensionality or 0))

    def __repr__(self) -> str:
        return f"MetricInfo(name='{self.name}', n_scales={self.n_scales})"


# =============================================================================
# METRIC REGISTRY
# =============================================================================

class MetricRegistry:
    """
    Registry for distance metrics.

    Allows looking up metrics by name and registering custom metrics.
    """

    def __init__(self):
        self._metrics: Dict[str, MetricInfo] = {}
        self._aliases: Dict[str, str] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        """Register built-in distance metrics."""

        self.register(
            MetricInfo(
                name="euclidean",
                function=dist_euclidean,
                sqdist_function=sqdist_euclidean,
                deriv_wrt_xi=dist_euclidean_deriv_wrt_xi,
                deriv_wrt_theta=dist_euclidean_deriv_wrt_theta,
                pair_function=pair_dist_euclidean,
                n_scales=None,
                xi_axes=None,
                description="Scaled planar Euclidean distance",
            ),
            aliases=["l2", "euclidean_distance"]
        )

        self.register(
            MetricInfo(
                name="km",
                function=dist_geo_km,
                sqdist_function=None,
                deriv_wrt_xi=dist_geo_deriv_wrt_xi,
                deriv_wrt_theta=dist_geo_deriv_wrt_theta,
                pair_function=None,
                n_scales=1,
                xi_axes=(0, 1),
                description="Scaled great-circle distance on (lon, lat)",
                point_length=2,
            ),
            aliases=["great_circle", "haversine", "ll"]
        )

        self.register(
            MetricInfo(
                name="3d_km",
                function=dist_3d_km,
                sqdist_function=distsq_3d_km,
                deriv_wrt_xi=dist3d_deriv_wrt_xi,
                deriv_wrt_theta=dist3d_deriv_wrt_theta,
                pair_function=pair_dist_3d_km,
                n_scales=2,
                xi_axes=(0, 1, 2),
                description="Great-circle distance and depth in quadrature",
                point_length=3,
            ),
            aliases=["lld", "great_circle_depth"]
        )

        self.register(
            MetricInfo(
                name="6d_km",
                function=dist_6d_km,
                sqdist_function=distsq_6d_km,
                deriv_wrt_xi=dist6d_deriv_wrt_xi,
                deriv_wrt_theta=dist6d_deriv_wrt_theta,
                pair_function=pair_dist_6d_km,
                n_scales=4,
                xi_axes=(0, 1, 2, 3, 4, 5),
                description="Two (lon, lat, depth) sub-points in quadrature",
                point_length=6,
            ),
            aliases=["lldlld", "two_body"]
        )

    def register(
        self,
        info: MetricInfo,
        aliases: Optional[List[str]] = None
    ) -> None:
        """
        Register a distance metric.

        Args:
            info: MetricInfo object
            aliases: Optional list of alternative names
        """
        self._metrics[info.name] = info

        if aliases:
            for alias in aliases:
                self._aliases[alias] = info.name

    def get(self, name: str) -> MetricInfo:
        """
        Get metric info by name.

        Args:
            name: Metric name or alias

        Returns:
            MetricInfo object

        Raises:
            UnknownFunctionError: If metric not found
        """
        name = str(name)
        canonical = self._aliases.get(name, name)

        if canonical not in self._metrics:
            available = list(self._metrics.keys())
            raise UnknownFunctionError(
                f"Unknown metric: '{name}'. Available: {available}"
            )

        return self._metrics[canonical]

    def get_function(self, name: str) -> DistanceFunction:
        """Get the distance function for a metric."""
        return self.get(name).function

    def list_metrics(self) -> List[str]:
        """List all registered metric names."""
        return list(self._metrics.keys())

    def list_all(self) -> Dict[str, MetricInfo]:
        """Get all registered metrics with their info."""
        return self._metrics.copy()

    def __contains__(self, name: Any) -> bool:
        name = str(name)
        canonical = self._aliases.get(name, name)
        return canonical in self._metrics

    def __getitem__(self, name: str) -> MetricInfo:
        return self.get(name)


# =============================================================================
# GLOBAL REGISTRY AND CONVENIENCE FUNCTIONS
# =============================================================================

_registry = MetricRegistry()


def get_metric(name: str) -> MetricInfo:
    """
    Get metric info by name.

    Example:
        >>> info = get_metric("lld")
        >>> info.name
        '3d_km'
    """
    return _registry.get(name)


def get_metric_fn(name: str) -> DistanceFunction:
    """
    Get distance function by metric name.

    Example:
        >>> dist_fn = get_metric_fn("euclidean")
        >>> d = dist_fn(a, b, None, scales, dims)
    """
    return _registry.get_function(name)


def register_metric(
    name: str,
    function: DistanceFunction,
    deriv_wrt_xi: DerivativeFunction,
    deriv_wrt_theta: DerivativeFunction,
    n_scales: Optional[int] = None,
    description: str = "",
    sqdist_function: Optional[DistanceFunction] = None,
    pair_function: Optional[DistanceFunction] = None,
    xi_axes: Optional[Tuple[int, ...]] = None,
    aliases: Optional[List[str]] = None,
) -> None:
    """
    Register a custom distance metric.

    The functions must follow the library calling convention:
    ``function(p1, p2, bound, scales, dims)`` and
    ``deriv(p1, p2, i, d, bound, scales, dims)``.
    """
    info = MetricInfo(
        name=name,
        function=function,
        sqdist_function=sqdist_function,
        deriv_wrt_xi=deriv_wrt_xi,
        deriv_wrt_theta=deriv_wrt_theta,
        pair_function=pair_function,
        n_scales=n_scales,
        xi_axes=xi_axes,
        description=description or f"Custom metric: {name}",
    )
    _registry.register(info, aliases)


def list_metrics() -> List[str]:
    """List all available metric names."""
    return _registry.list_metrics()


def metric_exists(name: str) -> bool:
    """Check if a metric is registered (by name or alias)."""
    return name in _registry
