"""
Covariance function binding one distance metric to one weight function.

The metric and weight are looked up and the parameters validated once, at
construction; the evaluation methods then call straight through to the
selected functions.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..distance.registry import MetricInfo, get_metric
from ..kernels.registry import WeightInfo, get_weight
from ..utils.logging import get_logger, set_level
from ..utils.validation import (
    validate_axis,
    validate_dimensionality,
    validate_extra,
    validate_scales,
)
from .exceptions import InvalidArgumentError
from .point import CallCounter, DimsContext, PairPoint, PointLike


logger = get_logger(__name__)


class CovarianceFunction:
    """
    A stationary covariance k(p1, p2) = w(dist(p1, p2)).

    Example:
        >>> cov = CovarianceFunction("lld", "matern32", scales=[50.0, 10.0],
        ...                          weight_params=[2.0])
        >>> k = cov.weight([10.0, 45.0, 5.0], [10.5, 45.0, 8.0])
        >>> dk = cov.deriv_wrt_scale([10.0, 45.0, 5.0], [10.5, 45.0, 8.0], 0)
    """

    def __init__(
        self,
        metric: str = "euclidean",
        weight: str = "se",
        scales: Sequence[float] = (1.0,),
        weight_params: Sequence[float] = (1.0,),
        dimensionality: Optional[int] = None,
        counter: Optional[CallCounter] = None,
        count_calls: bool = False,
    ):
        """
        Args:
            metric: Registered metric name or alias
            weight: Registered weight function name or alias
            scales: Lengthscales, one per metric axis
            weight_params: ``[variance]`` or ``[variance, order]``
            dimensionality: Coordinates summed by the Euclidean metric;
                defaults to the metric's fixed point length (2, 3 or 6)
                and otherwise to the number of scales
            counter: Caller-owned call counter
            count_calls: Create a fresh counter when ``counter`` is None

        Raises:
            UnknownFunctionError: If the metric or weight is not registered
            ValidationError: If the parameters are invalid
        """
        self.metric_info: MetricInfo = get_metric(metric)
        self.weight_info: WeightInfo = get_weight(weight)

        if dimensionality is None:
            dimensionality = self.metric_info.point_length or len(np.atleast_1d(scales))
        dimensionality = validate_dimensionality(dimensionality)

        n_scales = self.metric_info.n_scales or dimensionality
        self.scales = validate_scales(
            scales, n_scales, exact=self.metric_info.n_scales is not None
        )
        self.weight_params = validate_extra(weight_params, self.weight_info.n_extra)

        if counter is None and count_calls:
            counter = CallCounter()
        self.dims = DimsContext(dimensionality, counter)

        self._dist = self.metric_info.function
        self._w = self.weight_info.function

        logger.info(
            "Covariance bound: metric=%s weight=%s scales=%s params=%s",
            self.metric_info.name, self.weight_info.name,
            self.scales.tolist(), self.weight_params.tolist(),
        )

    @classmethod
    def from_settings(cls, settings, counter: Optional[CallCounter] = None) -> "CovarianceFunction":
        """Build from a ``config.Settings`` object."""
        set_level(settings.log_level)
        return cls(
            metric=settings.metric,
            weight=settings.weight,
            scales=settings.scales,
            weight_params=settings.weight_params,
            dimensionality=settings.dimensionality,
            counter=counter,
            count_calls=settings.count_calls,
        )

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    @property
    def metric(self) -> str:
        return self.metric_info.name

    @property
    def weight_name(self) -> str:
        return self.weight_info.name

    @property
    def counter(self) -> Optional[CallCounter]:
        return self.dims.counter

    @property
    def calls(self) -> int:
        return self.dims.calls

    def distance(self, p1: PointLike, p2: PointLike) -> float:
        """Scaled distance between two points."""
        return self._dist(p1, p2, None, self.scales, self.dims)

    def pair_distance(self, p1: PairPoint, p2: PairPoint) -> float:
        """Scaled distance between two pair-points."""
        pair_fn = self.metric_info.pair_function
        if pair_fn is None:
            raise InvalidArgumentError(
                f"Metric '{self.metric}' has no pair-point variant"
            )
        return pair_fn(p1, p2, None, self.scales, self.dims)

    def weight_at(self, d: float) -> float:
        """Weight for a precomputed distance."""
        return self._w(d, self.weight_params)

    def lower(self, d: float) -> float:
        """Lower bound on the weight at distance ``d``."""
        return self.weight_info.lower(d, self.weight_params)

    def upper(self, d: float) -> float:
        """Upper bound on the weight at distance ``d``."""
        return self.weight_info.upper(d, self.weight_params)

    def weight(self, p1: PointLike, p2: PointLike) -> float:
        """Covariance between two points."""
        return self._w(self.distance(p1, p2), self.weight_params)

    __call__ = weight

    # -------------------------------------------------------------------------
    # Derivatives
    # -------------------------------------------------------------------------

    def _deriv_wrt_r(self):
        deriv = self.weight_info.deriv_wrt_r
        if deriv is None:
            raise InvalidArgumentError(
                f"Weight function '{self.weight_name}' has no analytic derivative"
            )
        return deriv

    def dist_deriv_wrt_scale(self, p1: PointLike, p2: PointLike, i: int, d: Optional[float] = None) -> float:
        """dr/dscale_i, where r is the scaled distance."""
        validate_axis(i, self.metric_info.theta_axes(self.dims.dimensionality),
                      self.metric_info.name)
        if d is None:
            d = self.distance(p1, p2)
        return self.metric_info.deriv_wrt_theta(p1, p2, i, d, None, self.scales, self.dims)

    def dist_deriv_wrt_xi(self, p1: PointLike, p2: PointLike, i: int, d: Optional[float] = None) -> float:
        """dr/dp1[i]."""
        validate_axis(i, self.metric_info.coordinate_axes(self.dims.dimensionality),
                      self.metric_info.name)
        if d is None:
            d = self.distance(p1, p2)
        return self.metric_info.deriv_wrt_xi(p1, p2, i, d, None, self.scales, self.dims)

    def deriv_wrt_scale(self, p1: PointLike, p2: PointLike, i: int) -> float:
        """dk/dscale_i via the chain rule dw/dr * dr/dscale_i."""
        deriv = self._deriv_wrt_r()
        d = self.distance(p1, p2)
        return deriv(d, self.dist_deriv_wrt_scale(p1, p2, i, d), self.weight_params)

    def deriv_wrt_xi(self, p1: PointLike, p2: PointLike, i: int) -> float:
        """dk/dp1[i] via the chain rule dw/dr * dr/dp1[i]."""
        deriv = self._deriv_wrt_r()
        d = self.distance(p1, p2)
        return deriv(d, self.dist_deriv_wrt_xi(p1, p2, i, d), self.weight_params)

    def deriv_wrt_variance(self, p1: PointLike, p2: PointLike) -> float:
        """dk/dvariance; every weight function is linear in the variance."""
        unit = self.weight_params.copy()
        unit[0] = 1.0
        return self._w(self.distance(p1, p2), unit)

    def gradient_wrt_scales(self, p1: PointLike, p2: PointLike) -> np.ndarray:
        """dk/dscale for every scale, as an array."""
        axes = self.metric_info.theta_axes(self.dims.dimensionality)
        return np.array([self.deriv_wrt_scale(p1, p2, i) for i in axes])

    def __repr__(self) -> str:
        return (
            f"CovarianceFunction(metric='{self.metric}', weight='{self.weight_name}', "
            f"scales={self.scales.tolist()}, weight_params={self.weight_params.tolist()})"
        )
