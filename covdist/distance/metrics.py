"""
Distance functions and their partial derivatives.

All distance functions share the call signature

    dist(p1, p2, bound, scales, dims) -> float

and all derivative functions

    deriv(p1, p2, i, d, bound, scales, dims) -> float

where ``d`` is the distance previously returned for the same inputs.
``bound`` keeps call sites uniform with the bounding variants used by
the cover tree and is intentionally unused here. ``dims`` is a
``DimsContext``; only the Euclidean metrics read its dimensionality.

Degenerate inputs (zero distance, singular derivative denominators) never
raise and never produce NaN: they fall back to 0 or to a
finite-difference estimate. Unsupported derivative axes raise
``UnsupportedAxisError``.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..core.exceptions import UnsupportedAxisError
from ..core.point import DimsContext, PairPoint, PointLike, as_coords, is_instrumented
from ..utils.logging import get_logger
from .geo import dist_km, dist_km_deriv_wrt_xi


logger = get_logger(__name__)

Scales = Sequence[float]

# Chain-rule results below this are numerically unstable and clamped to 0
INSTABILITY_THRESHOLD = -99999.0


def _dimensionality(dims: Optional[DimsContext], p: np.ndarray) -> int:
    if dims is None:
        return len(p)
    return dims.dimensionality


# =============================================================================
# PLANAR EUCLIDEAN
# =============================================================================

def sqdist_euclidean(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext],
) -> float:
    """
    Scaled squared Euclidean distance.

    Formula: sum_i ((p1[i] - p2[i]) / scales[i])^2 over the first
    ``dims.dimensionality`` coordinates.

    Example:
        >>> sqdist_euclidean([0.0, 0.0], [3.0, 4.0], None, [1.0, 1.0], DimsContext(2))
        25.0
    """
    p1 = as_coords(p1)
    p2 = as_coords(p2)
    n = _dimensionality(dims, p1)
    diff = (p1[:n] - p2[:n]) / np.asarray(scales[:n], dtype=np.float64)
    return float(np.dot(diff, diff))


def dist_euclidean(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext],
) -> float:
    """
    Scaled Euclidean distance.

    When both inputs are ``Point`` objects the call is recorded on the
    context counter; raw arrays are evaluated without side effects.

    Args:
        p1: First point
        p2: Second point
        bound: Unused
        scales: One lengthscale per coordinate
        dims: Context carrying dimensionality and optional counter

    Returns:
        Distance (>= 0)
    """
    if dims is not None and is_instrumented(p1, p2):
        dims.record_call()
    return float(np.sqrt(sqdist_euclidean(p1, p2, bound, scales, dims)))


def dist_euclidean_deriv_wrt_xi(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext],
) -> float:
    """Derivative of ``dist_euclidean`` w.r.t. ``p1[i]``; 0 at coincident points."""
    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)
    return float((p1[i] - p2[i]) / (scales[i] * scales[i] * d))


def dist_euclidean_deriv_wrt_theta(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext],
) -> float:
    """Derivative of ``dist_euclidean`` w.r.t. the i'th lengthscale; 0 at coincident points."""
    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)
    diff = (p1[i] - p2[i]) / scales[i]
    return float(-diff * diff / (scales[i] * d))


def pair_dist_euclidean(
    p1: PairPoint,
    p2: PairPoint,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext],
) -> float:
    """Euclidean distance between two pair-points: sqrt(sqdist(pt1) + sqdist(pt2))."""
    d1 = sqdist_euclidean(p1.pt1, p2.pt1, bound, scales, dims)
    d2 = sqdist_euclidean(p1.pt2, p2.pt2, bound, scales, dims)
    return float(np.sqrt(d1 + d2))


# =============================================================================
# GREAT-CIRCLE + DEPTH (3D)
# =============================================================================

def distsq_3d_km(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Squared scaled distance over (lon, lat, depth).

    Formula: (dist_km(p1, p2) / scales[0])^2 + ((p2[2] - p1[2]) / scales[1])^2
    """
    p1 = as_coords(p1)
    p2 = as_coords(p2)
    distkm = dist_km(p1, p2) / scales[0]
    dist_d = (p2[2] - p1[2]) / scales[1]
    return float(distkm * distkm + dist_d * dist_d)


def dist_3d_km(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """Scaled great-circle + depth distance."""
    return float(np.sqrt(distsq_3d_km(p1, p2, bound, scales, dims)))


def _geo_chain_rule(p1, p2, i, d, scale, function):
    # d/dxi of sqrt((dkm/s0)^2 + rest) = (dkm/s0) * (d_dkm_di/s0) / d
    dkm = dist_km(p1, p2)
    d_dkm_di = dist_km_deriv_wrt_xi(p1, p2, i, dkm)
    dxi = (dkm * d_dkm_di) / (scale * scale * d)

    if dxi < INSTABILITY_THRESHOLD:
        logger.debug(
            "%s: unstable derivative %g clamped to 0 (i=%d, dkm=%g, d=%g)",
            function, dxi, i, dkm, d,
        )
        return 0.0

    return float(dxi)


def dist3d_deriv_wrt_xi(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Derivative of ``dist_3d_km`` w.r.t. ``p1[i]``.

    Indices 0 and 1 go through the great-circle derivative; index 2
    (depth) is the planar form. Returns 0 when ``d == 0``.

    Raises:
        UnsupportedAxisError: If ``i`` is not 0, 1 or 2
    """
    if i not in (0, 1, 2):
        raise UnsupportedAxisError("dist3d_deriv_wrt_xi", i, (0, 1, 2))

    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)

    if i < 2:
        return _geo_chain_rule(p1, p2, i, d, scales[0], "dist3d_deriv_wrt_xi")

    return float((p1[2] - p2[2]) / (scales[1] * scales[1] * d))


def dist3d_deriv_wrt_theta(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Derivative of ``dist_3d_km`` w.r.t. scale ``i`` (0: great-circle, 1: depth).

    Raises:
        UnsupportedAxisError: If ``i`` is not 0 or 1
    """
    if i not in (0, 1):
        raise UnsupportedAxisError("dist3d_deriv_wrt_theta", i, (0, 1))

    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)

    if i == 0:
        distkm = dist_km(p1, p2) / scales[0]
        return float(-distkm * distkm / (scales[0] * d))

    dist_d = (p2[2] - p1[2]) / scales[1]
    return float(-dist_d * dist_d / (scales[1] * d))


def pair_dist_3d_km(
    p1: PairPoint,
    p2: PairPoint,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """3D distance between two pair-points, all four terms in quadrature."""
    distkm1 = dist_km(p1.pt1, p2.pt1) / scales[0]
    distkm2 = dist_km(p1.pt2, p2.pt2) / scales[0]
    dist_d1 = (p2.pt1[2] - p1.pt1[2]) / scales[1]
    dist_d2 = (p2.pt2[2] - p1.pt2[2]) / scales[1]
    return float(np.sqrt(distkm1 ** 2 + distkm2 ** 2 + dist_d1 ** 2 + dist_d2 ** 2))


# =============================================================================
# TWO-BODY GREAT-CIRCLE + DEPTH (6D)
# =============================================================================

def distsq_6d_km(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Squared scaled distance over two (lon, lat, depth) sub-points.

    Coordinates 0..2 (station) use ``scales[0:2]``, coordinates 3..5
    (event) use ``scales[2:4]``.
    """
    p1 = as_coords(p1)
    p2 = as_coords(p2)
    return (distsq_3d_km(p1[:3], p2[:3], bound, scales[0:2])
            + distsq_3d_km(p1[3:6], p2[3:6], bound, scales[2:4]))


def dist_6d_km(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """Scaled two-body great-circle + depth distance."""
    return float(np.sqrt(distsq_6d_km(p1, p2, bound, scales, dims)))


def dist6d_deriv_wrt_theta(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Derivative of ``dist_6d_km`` w.r.t. scale ``i``.

    0: station great-circle, 1: station depth, 2: event great-circle,
    3: event depth.

    Raises:
        UnsupportedAxisError: If ``i`` is not in 0..3
    """
    if i not in (0, 1, 2, 3):
        raise UnsupportedAxisError("dist6d_deriv_wrt_theta", i, (0, 1, 2, 3))

    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)

    if i == 0:
        sub = dist_km(p1, p2) / scales[0]
    elif i == 1:
        sub = (p2[2] - p1[2]) / scales[1]
    elif i == 2:
        sub = dist_km(p1[3:], p2[3:]) / scales[2]
    else:
        sub = (p2[5] - p1[5]) / scales[3]

    return float(-sub * sub / (scales[i] * d))


def dist6d_deriv_wrt_xi(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    Derivative of ``dist_6d_km`` w.r.t. ``p1[i]`` for i in 0..5.

    Each sub-point is handled like ``dist3d_deriv_wrt_xi`` with its own
    pair of scales.
    """
    if i not in range(6):
        raise UnsupportedAxisError("dist6d_deriv_wrt_xi", i, range(6))

    if d == 0:
        return 0.0

    p1 = as_coords(p1)
    p2 = as_coords(p2)
    offset = 0 if i < 3 else 3
    sub1 = p1[offset:offset + 3]
    sub2 = p2[offset:offset + 3]
    geo_scale, depth_scale = scales[offset // 3 * 2], scales[offset // 3 * 2 + 1]
    j = i - offset

    if j < 2:
        return _geo_chain_rule(sub1, sub2, j, d, geo_scale, "dist6d_deriv_wrt_xi")

    return float((sub1[2] - sub2[2]) / (depth_scale * depth_scale * d))


def pair_dist_6d_km(
    p1: PairPoint,
    p2: PairPoint,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """
    6D distance between two pair-points.

    Sums eight squared terms before a single square root. Station and
    event terms are both taken from each pair's leading (lon, lat, depth)
    coordinates, and both depth terms are scaled by ``scales[1]``.
    """
    geo1 = dist_km(p1.pt1, p2.pt1)
    geo2 = dist_km(p1.pt2, p2.pt2)
    sta_distkm1 = geo1 / scales[0]
    sta_distkm2 = geo2 / scales[0]
    ev_distkm1 = geo1 / scales[2]
    ev_distkm2 = geo2 / scales[2]

    # TODO: confirm whether the event depth terms should use scales[3]
    sta_dist_d1 = (p2.pt1[2] - p1.pt1[2]) / scales[1]
    sta_dist_d2 = (p2.pt2[2] - p1.pt2[2]) / scales[1]
    ev_dist_d1 = (p2.pt1[2] - p1.pt1[2]) / scales[1]
    ev_dist_d2 = (p2.pt2[2] - p1.pt2[2]) / scales[1]

    return float(np.sqrt(
        sta_distkm1 ** 2 + sta_distkm2 ** 2 + sta_dist_d1 ** 2 + sta_dist_d2 ** 2
        + ev_distkm1 ** 2 + ev_distkm2 ** 2 + ev_dist_d1 ** 2 + ev_dist_d2 ** 2
    ))


# =============================================================================
# GREAT-CIRCLE ONLY
# =============================================================================

def dist_geo_km(
    p1: PointLike,
    p2: PointLike,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """Great-circle distance divided by a single lengthscale."""
    return dist_km(p1, p2) / scales[0]


def dist_geo_deriv_wrt_xi(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """Derivative of ``dist_geo_km`` w.r.t. longitude (0) or latitude (1) of ``p1``."""
    return dist_km_deriv_wrt_xi(p1, p2, i, d * scales[0]) / scales[0]


def dist_geo_deriv_wrt_theta(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float,
    bound: Optional[float],
    scales: Scales,
    dims: Optional[DimsContext] = None,
) -> float:
    """Derivative of ``dist_geo_km`` w.r.t. its lengthscale: -d / scale."""
    if i != 0:
        raise UnsupportedAxisError("dist_geo_deriv_wrt_theta", i, (0,))
    return float(-d / scales[0])
