"""
Great-circle primitives shared by every geodesic metric.

Points are (longitude, latitude[, depth]) with angles in degrees.
Distances are in kilometres on a sphere of radius ``AVG_EARTH_RADIUS_KM``.
"""

from __future__ import annotations

import numpy as np

from ..core.exceptions import UnsupportedAxisError
from ..core.point import PointLike, as_coords
from ..utils.logging import get_logger


logger = get_logger(__name__)

AVG_EARTH_RADIUS_KM = 6371.0
DEG2RAD = np.pi / 180.0

# Step (degrees) of the finite-difference fallback
FD_EPS = 1e-8

# Below this the analytic derivative's denominator is treated as zero
DENOM_EPS = 1e-12

_GEO_AXES = (0, 1)


def radians(x):
    """Convert degrees to radians."""
    return np.radians(x)


def degrees(x):
    """Convert radians to degrees."""
    return np.degrees(x)


def _haversine_term(rlon1, rlat1, rlon2, rlat2) -> float:
    t = (np.sin((rlat1 - rlat2) / 2.0) ** 2
         + np.cos(rlat1) * np.cos(rlat2) * np.sin((rlon1 - rlon2) / 2.0) ** 2)
    # round-off can push t just outside [0, 1] near antipodes
    return min(max(float(t), 0.0), 1.0)


def dist_km(p1: PointLike, p2: PointLike) -> float:
    """
    Great-circle distance between two (lon, lat) points.

    Uses the haversine formula, which is well conditioned for small
    separations.

    Args:
        p1: First point, (lon, lat, ...) in degrees
        p2: Second point, (lon, lat, ...) in degrees

    Returns:
        Distance in kilometres (>= 0)

    Example:
        >>> round(dist_km((0.0, 0.0), (0.0, 1.0)), 2)
        111.19
    """
    p1 = as_coords(p1)
    p2 = as_coords(p2)
    t = _haversine_term(radians(p1[0]), radians(p1[1]), radians(p2[0]), radians(p2[1]))
    return float(2.0 * np.arcsin(np.sqrt(t)) * AVG_EARTH_RADIUS_KM)


def dist_km_deriv_wrt_xi_empirical(
    p1: PointLike,
    p2: PointLike,
    i: int,
    d: float | None = None,
    eps: float = FD_EPS,
) -> float:
    """
    Central finite-difference derivative of ``dist_km`` w.r.t. ``p1[i]``.

    This is the fallback used where the closed form is singular
    (coincident or antipodal points).

    Args:
        p1: First point (the one being perturbed)
        p2: Second point
        i: 0 for longitude, 1 for latitude
        d: Precomputed distance, accepted for signature compatibility
        eps: Perturbation in degrees

    Returns:
        Derivative in km per degree
    """
    if i not in _GEO_AXES:
        raise UnsupportedAxisError("dist_km_deriv_wrt_xi_empirical", i, _GEO_AXES)

    p1 = as_coords(p1)
    lo = p1[:2].copy()
    hi = p1[:2].copy()
    lo[i] -= eps
    hi[i] += eps
    return (dist_km(hi, p2) - dist_km(lo, p2)) / (2.0 * eps)


def dist_km_deriv_wrt_xi(p1: PointLike, p2: PointLike, i: int, d: float | None = None) -> float:
    """
    Analytic derivative of ``dist_km(p1, p2)`` w.r.t. ``p1[i]``.

    Obtained by differentiating ``2R asin(sqrt(t))`` where ``t`` is the
    haversine term. The result is in km per degree.

    Args:
        p1: First point, (lon, lat, ...) in degrees
        p2: Second point
        i: 0 (longitude) or 1 (latitude)
        d: Precomputed ``dist_km(p1, p2)``; only forwarded to the fallback

    Returns:
        Partial derivative, always finite

    Raises:
        UnsupportedAxisError: If ``i`` is not 0 or 1
    """
    p1 = as_coords(p1)
    p2 = as_coords(p2)
    rlon1 = radians(p1[0])
    rlat1 = radians(p1[1])
    rlon2 = radians(p2[0])
    rlat2 = radians(p2[1])

    if i == 0:
        num = np.cos(rlat1) * np.cos(rlat2) * np.sin(rlon1 - rlon2)
    elif i == 1:
        num = (np.sin(rlat1 - rlat2)
               - 2.0 * np.sin(rlat1) * np.cos(rlat2) * np.sin((rlon1 - rlon2) / 2.0) ** 2)
    else:
        raise UnsupportedAxisError("dist_km_deriv_wrt_xi", i, _GEO_AXES)

    t = _haversine_term(rlon1, rlat1, rlon2, rlat2)
    denom = 2.0 * np.sqrt((1.0 - t) * t)

    if denom < DENOM_EPS:
        logger.debug(
            "dist_km_deriv_wrt_xi: singular denominator at %s, %s (i=%d); "
            "using finite differences", p1[:2], p2[:2], i,
        )
        return dist_km_deriv_wrt_xi_empirical(p1, p2, i, d)

    return float(num / denom * DEG2RAD * AVG_EARTH_RADIUS_KM)
