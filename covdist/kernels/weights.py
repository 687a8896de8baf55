"""
Covariance weight functions.

A weight function maps a (scale-normalised) distance to a covariance
value: ``w(d, extra)``. ``extra[0]`` is the marginal variance and, for
the compactly supported kernels, ``extra[1]`` is the smoothness order
``j`` (truncated to an integer).

Derivatives are taken with respect to a hyperparameter ``theta`` through
the distance: ``deriv(r, dr_dtheta, extra) = dw/dr * dr/dtheta``.

The ``_lower`` and ``_upper`` variants bound the kernel from below and
above and are used by the cover tree to prune subtrees. Compactly
supported kernels return exactly 0 outside their support.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


SQRT3 = np.sqrt(3.0)

Extra = Sequence[float]


def _order(extra: Extra) -> int:
    return int(extra[1])


# =============================================================================
# SQUARED EXPONENTIAL / EXPONENTIAL
# =============================================================================

def w_se(d: float, extra: Extra) -> float:
    """
    Squared-exponential weight: variance * exp(-d^2).

    Example:
        >>> w_se(0.0, [2.0])
        2.0
    """
    return float(extra[0] * np.exp(-d * d))


def deriv_se_wrt_r(r: float, dr_dtheta: float, extra: Extra) -> float:
    return float(extra[0] * np.exp(-r * r) * -2.0 * r * dr_dtheta)


def w_e(d: float, extra: Extra) -> float:
    """Exponential weight: variance * exp(-d)."""
    return float(extra[0] * np.exp(-d))


def deriv_e_wrt_r(r: float, dr_dtheta: float, extra: Extra) -> float:
    return float(-extra[0] * np.exp(-r) * dr_dtheta)


# =============================================================================
# MATERN 3/2
# =============================================================================

def w_matern32(d: float, extra: Extra) -> float:
    """Matérn-3/2 weight: variance * (1 + sqrt(3) d) * exp(-sqrt(3) d)."""
    return float(extra[0] * (1.0 + SQRT3 * d) * np.exp(-SQRT3 * d))


def w_matern32_lower(d: float, extra: Extra) -> float:
    """Lower bound for the Matérn-3/2 weight (the exact kernel)."""
    return float(extra[0] * (1.0 + SQRT3 * d) * np.exp(-SQRT3 * d))


def w_matern32_upper(d: float, extra: Extra) -> float:
    """Upper bound for the Matérn-3/2 weight, adding a 0.75 d^2 term to the prefactor."""
    return float(extra[0] * (1.0 + SQRT3 * d + 0.75 * d * d) * np.exp(-SQRT3 * d))


def deriv_matern32_wrt_r(r: float, dr_dtheta: float, extra: Extra) -> float:
    """d/dr of the Matérn-3/2 weight is -3 r variance exp(-sqrt(3) r)."""
    return float(extra[0] * np.exp(-SQRT3 * r) * -3.0 * r * dr_dtheta)


# =============================================================================
# COMPACT SUPPORT, q = 0
# =============================================================================

def w_compact_q0(r: float, extra: Extra) -> float:
    """
    Piecewise polynomial kernel with compact support, q = 0.

    Formula: variance * (1 - r)^j for r < 1, else 0
    (Rasmussen & Williams, eq. 4.21).
    """
    d = 1.0 - r
    if d <= 0.0:
        return 0.0
    return float(extra[0] * d ** _order(extra))


def w_compact_q0_lower(r: float, extra: Extra) -> float:
    """Lower bound for ``w_compact_q0`` (the exact kernel)."""
    d = 1.0 - r
    if d <= 0.0:
        return 0.0
    return float(extra[0] * d ** _order(extra))


def w_compact_q0_upper(r: float, extra: Extra) -> float:
    """
    Upper bound for ``w_compact_q0`` on 0 <= r < 2.

    Replaces (1 - r) with the majorant 1 - r + r^2/4 = (1 - r/2)^2.
    """
    if r >= 2.0:
        return 0.0
    d = 1.0 - r + 0.25 * r * r
    return float(extra[0] * d ** _order(extra))


def deriv_compact_q0_wrt_r(r: float, dr_dtheta: float, extra: Extra) -> float:
    d = 1.0 - r
    if d <= 0.0:
        return 0.0

    j = _order(extra)
    if j == 0:
        return 0.0
    return float(-extra[0] * j * d ** (j - 1) * dr_dtheta)


# =============================================================================
# COMPACT SUPPORT, q = 2
# =============================================================================

def _q2_poly(r: float, j: int) -> float:
    return ((j * j + 4 * j + 3) * r * r + (3 * j + 6) * r + 3) / 3.0


def w_compact_q2(r: float, extra: Extra) -> float:
    """
    Piecewise polynomial kernel with compact support, q = 2.

    Formula: variance * (1 - r)^(j+2) * ((j^2+4j+3) r^2 + (3j+6) r + 3) / 3
    for r < 1, else 0 (Rasmussen & Williams, eq. 4.21).
    """
    d = 1.0 - r
    if d <= 0.0:
        return 0.0

    j = _order(extra)
    return float(extra[0] * d ** (j + 2) * _q2_poly(r, j))


def deriv_compact_q2_wrt_r(r: float, dr_dtheta: float, extra: Extra) -> float:
    d = 1.0 - r
    if d <= 0.0:
        return 0.0

    j = _order(extra)
    poly = _q2_poly(r, j)
    dpoly_dr = ((2 * j * j + 8 * j + 6.0) * r + 3 * j + 6.0) / 3.0
    dk_dr = extra[0] * (d ** (j + 2) * dpoly_dr - (j + 2) * d ** (j + 1) * poly)

    return float(dk_dr * dr_dtheta)


def w_compact_q2_lower(r: float, extra: Extra) -> float:
    """Lower bound for ``w_compact_q2``, using a polynomial with halved r^2 term."""
    d = 1.0 - r
    if d <= 0.0:
        return 0.0

    j = _order(extra)
    poly1 = (3 * j * j + 12 * j + 9) * r * r / 2.0
    poly2 = (9 * j + 18) * r
    poly = (poly1 + poly2 + 9.0) / 9.0
    return float(extra[0] * d ** (j + 2) * poly)


def w_compact_q2_upper(r: float, extra: Extra) -> float:
    """
    Upper bound for ``w_compact_q2`` on 0 <= r < 2.

    The (1 - r) factor becomes the majorant 1 - r + r^2/4 and the
    polynomial is replaced by a dominating quartic.
    """
    if r >= 2.0:
        return 0.0

    d = 1.0 - r + 0.25 * r * r
    j = _order(extra)

    rsq4 = r * r / 4.0
    jquad = j * j + 4 * j + 3
    jlinear = 3 * j + 6

    poly1 = jquad * rsq4
    poly1sq = poly1 * poly1
    poly2 = jquad * jlinear * rsq4 * r
    poly3 = poly1 * 12.0
    poly4 = jlinear * jlinear * rsq4
    poly5 = jlinear * r * 3.0
    poly = (poly1sq + poly2 + poly3 + poly4 + poly5 + 9.0) / 9.0

    return float(extra[0] * d ** (j + 2) * poly)


# =============================================================================
# VECTORISED EVALUATION
# =============================================================================

def apply_weight(weight_fn, distances, extra: Extra) -> np.ndarray:
    """
    Apply a scalar weight function to every entry of a distance array.

    Args:
        weight_fn: One of the ``w_*`` functions
        distances: Array of any shape
        extra: Weight parameters

    Returns:
        Array of weights with the same shape as ``distances``
    """
    distances = np.asarray(distances, dtype=np.float64)
    values = np.fromiter(
        (weight_fn(float(v), extra) for v in distances.ravel()),
        dtype=np.float64,
        count=distances.size,
    )
    return values.reshape(distances.shape)
