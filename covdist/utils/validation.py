"""
Input validation utilities.

Validation runs once, when a metric or kernel is bound to a problem
(see ``CovarianceFunction``). The per-pair numeric functions trust their
inputs and never call into this module.
"""

from typing import Iterable, Optional, Sequence

import numpy as np

from ..core.exceptions import UnsupportedAxisError, ValidationError


def validate_scales(
    scales: Sequence[float],
    n_scales: Optional[int] = None,
    exact: bool = False,
) -> np.ndarray:
    """
    Validate a lengthscale vector.

    Args:
        scales: Per-axis lengthscales
        n_scales: Expected number of scales (None to skip the length check)
        exact: Require exactly ``n_scales`` scales rather than at least

    Returns:
        Scales as a float64 array

    Raises:
        ValidationError: If scales are missing, non-finite or non-positive
    """
    if scales is None:
        raise ValidationError("scales cannot be None")

    arr = np.atleast_1d(np.asarray(scales, dtype=np.float64))

    if arr.ndim != 1:
        raise ValidationError(f"scales must be 1-dimensional, got {arr.ndim} dimensions")

    if n_scales is not None:
        if exact and len(arr) != n_scales:
            raise ValidationError(
                f"Expected exactly {n_scales} scales, got {len(arr)}"
            )
        if len(arr) < n_scales:
            raise ValidationError(
                f"Expected at least {n_scales} scales, got {len(arr)}"
            )

    if not np.isfinite(arr).all():
        raise ValidationError("scales contain NaN or Inf values")

    if (arr <= 0).any():
        raise ValidationError(f"scales must be positive, got {arr.tolist()}")

    return arr


def validate_extra(extra: Sequence[float], n_extra: int = 1) -> np.ndarray:
    """
    Validate a weight function parameter vector.

    ``extra[0]`` is the variance (>= 0); when present, ``extra[1]`` is the
    smoothness order and must be a non-negative number.
    """
    if extra is None:
        raise ValidationError("weight parameters cannot be None")

    arr = np.atleast_1d(np.asarray(extra, dtype=np.float64))

    if len(arr) < n_extra:
        raise ValidationError(
            f"Expected at least {n_extra} weight parameters, got {len(arr)}"
        )

    if not np.isfinite(arr).all():
        raise ValidationError("weight parameters contain NaN or Inf values")

    if arr[0] < 0:
        raise ValidationError(f"variance must be non-negative, got {arr[0]}")

    if n_extra > 1 and arr[1] < 0:
        raise ValidationError(f"smoothness order must be non-negative, got {arr[1]}")

    return arr


def validate_dimensionality(dimensionality: int, point_length: Optional[int] = None) -> int:
    """Validate the number of coordinates a Euclidean metric sums over."""
    try:
        d = int(dimensionality)
    except (TypeError, ValueError):
        raise ValidationError(
            f"dimensionality must be an integer, got {dimensionality!r}"
        ) from None

    if d <= 0:
        raise ValidationError(f"dimensionality must be positive, got {d}")

    if point_length is not None and d > point_length:
        raise ValidationError(
            f"dimensionality {d} exceeds point length {point_length}"
        )

    return d


def validate_axis(i: int, allowed: Iterable[int], function: str) -> int:
    """
    Check that a derivative axis is one the function defines.

    Raises:
        UnsupportedAxisError: If ``i`` is not in ``allowed``
    """
    allowed = tuple(allowed)
    if i not in allowed:
        raise UnsupportedAxisError(function, i, allowed)
    return int(i)
