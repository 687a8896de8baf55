"""
Batch distance and covariance matrix computation.

Builds full distance or covariance matrices from the pairwise functions,
processing rows in chunks to bound peak memory.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from ..core.point import DimsContext
from ..kernels.weights import apply_weight
from ..utils.logging import get_logger
from ..utils.validation import validate_dimensionality, validate_scales
from .registry import get_metric


logger = get_logger(__name__)


def _as_matrix(X) -> NDArray:
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X[None, :]
    return X


def pairwise_distances(
    X: NDArray,
    Y: Optional[NDArray] = None,
    metric: str = "euclidean",
    scales: Optional[Sequence[float]] = None,
    dimensionality: Optional[int] = None,
) -> NDArray:
    """
    Compute the matrix of scaled distances between two point sets.

    Rows are passed to the metric as raw arrays, so no call counter is
    touched.

    Args:
        X: Array of shape (n, p)
        Y: Array of shape (m, p), or None to compute X vs X
        metric: Registered metric name or alias
        scales: Lengthscales (defaults to all ones)
        dimensionality: Coordinates used by the Euclidean metric
            (defaults to p)

    Returns:
        Distance matrix of shape (n, m)

    Example:
        >>> X = np.array([[0.0, 0.0], [3.0, 4.0]])
        >>> pairwise_distances(X, scales=[1.0, 1.0])
        array([[0., 5.],
               [5., 0.]])
    """
    info = get_metric(metric)
    X = _as_matrix(X)
    Y = X if Y is None else _as_matrix(Y)

    dimensionality = validate_dimensionality(
        dimensionality if dimensionality is not None else X.shape[1], X.shape[1]
    )
    n_scales = info.n_scales or dimensionality
    if scales is None:
        scales = np.ones(n_scales)
    scales = validate_scales(scales, n_scales, exact=info.n_scales is not None)

    dims = DimsContext(dimensionality)
    fn = info.function

    return cdist(X, Y, lambda u, v: fn(u, v, None, scales, dims))


def covariance_matrix(cov, X: NDArray, Y: Optional[NDArray] = None, variant: str = "exact") -> NDArray:
    """
    Compute the covariance matrix K[a, b] = k(X[a], Y[b]).

    Args:
        cov: A ``CovarianceFunction``
        X: Array of shape (n, p)
        Y: Array of shape (m, p), or None for X vs X
        variant: "exact", "lower" or "upper" weight function

    Returns:
        Matrix of shape (n, m)
    """
    if variant == "exact":
        weight_fn = cov.weight_info.function
    elif variant == "lower":
        weight_fn = cov.weight_info.lower
    elif variant == "upper":
        weight_fn = cov.weight_info.upper
    else:
        raise ValueError(f"variant must be 'exact', 'lower' or 'upper', got '{variant}'")

    distances = pairwise_distances(
        X, Y,
        metric=cov.metric,
        scales=cov.scales,
        dimensionality=cov.dims.dimensionality,
    )
    return apply_weight(weight_fn, distances, cov.weight_params)


class BatchKernelCalculator:
    """
    Covariance matrices and their scale gradients for large point sets.

    Example:
        >>> calc = BatchKernelCalculator(cov, chunk_size=500)
        >>> K = calc.compute(X)
        >>> dK = calc.gradient(X, 0)
    """

    def __init__(self, cov, chunk_size: int = 1000):
        """
        Args:
            cov: A ``CovarianceFunction``
            chunk_size: Number of rows of X processed at once
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.cov = cov
        self.chunk_size = chunk_size

    def compute(self, X: NDArray, Y: Optional[NDArray] = None, variant: str = "exact") -> NDArray:
        """Covariance matrix of X vs Y, computed chunk by chunk."""
        X = _as_matrix(X)
        Y = X if Y is None else _as_matrix(Y)
        n = len(X)

        if n <= self.chunk_size:
            return covariance_matrix(self.cov, X, Y, variant)

        K = np.empty((n, len(Y)))
        for start in range(0, n, self.chunk_size):
            end = min(start + self.chunk_size, n)
            K[start:end] = covariance_matrix(self.cov, X[start:end], Y, variant)
            logger.debug("covariance rows %d-%d of %d done", start, end, n)
        return K

    def gradient(self, X: NDArray, i: int, Y: Optional[NDArray] = None) -> NDArray:
        """
        Matrix of dk/dscale_i for every pair of rows.

        Entries for coincident points are 0.
        """
        X = _as_matrix(X)
        Y = X if Y is None else _as_matrix(Y)
        dK = np.empty((len(X), len(Y)))
        for a in range(len(X)):
            for b in range(len(Y)):
                dK[a, b] = self.cov.deriv_wrt_scale(X[a], Y[b], i)
        return dK

    def __repr__(self) -> str:
        return f"BatchKernelCalculator(cov={self.cov!r}, chunk_size={self.chunk_size})"
