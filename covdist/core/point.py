"""
Point, pair-point and call-context definitions.

These are the transient value types handed to the distance functions.
The library never stores them; the caller owns every instance.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .exceptions import ValidationError


Coords = NDArray[np.float64]


class CallCounter:
    """
    Thread-safe counter of distance function calls.

    Owned by the caller and attached to a ``DimsContext``. Instrumented
    distance functions increment it once per evaluation.

    Example:
        >>> counter = CallCounter()
        >>> dims = DimsContext(2, counter)
        >>> dims.record_call()
        >>> counter.value
        1
    """

    def __init__(self, start: int = 0):
        self._value = int(start)
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Increment the counter and return the new value."""
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        return self._value

    def reset(self) -> int:
        """Reset to zero, returning the value before the reset."""
        with self._lock:
            old = self._value
            self._value = 0
            return old

    def __repr__(self) -> str:
        return f"CallCounter(value={self._value})"


@dataclass(frozen=True)
class DimsContext:
    """
    Auxiliary context passed alongside every distance evaluation.

    Attributes:
        dimensionality: Number of leading coordinates the Euclidean
            metrics sum over. Must not exceed the point length.
        counter: Optional caller-owned call counter.
    """

    dimensionality: int
    counter: Optional[CallCounter] = None

    def __post_init__(self):
        if int(self.dimensionality) < 0:
            raise ValidationError(
                f"dimensionality must be non-negative, got {self.dimensionality}"
            )
        object.__setattr__(self, "dimensionality", int(self.dimensionality))

    def record_call(self) -> None:
        if self.counter is not None:
            self.counter.increment()

    @property
    def calls(self) -> int:
        """Current counter value (0 when no counter is attached)."""
        return self.counter.value if self.counter is not None else 0


@dataclass
class Point:
    """
    A coordinate vector used as an instrumented distance input.

    Distance functions that support instrumentation record a call on the
    ``DimsContext`` when they receive ``Point`` instances; plain arrays
    are evaluated without side effects.

    For geodesic metrics the first two coordinates are (longitude,
    latitude) in degrees and the third, when present, is depth.
    """

    coords: Coords

    def __post_init__(self):
        if not isinstance(self.coords, np.ndarray) or self.coords.dtype != np.float64:
            self.coords = np.asarray(self.coords, dtype=np.float64)

        if self.coords.ndim != 1:
            raise ValidationError(
                f"Point must be 1-dimensional, got {self.coords.ndim} dimensions"
            )

    @property
    def dimension(self) -> int:
        return len(self.coords)

    def __len__(self) -> int:
        return len(self.coords)

    def __getitem__(self, i):
        return self.coords[i]

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.coords
        return self.coords.astype(dtype)


@dataclass
class PairPoint:
    """
    Two points bundled as a single distance input.

    Used when one observation is described by two locations, e.g. a
    station and an event.
    """

    pt1: Coords
    pt2: Coords

    def __post_init__(self):
        self.pt1 = as_coords(self.pt1)
        self.pt2 = as_coords(self.pt2)

    def __iter__(self):
        yield self.pt1
        yield self.pt2


PointLike = Union[Point, Coords, Sequence[float]]


def as_coords(p: PointLike) -> Coords:
    """Return the float64 coordinate array behind a point-like value."""
    if isinstance(p, Point):
        return p.coords
    if isinstance(p, np.ndarray) and p.dtype == np.float64:
        return p
    return np.asarray(p, dtype=np.float64)


def is_instrumented(p1: PointLike, p2: PointLike) -> bool:
    """True when both inputs are ``Point`` objects."""
    return isinstance(p1, Point) and isinstance(p2, Point)
