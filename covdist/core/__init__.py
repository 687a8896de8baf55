"""
Core components for covdist.
"""

from .point import (
    Point,
    PairPoint,
    CallCounter,
    DimsContext,
    as_coords,
)
from .exceptions import (
    CovDistError,
    InvalidArgumentError,
    UnsupportedAxisError,
    ValidationError,
    UnknownFunctionError,
    ConfigurationError,
)

__all__ = [
    # Points
    "Point",
    "PairPoint",
    "CallCounter",
    "DimsContext",
    "as_coords",
    # Exceptions
    "CovDistError",
    "InvalidArgumentError",
    "UnsupportedAxisError",
    "ValidationError",
    "UnknownFunctionError",
    "ConfigurationError",
]
