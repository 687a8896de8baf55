"""
Utility functions for covdist.
"""

from .validation import (
    validate_scales,
    validate_extra,
    validate_dimensionality,
    validate_axis,
)
from .logging import setup_logger, get_logger, set_level, LogContext

__all__ = [
    "validate_scales",
    "validate_extra",
    "validate_dimensionality",
    "validate_axis",
    "setup_logger",
    "get_logger",
    "set_level",
    "LogContext",
]
