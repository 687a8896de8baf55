"""
Configuration module for covdist.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from config import load_config
    >>> from covdist import CovarianceFunction
    >>>
    >>> settings = load_config()
    >>> cov = CovarianceFunction.from_settings(settings)
"""

from .settings import (
    Settings,
    NumericsConfig,
    load_config,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "NumericsConfig",
    "load_config",
    "get_default_config_path",
]
