"""
Configuration management for covdist.

Provides dataclasses for configuration and utilities
for loading settings from YAML files.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from covdist.core.exceptions import ConfigurationError
from covdist.distance.geo import DENOM_EPS, FD_EPS
from covdist.distance.metrics import INSTABILITY_THRESHOLD


@dataclass
class NumericsConfig:
    """
    Numerical guard constants.

    These mirror the values compiled into the distance functions and are
    reported here for reference; they are not runtime knobs. A value that
    differs from the compiled constant is rejected.
    """
    fd_epsilon: float = FD_EPS
    denominator_epsilon: float = DENOM_EPS
    instability_threshold: float = INSTABILITY_THRESHOLD

    def __post_init__(self):
        compiled = {
            "fd_epsilon": FD_EPS,
            "denominator_epsilon": DENOM_EPS,
            "instability_threshold": INSTABILITY_THRESHOLD,
        }
        for key, expected in compiled.items():
            value = getattr(self, key)
            try:
                matches = float(value) == expected
            except (TypeError, ValueError):
                matches = False
            if not matches:
                raise ConfigurationError(
                    f"numerics.{key} is fixed at {expected}, got {value!r}"
                )


@dataclass
class Settings:
    """
    Main settings container for covdist.

    Attributes:
        metric: Distance metric (euclidean, km, 3d_km, 6d_km or an alias)
        weight: Weight function (se, e, matern32, compact0, compact2)
        scales: Lengthscales, one per metric axis
        weight_params: [variance] or [variance, order]
        dimensionality: Coordinates summed by the Euclidean metric
        count_calls: Attach a call counter to the covariance function
        log_level: Logging level
        numerics: Numerical guard constants
    """
    metric: str = "euclidean"
    weight: str = "se"
    scales: List[float] = field(default_factory=lambda: [1.0, 1.0])
    weight_params: List[float] = field(default_factory=lambda: [1.0])
    dimensionality: Optional[int] = None
    count_calls: bool = False
    log_level: str = "WARNING"

    numerics: NumericsConfig = field(default_factory=NumericsConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        data = dict(data)
        numerics_data = data.pop("numerics", None) or {}

        known = set(cls.__dataclass_fields__) - {"numerics"}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown settings: {sorted(unknown)}")

        try:
            return cls(numerics=NumericsConfig(**numerics_data), **data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid numerics settings: {e}") from e

    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        return asdict(self)


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Check environment variable
    env_config = os.environ.get("COVDIST_CONFIG")
    if env_config:
        return Path(env_config)

    # Check for config in current directory
    local_config = Path("./config/default_config.yaml")
    if local_config.exists():
        return local_config

    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Settings object with loaded configuration

    Raises:
        ConfigurationError: If the file is not valid YAML or has unknown keys

    Example:
        >>> settings = load_config()
        >>> settings = load_config("./my_config.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)

    if not path.exists():
        # Return default settings if no config file
        return Settings()

    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at top level")

    return Settings.from_dict(data)
