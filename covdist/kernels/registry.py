"""
Weight function registry.

Groups each covariance weight function with its bounding variants and
its derivative so the whole family is selected by one name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.exceptions import UnknownFunctionError
from .weights import (
    w_se,
    deriv_se_wrt_r,
    w_e,
    deriv_e_wrt_r,
    w_matern32,
    w_matern32_lower,
    w_matern32_upper,
    deriv_matern32_wrt_r,
    w_compact_q0,
    w_compact_q0_lower,
    w_compact_q0_upper,
    deriv_compact_q0_wrt_r,
    w_compact_q2,
    w_compact_q2_lower,
    w_compact_q2_upper,
    deriv_compact_q2_wrt_r,
)


WeightFn = Callable[[float, "list[float]"], float]
WeightDerivFn = Callable[[float, float, "list[float]"], float]


class WeightFunction(str, Enum):
    """Enumeration of built-in covariance weight functions."""

    SE = "se"
    EXPONENTIAL = "e"
    MATERN32 = "matern32"
    COMPACT_Q0 = "compact0"
    COMPACT_Q2 = "compact2"

    def __str__(self) -> str:
        return self.value


@dataclass
class WeightInfo:
    """
    Information about a weight function.

    ``support`` is the radius beyond which the exact kernel is zero
    (None for kernels with infinite support); ``upper_support`` is the
    same for the upper bounding variant.
    """

    name: str
    function: WeightFn
    lower: WeightFn
    upper: WeightFn
    deriv_wrt_r: Optional[WeightDerivFn]
    n_extra: int
    support: Optional[float]
    upper_support: Optional[float]
    description: str

    @property
    def has_derivative(self) -> bool:
        return self.deriv_wrt_r is not None

    def __repr__(self) -> str:
        return f"WeightInfo(name='{self.name}', n_extra={self.n_extra})"


class WeightRegistry:
    """Registry for covariance weight functions."""

    def __init__(self):
        self._weights: Dict[str, WeightInfo] = {}
        self._aliases: Dict[str, str] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        self.register(
            WeightInfo(
                name="se",
                function=w_se,
                lower=w_se,
                upper=w_se,
                deriv_wrt_r=deriv_se_wrt_r,
                n_extra=1,
                support=None,
                upper_support=None,
                description="Squared exponential: v exp(-d^2)",
            ),
            aliases=["squared_exponential", "rbf", "gaussian"]
        )

        self.register(
            WeightInfo(
                name="e",
                function=w_e,
                lower=w_e,
                upper=w_e,
                deriv_wrt_r=deriv_e_wrt_r,
                n_extra=1,
                support=None,
                upper_support=None,
                description="Exponential: v exp(-d)",
            ),
            aliases=["exponential"]
        )

        self.register(
            WeightInfo(
                name="matern32",
                function=w_matern32,
                lower=w_matern32_lower,
                upper=w_matern32_upper,
                deriv_wrt_r=deriv_matern32_wrt_r,
                n_extra=1,
                support=None,
                upper_support=None,
                description="Matern 3/2: v (1 + sqrt(3) d) exp(-sqrt(3) d)",
            ),
            aliases=["matern_3_2"]
        )

        self.register(
            WeightInfo(
                name="compact0",
                function=w_compact_q0,
                lower=w_compact_q0_lower,
                upper=w_compact_q0_upper,
                deriv_wrt_r=deriv_compact_q0_wrt_r,
                n_extra=2,
                support=1.0,
                upper_support=2.0,
                description="Compact support piecewise polynomial, q = 0",
            ),
            aliases=["compact_q0", "q0"]
        )

        self.register(
            WeightInfo(
                name="compact2",
                function=w_compact_q2,
                lower=w_compact_q2_lower,
                upper=w_compact_q2_upper,
                deriv_wrt_r=deriv_compact_q2_wrt_r,
                n_extra=2,
                support=1.0,
                upper_support=2.0,
                description="Compact support piecewise polynomial, q = 2",
            ),
            aliases=["compact_q2", "q2"]
        )

    def register(self, info: WeightInfo, aliases: Optional[List[str]] = None) -> None:
        self._weights[info.name] = info

        if aliases:
            for alias in aliases:
                self._aliases[alias] = info.name

    def get(self, name: str) -> WeightInfo:
        """
        Get weight info by name or alias.

        Raises:
            UnknownFunctionError: If no weight function is registered under ``name``
        """
        name = str(name)
        canonical = self._aliases.get(name, name)

        if canonical not in self._weights:
            available = list(self._weights.keys())
            raise UnknownFunctionError(
                f"Unknown weight function: '{name}'. Available: {available}"
            )

        return self._weights[canonical]

    def list_weights(self) -> List[str]:
        return list(self._weights.keys())

    def __contains__(self, name) -> bool:
        name = str(name)
        return self._aliases.get(name, name) in self._weights

    def __getitem__(self, name: str) -> WeightInfo:
        return self.get(name)


_registry = WeightRegistry()


def get_weight(name: str) -> WeightInfo:
    """
    Get weight function info by name.

    Example:
        >>> get_weight("q2").upper_support
        2.0
    """
    return _registry.get(name)


def get_weight_fn(name: str) -> WeightFn:
    """Get the exact weight function by name."""
    return _registry.get(name).function


def register_weight(
    name: str,
    function: WeightFn,
    deriv_wrt_r: Optional[WeightDerivFn] = None,
    lower: Optional[WeightFn] = None,
    upper: Optional[WeightFn] = None,
    n_extra: int = 1,
    support: Optional[float] = None,
    description: str = "",
    aliases: Optional[List[str]] = None,
) -> None:
    """
    Register a custom weight function.

    Missing bounding variants default to the exact function.
    """
    info = WeightInfo(
        name=name,
        function=function,
        lower=lower or function,
        upper=upper or function,
        deriv_wrt_r=deriv_wrt_r,
        n_extra=n_extra,
        support=support,
        upper_support=support if upper is None else None,
        description=description or f"Custom weight function: {name}",
    )
    _registry.register(info, aliases)


def list_weights() -> List[str]:
    """List all available weight function names."""
    return _registry.list_weights()
