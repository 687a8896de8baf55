"""
Covariance weight functions and their derivatives.

Supported Weights:
    - se: squared exponential
    - e: exponential
    - matern32: Matern 3/2 (with lower/upper bounds)
    - compact0, compact2: compactly supported piecewise polynomials
      (with lower/upper bounds)
"""

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
    apply_weight,
)

from .registry import (
    WeightFunction,
    WeightInfo,
    get_weight,
    get_weight_fn,
    register_weight,
    list_weights,
)

__all__ = [
    "w_se",
    "deriv_se_wrt_r",
    "w_e",
    "deriv_e_wrt_r",
    "w_matern32",
    "w_matern32_lower",
    "w_matern32_upper",
    "deriv_matern32_wrt_r",
    "w_compact_q0",
    "w_compact_q0_lower",
    "w_compact_q0_upper",
    "deriv_compact_q0_wrt_r",
    "w_compact_q2",
    "w_compact_q2_lower",
    "w_compact_q2_upper",
    "deriv_compact_q2_wrt_r",
    "apply_weight",
    "WeightFunction",
    "WeightInfo",
    "get_weight",
    "get_weight_fn",
    "register_weight",
    "list_weights",
]
