"""
Custom exceptions for covdist.
"""


class CovDistError(Exception):
    """Base exception for covdist."""
    pass


class InvalidArgumentError(CovDistError, ValueError):
    """An argument is outside the domain a function is defined on."""
    pass


class UnsupportedAxisError(InvalidArgumentError):
    """Derivative requested for an axis the metric does not define."""

    def __init__(self, function: str, axis: int, allowed=None):
        self.function = function
        self.axis = axis
        self.allowed = tuple(allowed) if allowed is not None else None
        message = f"{function}: cannot take derivative with respect to index {axis}"
        if self.allowed:
            message += f" (supported: {list(self.allowed)})"
        super().__init__(message)


class ValidationError(InvalidArgumentError):
    """Input validation error."""
    pass


class UnknownFunctionError(CovDistError, KeyError):
    """No distance or weight function is registered under the given name."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class ConfigurationError(CovDistError):
    """Invalid or inconsistent configuration."""
    pass
