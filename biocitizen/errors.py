from __future__ import annotations

"""Error taxonomy shared by the normalizer, calculator and session layer.

ValidationError and EmptyResultError are user-facing and recoverable: the
caller shows the message and the loaded table stays available for another
attempt. InvariantViolation marks broken wiring upstream of the calculator.
"""

__all__ = [
    "BioCitizenError",
    "ValidationError",
    "EmptyResultError",
    "InvariantViolation",
]


class BioCitizenError(Exception):
    """Base exception for analysis errors."""


class ValidationError(BioCitizenError):
    """Raised when the column selection (or a strict-mode value) is unusable."""


class EmptyResultError(BioCitizenError):
    """Raised when no row carried a usable species value."""

    def __init__(self, message: str = "no valid species data found in the selected column") -> None:
        super().__init__(message)


class InvariantViolation(BioCitizenError, AssertionError):
    """Raised when the calculator receives an empty or malformed count map."""
