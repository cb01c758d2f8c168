"""
Input errors raised by the detector and its loaders.

All of them subclass `ValueError`, so callers that only care about "bad input"
can keep catching `ValueError`.
"""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Base class for rejected detector input."""


class EmptyDatasetError(InvalidInputError):
    """Raised when a dataset has no coordinates (its mean is undefined)."""

    def __init__(self, message: str = "Cannot detect anomalies in an empty dataset: mean undefined") -> None:
        super().__init__(message)


class InvalidCoordinateError(InvalidInputError):
    """Raised when a coordinate cannot be resolved to a usable lat/lon pair."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"coordinate #{index}: {message}"
        super().__init__(message)
