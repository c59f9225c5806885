"""
Engine Errors
=============

Exception taxonomy raised by the forecasting engine.

Validation errors are raised before any statistics run. Everything else that
goes wrong numerically surfaces as ComputationFailure with the original
exception chained as ``__cause__``.
"""


class ForecastError(Exception):
    """Base class for every error raised by the engine."""


class ForecastValidationError(ForecastError, ValueError):
    """The input series was rejected before any computation ran."""


class InsufficientDataError(ForecastValidationError):
    """Series is shorter than the minimum number of points."""

    def __init__(self, n_points: int, minimum: int = 3):
        self.n_points = n_points
        self.minimum = minimum
        super().__init__(
            f"Insufficient data points for forecasting: got {n_points}, "
            f"need at least {minimum}"
        )


class InvalidValuesError(ForecastValidationError):
    """Series contains NaN or negative values."""

    def __init__(self, positions):
        self.positions = list(positions)
        super().__init__(
            f"Invalid data values detected at positions {self.positions}"
        )


class TimestampMismatchError(ForecastValidationError):
    """Values and timestamps have different lengths."""

    def __init__(self, n_values: int, n_timestamps: int):
        self.n_values = n_values
        self.n_timestamps = n_timestamps
        super().__init__(
            "Timestamps and values arrays must have the same length "
            f"({n_timestamps} timestamps, {n_values} values)"
        )


class ComputationFailure(ForecastError):
    """Unexpected numerical failure while fitting or forecasting."""


__all__ = [
    "ForecastError",
    "ForecastValidationError",
    "InsufficientDataError",
    "InvalidValuesError",
    "TimestampMismatchError",
    "ComputationFailure",
]
