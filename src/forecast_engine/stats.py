"""
Series Statistics
=================

Descriptive statistics shared by the forecasting methods, the adaptive
selector, validation and the insight generator.

All dispersion measures are population statistics (ddof=0). Ratios whose
denominator is zero (an all-zero series) evaluate to 0 rather than NaN, so the
derived signals stay comparable with their thresholds.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from scipy.stats import linregress

from .exceptions import ComputationFailure


# =============================================================================
# Linear Fit
# =============================================================================

@dataclass(frozen=True)
class LinearFit:
    """Least-squares line of value against integer index."""
    slope: float
    intercept: float
    r2: float

    def predict(self, x: float) -> float:
        return self.intercept + self.slope * x


def fit_line(values: Sequence[float]) -> LinearFit:
    """
    Fit ``value = intercept + slope * index`` by ordinary least squares.

    R² is 1.0 for a series with no variance (the line fits it exactly).

    Raises
    ------
    ComputationFailure
        If fewer than two points are given.
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    if n < 2:
        raise ComputationFailure(
            f"Linear regression needs at least 2 points, got {n}"
        )

    x = np.arange(n, dtype=float)
    result = linregress(x, y)

    # linregress reports r = 0 for a constant series
    if np.ptp(y) == 0:
        r2 = 1.0
    else:
        r2 = float(result.rvalue) ** 2

    return LinearFit(
        slope=float(result.slope),
        intercept=float(result.intercept),
        r2=r2,
    )


# =============================================================================
# Level, Trend, Dispersion
# =============================================================================

def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def mean(values: Sequence[float]) -> float:
    return float(np.mean(np.asarray(values, dtype=float)))


def std(values: Sequence[float]) -> float:
    return float(np.std(np.asarray(values, dtype=float)))


def variance(values: Sequence[float]) -> float:
    return float(np.var(np.asarray(values, dtype=float)))


def trend_slope(values: Sequence[float]) -> float:
    """OLS slope of the series against its index."""
    return fit_line(values).slope


def trend_level(values: Sequence[float]) -> float:
    """Trend level used by the seasonal decomposition: the series mean."""
    return mean(values)


def trend_strength(values: Sequence[float]) -> float:
    """|slope| relative to the series mean."""
    return _ratio(abs(trend_slope(values)), mean(values))


def volatility(values: Sequence[float]) -> float:
    """Coefficient of variation: stddev / mean."""
    return _ratio(std(values), mean(values))


# =============================================================================
# Seasonality
# =============================================================================

def seasonal_component(
    values: Sequence[float],
    season_length: int = 12,
) -> List[Optional[float]]:
    """
    Multiplicative seasonal index per phase of the cycle.

    For phase ``p`` the index is the mean of ``value[i] / trend`` over all
    ``i ≡ p (mod season_length)``, with ``trend`` the series mean. Phases that
    the series never reaches are ``None``. An all-zero series carries no
    seasonal signal and gets a neutral index of 1.0.

    Returns
    -------
    list[float or None]
        ``season_length`` entries.
    """
    arr = np.asarray(values, dtype=float)
    trend = trend_level(arr)

    seasonal: List[Optional[float]] = []
    for phase in range(season_length):
        phase_values = arr[phase::season_length]
        if len(phase_values) == 0:
            seasonal.append(None)
        elif trend == 0:
            seasonal.append(1.0)
        else:
            seasonal.append(float(np.mean(phase_values / trend)))
    return seasonal


def seasonality_strength(
    values: Sequence[float],
    season_length: int = 12,
    min_length: int = 24,
) -> float:
    """
    Share of the series variance explained by the seasonal index.

    Series shorter than ``min_length`` report 0.
    """
    if len(values) < min_length:
        return 0.0

    seasonal = [s for s in seasonal_component(values, season_length) if s is not None]
    return _ratio(variance(seasonal), variance(values))


# =============================================================================
# Confidence & Error Measures
# =============================================================================

def z_score(values: Sequence[float], predicted: float) -> float:
    """
    Distance of ``predicted`` from the series mean in standard deviations.

    A series with zero spread gives 0 when the prediction equals the mean and
    infinity otherwise.
    """
    center = mean(values)
    spread = std(values)
    distance = abs(predicted - center)
    if spread == 0:
        return 0.0 if distance == 0 else math.inf
    return distance / spread


def point_confidence(
    values: Sequence[float],
    predicted: float,
    floor: float = 0.5,
) -> float:
    """Convert a z-score into a confidence, ``max(floor, 1 - z/3)``."""
    return max(floor, 1.0 - z_score(values, predicted) / 3.0)


def mean_absolute_percentage_error(
    actual: Sequence[float],
    predicted: Sequence[float],
) -> float:
    """
    MAPE in percent, skipping points whose actual value is zero.

    Returns 100 when no point can be evaluated.
    """
    errors = [
        abs((a - p) / a)
        for a, p in zip(actual, predicted)
        if a != 0
    ]
    if not errors:
        return 100.0
    return float(np.mean(errors)) * 100


def root_mean_squared_error(
    actual: Sequence[float],
    predicted: Sequence[float],
) -> float:
    diffs = np.asarray(actual, dtype=float) - np.asarray(predicted, dtype=float)
    return float(np.sqrt(np.mean(diffs ** 2)))


__all__ = [
    "LinearFit",
    "fit_line",
    "mean",
    "std",
    "variance",
    "trend_slope",
    "trend_level",
    "trend_strength",
    "volatility",
    "seasonal_component",
    "seasonality_strength",
    "z_score",
    "point_confidence",
    "mean_absolute_percentage_error",
    "root_mean_squared_error",
]
