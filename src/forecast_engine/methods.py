"""
Forecasting Methods
===================

The competing statistical methods and the adaptive selector that chooses
between them.

Every method takes a cleaned series and a horizon and returns a
MethodForecast: one clamped (non-negative) value and one confidence score per
future period, plus the fitted parameters. Timestamps are attached later by
``MethodForecast.to_points`` so the methods stay pure arithmetic.

Methods
-------
- linear: least-squares trend line
- exponential: simple exponential smoothing with grid-searched alpha and a
  short-term trend from the last three smoothed values
- seasonal: mean level plus linear slope, scaled by a 12-slot seasonal index
- adaptive: pick one of the above from trend, seasonality and volatility
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from .config import EngineSettings
from .models import ForecastMethod, ForecastPoint
from .preprocessing import count_outliers
from .stats import (
    fit_line,
    mean_absolute_percentage_error,
    point_confidence,
    seasonal_component,
    seasonality_strength,
    trend_level,
    trend_slope,
    trend_strength,
    volatility,
)

LOGGER = logging.getLogger(__name__)

# Adaptive selection thresholds
SEASONALITY_THRESHOLD = 0.3
TREND_THRESHOLD = 0.5
VOLATILITY_THRESHOLD = 0.3

# Confidence bounds
LINEAR_CONFIDENCE_FLOOR = 0.3
LINEAR_CONFIDENCE_CEILING = 0.95
SEASONAL_CONFIDENCE_FLOOR = 0.5


# =============================================================================
# Result container
# =============================================================================

@dataclass
class MethodForecast:
    """Raw output of a forecasting method."""
    method: ForecastMethod
    values: List[float]
    confidences: List[float]
    params: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.values)

    def to_points(self, anchor: Optional[datetime] = None) -> List[ForecastPoint]:
        """Attach monthly timestamps counted from ``anchor``."""
        timestamps = forecast_timestamps(len(self.values), anchor)
        return [
            ForecastPoint(timestamp=ts, value=value, confidence=conf)
            for ts, value, conf in zip(timestamps, self.values, self.confidences)
        ]


def forecast_timestamps(periods: int, anchor: Optional[datetime] = None) -> List[datetime]:
    """
    Timestamps ``anchor + i months`` for ``i = 1..periods``.

    Each date is offset from the anchor directly, so month-end anchors clamp
    to the last day of shorter months instead of drifting. ``anchor`` defaults
    to the wall clock.
    """
    base = pd.Timestamp(anchor if anchor is not None else datetime.now())
    return [
        (base + pd.DateOffset(months=i)).to_pydatetime()
        for i in range(1, periods + 1)
    ]


# =============================================================================
# Linear
# =============================================================================

def data_quality(values: Sequence[float]) -> float:
    """1 - 2 * outlier ratio, floored at 0."""
    outlier_ratio = count_outliers(values) / len(values)
    return max(0.0, 1.0 - outlier_ratio * 2)


def enhanced_confidence(
    values: Sequence[float],
    predicted: float,
    r2: float,
    quality: float,
) -> float:
    """
    Blend z-score, fit quality and data quality into one confidence.

    ``0.5 * base + 0.3 * R² + 0.2 * quality`` with
    ``base = max(0.3, 1 - z/3)``, clamped to [0.3, 0.95].
    """
    base = point_confidence(values, predicted, floor=LINEAR_CONFIDENCE_FLOOR)
    blended = base * 0.5 + r2 * 0.3 + quality * 0.2
    return max(LINEAR_CONFIDENCE_FLOOR, min(LINEAR_CONFIDENCE_CEILING, blended))


def linear_forecast(
    values: Sequence[float],
    periods: int,
    settings: Optional[EngineSettings] = None,
) -> MethodForecast:
    """
    Extend the least-squares trend line ``periods`` steps past the series.

    Parameters
    ----------
    values : sequence of float
        Cleaned series with at least 2 points.
    periods : int
        Horizon.
    settings : EngineSettings, optional
        Unused; accepted so all methods share one signature.

    Returns
    -------
    MethodForecast
        ``params`` holds ``slope``, ``intercept`` and ``r2``.
    """
    fit = fit_line(values)
    quality = data_quality(values)
    n = len(values)

    forecast_values, confidences = [], []
    for i in range(1, periods + 1):
        predicted = fit.predict(n + i - 1)
        forecast_values.append(max(0.0, predicted))
        confidences.append(enhanced_confidence(values, predicted, fit.r2, quality))

    return MethodForecast(
        method=ForecastMethod.LINEAR,
        values=forecast_values,
        confidences=confidences,
        params={"slope": fit.slope, "intercept": fit.intercept, "r2": fit.r2},
    )


# =============================================================================
# Exponential smoothing
# =============================================================================

def smooth(values: Sequence[float], alpha: float) -> List[float]:
    """Simple exponential smoothing seeded with the first observation."""
    level = float(values[0])
    smoothed = [level]
    for value in values[1:]:
        level = alpha * value + (1 - alpha) * level
        smoothed.append(level)
    return smoothed


def smoothing_mse(values: Sequence[float], alpha: float) -> float:
    """Mean squared one-step-ahead error of smoothing with ``alpha``."""
    if len(values) < 2:
        return math.inf

    level = float(values[0])
    sum_squared = 0.0
    for actual in values[1:]:
        sum_squared += (actual - level) ** 2
        level = alpha * actual + (1 - alpha) * level
    return sum_squared / (len(values) - 1)


def optimize_alpha(values: Sequence[float], grid: Sequence[float]) -> float:
    """
    Grid-search the smoothing parameter.

    Ties keep the earlier grid value. If no candidate yields a finite error the
    default of 0.3 is returned.
    """
    best_alpha, best_mse = 0.3, math.inf
    for alpha in grid:
        mse = smoothing_mse(values, alpha)
        if mse < best_mse:
            best_alpha, best_mse = alpha, mse
    return best_alpha


def _recent_trend(smoothed: Sequence[float]) -> float:
    if len(smoothed) < 3:
        return 0.0
    return fit_line(smoothed[-3:]).slope


def exponential_smoothing_forecast(
    values: Sequence[float],
    periods: int,
    settings: Optional[EngineSettings] = None,
) -> MethodForecast:
    """
    Smooth with the best alpha and project the final level along a short trend.

    Every point carries the same confidence, derived from how closely the
    smoothed series tracks the original (1 - MAPE/100), kept within
    [0.3, 0.95].

    Returns
    -------
    MethodForecast
        ``params`` holds ``alpha``, ``level`` and ``trend``.
    """
    settings = settings or EngineSettings()
    alpha = optimize_alpha(values, settings.alpha_grid)
    smoothed = smooth(values, alpha)
    level = smoothed[-1]
    trend = _recent_trend(smoothed)
    LOGGER.debug("Exponential smoothing: alpha=%.1f level=%.3f trend=%.3f", alpha, level, trend)

    mape = mean_absolute_percentage_error(values, smoothed)
    accuracy = max(LINEAR_CONFIDENCE_FLOOR, min(LINEAR_CONFIDENCE_CEILING, 1 - mape / 100))

    return MethodForecast(
        method=ForecastMethod.EXPONENTIAL,
        values=[max(0.0, level + trend * i) for i in range(1, periods + 1)],
        confidences=[accuracy] * periods,
        params={"alpha": alpha, "level": level, "trend": trend},
    )


# =============================================================================
# Seasonal
# =============================================================================

def seasonal_forecast(
    values: Sequence[float],
    periods: int,
    settings: Optional[EngineSettings] = None,
) -> MethodForecast:
    """
    Naive multiplicative decomposition: (mean + i * slope) * seasonal index.

    Phases the history never reached use a multiplier of 1.

    Returns
    -------
    MethodForecast
        ``params`` holds ``trend``, ``slope`` and the ``seasonal`` index.
    """
    settings = settings or EngineSettings()
    season_length = settings.season_length
    trend = trend_level(values)
    slope = trend_slope(values)
    seasonal = seasonal_component(values, season_length)
    n = len(values)

    forecast_values, confidences = [], []
    for i in range(1, periods + 1):
        multiplier = seasonal[(n + i - 1) % season_length]
        if multiplier is None:
            multiplier = 1.0
        predicted = (trend + i * slope) * multiplier
        forecast_values.append(max(0.0, predicted))
        confidences.append(
            point_confidence(values, predicted, floor=SEASONAL_CONFIDENCE_FLOOR)
        )

    return MethodForecast(
        method=ForecastMethod.SEASONAL,
        values=forecast_values,
        confidences=confidences,
        params={"trend": trend, "slope": slope, "seasonal": seasonal},
    )


# =============================================================================
# Adaptive selection
# =============================================================================

@dataclass(frozen=True)
class SeriesProfile:
    """Characteristics the adaptive selector looks at."""
    trend_strength: float
    seasonality_strength: float
    volatility: float

    @classmethod
    def from_values(
        cls,
        values: Sequence[float],
        settings: Optional[EngineSettings] = None,
    ) -> "SeriesProfile":
        settings = settings or EngineSettings()
        return cls(
            trend_strength=trend_strength(values),
            seasonality_strength=seasonality_strength(
                values, settings.season_length, settings.min_seasonal_length
            ),
            volatility=volatility(values),
        )


def select_method(profile: SeriesProfile) -> ForecastMethod:
    """
    Choose a concrete method for a series profile.

    Seasonal when seasonality strength > 0.3; otherwise linear when trend
    strength > 0.5 and volatility < 0.3; otherwise exponential smoothing.
    """
    if profile.seasonality_strength > SEASONALITY_THRESHOLD:
        return ForecastMethod.SEASONAL
    if profile.trend_strength > TREND_THRESHOLD and profile.volatility < VOLATILITY_THRESHOLD:
        return ForecastMethod.LINEAR
    return ForecastMethod.EXPONENTIAL


MethodRunner = Callable[[Sequence[float], int, Optional[EngineSettings]], MethodForecast]

METHOD_RUNNERS: Dict[ForecastMethod, MethodRunner] = {
    ForecastMethod.LINEAR: linear_forecast,
    ForecastMethod.EXPONENTIAL: exponential_smoothing_forecast,
    ForecastMethod.SEASONAL: seasonal_forecast,
}


def resolve_method(
    method: ForecastMethod,
    values: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> ForecastMethod:
    """Map ``adaptive`` to a concrete method; other methods pass through."""
    if method is not ForecastMethod.ADAPTIVE:
        return method

    profile = SeriesProfile.from_values(values, settings)
    chosen = select_method(profile)
    LOGGER.debug(
        "Adaptive selection: trend=%.3f seasonality=%.3f volatility=%.3f -> %s",
        profile.trend_strength,
        profile.seasonality_strength,
        profile.volatility,
        chosen.value,
    )
    return chosen


def run_method(
    method: ForecastMethod,
    values: Sequence[float],
    periods: int,
    settings: Optional[EngineSettings] = None,
) -> MethodForecast:
    """
    Run a forecasting method, resolving ``adaptive`` first.

    Parameters
    ----------
    method : ForecastMethod
        Requested method.
    values : sequence of float
        Cleaned series.
    periods : int
        Horizon.
    settings : EngineSettings, optional
        Engine constants; defaults are used when omitted.
    """
    concrete = resolve_method(ForecastMethod(method), values, settings)
    return METHOD_RUNNERS[concrete](values, periods, settings)


__all__ = [
    "MethodForecast",
    "SeriesProfile",
    "forecast_timestamps",
    "data_quality",
    "enhanced_confidence",
    "linear_forecast",
    "smooth",
    "smoothing_mse",
    "optimize_alpha",
    "exponential_smoothing_forecast",
    "seasonal_forecast",
    "select_method",
    "resolve_method",
    "run_method",
    "METHOD_RUNNERS",
]
