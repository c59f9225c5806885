"""
Forecasting Engine
==================

Public entry points of the statistical forecasting engine.

The ``Forecaster`` protocol is the contract the calling analytics service
depends on. ``StatisticalForecastingEngine`` is the implementation in use;
other engines (e.g. ML-based) only have to provide the same methods and
attributes.

Pipeline of ``generate_forecast``
---------------------------------
1. Validate the series (length, NaN/negative values, timestamp count)
2. Replace IQR outliers with the median
3. Run the requested method, or let the adaptive selector choose
4. Build confidence intervals from the cleaned series
5. Backtest the method on a held-out tail
6. Derive insights and recommendations

The engine keeps no state between calls beyond its settings and is safe to
share between threads.

Usage
-----
    >>> from forecast_engine import ForecastingOptions, StatisticalForecastingEngine, TimeSeries
    >>> engine = StatisticalForecastingEngine()
    >>> series = TimeSeries.from_values([100, 110, 105, 120, 115, 130], start="2024-01-01")
    >>> result = engine.generate_forecast(series, ForecastingOptions(method="linear", periods=3))
    >>> [p.value for p in result.predictions]
"""

import logging
import math
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from .config import EngineSettings
from .evaluation import compute_accuracy, validate_series
from .exceptions import (
    ComputationFailure,
    ForecastError,
    InsufficientDataError,
    InvalidValuesError,
    TimestampMismatchError,
)
from .insights import generate_insights, generate_recommendations
from .intervals import build_confidence_intervals
from .methods import run_method
from .models import (
    ForecastingOptions,
    ForecastResult,
    ModelMetrics,
    ModelValidation,
    TimeSeries,
)
from .preprocessing import remove_outliers
from .version import __version__

LOGGER = logging.getLogger(__name__)

MIN_DATA_POINTS = 3


# =============================================================================
# Contract
# =============================================================================

class AnalyticsCapability(str, Enum):
    FORECASTING = "FORECASTING"
    ANOMALY_DETECTION = "ANOMALY_DETECTION"
    TREND_ANALYSIS = "TREND_ANALYSIS"
    PATTERN_RECOGNITION = "PATTERN_RECOGNITION"
    PREDICTIVE_MODELING = "PREDICTIVE_MODELING"
    RISK_ASSESSMENT = "RISK_ASSESSMENT"


@runtime_checkable
class Forecaster(Protocol):
    """Anything that can forecast, validate and describe itself."""

    engine_type: str
    version: str
    capabilities: Tuple[AnalyticsCapability, ...]

    def generate_forecast(
        self,
        series: TimeSeries,
        options: Optional[ForecastingOptions] = None,
    ) -> ForecastResult:
        ...

    def validate_model(self, series: TimeSeries) -> ModelValidation:
        ...

    def get_model_metrics(self) -> ModelMetrics:
        ...


# =============================================================================
# Input validation
# =============================================================================

def validate_time_series(series: TimeSeries, min_points: int = MIN_DATA_POINTS) -> None:
    """
    Reject series the engine cannot forecast.

    Raises
    ------
    InsufficientDataError
        Fewer than ``min_points`` values.
    InvalidValuesError
        NaN, infinite or negative values.
    TimestampMismatchError
        Timestamp count differs from value count.
    """
    values = series.values
    if len(values) < min_points:
        raise InsufficientDataError(len(values), min_points)

    invalid = [i for i, v in enumerate(values) if not math.isfinite(v) or v < 0]
    if invalid:
        raise InvalidValuesError(invalid)

    if len(series.timestamps) != len(values):
        raise TimestampMismatchError(len(values), len(series.timestamps))


# =============================================================================
# Statistical engine
# =============================================================================

STATISTICAL_MODEL_METRICS = ModelMetrics(
    accuracy=0.85,
    precision=0.82,
    recall=0.88,
    f1_score=0.85,
    mape=15.2,
    rmse=0.12,
)


class StatisticalForecastingEngine:
    """
    Forecasting engine built on classical statistics.

    Parameters
    ----------
    settings : EngineSettings, optional
        Engine constants. Defaults to ``EngineSettings()``.

    Attributes
    ----------
    engine_type : str
        Always ``"STATISTICAL"``.
    version : str
        Package version.
    capabilities : tuple[AnalyticsCapability, ...]
        Forecasting and trend analysis.
    """

    engine_type = "STATISTICAL"
    version = __version__
    capabilities = (
        AnalyticsCapability.FORECASTING,
        AnalyticsCapability.TREND_ANALYSIS,
    )

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def __repr__(self):
        return f"StatisticalForecastingEngine(version='{self.version}')"

    # ========================================================================
    # Public operations
    # ========================================================================

    def generate_forecast(
        self,
        series: TimeSeries,
        options: Optional[ForecastingOptions] = None,
    ) -> ForecastResult:
        """
        Forecast the next ``options.periods`` values of a series.

        Parameters
        ----------
        series : TimeSeries
            History with at least 3 non-negative values.
        options : ForecastingOptions, optional
            Method, horizon and confidence level. Defaults to an adaptive,
            6-period forecast at 95%.

        Returns
        -------
        ForecastResult
            Predictions one calendar month apart from ``options.anchor`` (or
            now), their intervals, backtest accuracy, insights and
            recommendations.

        Raises
        ------
        ForecastValidationError
            The series was rejected before any computation ran.
        ComputationFailure
            Any other numerical failure, with the cause chained.
        """
        options = options or ForecastingOptions()
        validate_time_series(series)
        LOGGER.info(
            "Generating forecast using %s method (%d points, %d periods)",
            options.method.value, len(series.values), options.periods,
        )

        with _computation("Forecast generation"):
            cleaned = remove_outliers(series.values)

            forecast = run_method(options.method, cleaned, options.periods, self.settings)
            predictions = forecast.to_points(options.anchor)

            intervals = build_confidence_intervals(
                cleaned, predictions, options.confidence, self.settings
            )
            accuracy = compute_accuracy(cleaned, options.method, self.settings)

            return ForecastResult(
                predictions=predictions,
                confidence=intervals,
                accuracy=accuracy,
                insights=generate_insights(cleaned, predictions),
                recommendations=generate_recommendations(
                    cleaned, predictions, options, self.settings
                ),
                method=forecast.method,
            )

    def validate_model(self, series: TimeSeries) -> ModelValidation:
        """
        Score how reliably the linear model forecasts this series.

        Runs cross-validation, holdout validation and a stability test on the
        cleaned series. See ``forecast_engine.evaluation``.

        Raises
        ------
        ForecastValidationError
            The series was rejected before any computation ran.
        ComputationFailure
            Any other numerical failure, with the cause chained.
        """
        validate_time_series(series)
        LOGGER.info("Validating model on %d points", len(series.values))

        with _computation("Model validation"):
            cleaned = remove_outliers(series.values)
            return validate_series(cleaned, self.settings)

    def get_model_metrics(self) -> ModelMetrics:
        """Static performance metadata of the statistical engine."""
        return STATISTICAL_MODEL_METRICS.model_copy()


@contextmanager
def _computation(stage: str) -> Iterator[None]:
    """
    Raise on floating-point faults and wrap unexpected numerical errors in
    ComputationFailure. Engine errors pass through unchanged.
    """
    try:
        with np.errstate(divide="raise", invalid="raise"):
            yield
    except ForecastError:
        raise
    except (ArithmeticError, ValueError) as exc:
        raise ComputationFailure(f"{stage} failed: {exc}") from exc


__all__ = [
    "AnalyticsCapability",
    "Forecaster",
    "StatisticalForecastingEngine",
    "validate_time_series",
    "MIN_DATA_POINTS",
]
