"""
Forecast Engine
===============

Statistical forecasting engine for business time series.

Structure:
- engine: Forecaster contract and StatisticalForecastingEngine
- factory: engine selection and recommendations
- methods: linear, exponential smoothing, seasonal and adaptive selection
- evaluation: accuracy backtest and model validation
- preprocessing: IQR outlier replacement
- intervals: confidence intervals
- insights: rule-based insights and recommendations
- report: tabular, text and plotly views of a forecast
- config: EngineSettings and YAML loading

Quick Start:
    from forecast_engine import StatisticalForecastingEngine, TimeSeries

    engine = StatisticalForecastingEngine()
    series = TimeSeries.from_values([120, 135, 128, 150, 162, 158], start="2024-01-01")
    result = engine.generate_forecast(series)
"""

import logging

from .version import __version__

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    AnalyticsCapability,
    Forecaster,
    StatisticalForecastingEngine,
    validate_time_series,
)
from .factory import EngineFactory

# =============================================================================
# Data Models
# =============================================================================
from .models import (
    ForecastMethod,
    TimeSeries,
    ForecastingOptions,
    ForecastPoint,
    ConfidenceInterval,
    ModelAccuracy,
    ValidationMetrics,
    ModelValidation,
    ModelMetrics,
    ForecastResult,
)

# =============================================================================
# Errors
# =============================================================================
from .exceptions import (
    ForecastError,
    ForecastValidationError,
    InsufficientDataError,
    InvalidValuesError,
    TimestampMismatchError,
    ComputationFailure,
)

# =============================================================================
# Configuration
# =============================================================================
from .config import EngineSettings, load_settings, CONFIG_ENV_VAR

# =============================================================================
# Building Blocks
# =============================================================================
from .preprocessing import remove_outliers, outlier_bounds
from .methods import (
    linear_forecast,
    exponential_smoothing_forecast,
    seasonal_forecast,
    select_method,
    run_method,
    SeriesProfile,
)
from .intervals import build_confidence_intervals, z_multiplier
from .evaluation import compute_accuracy, validate_series
from .insights import generate_insights, generate_recommendations

# =============================================================================
# Reports
# =============================================================================
from .report import ForecastReport

logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "__version__",
    # Engine
    "AnalyticsCapability",
    "Forecaster",
    "StatisticalForecastingEngine",
    "validate_time_series",
    "EngineFactory",
    # Models
    "ForecastMethod",
    "TimeSeries",
    "ForecastingOptions",
    "ForecastPoint",
    "ConfidenceInterval",
    "ModelAccuracy",
    "ValidationMetrics",
    "ModelValidation",
    "ModelMetrics",
    "ForecastResult",
    # Errors
    "ForecastError",
    "ForecastValidationError",
    "InsufficientDataError",
    "InvalidValuesError",
    "TimestampMismatchError",
    "ComputationFailure",
    # Configuration
    "EngineSettings",
    "load_settings",
    "CONFIG_ENV_VAR",
    # Building blocks
    "remove_outliers",
    "outlier_bounds",
    "linear_forecast",
    "exponential_smoothing_forecast",
    "seasonal_forecast",
    "select_method",
    "run_method",
    "SeriesProfile",
    "build_confidence_intervals",
    "z_multiplier",
    "compute_accuracy",
    "validate_series",
    "generate_insights",
    "generate_recommendations",
    # Reports
    "ForecastReport",
]
