"""
Accuracy & Model Validation
===========================

Backtests that measure how well the statistical methods fit a series.

Accuracy
--------
``compute_accuracy`` holds out a short tail (20% of the series, at most 6
points, at least 1), forecasts it from the remaining prefix with the
requested method and reports MAPE, RMSE and the R² of a line fit on the
prefix.

Validation
----------
``validate_series`` runs three independent procedures, all with the linear
method whatever the caller asked for:

- cross-validation over 5 contiguous folds
- holdout on the last 20%
- stability of forecasts from the first and the last 80%

Each score lies in [0, 1]. The model is valid only when every score is
strictly above its threshold (0.6, 0.6, 0.7 by default).

Usage
-----
    >>> from forecast_engine.evaluation import validate_series
    >>> validation = validate_series([100, 110, 105, 120, 115, 130, 125, 140])
    >>> validation.metrics.holdout_score
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import EngineSettings
from .exceptions import ComputationFailure
from .methods import linear_forecast, run_method
from .models import ForecastMethod, ModelAccuracy, ModelValidation, ValidationMetrics
from .stats import fit_line, root_mean_squared_error

LOGGER = logging.getLogger(__name__)

MIN_TRAIN_POINTS = 3
ACCURACY_CONFIDENCE_FLOOR = 0.5

RECOMMEND_MORE_DATA = "Increase data quality or quantity"
RECOMMEND_OVERFITTING = "Model may be overfitting"
RECOMMEND_VOLATILITY = "Data shows high volatility"


# ============================================================================
# Scoring helpers
# ============================================================================

def _unit(score: float) -> float:
    return max(0.0, min(1.0, score))


def relative_accuracy(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    Mean per-point accuracy ``max(0, 1 - |error / actual|)``.

    Points with a zero actual contribute nothing but still count in the
    denominator.
    """
    if len(actual) == 0:
        return 0.0

    total = 0.0
    for a, p in zip(actual, predicted):
        if a != 0:
            total += max(0.0, 1.0 - abs((a - p) / a))
    return _unit(total / len(actual))


def forecast_similarity(first: Sequence[float], second: Sequence[float]) -> float:
    """
    Mean pairwise similarity ``1 - |diff| / average`` of two forecasts.

    Two zero forecasts are identical and score 1.
    """
    n = min(len(first), len(second))
    if n == 0:
        return 0.0

    total = 0.0
    for a, b in zip(first[:n], second[:n]):
        avg = (a + b) / 2
        if avg > 0:
            total += _unit(1.0 - abs(a - b) / avg)
        elif a == b:
            total += 1.0
    return _unit(total / n)


# ============================================================================
# Accuracy
# ============================================================================

def holdout_mape(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    MAPE in percent over a held-out tail.

    Zero actuals add no error but still count in the divisor, so a tail of
    zeros scores 0.
    """
    if len(actual) == 0:
        return 0.0

    total = 0.0
    for a, p in zip(actual, predicted):
        if a != 0:
            total += abs((a - p) / a)
    return total / len(actual) * 100


def accuracy_holdout_size(n_points: int, settings: Optional[EngineSettings] = None) -> int:
    """min(20% of the series, 6), never below 1."""
    settings = settings or EngineSettings()
    size = min(int(n_points * settings.holdout_fraction), settings.accuracy_max_holdout)
    return max(1, size)


def compute_accuracy(
    values: Sequence[float],
    method: ForecastMethod = ForecastMethod.ADAPTIVE,
    settings: Optional[EngineSettings] = None,
) -> ModelAccuracy:
    """
    Backtest ``method`` on the tail of a cleaned series.

    Parameters
    ----------
    values : sequence of float
        Cleaned series with at least 3 points.
    method : ForecastMethod, default=ADAPTIVE
        Method implied by the caller's options. ``adaptive`` is resolved on
        the training prefix.
    settings : EngineSettings, optional
        Engine constants.

    Returns
    -------
    ModelAccuracy
        MAPE (%), RMSE, R² of the prefix and ``max(0.5, 1 - MAPE/100)``.
    """
    settings = settings or EngineSettings()
    values = list(values)
    test_size = accuracy_holdout_size(len(values), settings)
    train, test = values[:-test_size], values[-test_size:]

    forecast = run_method(method, train, test_size, settings)

    mape = holdout_mape(test, forecast.values)
    rmse = root_mean_squared_error(test, forecast.values)
    r2 = fit_line(train).r2

    return ModelAccuracy(
        mape=mape,
        rmse=rmse,
        r2=r2,
        confidence=max(ACCURACY_CONFIDENCE_FLOOR, 1 - mape / 100),
    )


# ============================================================================
# Validation procedures
# ============================================================================

def cross_validation_score(
    values: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> float:
    """
    Contiguous k-fold cross-validation of the linear method.

    Folds of ``n // k`` points are held out in turn; the model is trained on
    the remaining points. Folds whose training set has 3 points or fewer, or
    whose fit fails, are skipped and excluded from the average. Returns 0 if
    no fold could be evaluated.
    """
    settings = settings or EngineSettings()
    values = list(values)
    folds = settings.validation_folds
    fold_size = len(values) // folds

    scores: List[float] = []
    for i in range(folds):
        start, end = i * fold_size, (i + 1) * fold_size
        test = values[start:end]
        train = values[:start] + values[end:]

        if not test or len(train) <= MIN_TRAIN_POINTS:
            LOGGER.debug("Skipping fold %d: %d train / %d test points", i, len(train), len(test))
            continue

        try:
            forecast = linear_forecast(train, len(test), settings)
        except (ComputationFailure, ArithmeticError) as exc:
            LOGGER.debug("Skipping fold %d: %s", i, exc)
            continue

        scores.append(relative_accuracy(test, forecast.values))

    if not scores:
        return 0.0
    return _unit(float(np.mean(scores)))


def holdout_score(
    values: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> float:
    """
    Train the linear method on the first 80%, score it on the last 20%.

    Returns 0 when the tail is empty or the prefix has fewer than 3 points.
    """
    settings = settings or EngineSettings()
    values = list(values)
    test_size = int(len(values) * settings.holdout_fraction)
    if test_size == 0:
        return 0.0

    train, test = values[:-test_size], values[-test_size:]
    if len(train) < MIN_TRAIN_POINTS:
        return 0.0

    forecast = linear_forecast(train, test_size, settings)
    return relative_accuracy(test, forecast.values)


def stability_score(
    values: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> float:
    """
    Compare linear forecasts trained on the first and the last 80%.

    Returns 0.5 when the subsets are too small to fit, and 0 when either fit
    fails.
    """
    settings = settings or EngineSettings()
    values = list(values)
    subset_size = int(len(values) * (1 - settings.holdout_fraction))
    if subset_size < MIN_TRAIN_POINTS:
        return 0.5

    early, late = values[:subset_size], values[-subset_size:]
    periods = settings.stability_periods
    try:
        first = linear_forecast(early, periods, settings)
        second = linear_forecast(late, periods, settings)
    except (ComputationFailure, ArithmeticError) as exc:
        LOGGER.debug("Stability test could not fit: %s", exc)
        return 0.0

    return forecast_similarity(first.values, second.values)


def validate_series(
    values: Sequence[float],
    settings: Optional[EngineSettings] = None,
) -> ModelValidation:
    """
    Run all three validation procedures on a cleaned series.

    Returns
    -------
    ModelValidation
        ``is_valid`` plus one recommendation per failed threshold.
    """
    settings = settings or EngineSettings()

    metrics = ValidationMetrics(
        cross_validation_score=cross_validation_score(values, settings),
        holdout_score=holdout_score(values, settings),
        stability_score=stability_score(values, settings),
    )

    recommendations = []
    if metrics.cross_validation_score <= settings.cross_validation_threshold:
        recommendations.append(RECOMMEND_MORE_DATA)
    if metrics.holdout_score <= settings.holdout_threshold:
        recommendations.append(RECOMMEND_OVERFITTING)
    if metrics.stability_score <= settings.stability_threshold:
        recommendations.append(RECOMMEND_VOLATILITY)

    return ModelValidation(
        is_valid=not recommendations,
        metrics=metrics,
        recommendations=recommendations,
    )


__all__ = [
    "relative_accuracy",
    "forecast_similarity",
    "holdout_mape",
    "accuracy_holdout_size",
    "compute_accuracy",
    "cross_validation_score",
    "holdout_score",
    "stability_score",
    "validate_series",
]
