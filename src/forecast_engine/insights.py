"""
Insights & Recommendations
==========================

Rule-based text derived from the cleaned history and the forecast.

Insights describe the data (trend direction, volatility, forecast
confidence). Recommendations suggest actions (collect more data, shorten the
horizon, react to the projected level, regional notes).
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import EngineSettings
from .exceptions import ComputationFailure
from .models import ForecastingOptions, ForecastPoint
from .stats import mean, trend_slope, volatility

LOGGER = logging.getLogger(__name__)

STRONG_TREND_SLOPE = 0.1
HIGH_VOLATILITY = 0.3
LOW_VOLATILITY = 0.1
HIGH_CONFIDENCE = 0.8
LOW_CONFIDENCE = 0.6

MIN_HISTORY_FOR_ACCURACY = 12
GROWTH_RATIO = 1.2
DECLINE_RATIO = 0.8


def safe_trend_slope(values: Sequence[float]) -> float:
    """Trend slope, or 0 when the slope cannot be computed."""
    try:
        return trend_slope(values)
    except (ComputationFailure, ArithmeticError, ValueError) as exc:
        LOGGER.debug("Trend slope unavailable, using 0: %s", exc)
        return 0.0


def generate_insights(
    values: Sequence[float],
    predictions: Sequence[ForecastPoint],
) -> List[str]:
    """
    Describe trend, volatility and forecast confidence.

    Parameters
    ----------
    values : sequence of float
        Cleaned history.
    predictions : sequence of ForecastPoint
        Forecast produced from ``values``.

    Returns
    -------
    list[str]
        Always starts with a trend statement.
    """
    insights = []

    slope = safe_trend_slope(values)
    if slope > STRONG_TREND_SLOPE:
        insights.append("Strong upward trend detected in historical data")
    elif slope < -STRONG_TREND_SLOPE:
        insights.append("Declining trend observed in recent periods")
    else:
        insights.append("Stable trend with minimal growth or decline")

    vol = volatility(values)
    if vol > HIGH_VOLATILITY:
        insights.append("High volatility detected - consider risk management strategies")
    elif vol < LOW_VOLATILITY:
        insights.append("Low volatility indicates stable business performance")

    if predictions:
        avg_confidence = float(np.mean([p.confidence for p in predictions]))
        if avg_confidence > HIGH_CONFIDENCE:
            insights.append("High confidence in forecast accuracy")
        elif avg_confidence < LOW_CONFIDENCE:
            insights.append("Lower confidence due to data variability - monitor closely")

    return insights


def generate_recommendations(
    values: Sequence[float],
    predictions: Sequence[ForecastPoint],
    options: ForecastingOptions,
    settings: Optional[EngineSettings] = None,
) -> List[str]:
    """
    Suggest follow-up actions for the caller.

    Rules, in order: short history (< 12 points), horizon longer than half
    the history, projected mean above 120% or below 80% of the historical
    mean, and the configured regional notes when ``locale_context`` is set.
    """
    settings = settings or EngineSettings()
    recommendations = []

    if len(values) < MIN_HISTORY_FOR_ACCURACY:
        recommendations.append("Collect more historical data to improve forecast accuracy")

    if options.periods > len(values) / 2:
        recommendations.append("Consider shorter forecast periods for better accuracy")

    if predictions:
        avg_predicted = float(np.mean([p.value for p in predictions]))
        avg_historical = mean(values)
        if avg_predicted > avg_historical * GROWTH_RATIO:
            recommendations.append("Prepare for increased demand - consider scaling operations")
        elif avg_predicted < avg_historical * DECLINE_RATIO:
            recommendations.append(
                "Declining forecast - review business strategy and market conditions"
            )

    if options.locale_context:
        recommendations.extend(settings.locale_notes)

    return recommendations


__all__ = [
    "safe_trend_slope",
    "generate_insights",
    "generate_recommendations",
]
