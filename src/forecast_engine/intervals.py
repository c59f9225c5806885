"""
Confidence Intervals
====================

Symmetric intervals of ``multiplier * stddev`` around each forecast point,
with the lower bound clamped at zero.
"""

from typing import List, Optional, Sequence

from .config import EngineSettings
from .models import ConfidenceInterval, ForecastPoint
from .stats import std


def z_multiplier(confidence: float, settings: Optional[EngineSettings] = None) -> float:
    """1.96 for 0.95, 1.645 for 0.90, 1.28 for anything else (by default)."""
    settings = settings or EngineSettings()
    return settings.z_multiplier(confidence)


def build_confidence_intervals(
    values: Sequence[float],
    predictions: Sequence[ForecastPoint],
    confidence: float,
    settings: Optional[EngineSettings] = None,
) -> List[ConfidenceInterval]:
    """
    Build one interval per prediction.

    Parameters
    ----------
    values : sequence of float
        Cleaned history; its population stddev sets the interval width.
    predictions : sequence of ForecastPoint
        Point forecasts.
    confidence : float
        Requested probability level, echoed on every interval.
    settings : EngineSettings, optional
        Source of the multiplier table.

    Returns
    -------
    list[ConfidenceInterval]
        Parallel to ``predictions``.
    """
    half_width = z_multiplier(confidence, settings) * std(values)
    return [
        ConfidenceInterval(
            lower=max(0.0, point.value - half_width),
            upper=point.value + half_width,
            probability=confidence,
        )
        for point in predictions
    ]


__all__ = ["z_multiplier", "build_confidence_intervals"]
