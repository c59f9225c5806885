"""
Engine Data Models
==================

Pydantic records exchanged with the forecasting engine.

Inputs
------
- TimeSeries: ordered values with parallel timestamps
- ForecastingOptions: method, horizon, confidence level and hints

Outputs
-------
- ForecastResult: predictions, intervals, accuracy, insights, recommendations
- ModelValidation: validity flag, validation scores, remediation text
- ModelMetrics: static descriptive metrics of the statistical engine

TimeSeries deliberately accepts NaN, negative values and mismatched lengths
at construction. The engine checks those invariants itself so it can raise
its own error kinds before any statistics run.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel, Field

DEFAULT_TIME_COL = "ds"
DEFAULT_TARGET_COL = "y"


# =============================================================================
# Inputs
# =============================================================================

class ForecastMethod(str, Enum):
    """Forecasting methods the statistical engine can run."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    SEASONAL = "seasonal"
    ADAPTIVE = "adaptive"


class TimeSeries(BaseModel):
    """
    Historical series handed to the engine.

    Attributes
    ----------
    values : list[float]
        Observations, oldest first.
    timestamps : list[datetime]
        One timestamp per observation.
    metadata : dict, optional
        Free-form context (organisation, data type, ...). Never read by the
        engine.
    """
    values: List[float]
    timestamps: List[datetime] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    def __len__(self) -> int:
        return len(self.values)

    @classmethod
    def from_values(
        cls,
        values: Sequence[float],
        start: Optional[Union[str, datetime]] = None,
        freq: str = "MS",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "TimeSeries":
        """
        Build a series with regularly spaced timestamps.

        Parameters
        ----------
        values : sequence of float
            Observations, oldest first.
        start : str or datetime, optional
            First timestamp. If None, the series ends at the current month.
        freq : str, default="MS"
            Pandas frequency alias (month start by default).
        """
        values = [float(v) for v in values]
        if start is None:
            index = pd.date_range(
                end=pd.Timestamp.today().normalize(), periods=len(values), freq=freq
            )
        else:
            index = pd.date_range(start=start, periods=len(values), freq=freq)
        return cls(
            values=values,
            timestamps=[ts.to_pydatetime() for ts in index],
            metadata=metadata,
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        date_col: str = DEFAULT_TIME_COL,
        target_col: str = DEFAULT_TARGET_COL,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "TimeSeries":
        """
        Build a series from a long-format DataFrame of a single series.

        Rows are sorted by ``date_col``. Missing targets are kept as NaN so the
        engine can reject them explicitly.

        Raises
        ------
        ValueError
            If either column is missing.
        """
        missing = {date_col, target_col} - set(df.columns)
        if missing:
            raise ValueError(
                f"Columns not found in DataFrame: {missing}. "
                f"Available columns: {list(df.columns)}"
            )

        ordered = df.sort_values(date_col)
        return cls(
            values=ordered[target_col].astype(float).tolist(),
            timestamps=[
                ts.to_pydatetime() for ts in pd.to_datetime(ordered[date_col])
            ],
            metadata=metadata,
        )

    def to_frame(
        self,
        date_col: str = DEFAULT_TIME_COL,
        target_col: str = DEFAULT_TARGET_COL,
    ) -> pd.DataFrame:
        """Return the series as a two-column DataFrame."""
        return pd.DataFrame({
            date_col: pd.to_datetime(self.timestamps),
            target_col: self.values,
        })


class ForecastingOptions(BaseModel):
    """
    Per-call forecasting options.

    Attributes
    ----------
    method : ForecastMethod, default=ADAPTIVE
        Method to run. ``adaptive`` lets the engine choose.
    periods : int, default=6
        Number of future points to produce.
    confidence : float, default=0.95
        Probability level of the confidence intervals, in (0, 1].
    include_seasonality : bool, default=False
        Caller hint; the adaptive selector measures seasonality itself.
    locale_context : bool, default=False
        Append region-specific notes to the recommendations.
    anchor : datetime, optional
        Timestamp that forecast dates are offset from. Defaults to the wall
        clock at call time.
    """
    method: ForecastMethod = ForecastMethod.ADAPTIVE
    periods: int = Field(6, gt=0)
    confidence: float = Field(0.95, gt=0, le=1)
    include_seasonality: bool = False
    locale_context: bool = False
    anchor: Optional[datetime] = None


# =============================================================================
# Outputs
# =============================================================================

class ForecastPoint(BaseModel):
    """One predicted future value."""
    timestamp: datetime
    value: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)


class ConfidenceInterval(BaseModel):
    """Interval around a forecast point."""
    lower: float = Field(ge=0)
    upper: float
    probability: float


class ModelAccuracy(BaseModel):
    """Accuracy of the chosen method measured on a held-out tail."""
    mape: float = Field(ge=0)
    rmse: float = Field(ge=0)
    r2: float
    confidence: float = Field(ge=0.5, le=1)


class ValidationMetrics(BaseModel):
    """Scores of the three validation procedures, each in [0, 1]."""
    cross_validation_score: float = Field(ge=0, le=1)
    holdout_score: float = Field(ge=0, le=1)
    stability_score: float = Field(ge=0, le=1)


class ModelValidation(BaseModel):
    """Outcome of validate_model."""
    is_valid: bool
    metrics: ValidationMetrics
    recommendations: List[str] = Field(default_factory=list)


class ModelMetrics(BaseModel):
    """Static performance metadata reported by an engine."""
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    mape: float
    rmse: float


class ForecastResult(BaseModel):
    """
    Everything produced by one generate_forecast call.

    ``predictions`` and ``confidence`` are parallel: interval ``i`` belongs to
    prediction ``i``.
    """
    predictions: List[ForecastPoint]
    confidence: List[ConfidenceInterval]
    accuracy: ModelAccuracy
    insights: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    method: ForecastMethod


__all__ = [
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
]
