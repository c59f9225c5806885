"""
Forecast Report
===============

Presentation helpers for a ForecastResult, used by the calling service and
in notebooks.

Features:
- Tabular view of predictions and intervals (pandas)
- Text report for non-notebook use
- Interactive chart of history, forecast and interval band (plotly)
- JSON save/load
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd
import plotly.graph_objects as go

from .models import ForecastResult, ModelValidation, TimeSeries

FORECAST_COLORS = {
    "history": "#4C78A8",
    "forecast": "#E45756",
    "band": "rgba(228, 87, 86, 0.15)",
}


@dataclass
class ForecastReport:
    """
    Report card for one forecast.

    Attributes
    ----------
    result : ForecastResult
        Output of ``generate_forecast``.
    validation : ModelValidation, optional
        Output of ``validate_model`` for the same series.
    history : TimeSeries, optional
        Series the forecast was produced from, used for plotting.
    series_name : str
        Name for display purposes.
    generated_at : str
        Timestamp when the report was generated.

    Examples
    --------
    >>> report = ForecastReport(result, validation, history=series, series_name="Revenue")
    >>> report.to_frame()           # predictions + intervals
    >>> report.display()            # text version
    >>> report.figure().show()      # interactive chart
    >>> report.save("revenue.json")
    >>> loaded = ForecastReport.load("revenue.json")
    """
    result: ForecastResult
    validation: Optional[ModelValidation] = None
    history: Optional[TimeSeries] = None
    series_name: str = "series"
    generated_at: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d %H:%M"))

    def __repr__(self):
        return (
            f"ForecastReport('{self.series_name}': {len(self.result.predictions)} periods, "
            f"method={self.result.method.value}, MAPE={self.result.accuracy.mape:.1f}%)"
        )

    def to_frame(self) -> pd.DataFrame:
        """
        Predictions and intervals as one row per forecast period.

        Columns: ds, y_pred, lower, upper, probability, confidence.
        """
        rows = [
            {
                "ds": point.timestamp,
                "y_pred": point.value,
                "lower": interval.lower,
                "upper": interval.upper,
                "probability": interval.probability,
                "confidence": point.confidence,
            }
            for point, interval in zip(self.result.predictions, self.result.confidence)
        ]
        df = pd.DataFrame(
            rows, columns=["ds", "y_pred", "lower", "upper", "probability", "confidence"]
        )
        df["ds"] = pd.to_datetime(df["ds"])
        return df

    def display(self):
        """Print text version of the report."""
        accuracy = self.result.accuracy
        print("\n" + "=" * 70)
        print(f"FORECAST REPORT: {self.series_name}")
        print(f"   Generated: {self.generated_at}")
        print(f"   Method:    {self.result.method.value}")
        print("=" * 70)

        print(f"\n{'Date':<12} {'Forecast':>12} {'Lower':>12} {'Upper':>12} {'Conf':>6}")
        print("-" * 70)
        for _, row in self.to_frame().iterrows():
            print(
                f"{row['ds'].date()!s:<12} {row['y_pred']:>12,.2f} "
                f"{row['lower']:>12,.2f} {row['upper']:>12,.2f} {row['confidence']:>6.2f}"
            )

        print("\nACCURACY")
        print("-" * 70)
        print(f"  {'MAPE':<25} {accuracy.mape:.2f}%")
        print(f"  {'RMSE':<25} {accuracy.rmse:,.2f}")
        print(f"  {'R²':<25} {accuracy.r2:.3f}")
        print(f"  {'Confidence':<25} {accuracy.confidence:.2f}")

        if self.validation is not None:
            metrics = self.validation.metrics
            status = "VALID" if self.validation.is_valid else "NOT VALID"
            print(f"\nVALIDATION ({status})")
            print("-" * 70)
            print(f"  {'Cross-validation':<25} {metrics.cross_validation_score:.2f}")
            print(f"  {'Holdout':<25} {metrics.holdout_score:.2f}")
            print(f"  {'Stability':<25} {metrics.stability_score:.2f}")
            for rec in self.validation.recommendations:
                print(f"  → {rec}")

        if self.result.insights:
            print("\nINSIGHTS")
            print("-" * 70)
            for insight in self.result.insights:
                print(f"  • {insight}")

        if self.result.recommendations:
            print("\nRECOMMENDATIONS")
            print("-" * 70)
            for rec in self.result.recommendations:
                print(f"  → {rec}")

        print("=" * 70)
        return self

    def figure(
        self,
        figsize: Tuple[int, int] = (900, 500),
        title: Optional[str] = None,
    ) -> go.Figure:
        """
        Plot history, forecast and interval band.

        Parameters
        ----------
        figsize : tuple[int, int], default=(900, 500)
            Figure size as (width, height).
        title : str, optional
            Custom title. Auto-generated if None.

        Returns
        -------
        plotly.graph_objects.Figure
            Interactive line chart.
        """
        forecast_df = self.to_frame()
        fig = go.Figure()

        if self.history is not None:
            history_df = self.history.to_frame()
            fig.add_trace(
                go.Scatter(
                    x=history_df["ds"],
                    y=history_df["y"],
                    mode="lines+markers",
                    name="History",
                    line=dict(color=FORECAST_COLORS["history"], width=2),
                )
            )

        # Interval band: upper bound, then lower bound filled up to it
        fig.add_trace(
            go.Scatter(
                x=forecast_df["ds"],
                y=forecast_df["upper"],
                mode="lines",
                line=dict(width=0),
                showlegend=False,
                hoverinfo="skip",
            )
        )
        probability = forecast_df["probability"].iloc[0] if len(forecast_df) else 0
        fig.add_trace(
            go.Scatter(
                x=forecast_df["ds"],
                y=forecast_df["lower"],
                mode="lines",
                line=dict(width=0),
                fill="tonexty",
                fillcolor=FORECAST_COLORS["band"],
                name=f"{probability:.0%} interval",
            )
        )
        fig.add_trace(
            go.Scatter(
                x=forecast_df["ds"],
                y=forecast_df["y_pred"],
                mode="lines+markers",
                name=f"Forecast ({self.result.method.value})",
                line=dict(color=FORECAST_COLORS["forecast"], width=2, dash="dash"),
            )
        )

        fig.update_layout(
            title=dict(
                text=title or f"Forecast: {self.series_name}",
                x=0.5,
                xanchor="center",
                font=dict(size=16, color="#333333"),
            ),
            xaxis_title="Date",
            yaxis_title="Value",
            width=figsize[0],
            height=figsize[1],
            hovermode="x unified",
            plot_bgcolor="white",
            paper_bgcolor="white",
            legend=dict(
                orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1
            ),
        )
        fig.update_xaxes(showgrid=False)
        fig.update_yaxes(
            showgrid=True,
            gridwidth=1,
            gridcolor="rgba(128, 128, 128, 0.2)",
            rangemode="tozero",
        )
        return fig

    def save(self, path):
        """
        Save report to JSON.

        Parameters
        ----------
        path : str or Path
            Output path (.json recommended)
        """
        path = Path(path)
        data = {
            "series_name": self.series_name,
            "generated_at": self.generated_at,
            "result": self.result.model_dump(mode="json"),
            "validation": (
                self.validation.model_dump(mode="json") if self.validation else None
            ),
            "history": self.history.model_dump(mode="json") if self.history else None,
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        print(f"✓ Saved report to {path.name}")

    @classmethod
    def load(cls, path) -> "ForecastReport":
        """
        Load report from JSON.

        Parameters
        ----------
        path : str or Path
            Path to saved report

        Returns
        -------
        ForecastReport
            Reconstructed report object
        """
        path = Path(path)
        with open(path, "r") as f:
            data = json.load(f)

        return cls(
            result=ForecastResult.model_validate(data["result"]),
            validation=(
                ModelValidation.model_validate(data["validation"])
                if data.get("validation") else None
            ),
            history=(
                TimeSeries.model_validate(data["history"])
                if data.get("history") else None
            ),
            series_name=data["series_name"],
            generated_at=data["generated_at"],
        )


__all__ = ["ForecastReport"]
