from datetime import datetime

from forecast_engine import ForecastingOptions, ForecastPoint, StatisticalForecastingEngine, TimeSeries
from forecast_engine.config import EngineSettings
from forecast_engine.insights import (
    generate_insights,
    generate_recommendations,
    safe_trend_slope,
)


def _points(values, confidence=0.9):
    return [
        ForecastPoint(timestamp=datetime(2024, i + 2, 1), value=v, confidence=confidence)
        for i, v in enumerate(values)
    ]


def test_trend_insights():
    rising = generate_insights(list(range(1, 13)), _points([13, 14]))
    assert rising[0] == "Strong upward trend detected in historical data", f"Got {rising}"
    assert "High volatility detected - consider risk management strategies" in rising
    assert "High confidence in forecast accuracy" in rising

    falling = generate_insights(list(range(12, 0, -1)), _points([1, 1], confidence=0.5))
    assert falling[0] == "Declining trend observed in recent periods"
    assert "Lower confidence due to data variability - monitor closely" in falling

    flat = generate_insights([100, 100.5, 100, 100.5, 100], _points([100], confidence=0.7))
    assert flat == [
        "Stable trend with minimal growth or decline",
        "Low volatility indicates stable business performance",
    ], f"Got {flat}"

    print("✓ Insight rules test passed")


def test_recommendation_rules():
    history = [100, 100, 100, 100, 100, 100]
    options = ForecastingOptions(periods=6)

    growth = generate_recommendations(history, _points([200] * 6), options)
    assert growth == [
        "Collect more historical data to improve forecast accuracy",
        "Consider shorter forecast periods for better accuracy",
        "Prepare for increased demand - consider scaling operations",
    ], f"Got {growth}"

    decline = generate_recommendations(history, _points([50] * 6), ForecastingOptions(periods=1))
    assert decline == [
        "Collect more historical data to improve forecast accuracy",
        "Declining forecast - review business strategy and market conditions",
    ], f"Got {decline}"

    steady = generate_recommendations([100] * 12, _points([100]), ForecastingOptions(periods=1))
    assert steady == [], f"Got {steady}"


def test_locale_notes_appended():
    options = ForecastingOptions(periods=1, locale_context=True)
    recs = generate_recommendations([100] * 12, _points([100]), options)
    assert recs == [
        "Consider seasonal factors specific to Zambian market conditions",
        "Monitor exchange rate impacts on business performance",
    ], f"Got {recs}"

    custom = EngineSettings(locale_notes=["Watch the harvest calendar"])
    recs = generate_recommendations([100] * 12, _points([100]), options, custom)
    assert recs[-1] == "Watch the harvest calendar"


def test_locale_notes_through_engine():
    series = TimeSeries.from_values([120, 130, 125, 140, 150, 145, 160, 170], start="2024-01-01")
    options = ForecastingOptions(periods=2, locale_context=True, anchor=datetime(2024, 9, 1))
    result = StatisticalForecastingEngine().generate_forecast(series, options)

    assert result.recommendations[-2:] == EngineSettings().locale_notes


def test_safe_trend_slope_single_point():
    assert safe_trend_slope([42]) == 0.0
