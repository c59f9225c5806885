import math
from datetime import datetime

import numpy as np

from forecast_engine.config import EngineSettings
from forecast_engine.methods import (
    SeriesProfile,
    exponential_smoothing_forecast,
    forecast_timestamps,
    linear_forecast,
    optimize_alpha,
    run_method,
    seasonal_forecast,
    select_method,
)
from forecast_engine.models import ForecastMethod


def test_linear_forecast_extends_exact_line():
    """[1..6] forecasts 7, 8, 9 with a perfect fit"""
    forecast = linear_forecast([1, 2, 3, 4, 5, 6], 3)

    assert forecast.method == ForecastMethod.LINEAR
    assert np.allclose(forecast.values, [7, 8, 9]), f"Got {forecast.values}"
    assert math.isclose(forecast.params["r2"], 1.0), "R² should be 1"
    for conf in forecast.confidences:
        assert 0.3 <= conf <= 0.95, f"Linear confidence {conf} out of range"

    print("✓ Linear forecast test passed")


def test_linear_forecast_clamps_negative_values():
    forecast = linear_forecast([10, 8, 6, 4], 10)

    assert all(v >= 0 for v in forecast.values), f"Negative forecast: {forecast.values}"
    assert forecast.values[-1] == 0.0, "Long declining horizon should hit zero"


def test_exponential_alpha_from_grid():
    """Chosen alpha is always one of the grid candidates"""
    np.random.seed(42)
    values = list(np.random.uniform(80, 120, 24))
    settings = EngineSettings()
    forecast = exponential_smoothing_forecast(values, 4, settings)

    assert forecast.params["alpha"] in settings.alpha_grid, \
        f"Alpha {forecast.params['alpha']} not in grid"
    assert len(set(forecast.confidences)) == 1, "All points share one confidence"
    assert 0.3 <= forecast.confidences[0] <= 0.95, "Confidence out of range"
    assert all(v >= 0 for v in forecast.values), "Negative forecast"

    print("✓ Exponential smoothing test passed")


def test_exponential_flat_series_keeps_first_alpha():
    """Ties keep the earliest grid value"""
    forecast = exponential_smoothing_forecast([50, 50, 50, 50], 3)

    assert forecast.params["alpha"] == 0.1, f"Expected 0.1, got {forecast.params['alpha']}"
    assert forecast.values == [50.0, 50.0, 50.0], f"Got {forecast.values}"
    assert optimize_alpha([5], (0.1, 0.5)) == 0.3, "Single point should fall back to 0.3"


def test_seasonal_forecast_confidence_floor():
    values = [100 + 30 * math.sin(2 * math.pi * i / 12) for i in range(24)]
    forecast = seasonal_forecast(values, 12)

    assert forecast.method == ForecastMethod.SEASONAL
    assert len(forecast.params["seasonal"]) == 12, "One index per phase"
    assert len(forecast.values) == 12
    for conf in forecast.confidences:
        assert 0.5 <= conf <= 1.0, f"Seasonal confidence {conf} out of range"

    # Peak phase (index 3) should stay above trough phase (index 9)
    assert forecast.values[3] > forecast.values[9], "Seasonal shape lost"


def test_select_method_rules():
    """Seasonality first, then trend with low volatility, else smoothing"""
    cases = [
        (SeriesProfile(0.0, 0.5, 0.0), ForecastMethod.SEASONAL),
        (SeriesProfile(0.9, 0.5, 0.0), ForecastMethod.SEASONAL),
        (SeriesProfile(0.6, 0.0, 0.1), ForecastMethod.LINEAR),
        (SeriesProfile(0.6, 0.0, 0.5), ForecastMethod.EXPONENTIAL),
        (SeriesProfile(0.1, 0.1, 0.1), ForecastMethod.EXPONENTIAL),
    ]
    for profile, expected in cases:
        assert select_method(profile) == expected, f"{profile} -> {select_method(profile)}"

    print("✓ Method selection test passed")


def test_adaptive_picks_seasonal_for_cyclic_series():
    values = [1 + 0.5 * math.sin(2 * math.pi * i / 12) for i in range(24)]
    forecast = run_method(ForecastMethod.ADAPTIVE, values, 6)

    assert forecast.method == ForecastMethod.SEASONAL, f"Got {forecast.method}"


def test_run_method_accepts_string_method():
    forecast = run_method("linear", [1, 2, 3, 4], 2)
    assert forecast.method == ForecastMethod.LINEAR


def test_forecast_timestamps_month_offsets():
    """Dates are whole months from the anchor, clamped at month end"""
    stamps = forecast_timestamps(3, datetime(2024, 1, 15))
    assert stamps == [
        datetime(2024, 2, 15),
        datetime(2024, 3, 15),
        datetime(2024, 4, 15),
    ], f"Got {stamps}"

    month_end = forecast_timestamps(3, datetime(2024, 1, 31))
    assert month_end == [
        datetime(2024, 2, 29),
        datetime(2024, 3, 31),
        datetime(2024, 4, 30),
    ], f"Got {month_end}"

    print("✓ Timestamp test passed")
