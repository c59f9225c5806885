import math

import numpy as np

from forecast_engine.exceptions import ComputationFailure
from forecast_engine.preprocessing import (
    count_outliers,
    outlier_bounds,
    remove_outliers,
)
from forecast_engine.stats import (
    fit_line,
    mean_absolute_percentage_error,
    seasonal_component,
    seasonality_strength,
    volatility,
    z_score,
)


def test_spike_replaced_with_median():
    """A single spike in a flat series is replaced by the median"""
    values = [10, 10, 10, 10, 100, 10, 10, 10]
    cleaned = remove_outliers(values)

    assert cleaned == [10.0] * 8, f"Spike not removed: {cleaned}"
    assert values[4] == 100, "Input series was modified"

    print("✓ Spike replacement test passed")


def test_outlier_removal_preserves_length_and_regular_points():
    """Cleaning never changes length and leaves in-range points alone"""
    np.random.seed(42)
    values = list(np.random.uniform(50, 150, 40)) + [1000.0]
    cleaned = remove_outliers(values)
    bounds = outlier_bounds(values)

    assert len(cleaned) == len(values), "Length changed"
    for raw, clean in zip(values, cleaned):
        if bounds.contains(raw):
            assert clean == raw, f"Regular point {raw} changed to {clean}"
    assert cleaned[-1] == float(np.median(values)), "Outlier not replaced by median"

    print("✓ Length preservation test passed")


def test_outlier_removal_idempotent_with_fixed_bounds():
    """Re-cleaning with the same fences changes nothing"""
    values = [12, 15, 14, 13, 90, 16, 14, 0, 15, 13]
    bounds = outlier_bounds(values)
    once = remove_outliers(values, bounds=bounds)
    twice = remove_outliers(once, bounds=bounds)

    assert once == twice, f"Not idempotent: {once} vs {twice}"
    assert count_outliers(values) == 2, "Expected 90 and 0 to be outliers"

    print("✓ Idempotence test passed")


def test_fit_line_exact_series():
    """OLS recovers an exact line with R² = 1"""
    fit = fit_line([1, 2, 3, 4, 5, 6])

    assert math.isclose(fit.slope, 1.0), f"Slope should be 1, got {fit.slope}"
    assert math.isclose(fit.intercept, 1.0), f"Intercept should be 1, got {fit.intercept}"
    assert math.isclose(fit.r2, 1.0), f"R² should be 1, got {fit.r2}"

    flat = fit_line([7, 7, 7])
    assert flat.slope == 0 and flat.r2 == 1.0, "Flat series should fit exactly"


def test_fit_line_needs_two_points():
    try:
        fit_line([5])
    except ComputationFailure:
        pass
    else:
        raise AssertionError("Single point regression should fail")


def test_seasonal_component_unreached_phases():
    """Phases the history never reaches are None"""
    seasonal = seasonal_component([10, 20, 30, 40, 50, 60], season_length=12)

    assert len(seasonal) == 12, "One entry per phase"
    assert all(s is not None for s in seasonal[:6]), "Observed phases need an index"
    assert all(s is None for s in seasonal[6:]), "Unobserved phases must be None"
    assert math.isclose(seasonal[0], 10 / 35), f"Unexpected index {seasonal[0]}"

    assert seasonal_component([0, 0, 0], season_length=4) == [1.0, 1.0, 1.0, None], \
        "All-zero series should get a neutral index"


def test_seasonality_strength_short_series():
    assert seasonality_strength(list(range(1, 20))) == 0.0, \
        "Series shorter than two cycles carry no seasonality"

    values = [1 + 0.5 * math.sin(2 * math.pi * i / 12) for i in range(24)]
    assert seasonality_strength(values) > 0.3, "Pure seasonal series should be seasonal"


def test_zero_mean_ratios_and_degenerate_scores():
    assert volatility([0, 0, 0]) == 0.0, "Zero-mean volatility should be 0"
    assert z_score([5, 5, 5], 5) == 0.0, "Prediction at the mean of a flat series"
    assert math.isinf(z_score([5, 5, 5], 6)), "Prediction off a flat series"
    assert mean_absolute_percentage_error([0, 0], [1, 2]) == 100.0, \
        "No evaluable points should give 100% MAPE"
    assert math.isclose(mean_absolute_percentage_error([100, 0, 50], [110, 3, 50]), 5.0), \
        "Zero actuals must be skipped"

    print("✓ Degenerate statistics test passed")


def test_quartiles_use_order_statistics():
    """Fences come from averaged order statistics, so 12 stays inside them"""
    values = [1, 2, 3, 4, 5, 6, 7, 12]
    bounds = outlier_bounds(values)

    assert (bounds.lower, bounds.upper) == (-3.5, 12.5), f"Got {bounds}"
    assert remove_outliers(values) == [float(v) for v in values], \
        "No point lies outside the fences"

    odd = outlier_bounds([1, 2, 3, 4, 5, 6, 7])
    assert (odd.lower, odd.upper) == (-4.0, 12.0), f"Got {odd}"


def test_fit_line_r2_matches_residuals():
    np.random.seed(3)
    values = 10 + 2 * np.arange(15) + np.random.normal(0, 3, 15)
    fit = fit_line(values)

    x = np.arange(15)
    residuals = values - (fit.intercept + fit.slope * x)
    expected = 1 - np.sum(residuals ** 2) / np.sum((values - np.mean(values)) ** 2)
    assert math.isclose(fit.r2, expected, rel_tol=1e-9), f"{fit.r2} vs {expected}"
