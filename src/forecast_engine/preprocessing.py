"""
Outlier Preprocessing
=====================

IQR-based outlier handling applied to every series before forecasting.

Points outside [Q1 - 1.5*IQR, Q3 + 1.5*IQR] are replaced with the median of
the original series. Bounds and median are computed once on the input, never
iteratively, and the input sequence is left untouched.
"""

from typing import List, NamedTuple, Optional, Sequence

import numpy as np

IQR_FACTOR = 1.5


class OutlierBounds(NamedTuple):
    """Closed interval of values considered regular."""
    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


def outlier_bounds(values: Sequence[float], factor: float = IQR_FACTOR) -> OutlierBounds:
    """
    Compute Tukey fences for a series.

    Parameters
    ----------
    values : sequence of float
        Non-empty series.
    factor : float, default=1.5
        IQR multiplier.

    Returns
    -------
    OutlierBounds
        (Q1 - factor*IQR, Q3 + factor*IQR)
    """
    arr = np.asarray(values, dtype=float)
    # Order statistic x[ceil(n*p) - 1], averaged with its neighbour when n*p is whole
    q1, q3 = np.quantile(arr, [0.25, 0.75], method="averaged_inverted_cdf")
    iqr = q3 - q1
    return OutlierBounds(float(q1 - factor * iqr), float(q3 + factor * iqr))


def count_outliers(values: Sequence[float], factor: float = IQR_FACTOR) -> int:
    """Number of points lying outside the IQR fences."""
    bounds = outlier_bounds(values, factor)
    return sum(1 for v in values if not bounds.contains(v))


def remove_outliers(
    values: Sequence[float],
    factor: float = IQR_FACTOR,
    bounds: Optional[OutlierBounds] = None,
) -> List[float]:
    """
    Replace IQR outliers with the median of the original series.

    Parameters
    ----------
    values : sequence of float
        Raw series. Not modified.
    factor : float, default=1.5
        IQR multiplier.
    bounds : OutlierBounds, optional
        Precomputed fences. Computed from ``values`` when omitted.

    Returns
    -------
    list[float]
        New series of the same length.

    Examples
    --------
    >>> remove_outliers([10, 10, 10, 10, 100, 10, 10, 10])
    [10.0, 10.0, 10.0, 10.0, 10.0, 10.0, 10.0, 10.0]
    """
    if bounds is None:
        bounds = outlier_bounds(values, factor)
    median = float(np.median(np.asarray(values, dtype=float)))
    return [float(v) if bounds.contains(v) else median for v in values]


__all__ = [
    "OutlierBounds",
    "outlier_bounds",
    "count_outliers",
    "remove_outliers",
]
