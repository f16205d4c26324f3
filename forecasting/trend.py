"""
Linear trend estimation over a daily quantity series.
"""

from collections.abc import Sequence

import numpy as np

from models.sales import SalesObservation


class TrendEstimator:
    """
    Ordinary least squares of quantity against day index, normalized by mean
    quantity: the result is fractional growth per day. Short or empty series
    yield a flat trend rather than an error.
    """

    def __init__(self, min_observations: int = 7):
        self.min_observations = min_observations

    def estimate(self, observations: Sequence[SalesObservation]) -> float:
        return self.estimate_quantities([o.quantity for o in observations])

    def estimate_quantities(self, quantities: Sequence[int]) -> float:
        n = len(quantities)
        if n < self.min_observations or n < 2:
            return 0.0

        # Integer sums keep a constant series at exactly zero slope
        y = np.asarray(quantities, dtype=np.int64)
        x = np.arange(n, dtype=np.int64)
        sum_x = int(x.sum())
        sum_y = int(y.sum())
        sum_xy = int((x * y).sum())
        sum_xx = int((x * x).sum())

        mean_y = sum_y / n
        if mean_y == 0:
            return 0.0
        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
        return float(slope / mean_y)
