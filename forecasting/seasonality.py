"""
Seasonal decomposition of a daily sales series into weekday and month multipliers.
"""

import logging
from collections.abc import Mapping, Sequence

import numpy as np

from config.config import DEFAULT_MONTH_FACTORS
from models.forecast import SeasonalProfile
from models.sales import SalesObservation

logger = logging.getLogger(__name__)


class SeasonalDecomposer:
    """
    Derives day-of-week factors from history.

    Month factors are not fitted: a 90-day window cannot support a monthly
    estimate, so a fixed annual retail profile is used (overridable).
    """

    def __init__(
        self,
        month_factors: Mapping[int, float] | None = None,
        factor_floor: float = 0.01,
    ):
        self.factor_floor = factor_floor
        source = DEFAULT_MONTH_FACTORS if month_factors is None else month_factors
        missing = set(range(1, 13)) - set(source)
        if missing:
            raise ValueError(f"month_factors is missing months {sorted(missing)}")
        self.month_factors = {m: self._floor(f) for m, f in source.items()}

    def _floor(self, factor: float) -> float:
        return max(float(factor), self.factor_floor)

    def weekday_factors(self, observations: Sequence[SalesObservation]) -> tuple[float, ...]:
        if not observations:
            return (1.0,) * 7

        quantities = np.array([o.quantity for o in observations], dtype=float)
        weekdays = np.array([o.weekday for o in observations])
        overall_mean = quantities.mean()
        if overall_mean == 0:
            return (1.0,) * 7

        factors = []
        for day in range(7):
            on_day = quantities[weekdays == day]
            if on_day.size == 0:
                # No observations for this weekday: assume average demand
                factors.append(1.0)
                continue
            factors.append(self._floor(on_day.mean() / overall_mean))
        return tuple(factors)

    def decompose(self, observations: Sequence[SalesObservation]) -> SeasonalProfile:
        profile = SeasonalProfile(
            weekday_factors=self.weekday_factors(observations),
            month_factors=self.month_factors,
        )
        logger.debug(f"Weekday factors: {[round(f, 3) for f in profile.weekday_factors]}")
        return profile
