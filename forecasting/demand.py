"""
Demand forecaster composing average demand, linear trend and seasonal factors
into a day-by-day forecast with a fixed low/high band and a confidence score.
"""

import logging
from collections.abc import Sequence
from datetime import date, timedelta

import numpy as np

from config.config import ForecastConfig
from models.exceptions import InvalidInputError
from models.forecast import DemandForecast, ForecastPoint, SeasonalProfile
from models.sales import SalesObservation
from utils.numeric import round_half_up

logger = logging.getLogger(__name__)


class DemandForecaster:
    def __init__(self, config: ForecastConfig | None = None):
        self.config = config or ForecastConfig()

    def forecast(
        self,
        observations: Sequence[SalesObservation],
        trend: float,
        profile: SeasonalProfile,
        horizon_days: int,
        today: date,
    ) -> DemandForecast:
        """
        Predict demand for each of the horizon_days days following today.

        The trend is applied linearly with horizon distance (never compounded),
        and the band is a fixed +/- band_width around the prediction.
        """
        if horizon_days <= 0:
            raise InvalidInputError(f"horizon_days must be positive, got {horizon_days}")

        mean_quantity = self._mean(observations)
        band = self.config.band_width
        points = []
        for i in range(1, horizon_days + 1):
            day = today + timedelta(days=i)
            base = mean_quantity * (1 + trend * i)
            predicted = max(0.0, base * profile.factor_for(day))
            points.append(
                ForecastPoint(
                    date=day,
                    quantity=round_half_up(predicted),
                    low=round_half_up(predicted * (1 - band)),
                    high=round_half_up(predicted * (1 + band)),
                )
            )

        forecast = DemandForecast(
            daily_predictions=tuple(points),
            total_predicted=sum(p.quantity for p in points),
            confidence=self.confidence(observations),
            insufficient_data=self.is_insufficient(observations),
        )
        logger.debug(
            f"Forecast {horizon_days}d from mean {mean_quantity:.2f}, trend {trend:.4f}: "
            f"total {forecast.total_predicted}, confidence {forecast.confidence}"
        )
        return forecast

    def confidence(self, observations: Sequence[SalesObservation]) -> int:
        """
        Score 0..max_confidence from data volume, consistency (inverse
        coefficient of variation), recent activity and sales-day coverage.
        """
        cfg = self.config
        n = len(observations)
        if n == 0:
            return 0

        quantities = np.array([o.quantity for o in observations], dtype=float)
        mean = quantities.mean()

        score = min(n / cfg.history_days, 1.0) * cfg.volume_weight

        # All-zero history earns no consistency credit
        cv = quantities.std() / mean if mean > 0 else 1.0
        score += (1 - min(cv, 1.0)) * cfg.consistency_weight

        if quantities[-cfg.recent_activity_days:].sum() > 0:
            score += cfg.recent_activity_weight

        score += (np.count_nonzero(quantities) / n) * cfg.coverage_weight

        return min(round_half_up(score), cfg.max_confidence)

    def is_insufficient(self, observations: Sequence[SalesObservation]) -> bool:
        if len(observations) < self.config.min_trend_observations:
            return True
        return not any(o.quantity > 0 for o in observations)

    @staticmethod
    def _mean(observations: Sequence[SalesObservation]) -> float:
        if not observations:
            return 0.0
        return sum(o.quantity for o in observations) / len(observations)
