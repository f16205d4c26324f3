"""
Inventory optimizer: safety stock, reorder point, days of stock, EOQ and
prioritized reorder recommendations derived from a demand forecast.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date

import numpy as np

from config.config import InventoryConfig
from forecasting.trend import TrendEstimator
from models.enums import RecommendationPriority, RecommendationType
from models.exceptions import InvalidInputError
from models.forecast import DemandForecast
from models.inventory import InventoryPolicy, InventoryRecommendation
from models.sales import SalesObservation

logger = logging.getLogger(__name__)


class InventoryOptimizer:
    def __init__(
        self,
        config: InventoryConfig | None = None,
        trend_estimator: TrendEstimator | None = None,
    ):
        self.config = config or InventoryConfig()
        self.trend_estimator = trend_estimator or TrendEstimator()

    def safety_stock(self, observations: Sequence[SalesObservation], lead_time_days: int) -> int:
        """Z * stddev(daily quantity over the history window) * sqrt(lead time)."""
        if not observations:
            return 0
        std_dev = float(np.std([o.quantity for o in observations]))
        return math.ceil(self.config.z_score * std_dev * math.sqrt(lead_time_days))

    @staticmethod
    def reorder_point(forecast: DemandForecast, lead_time_days: int, safety_stock: int) -> int:
        """Forecast demand over the first lead_time_days days plus safety stock."""
        lead_time_demand = sum(forecast.quantities()[:lead_time_days])
        return lead_time_demand + safety_stock

    @staticmethod
    def days_of_stock(current_stock: int, forecast: DemandForecast) -> int:
        """Days survived while depleting stock by each forecast day, capped at the horizon."""
        remaining = current_stock
        days = 0
        for quantity in forecast.quantities():
            remaining -= quantity
            if remaining <= 0:
                break
            days += 1
        return days

    def economic_order_quantity(
        self,
        forecast: DemandForecast,
        unit_cost: float,
        order_cost: float | None = None,
    ) -> int:
        """sqrt(2 * annual demand * order cost / annual holding cost per unit), at least 1."""
        if unit_cost <= 0:
            raise InvalidInputError(f"unit_cost must be positive, got {unit_cost}")
        if forecast.horizon_days == 0:
            return 1
        annual_demand = forecast.total_predicted * (365 / forecast.horizon_days)
        holding_cost = unit_cost * self.config.holding_cost_rate
        per_order = self.config.order_cost if order_cost is None else order_cost
        eoq = math.sqrt((2 * annual_demand * per_order) / holding_cost)
        return max(1, math.ceil(eoq))

    def build_policy(
        self,
        observations: Sequence[SalesObservation],
        forecast: DemandForecast,
        current_stock: int,
        unit_cost: float,
        lead_time_days: int | None = None,
        order_cost: float | None = None,
    ) -> InventoryPolicy:
        if current_stock < 0:
            raise InvalidInputError(f"current_stock must not be negative, got {current_stock}")
        lead_time = self.config.default_lead_time_days if lead_time_days is None else lead_time_days
        if lead_time <= 0:
            raise InvalidInputError(f"lead_time_days must be positive, got {lead_time}")

        safety = self.safety_stock(observations, lead_time)
        return InventoryPolicy(
            safety_stock=safety,
            reorder_point=self.reorder_point(forecast, lead_time, safety),
            days_of_stock=self.days_of_stock(current_stock, forecast),
            economic_order_quantity=self.economic_order_quantity(forecast, unit_cost, order_cost),
        )

    def recommend(
        self,
        current_stock: int,
        forecast: DemandForecast,
        policy: InventoryPolicy,
        today: date,
    ) -> list[InventoryRecommendation]:
        """Advisory recommendations, most urgent first. Several may fire at once."""
        cfg = self.config
        recommendations: list[InventoryRecommendation] = []

        if current_stock <= policy.safety_stock:
            quantity = policy.reorder_point * 2
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.CRITICAL,
                    type=RecommendationType.REORDER,
                    message="Stock is at or below safety level. Immediate reorder required.",
                    action=f"Order {quantity} units immediately",
                    suggested_quantity=quantity,
                )
            )
        elif current_stock <= policy.reorder_point:
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.HIGH,
                    type=RecommendationType.REORDER,
                    message="Stock has reached reorder point.",
                    action=f"Order {policy.reorder_point} units",
                    suggested_quantity=policy.reorder_point,
                )
            )

        if policy.days_of_stock > cfg.overstock_days:
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.MEDIUM,
                    type=RecommendationType.OVERSTOCK,
                    message=(
                        f"Current stock will last {policy.days_of_stock} days. "
                        "Consider reducing orders or running promotions."
                    ),
                    action="Consider discount or promotional pricing",
                )
            )

        forecast_trend = self.trend_estimator.estimate_quantities(forecast.quantities())
        if forecast_trend > cfg.trend_threshold:
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.INFO,
                    type=RecommendationType.TREND,
                    message="Demand is trending upward. Consider increasing order quantities.",
                    action="Increase safety stock by 20%",
                )
            )
        elif forecast_trend < -cfg.trend_threshold:
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.INFO,
                    type=RecommendationType.TREND,
                    message="Demand is trending downward. Consider reducing order quantities.",
                    action="Reduce next order by 20%",
                )
            )

        if today.month in cfg.peak_months:
            recommendations.append(
                InventoryRecommendation(
                    priority=RecommendationPriority.MEDIUM,
                    type=RecommendationType.SEASONAL,
                    message="Holiday season approaching. Ensure adequate stock.",
                    action="Increase stock levels by 30%",
                )
            )

        recommendations.sort(key=lambda r: r.priority.rank)
        logger.debug(f"{len(recommendations)} inventory recommendations for stock {current_stock}")
        return recommendations
