"""
Price optimizer blending demand, inventory pressure, seasonality and
competitor prices into a bounded, psychologically rounded price.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date

from config.config import PricingConfig
from models.enums import PriceRecommendationClass
from models.exceptions import InvalidInputError
from models.pricing import (
    CompetitorSummary,
    EstimatedImpact,
    PriceRecommendation,
    PricingFactors,
)
from utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)


class PriceOptimizer:
    """
    The multiplier starts at 1.0 and each signal adds to it. The resulting
    price is clamped to the margin band [cost * (1 + min_margin),
    cost * (1 + max_margin)] before and after rounding, so no combination of
    signals can leave the band.
    """

    def __init__(self, config: PricingConfig | None = None):
        self.config = config or PricingConfig()

    # --- Multiplier components ---

    def demand_adjustment(self, demand_score: int | None) -> float:
        cfg = self.config
        if demand_score is None:
            return 0.0
        if demand_score > cfg.high_demand_score:
            return cfg.high_demand_adjustment
        if demand_score > cfg.elevated_demand_score:
            return cfg.elevated_demand_adjustment
        if demand_score < cfg.low_demand_score:
            return cfg.low_demand_adjustment
        return 0.0

    def inventory_factor(self, stock: int, reorder_level: int | None = None) -> float:
        """Scarce stock nudges the price up, excess stock nudges it down."""
        level = self.config.default_reorder_level if reorder_level is None else reorder_level
        if stock <= 0:
            # Out of stock: nothing to price against
            return 0.0
        if stock <= level * 0.5:
            return 0.10
        if stock <= level:
            return 0.05
        if stock > level * 5:
            return -0.10
        if stock > level * 3:
            return -0.05
        return 0.0

    def seasonal_factor(self, category: str, today: date) -> float:
        cfg = self.config
        factor = 0.0
        if today.month in cfg.holiday_months:
            factor += cfg.holiday_adjustment
        if today.month in cfg.post_holiday_months:
            factor += cfg.post_holiday_adjustment
        if today.weekday() >= 5:
            factor += cfg.weekend_adjustment

        season = cfg.category_seasons.get(category)
        if season:
            if today.month in season.get("peak", ()):
                factor += cfg.category_adjustment
            elif today.month in season.get("low", ()):
                factor -= cfg.category_adjustment
        return factor

    def competitor_adjustment(self, current_price: float, competitor_avg: float | None) -> float:
        """Dampened pull toward the competitor average."""
        if competitor_avg is None:
            return 0.0
        cfg = self.config
        diff = (competitor_avg - current_price) / current_price
        return clamp(diff * cfg.competitor_weight, -cfg.competitor_cap, cfg.competitor_cap)

    # --- Bounding and rounding ---

    def price_bounds(self, cost_price: float) -> tuple[float, float]:
        return (
            cost_price * (1 + self.config.min_margin),
            cost_price * (1 + self.config.max_margin),
        )

    @staticmethod
    def round_price(price: float) -> float:
        """Psychological price point: x.99 under 10, nearest 5 minus 0.01 under 100, nearest 10 minus 1 above."""
        if price < 10:
            return round(math.floor(price) + 0.99, 2)
        if price < 100:
            return round(round_half_up(price / 5) * 5 - 0.01, 2)
        return float(round_half_up(price / 10) * 10 - 1)

    @staticmethod
    def _price_step(price: float) -> float:
        if price < 10:
            return 1.0
        if price < 100:
            return 5.0
        return 10.0

    def fit_to_band(self, price: float, lower: float, upper: float) -> float:
        """Round price, moving one price point inward if rounding left the band."""
        candidate = self.round_price(price)
        if lower <= candidate <= upper:
            return candidate

        below = candidate < lower
        step = self._price_step(candidate)
        nudged = round(candidate + step if below else candidate - step, 2)
        if lower <= nudged <= upper:
            return nudged

        # Band narrower than a price step: use the band edge in whole cents
        edge = math.ceil(lower * 100) / 100 if below else math.floor(upper * 100) / 100
        if lower <= edge <= upper:
            return edge
        return lower if below else upper

    # --- Scoring ---

    def confidence(
        self,
        demand_score: int | None,
        competitor_samples: int,
        price_change_records: int,
    ) -> int:
        cfg = self.config
        score = 50
        if demand_score is not None:
            score += 15
        score += 10 * min(competitor_samples, cfg.max_competitor_samples)
        if price_change_records >= cfg.history_records_for_confidence:
            score += 15
        return min(score, cfg.max_confidence)

    @staticmethod
    def classify(change_percent: float) -> PriceRecommendationClass:
        if change_percent > 10:
            return PriceRecommendationClass.STRONG_INCREASE
        if change_percent > 5:
            return PriceRecommendationClass.MODERATE_INCREASE
        if change_percent > 0:
            return PriceRecommendationClass.SLIGHT_INCREASE
        if change_percent > -5:
            return PriceRecommendationClass.SLIGHT_DECREASE
        if change_percent > -10:
            return PriceRecommendationClass.MODERATE_DECREASE
        return PriceRecommendationClass.STRONG_DECREASE

    def estimate_impact(
        self, current_price: float, new_price: float, units_sold: int
    ) -> EstimatedImpact:
        """
        Linear elasticity approximation. Demand cannot fall by more than 100%,
        so projected revenue is never negative.
        """
        price_change = (new_price - current_price) / current_price
        demand_change = max(-1.0, price_change * self.config.elasticity)
        units = units_sold if units_sold > 0 else self.config.default_units_sold

        current_revenue = current_price * units
        projected_revenue = new_price * units * (1 + demand_change)
        return EstimatedImpact(
            estimated_demand_change_pct=round(demand_change * 100, 1),
            current_revenue=round(current_revenue, 2),
            projected_revenue=round(projected_revenue, 2),
            revenue_impact_pct=round((projected_revenue - current_revenue) / current_revenue * 100, 1),
        )

    # --- Composition ---

    def recommend(
        self,
        product_id: str,
        current_price: float,
        stock: int,
        today: date,
        cost_price: float | None = None,
        demand_score: int | None = None,
        competitor_prices: Sequence[float] = (),
        reorder_level: int | None = None,
        category: str = "",
        price_change_records: int = 0,
        units_sold: int = 0,
    ) -> PriceRecommendation:
        if current_price <= 0:
            raise InvalidInputError(f"current_price must be positive, got {current_price}", product_id)
        if cost_price is not None and cost_price <= 0:
            raise InvalidInputError(f"cost_price must be positive, got {cost_price}", product_id)
        if stock < 0:
            raise InvalidInputError(f"stock must not be negative, got {stock}", product_id)
        if demand_score is not None and not 0 <= demand_score <= 100:
            raise InvalidInputError(f"demand_score must be within 0..100, got {demand_score}", product_id)
        if any(p <= 0 for p in competitor_prices):
            raise InvalidInputError("competitor prices must be positive", product_id)

        cost = cost_price if cost_price is not None else current_price * self.config.default_cost_ratio
        competitors = CompetitorSummary.from_prices(list(competitor_prices))

        demand_adj = self.demand_adjustment(demand_score)
        inventory_adj = self.inventory_factor(stock, reorder_level)
        seasonal_adj = self.seasonal_factor(category, today)
        competitor_adj = self.competitor_adjustment(current_price, competitors.average_price)
        multiplier = 1.0 + demand_adj + inventory_adj + seasonal_adj + competitor_adj

        lower, upper = self.price_bounds(cost)
        unconstrained = current_price * multiplier
        suggested = self.fit_to_band(clamp(unconstrained, lower, upper), lower, upper)

        change_percent = (suggested - current_price) / current_price * 100
        recommendation = PriceRecommendation(
            product_id=product_id,
            current_price=current_price,
            suggested_price=suggested,
            price_change=round(suggested - current_price, 2),
            price_change_percent=round(change_percent, 2),
            confidence_score=self.confidence(demand_score, competitors.sample_count, price_change_records),
            recommendation_class=self.classify(change_percent),
            estimated_impact=self.estimate_impact(current_price, suggested, units_sold),
            factors=PricingFactors(
                demand_score=demand_score,
                demand_adjustment=round(demand_adj, 3),
                inventory_factor=round(inventory_adj, 3),
                seasonal_factor=round(seasonal_adj, 3),
                competitor_adjustment=round(competitor_adj, 3),
                competitor_avg_price=competitors.average_price,
                price_multiplier=round(multiplier, 3),
                unconstrained_price=round(unconstrained, 2),
                min_price=round(lower, 2),
                max_price=round(upper, 2),
            ),
        )
        logger.debug(
            f"Price for {product_id}: {current_price:.2f} -> {suggested:.2f} "
            f"(multiplier {multiplier:.3f}, band {lower:.2f}-{upper:.2f})"
        )
        return recommendation
