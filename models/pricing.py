"""
Pricing-related data models: the price recommendation, its factor breakdown,
impact estimate and the confirmation returned when a price change is recorded.
"""

from dataclasses import dataclass
from datetime import datetime

from .enums import PriceRecommendationClass


@dataclass(frozen=True)
class CompetitorSummary:
    prices: tuple[float, ...]
    average_price: float | None
    lowest_price: float | None
    highest_price: float | None

    @property
    def sample_count(self) -> int:
        return len(self.prices)

    @classmethod
    def from_prices(cls, prices: list[float]) -> "CompetitorSummary":
        if not prices:
            return cls((), None, None, None)
        return cls(
            tuple(prices),
            round(sum(prices) / len(prices), 2),
            round(min(prices), 2),
            round(max(prices), 2),
        )


@dataclass(frozen=True)
class PricingFactors:
    """Breakdown of the additive price multiplier."""

    demand_score: int | None
    demand_adjustment: float
    inventory_factor: float
    seasonal_factor: float
    competitor_adjustment: float
    competitor_avg_price: float | None
    price_multiplier: float
    unconstrained_price: float
    min_price: float
    max_price: float


@dataclass(frozen=True)
class EstimatedImpact:
    estimated_demand_change_pct: float
    current_revenue: float
    projected_revenue: float
    revenue_impact_pct: float


@dataclass(frozen=True)
class PriceRecommendation:
    product_id: str
    current_price: float
    suggested_price: float
    price_change: float
    price_change_percent: float
    confidence_score: int
    recommendation_class: PriceRecommendationClass
    estimated_impact: EstimatedImpact
    factors: PricingFactors


@dataclass(frozen=True)
class PriceChangeConfirmation:
    product_id: str
    old_price: float
    new_price: float
    reason: str
    changed_at: datetime
    applied: bool = True
