"""
Forecast-related value objects: seasonal profile, daily predictions and the
composed forecast output returned by the orchestrator.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping

from .enums import TrendDirection
from .inventory import InventoryPolicy, InventoryRecommendation


@dataclass(frozen=True)
class SeasonalProfile:
    """
    Day-of-week and month-of-year demand multipliers, normalized around 1.0.

    weekday_factors is indexed by date.weekday(); month_factors is keyed by
    date.month (1-12).
    """

    weekday_factors: tuple[float, ...]
    month_factors: Mapping[int, float]

    def __post_init__(self):
        if len(self.weekday_factors) != 7:
            raise ValueError("weekday_factors must hold exactly 7 entries")
        # Freeze the mapping so the profile stays immutable
        object.__setattr__(
            self, "month_factors", MappingProxyType(dict(self.month_factors))
        )

    def factor_for(self, day: date) -> float:
        return self.weekday_factors[day.weekday()] * self.month_factors.get(
            day.month, 1.0
        )


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    quantity: int
    low: int
    high: int


@dataclass(frozen=True)
class DemandForecast:
    daily_predictions: tuple[ForecastPoint, ...]
    total_predicted: int
    confidence: int
    insufficient_data: bool = False

    @property
    def horizon_days(self) -> int:
        return len(self.daily_predictions)

    def quantities(self) -> list[int]:
        return [p.quantity for p in self.daily_predictions]


@dataclass(frozen=True)
class TrendSummary:
    coefficient: float
    direction: TrendDirection
    percentage: float

    @classmethod
    def from_coefficient(cls, coefficient: float) -> "TrendSummary":
        if coefficient > 0:
            direction = TrendDirection.INCREASING
        elif coefficient < 0:
            direction = TrendDirection.DECREASING
        else:
            direction = TrendDirection.STABLE
        return cls(coefficient, direction, round(coefficient * 100, 2))


@dataclass(frozen=True)
class ForecastOutput:
    """Everything forecastDemand returns for one product."""

    product_id: str
    product_name: str
    current_stock: int
    forecast: DemandForecast
    trend: TrendSummary
    inventory: InventoryPolicy
    recommendations: tuple[InventoryRecommendation, ...] = field(default_factory=tuple)
    generated_at: datetime = field(default_factory=datetime.now)
