import math
from datetime import date, timedelta

import numpy as np
import pytest

from config.config import InventoryConfig
from forecasting.demand import DemandForecaster
from models.enums import RecommendationPriority, RecommendationType
from models.exceptions import InvalidInputError
from models.forecast import DemandForecast, ForecastPoint, SeasonalProfile
from models.inventory import InventoryPolicy
from models.sales import SalesObservation
from optimization.inventory import InventoryOptimizer

TODAY = date(2025, 3, 10)


def history(quantities: list[int]) -> list[SalesObservation]:
    start = TODAY - timedelta(days=len(quantities))
    return [
        SalesObservation(start + timedelta(days=i), q, float(q), (start + timedelta(days=i)).weekday())
        for i, q in enumerate(quantities)
    ]


def forecast_of(quantities: list[int]) -> DemandForecast:
    points = tuple(
        ForecastPoint(TODAY + timedelta(days=i + 1), q, q, q) for i, q in enumerate(quantities)
    )
    return DemandForecast(points, sum(quantities), confidence=80)


@pytest.fixture
def optimizer() -> InventoryOptimizer:
    return InventoryOptimizer()


def test_safety_stock_uses_population_std(optimizer: InventoryOptimizer):
    # Alternating 4/6 has a standard deviation of exactly 1
    series = history([4, 6] * 45)
    assert optimizer.safety_stock(series, 7) == math.ceil(1.65 * math.sqrt(7)) == 5


def test_safety_stock_zero_for_constant_demand(optimizer: InventoryOptimizer):
    assert optimizer.safety_stock(history([8] * 30), 7) == 0
    assert optimizer.safety_stock([], 7) == 0


def test_reorder_point_is_lead_time_demand_plus_safety():
    forecast = forecast_of([3, 4, 5, 6, 7, 8, 9, 10])
    assert InventoryOptimizer.reorder_point(forecast, 3, 5) == 3 + 4 + 5 + 5


def test_reorder_point_with_horizon_shorter_than_lead_time():
    forecast = forecast_of([2, 2])
    assert InventoryOptimizer.reorder_point(forecast, 7, 1) == 5


@pytest.mark.parametrize(
    "stock, expected",
    [(0, 0), (5, 0), (6, 1), (16, 3), (1000, 4)],
)
def test_days_of_stock(stock: int, expected: int):
    forecast = forecast_of([5, 5, 5, 5])
    assert InventoryOptimizer.days_of_stock(stock, forecast) == expected


def test_economic_order_quantity(optimizer: InventoryOptimizer):
    forecast = forecast_of([10] * 30)
    annual = 300 * 365 / 30
    expected = math.ceil(math.sqrt(2 * annual * 50 / (20 * 0.25)))
    assert optimizer.economic_order_quantity(forecast, unit_cost=20.0) == expected


def test_economic_order_quantity_is_at_least_one(optimizer: InventoryOptimizer):
    assert optimizer.economic_order_quantity(forecast_of([0] * 14), unit_cost=5.0) == 1


def test_economic_order_quantity_rejects_non_positive_cost(optimizer: InventoryOptimizer):
    with pytest.raises(InvalidInputError):
        optimizer.economic_order_quantity(forecast_of([1]), unit_cost=0)


@pytest.mark.parametrize("seed", range(8))
def test_reorder_point_never_below_safety_stock(optimizer: InventoryOptimizer, seed: int):
    rng = np.random.default_rng(seed)
    series = history([int(q) for q in rng.poisson(rng.uniform(0, 20), size=90)])
    forecast = forecast_of([int(q) for q in rng.poisson(3, size=int(rng.integers(1, 30)))])

    policy = optimizer.build_policy(series, forecast, current_stock=int(rng.integers(0, 200)), unit_cost=9.5)

    assert policy.reorder_point >= policy.safety_stock >= 0
    assert policy.economic_order_quantity >= 1


def test_build_policy_validates_inputs(optimizer: InventoryOptimizer):
    forecast = forecast_of([1, 1])
    with pytest.raises(InvalidInputError):
        optimizer.build_policy([], forecast, current_stock=-1, unit_cost=1.0)
    with pytest.raises(InvalidInputError):
        optimizer.build_policy([], forecast, current_stock=1, unit_cost=1.0, lead_time_days=0)


def test_policy_rejects_inconsistent_values():
    with pytest.raises(ValueError):
        InventoryPolicy(safety_stock=10, reorder_point=5, days_of_stock=0, economic_order_quantity=1)


def test_critical_recommendation_at_safety_stock(optimizer: InventoryOptimizer):
    series = history([4, 6] * 45)
    flat = SeasonalProfile((1.0,) * 7, {m: 1.0 for m in range(1, 13)})
    forecast = DemandForecaster().forecast(series, 0.0, flat, 30, TODAY)
    policy = optimizer.build_policy(series, forecast, current_stock=3, unit_cost=10.0)

    recommendations = optimizer.recommend(3, forecast, policy, TODAY)

    critical = [r for r in recommendations if r.priority == RecommendationPriority.CRITICAL]
    assert policy.safety_stock == 5
    assert len(critical) == 1
    assert critical[0].type == RecommendationType.REORDER
    assert critical[0].suggested_quantity == 2 * policy.reorder_point
    assert recommendations[0] is critical[0]


def test_high_recommendation_between_safety_and_reorder_point(optimizer: InventoryOptimizer):
    forecast = forecast_of([5] * 30)
    policy = InventoryPolicy(safety_stock=5, reorder_point=40, days_of_stock=3, economic_order_quantity=60)

    recommendations = optimizer.recommend(20, forecast, policy, TODAY)

    assert [r.priority for r in recommendations] == [RecommendationPriority.HIGH]
    assert recommendations[0].suggested_quantity == 40


def test_overstock_recommendation(optimizer: InventoryOptimizer):
    forecast = forecast_of([1] * 120)
    policy = InventoryPolicy(safety_stock=1, reorder_point=8, days_of_stock=100, economic_order_quantity=10)

    recommendations = optimizer.recommend(500, forecast, policy, TODAY)

    assert [r.type for r in recommendations] == [RecommendationType.OVERSTOCK]
    assert recommendations[0].priority == RecommendationPriority.MEDIUM


def test_trend_recommendations(optimizer: InventoryOptimizer):
    policy = InventoryPolicy(safety_stock=0, reorder_point=10, days_of_stock=30, economic_order_quantity=10)

    rising = optimizer.recommend(100, forecast_of(list(range(1, 31))), policy, TODAY)
    falling = optimizer.recommend(100, forecast_of(list(range(30, 0, -1))), policy, TODAY)

    assert any(r.type == RecommendationType.TREND and "upward" in r.message for r in rising)
    assert any(r.type == RecommendationType.TREND and "downward" in r.message for r in falling)


def test_seasonal_recommendation_in_peak_months(optimizer: InventoryOptimizer):
    forecast = forecast_of([2] * 30)
    policy = InventoryPolicy(safety_stock=0, reorder_point=14, days_of_stock=30, economic_order_quantity=10)

    november = optimizer.recommend(100, forecast, policy, date(2025, 11, 3))
    march = optimizer.recommend(100, forecast, policy, TODAY)

    assert [r.type for r in november] == [RecommendationType.SEASONAL]
    assert march == []


def test_recommendations_sorted_by_priority():
    optimizer = InventoryOptimizer(InventoryConfig(peak_months=(3,)))
    forecast = forecast_of(list(range(1, 31)))
    policy = InventoryPolicy(safety_stock=5, reorder_point=10, days_of_stock=1, economic_order_quantity=10)

    recommendations = optimizer.recommend(2, forecast, policy, TODAY)

    ranks = [r.priority.rank for r in recommendations]
    assert ranks == sorted(ranks)
    assert recommendations[0].priority == RecommendationPriority.CRITICAL
    assert recommendations[-1].priority == RecommendationPriority.INFO