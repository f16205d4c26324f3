"""
Module: connectors.dummy_analytics

Provides a dummy analytics feed deriving a demand score from recent activity
counters (orders, product views, cart additions).
"""

import asyncio
from dataclasses import dataclass

ORDERS_BENCHMARK = 50
VIEWS_BENCHMARK = 1000
CART_BENCHMARK = 100


@dataclass
class ProductActivity:
    recent_orders: int = 0
    views: int = 0
    cart_additions: int = 0


def demand_score_from_activity(activity: ProductActivity) -> int:
    """Weighted 0-100 score: 40 for order velocity, 30 for views, 30 for cart additions."""
    sales_score = min(activity.recent_orders / ORDERS_BENCHMARK, 1) * 40
    views_score = min(activity.views / VIEWS_BENCHMARK, 1) * 30
    cart_score = min(activity.cart_additions / CART_BENCHMARK, 1) * 30
    return round(sales_score + views_score + cart_score)


class DummyAnalytics:
    def __init__(self, activity: dict[str, ProductActivity] | None = None, latency: float = 0.01):
        self._activity = dict(activity or {})
        self.latency = latency

    async def get_demand_score(self, product_id: str) -> int | None:
        """Demand score for a product, None when no activity was tracked."""
        await asyncio.sleep(self.latency)
        activity = self._activity.get(product_id)
        if activity is None:
            return None
        return demand_score_from_activity(activity)
