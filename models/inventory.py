"""
Inventory-related data models: the control policy derived from a forecast,
advisory recommendations and reorder alerts.
"""

from dataclasses import dataclass

from .enums import RecommendationPriority, RecommendationType


@dataclass(frozen=True)
class InventoryPolicy:
    """
    Inventory control parameters for one product.

    reorder_point is lead-time demand plus safety_stock, so it is never
    below safety_stock.
    """

    safety_stock: int
    reorder_point: int
    days_of_stock: int
    economic_order_quantity: int

    def __post_init__(self):
        if self.reorder_point < self.safety_stock:
            raise ValueError("reorder_point must not be below safety_stock")
        if self.economic_order_quantity < 1:
            raise ValueError("economic_order_quantity must be positive")


@dataclass(frozen=True)
class InventoryRecommendation:
    """Advisory output; the engine never executes these."""

    priority: RecommendationPriority
    type: RecommendationType
    message: str
    action: str
    suggested_quantity: int | None = None


@dataclass(frozen=True)
class ReorderAlert:
    product_id: str
    product_name: str
    current_stock: int
    policy: InventoryPolicy
    priority: RecommendationPriority

    @property
    def recommended_order(self) -> int:
        return self.policy.economic_order_quantity
