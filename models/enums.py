"""
Centralized Enum definitions for the forecasting engine.
"""

from enum import Enum


class AgentType(str, Enum):
    """Components that can publish engine events"""

    FORECASTING = "forecasting"
    INVENTORY = "inventory"
    PRICING = "pricing"
    SYSTEM = "system"


class ForecastState(str, Enum):
    """Lifecycle of a single orchestrated computation"""

    IDLE = "idle"
    FETCHING = "fetching"
    COMPUTING = "computing"
    DONE = "done"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Error taxonomy surfaced to callers"""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    COLLABORATOR_UNAVAILABLE = "collaborator_unavailable"
    INTERNAL = "internal"  # defect in the engine itself


class RecommendationPriority(str, Enum):
    """Priority of an inventory recommendation, most urgent first"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    RecommendationPriority.CRITICAL: 0,
    RecommendationPriority.HIGH: 1,
    RecommendationPriority.MEDIUM: 2,
    RecommendationPriority.INFO: 3,
}


class RecommendationType(str, Enum):
    """Kinds of inventory recommendations"""

    REORDER = "reorder"
    OVERSTOCK = "overstock"
    TREND = "trend"
    SEASONAL = "seasonal"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class PriceRecommendationClass(str, Enum):
    """Buckets for the signed percentage price change"""

    STRONG_INCREASE = "STRONG_INCREASE"
    MODERATE_INCREASE = "MODERATE_INCREASE"
    SLIGHT_INCREASE = "SLIGHT_INCREASE"
    SLIGHT_DECREASE = "SLIGHT_DECREASE"
    MODERATE_DECREASE = "MODERATE_DECREASE"
    STRONG_DECREASE = "STRONG_DECREASE"

    @property
    def is_increase(self) -> bool:
        return self.value.endswith("_INCREASE")
