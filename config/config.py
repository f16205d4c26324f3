"""
Configuration classes for the demand forecasting and pricing engine.
Defines tunable defaults for each component in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass, field

from models.exceptions import InvalidInputError
from utils.env import load_project_dotenv

# General annual retail curve: post-holiday trough, pre-holiday peak
DEFAULT_MONTH_FACTORS: dict[int, float] = {
    1: 0.9,
    2: 0.95,
    3: 1.0,
    4: 1.05,
    5: 1.1,
    6: 1.0,
    7: 0.95,
    8: 0.9,
    9: 1.05,
    10: 1.1,
    11: 1.2,
    12: 1.3,
}

DEFAULT_CATEGORY_SEASONS: dict[str, dict[str, tuple[int, ...]]] = {
    "Electronics": {"peak": (11, 12), "low": (1, 2)},
    "Fashion": {"peak": (3, 4, 9, 10), "low": (6, 7)},
    "Sports": {"peak": (4, 5, 6), "low": (12, 1, 2)},
    "Home": {"peak": (5, 6), "low": (12, 1)},
}


@dataclass
class ForecastConfig:
    history_days: int = 90
    default_horizon_days: int = 30
    band_width: float = 0.10
    min_trend_observations: int = 7
    factor_floor: float = 0.01
    month_factors: dict[int, float] = field(
        default_factory=lambda: dict(DEFAULT_MONTH_FACTORS)
    )
    # Confidence score weights, see DemandForecaster.confidence
    volume_weight: float = 40.0
    consistency_weight: float = 30.0
    recent_activity_weight: float = 15.0
    coverage_weight: float = 15.0
    recent_activity_days: int = 7
    max_confidence: int = 95


@dataclass
class InventoryConfig:
    default_lead_time_days: int = 7
    z_score: float = 1.65  # ~95% service level
    order_cost: float = 50.0
    holding_cost_rate: float = 0.25  # fraction of unit cost per year
    default_cost_ratio: float = 0.6
    overstock_days: int = 90
    trend_threshold: float = 0.05
    peak_months: tuple[int, ...] = (11, 12)
    reorder_alert_horizon_days: int = 14


@dataclass
class PricingConfig:
    min_margin: float = 0.10
    max_margin: float = 0.50
    default_cost_ratio: float = 0.6
    default_reorder_level: int = 10
    elasticity: float = -1.5
    # Demand score thresholds and multiplier adjustments
    high_demand_score: int = 80
    high_demand_adjustment: float = 0.15
    elevated_demand_score: int = 60
    elevated_demand_adjustment: float = 0.08
    low_demand_score: int = 30
    low_demand_adjustment: float = -0.10
    competitor_weight: float = 0.5
    competitor_cap: float = 0.10
    holiday_months: tuple[int, ...] = (11, 12)
    holiday_adjustment: float = 0.10
    post_holiday_months: tuple[int, ...] = (1,)
    post_holiday_adjustment: float = -0.10
    weekend_adjustment: float = 0.02
    category_adjustment: float = 0.08
    category_seasons: dict[str, dict[str, tuple[int, ...]]] = field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_CATEGORY_SEASONS.items()}
    )
    max_competitor_samples: int = 3
    history_records_for_confidence: int = 5
    default_units_sold: int = 100
    units_sold_window_days: int = 30
    max_confidence: int = 95


@dataclass
class OrchestratorConfig:
    max_concurrency: int = 8
    collaborator_timeout_seconds: float = 5.0
    read_retries: int = 2
    retry_backoff_seconds: float = 0.1
    competitor_cache_ttl_seconds: int = 1800
    demand_score_cache_ttl_seconds: int = 3600
    price_history_cache_ttl_seconds: int = 21600
    redis_url: str | None = None

    def __post_init__(self):
        if self.max_concurrency < 1:
            raise InvalidInputError("max_concurrency must be at least 1")
        if self.collaborator_timeout_seconds <= 0:
            raise InvalidInputError("collaborator_timeout_seconds must be positive")
        if self.read_retries < 0:
            raise InvalidInputError("read_retries must not be negative")


@dataclass
class EngineConfig:
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from defaults overridden by FORECAST_* environment variables."""
        load_project_dotenv()
        config = cls()
        config.forecast.history_days = _env_int(
            "FORECAST_HISTORY_DAYS", config.forecast.history_days
        )
        config.forecast.default_horizon_days = _env_int(
            "FORECAST_HORIZON_DAYS", config.forecast.default_horizon_days
        )
        config.inventory.default_lead_time_days = _env_int(
            "FORECAST_LEAD_TIME_DAYS", config.inventory.default_lead_time_days
        )
        config.orchestrator = OrchestratorConfig(
            max_concurrency=_env_int(
                "FORECAST_MAX_CONCURRENCY", config.orchestrator.max_concurrency
            ),
            collaborator_timeout_seconds=_env_float(
                "FORECAST_COLLABORATOR_TIMEOUT",
                config.orchestrator.collaborator_timeout_seconds,
            ),
            read_retries=_env_int("FORECAST_READ_RETRIES", config.orchestrator.read_retries),
            redis_url=os.getenv("FORECAST_REDIS_URL") or None,
        )
        return config


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise InvalidInputError(f"{name} must be a number, got {raw!r}") from e
