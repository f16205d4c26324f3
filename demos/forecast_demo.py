"""
Demonstration of the forecasting engine against in-memory collaborators.

Seeds the dummy catalog with 90 days of synthetic sales, then runs a single
forecast, a bulk forecast (including an unknown product), price
recommendations, the reorder scan and a price change.

Set FORECAST_REDIS_URL to cache competitor prices and analytics in Redis
instead of process memory.
"""

import asyncio
import logging
from datetime import date

from agents.forecast_orchestrator import ForecastOrchestrator
from config.config import EngineConfig
from connectors.dummy_analytics import DummyAnalytics, ProductActivity
from connectors.dummy_catalog import SAMPLE_PRODUCTS, DummyCatalog
from connectors.dummy_competitor_feed import DummyCompetitorFeed
from connectors.dummy_order_system import DummyOrderSystem
from connectors.dummy_price_history import DummyPriceHistoryStore
from models.events import EngineEvent
from utils.event_bus import EventBus
from utils.logger import get_logger

get_logger(level=logging.INFO)
logger = logging.getLogger("forecast-demo")


async def log_event(event: EngineEvent) -> None:
    logger.info(f"EVENT {event.event_type}: {event.payload}")


async def run_forecast_demo():
    logger.info("--- Starting Forecasting Engine Demo ---")
    config = EngineConfig.from_env()
    today = date.today()
    prices = {p.product_id: p.price for p in SAMPLE_PRODUCTS}

    event_bus = EventBus()
    for event_type in ("forecast.completed", "price.recommended", "price.change_applied"):
        event_bus.subscribe(event_type, log_event)

    orchestrator = ForecastOrchestrator.from_config(
        config,
        DummyCatalog(),
        DummyOrderSystem.with_synthetic_history(prices, today, num_days=config.forecast.history_days),
        analytics=DummyAnalytics(
            {
                "P1001": ProductActivity(recent_orders=42, views=900, cart_additions=85),
                "P1002": ProductActivity(recent_orders=8, views=150, cart_additions=10),
            }
        ),
        competitor_prices=DummyCompetitorFeed(reference_prices=prices),
        price_history=DummyPriceHistoryStore(),
        event_bus=event_bus,
    )

    try:
        output = await orchestrator.forecast_demand("P1001", horizon_days=14)
        logger.info(
            f"{output.product_name}: {output.forecast.total_predicted} units over 14 days "
            f"(confidence {output.forecast.confidence}, trend {output.trend.direction.value} "
            f"{output.trend.percentage}%/day)"
        )
        logger.info(
            f"Policy: safety stock {output.inventory.safety_stock}, reorder point "
            f"{output.inventory.reorder_point}, EOQ {output.inventory.economic_order_quantity}, "
            f"{output.inventory.days_of_stock} days of stock"
        )
        for rec in output.recommendations:
            logger.info(f"  [{rec.priority.value}] {rec.message} -> {rec.action}")

        results = await orchestrator.bulk_forecast(["P1001", "P1002", "P1003", "P9999"], horizon_days=7)
        for result in results:
            if result.ok:
                logger.info(f"Bulk {result.product_id}: {result.value.forecast.quantities()}")
            else:
                logger.info(f"Bulk {result.product_id}: {result.error.kind.value} ({result.error.message})")

        for result in await orchestrator.bulk_optimize_price(["P1001", "P1002", "P1003"]):
            if not result.ok:
                continue
            rec = result.value
            logger.info(
                f"Price {rec.product_id}: {rec.current_price:.2f} -> {rec.suggested_price:.2f} "
                f"{rec.recommendation_class.value} (confidence {rec.confidence_score}, "
                f"revenue impact {rec.estimated_impact.revenue_impact_pct}%)"
            )

        for alert in await orchestrator.list_reorder_alerts():
            logger.info(
                f"Reorder {alert.priority.value}: {alert.product_name} stock {alert.current_stock} "
                f"<= reorder point {alert.policy.reorder_point}, order {alert.recommended_order}"
            )

        recommendation = await orchestrator.optimize_price("P1002")
        confirmation = await orchestrator.apply_price_change(
            "P1002", recommendation.suggested_price, "demo: accept recommendation"
        )
        logger.info(f"Recorded price change at {confirmation.changed_at:%Y-%m-%d %H:%M}")
    except Exception as e:
        logger.error(f"Forecast demo failed: {e}", exc_info=True)
    finally:
        await orchestrator.aclose()
        logger.info("--- Forecasting Engine Demo Finished ---")


if __name__ == "__main__":
    asyncio.run(run_forecast_demo())
