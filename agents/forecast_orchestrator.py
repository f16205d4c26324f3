"""
Forecast orchestrator: the only I/O-facing component of the engine.

Fetches inputs from the collaborators, runs aggregation, decomposition,
forecasting, inventory and price optimization in dependency order, and fans
bulk requests out over a bounded number of concurrent workers.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from config.config import EngineConfig
from connectors.protocols import (
    AnalyticsProvider,
    CatalogProvider,
    CompetitorPriceProvider,
    PriceHistoryStore,
    SalesHistoryProvider,
)
from forecasting.demand import DemandForecaster
from forecasting.sales_history import SalesHistoryAggregator
from forecasting.seasonality import SeasonalDecomposer
from forecasting.trend import TrendEstimator
from models.catalog import CompetitorPrice, OrderLine, PriceChange, ProductRecord
from models.enums import AgentType, ForecastState, RecommendationPriority
from models.exceptions import (
    CollaboratorUnavailableError,
    ForecastEngineError,
    ForecastError,
    InvalidInputError,
    NotFoundError,
)
from models.forecast import ForecastOutput, TrendSummary
from models.inventory import ReorderAlert
from models.pricing import PriceChangeConfirmation, PriceRecommendation
from models.results import ItemResult
from models.sales import SalesObservation
from optimization.inventory import InventoryOptimizer
from optimization.pricing import PriceOptimizer
from utils.cache import Cache, InMemoryCache, RedisCache, read_through
from utils.event_bus import EventBus

from .base import BaseAgent

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class ForecastJob:
    """Tracks one product computation: Idle -> Fetching -> Computing -> Done | Failed."""

    _TRANSITIONS = {
        ForecastState.IDLE: {ForecastState.FETCHING},
        ForecastState.FETCHING: {ForecastState.COMPUTING, ForecastState.FAILED},
        ForecastState.COMPUTING: {ForecastState.DONE, ForecastState.FAILED},
        ForecastState.DONE: set(),
        ForecastState.FAILED: set(),
    }

    def __init__(self, product_id: str, operation: str):
        self.product_id = product_id
        self.operation = operation
        self.state = ForecastState.IDLE
        self.history = [ForecastState.IDLE]

    def advance(self, new_state: ForecastState) -> None:
        if new_state not in self._TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal transition {self.state.value} -> {new_state.value} for {self.product_id}"
            )
        level = logging.INFO if new_state in (ForecastState.DONE, ForecastState.FAILED) else logging.DEBUG
        logger.log(level, f"{self.operation}[{self.product_id}]: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def fail(self) -> None:
        # Failures before any fetch started still count as fetch failures
        if self.state == ForecastState.IDLE:
            self.advance(ForecastState.FETCHING)
        if self.state not in (ForecastState.DONE, ForecastState.FAILED):
            self.advance(ForecastState.FAILED)


class ForecastOrchestrator(BaseAgent):
    """Exposes forecastDemand, bulkForecast, optimizePrice, bulkOptimizePrice,
    listReorderAlerts and applyPriceChange over the injected collaborators."""

    def __init__(
        self,
        catalog: CatalogProvider,
        sales_history: SalesHistoryProvider,
        analytics: AnalyticsProvider | None = None,
        competitor_prices: CompetitorPriceProvider | None = None,
        price_history: PriceHistoryStore | None = None,
        cache: Cache | None = None,
        config: EngineConfig | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] = datetime.now,
        agent_id: str = "forecast-orchestrator",
    ):
        super().__init__(agent_id, AgentType.FORECASTING, event_bus)
        self.catalog = catalog
        self.sales_history = sales_history
        self.analytics = analytics
        self.competitor_prices = competitor_prices
        self.price_history = price_history
        self.cache = cache
        self.config = config or EngineConfig()
        self.clock = clock

        fc = self.config.forecast
        self.aggregator = SalesHistoryAggregator(window_days=fc.history_days)
        self.decomposer = SeasonalDecomposer(fc.month_factors, fc.factor_floor)
        self.trend_estimator = TrendEstimator(fc.min_trend_observations)
        self.forecaster = DemandForecaster(fc)
        self.inventory_optimizer = InventoryOptimizer(self.config.inventory, self.trend_estimator)
        self.price_optimizer = PriceOptimizer(self.config.pricing)

        self._workers = asyncio.Semaphore(self.config.orchestrator.max_concurrency)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        catalog: CatalogProvider,
        sales_history: SalesHistoryProvider,
        **collaborators: Any,
    ) -> "ForecastOrchestrator":
        """Build an orchestrator with a Redis cache when configured, else an in-memory one."""
        redis_url = config.orchestrator.redis_url
        cache = RedisCache.from_url(redis_url) if redis_url else InMemoryCache()
        return cls(catalog, sales_history, cache=cache, config=config, **collaborators)

    async def aclose(self) -> None:
        if isinstance(self.cache, RedisCache):
            await self.cache.close()

    # --- Collaborator access ---

    async def _call(
        self,
        collaborator: str,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        product_id: str | None = None,
        retry: bool = True,
    ) -> T:
        """
        Time-boxed collaborator call. Reads are retried on outages only;
        NotFound and InvalidInput propagate immediately.
        """
        settings = self.config.orchestrator
        attempts = 1 + settings.read_retries if retry else 1
        last_error: CollaboratorUnavailableError | None = None

        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(func(*args), timeout=settings.collaborator_timeout_seconds)
            except CollaboratorUnavailableError as e:
                last_error = e
            except ForecastEngineError:
                raise
            except asyncio.TimeoutError:
                last_error = CollaboratorUnavailableError(
                    f"{collaborator} timed out after {settings.collaborator_timeout_seconds}s",
                    collaborator,
                    product_id,
                )
            except Exception as e:
                last_error = CollaboratorUnavailableError(
                    f"{collaborator} failed: {type(e).__name__}: {e}", collaborator, product_id
                )

            if attempt < attempts:
                logger.warning(f"{last_error} (attempt {attempt}/{attempts}), retrying")
                await asyncio.sleep(settings.retry_backoff_seconds * attempt)

        raise last_error

    @staticmethod
    def _parse(model: type[M], raw: Any, product_id: str | None = None) -> M:
        if isinstance(raw, model):
            return raw
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise InvalidInputError(f"Malformed {model.__name__}: {e}", product_id) from e

    async def _load_product(self, product_id: str) -> ProductRecord:
        raw = await self._call("catalog", self.catalog.get_product, product_id, product_id=product_id)
        if raw is None:
            raise NotFoundError(f"Product {product_id} not found", product_id)
        return self._parse(ProductRecord, raw, product_id)

    async def _load_history(self, product_id: str, today: date, window_days: int) -> list[SalesObservation]:
        start = self.aggregator.window_start(today, window_days)
        raw_lines = await self._call(
            "sales_history",
            self.sales_history.get_order_lines,
            product_id,
            start,
            today,
            product_id=product_id,
        )
        lines = [self._parse(OrderLine, line, product_id) for line in raw_lines]
        return self.aggregator.aggregate(lines, today, window_days)

    async def _load_demand_score(self, product_id: str) -> int | None:
        if self.analytics is None:
            return None

        async def load():
            return await self._call(
                "analytics", self.analytics.get_demand_score, product_id, product_id=product_id
            )

        score = await read_through(
            self.cache,
            f"demand_score:{product_id}",
            load,
            self.config.orchestrator.demand_score_cache_ttl_seconds,
        )
        return None if score is None else int(score)

    async def _load_competitor_prices(self, product_id: str) -> list[CompetitorPrice]:
        if self.competitor_prices is None:
            return []

        async def load():
            samples = await self._call(
                "competitor_prices",
                self.competitor_prices.get_competitor_prices,
                product_id,
                product_id=product_id,
            )
            return [self._parse(CompetitorPrice, s, product_id).model_dump(mode="json") for s in samples]

        raw = await read_through(
            self.cache,
            f"competitor_prices:{product_id}",
            load,
            self.config.orchestrator.competitor_cache_ttl_seconds,
        )
        return [self._parse(CompetitorPrice, s, product_id) for s in raw]

    def _price_history_key(self, product_id: str) -> str:
        return f"price_history:{product_id}"

    async def _load_price_changes(self, product_id: str) -> list[PriceChange]:
        if self.price_history is None:
            return []

        async def load():
            changes = await self._call(
                "price_history", self.price_history.get_price_changes, product_id, product_id=product_id
            )
            return [self._parse(PriceChange, c, product_id).model_dump(mode="json") for c in changes]

        raw = await read_through(
            self.cache,
            self._price_history_key(product_id),
            load,
            self.config.orchestrator.price_history_cache_ttl_seconds,
        )
        return [self._parse(PriceChange, c, product_id) for c in raw]

    # --- Pure computation ---

    def compute_forecast(
        self,
        product: ProductRecord,
        observations: Sequence[SalesObservation],
        horizon_days: int,
        now: datetime,
    ) -> ForecastOutput:
        """Run decomposition, trend, forecast and inventory policy for one product."""
        today = now.date()
        profile = self.decomposer.decompose(observations)
        trend = self.trend_estimator.estimate(observations)
        forecast = self.forecaster.forecast(observations, trend, profile, horizon_days, today)

        unit_cost = product.cost_price or product.price * self.config.inventory.default_cost_ratio
        policy = self.inventory_optimizer.build_policy(
            observations,
            forecast,
            current_stock=product.stock,
            unit_cost=unit_cost,
            lead_time_days=product.lead_time_days,
            order_cost=product.order_cost,
        )
        recommendations = self.inventory_optimizer.recommend(product.stock, forecast, policy, today)
        return ForecastOutput(
            product_id=product.product_id,
            product_name=product.name,
            current_stock=product.stock,
            forecast=forecast,
            trend=TrendSummary.from_coefficient(trend),
            inventory=policy,
            recommendations=tuple(recommendations),
            generated_at=now,
        )

    # --- Exposed operations ---

    def _resolve_horizon(self, horizon_days: int | None) -> int:
        horizon = self.config.forecast.default_horizon_days if horizon_days is None else horizon_days
        if horizon <= 0:
            raise InvalidInputError(f"horizon_days must be positive, got {horizon}")
        return horizon

    async def _forecast(
        self,
        product_id: str,
        horizon_days: int,
        now: datetime,
        product: ProductRecord | None = None,
    ) -> ForecastOutput:
        job = ForecastJob(product_id, "forecast")
        try:
            job.advance(ForecastState.FETCHING)
            if product is None:
                product = await self._load_product(product_id)
            observations = await self._load_history(
                product_id, now.date(), self.config.forecast.history_days
            )
            job.advance(ForecastState.COMPUTING)
            output = self.compute_forecast(product, observations, horizon_days, now)
            job.advance(ForecastState.DONE)
        except Exception as e:
            job.fail()
            await self.handle_exception(e, {"operation": "forecast", "product_id": product_id})
            raise

        await self.publish_event(
            "forecast.completed",
            {
                "product_id": product_id,
                "horizon_days": horizon_days,
                "total_predicted": output.forecast.total_predicted,
                "confidence": output.forecast.confidence,
            },
        )
        return output

    async def forecast_demand(self, product_id: str, horizon_days: int | None = None) -> ForecastOutput:
        """Forecast, inventory policy and recommendations for one product."""
        horizon = self._resolve_horizon(horizon_days)
        return await self._forecast(product_id, horizon, self.clock())

    async def _optimize_price(self, product_id: str, now: datetime) -> PriceRecommendation:
        job = ForecastJob(product_id, "price")
        pricing = self.config.pricing
        try:
            job.advance(ForecastState.FETCHING)
            product = await self._load_product(product_id)
            demand_score, competitors, changes, recent_sales = await asyncio.gather(
                self._load_demand_score(product_id),
                self._load_competitor_prices(product_id),
                self._load_price_changes(product_id),
                self._load_history(product_id, now.date(), pricing.units_sold_window_days),
            )
            job.advance(ForecastState.COMPUTING)
            recommendation = self.price_optimizer.recommend(
                product_id=product_id,
                current_price=product.price,
                stock=product.stock,
                today=now.date(),
                cost_price=product.cost_price,
                demand_score=demand_score,
                competitor_prices=[c.price for c in competitors],
                reorder_level=product.reorder_level,
                category=product.category,
                price_change_records=len(changes),
                units_sold=SalesHistoryAggregator.total_units(recent_sales),
            )
            job.advance(ForecastState.DONE)
        except Exception as e:
            job.fail()
            await self.handle_exception(e, {"operation": "price", "product_id": product_id})
            raise

        await self.publish_event(
            "price.recommended",
            {
                "product_id": product_id,
                "current_price": recommendation.current_price,
                "suggested_price": recommendation.suggested_price,
                "recommendation": recommendation.recommendation_class.value,
            },
        )
        return recommendation

    async def optimize_price(self, product_id: str) -> PriceRecommendation:
        """Bounded, rounded price recommendation for one product."""
        return await self._optimize_price(product_id, self.clock())

    async def _run_bounded(
        self, product_id: str, work: Callable[[], Awaitable[T]]
    ) -> ItemResult[T]:
        async with self._workers:
            try:
                return ItemResult.success(product_id, await work())
            except Exception as e:
                return ItemResult.failure(product_id, ForecastError.from_exception(e, product_id))

    async def _run_bulk(
        self, label: str, product_ids: Sequence[str], work: Callable[[str], Awaitable[T]]
    ) -> list[ItemResult[T]]:
        results = await asyncio.gather(
            *(self._run_bounded(pid, lambda pid=pid: work(pid)) for pid in product_ids)
        )
        failed = sum(1 for r in results if not r.ok)
        logger.info(f"{label}: {len(results) - failed} succeeded, {failed} failed")
        return list(results)

    async def bulk_forecast(
        self, product_ids: Sequence[str], horizon_days: int | None = None
    ) -> list[ItemResult[ForecastOutput]]:
        """Forecast many products; one result per id, in input order, failures included."""
        horizon = self._resolve_horizon(horizon_days)
        now = self.clock()
        return await self._run_bulk(
            "Bulk forecast", product_ids, lambda pid: self._forecast(pid, horizon, now)
        )

    async def bulk_optimize_price(self, product_ids: Sequence[str]) -> list[ItemResult[PriceRecommendation]]:
        now = self.clock()
        return await self._run_bulk(
            "Bulk price optimization", product_ids, lambda pid: self._optimize_price(pid, now)
        )

    async def list_reorder_alerts(self) -> list[ReorderAlert]:
        """Active in-stock products at or below their reorder point, critical first."""
        now = self.clock()
        horizon = self.config.inventory.reorder_alert_horizon_days
        raw_products = await self._call("catalog", self.catalog.list_active_products)
        products = [self._parse(ProductRecord, raw) for raw in raw_products]
        candidates = [p for p in products if p.active and p.stock > 0]

        async def check(product: ProductRecord) -> ReorderAlert | None:
            async with self._workers:
                try:
                    output = await self._forecast(product.product_id, horizon, now, product=product)
                except Exception as e:
                    logger.warning(f"Skipping {product.product_id} in reorder scan: {e}")
                    return None
            policy = output.inventory
            if product.stock > policy.reorder_point:
                return None
            priority = (
                RecommendationPriority.CRITICAL
                if product.stock <= policy.safety_stock
                else RecommendationPriority.HIGH
            )
            return ReorderAlert(product.product_id, product.name, product.stock, policy, priority)

        checked = await asyncio.gather(*(check(p) for p in candidates))
        alerts = sorted((a for a in checked if a is not None), key=lambda a: a.priority.rank)
        logger.info(f"Reorder scan: {len(alerts)} of {len(candidates)} products need reorder")
        return alerts

    async def apply_price_change(
        self, product_id: str, new_price: float, reason: str
    ) -> PriceChangeConfirmation:
        """
        Record a price change in the price history store. The write is never
        retried; a failure is raised to the caller. The catalog itself is not
        updated here.
        """
        if new_price <= 0:
            raise InvalidInputError(f"new_price must be positive, got {new_price}", product_id)
        if self.price_history is None:
            raise CollaboratorUnavailableError(
                "No price history store configured", "price_history", product_id
            )

        product = await self._load_product(product_id)
        now = self.clock()
        change = PriceChange(old_price=product.price, new_price=new_price, changed_at=now, reason=reason)
        try:
            await self._call(
                "price_history",
                self.price_history.append_price_change,
                product_id,
                change,
                product_id=product_id,
                retry=False,
            )
        except ForecastEngineError as e:
            logger.error(f"Price change for {product_id} was not recorded: {e}")
            raise

        if self.cache is not None:
            await self.cache.invalidate(self._price_history_key(product_id))
        logger.info(f"Applied price change for {product_id}: {product.price:.2f} -> {new_price:.2f} ({reason})")
        await self.publish_event(
            "price.change_applied",
            {"product_id": product_id, "old_price": product.price, "new_price": new_price, "reason": reason},
        )
        return PriceChangeConfirmation(
            product_id=product_id,
            old_price=product.price,
            new_price=new_price,
            reason=reason,
            changed_at=now,
        )
