"""
Module: connectors.protocols

Read-only collaborator interfaces consumed by the forecast orchestrator, plus
the price history store which is the engine's only write target. Providers may
return model instances or plain dicts; the orchestrator validates both.
"""

from collections.abc import Sequence
from datetime import date
from typing import Any, Protocol

from models.catalog import CompetitorPrice, OrderLine, PriceChange, ProductRecord

Record = dict[str, Any]


class SalesHistoryProvider(Protocol):
    async def get_order_lines(
        self, product_id: str, from_date: date, to_date: date
    ) -> Sequence[OrderLine | Record]:
        """Order lines for product_id with from_date <= date < to_date."""
        ...


class CatalogProvider(Protocol):
    async def get_product(self, product_id: str) -> ProductRecord | Record | None:
        """Catalog attributes, or None when the product is unknown."""
        ...

    async def list_active_products(self) -> Sequence[ProductRecord | Record]: ...


class AnalyticsProvider(Protocol):
    async def get_demand_score(self, product_id: str) -> int | None:
        """Externally computed demand score in 0..100, None when unavailable."""
        ...


class CompetitorPriceProvider(Protocol):
    async def get_competitor_prices(
        self, product_id: str
    ) -> Sequence[CompetitorPrice | Record]: ...


class PriceHistoryStore(Protocol):
    async def get_price_changes(self, product_id: str) -> Sequence[PriceChange | Record]: ...

    async def append_price_change(self, product_id: str, change: PriceChange) -> None: ...
