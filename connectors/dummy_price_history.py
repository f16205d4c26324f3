"""
Module: connectors.dummy_price_history

Provides a dummy in-memory price history store.
"""

import asyncio
import logging

from models.catalog import PriceChange

logger = logging.getLogger(__name__)


class DummyPriceHistoryStore:
    def __init__(self, changes: dict[str, list[PriceChange]] | None = None, latency: float = 0.01):
        self._changes = {pid: list(items) for pid, items in (changes or {}).items()}
        self.latency = latency

    async def get_price_changes(self, product_id: str) -> list[PriceChange]:
        await asyncio.sleep(self.latency)
        return list(self._changes.get(product_id, []))

    async def append_price_change(self, product_id: str, change: PriceChange) -> None:
        await asyncio.sleep(self.latency)
        self._changes.setdefault(product_id, []).append(change)
        logger.info(f"DUMMY: Recorded price change for {product_id}: {change.old_price} -> {change.new_price}")
