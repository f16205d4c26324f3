"""
Module: connectors.dummy_order_system

Provides a dummy in-memory sales history provider serving order lines per product.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import date, timedelta

from models.catalog import OrderLine
from utils.data_generation import generate_synthetic_order_lines, to_order_lines

logger = logging.getLogger(__name__)


class DummyOrderSystem:
    """
    Dummy order system connector for demonstration purposes.
    """

    def __init__(
        self,
        order_lines: dict[str, list[OrderLine]] | None = None,
        latency: float = 0.01,
    ):
        self._order_lines: dict[str, list[OrderLine]] = {
            pid: list(lines) for pid, lines in (order_lines or {}).items()
        }
        self.latency = latency

    @classmethod
    def with_synthetic_history(
        cls,
        product_prices: dict[str, float],
        today: date,
        num_days: int = 90,
        seed: int = 42,
    ) -> "DummyOrderSystem":
        """Seed every product with a reproducible synthetic history ending yesterday."""
        start = today - timedelta(days=num_days)
        history = {}
        for offset, (product_id, price) in enumerate(sorted(product_prices.items())):
            frame = generate_synthetic_order_lines(
                start_date=start, num_days=num_days, seed=seed + offset, unit_price=price
            )
            history[product_id] = to_order_lines(frame)
        return cls(history)

    def record(self, product_id: str, lines: Iterable[OrderLine]) -> None:
        self._order_lines.setdefault(product_id, []).extend(lines)

    async def get_order_lines(
        self, product_id: str, from_date: date, to_date: date
    ) -> list[OrderLine]:
        """Order lines for a product with from_date <= date < to_date."""
        await asyncio.sleep(self.latency)
        lines = [
            line
            for line in self._order_lines.get(product_id, [])
            if from_date <= line.date < to_date
        ]
        logger.debug(f"DUMMY: {len(lines)} order lines for {product_id} in [{from_date}, {to_date})")
        return lines
