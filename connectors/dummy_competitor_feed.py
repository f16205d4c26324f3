"""
Module: connectors.dummy_competitor_feed

Stand-in for a real competitor price feed. Serves fixed samples where given,
otherwise simulates three competitors around a reference price.
"""

import asyncio
import random

from models.catalog import CompetitorPrice

# (source, low multiplier, spread) around the reference price
SIMULATED_COMPETITORS = [
    ("Competitor A", 0.90, 0.20),
    ("Competitor B", 0.85, 0.30),
    ("Competitor C", 0.95, 0.15),
]


class DummyCompetitorFeed:
    def __init__(
        self,
        prices: dict[str, list[CompetitorPrice]] | None = None,
        reference_prices: dict[str, float] | None = None,
        seed: int = 7,
        latency: float = 0.01,
    ):
        self._prices = {pid: list(samples) for pid, samples in (prices or {}).items()}
        self._reference_prices = dict(reference_prices or {})
        self.seed = seed
        self.latency = latency
        self.calls = 0

    async def get_competitor_prices(self, product_id: str) -> list[CompetitorPrice]:
        await asyncio.sleep(self.latency)
        self.calls += 1
        if product_id in self._prices:
            return list(self._prices[product_id])
        reference = self._reference_prices.get(product_id)
        if reference is None:
            return []
        # Seeded per product so repeated calls agree
        rng = random.Random(f"{self.seed}:{product_id}")
        return [
            CompetitorPrice(source=name, price=round(reference * (low + rng.random() * spread), 2))
            for name, low, spread in SIMULATED_COMPETITORS
        ]
