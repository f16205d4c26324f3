"""
Module: connectors.dummy_catalog

Provides a dummy in-memory product catalog for demos and tests.
"""

import asyncio

from models.catalog import ProductRecord

SAMPLE_PRODUCTS = [
    ProductRecord(
        product_id="P1001",
        name="Noise Cancelling Headphones",
        price=199.0,
        cost_price=120.0,
        stock=14,
        lead_time_days=10,
        category="Electronics",
        reorder_level=20,
    ),
    ProductRecord(
        product_id="P1002",
        name="Running Shoes",
        price=89.99,
        stock=240,
        category="Sports",
        reorder_level=25,
    ),
    ProductRecord(
        product_id="P1003",
        name="Linen Throw Blanket",
        price=49.99,
        cost_price=22.0,
        stock=3,
        lead_time_days=5,
        category="Home",
    ),
    ProductRecord(
        product_id="P1004",
        name="Denim Jacket",
        price=74.5,
        cost_price=40.0,
        stock=60,
        category="Fashion",
        reorder_level=15,
        active=False,
    ),
]


class DummyCatalog:
    """
    Dummy catalog connector keyed by product id.
    """

    def __init__(self, products: list[ProductRecord] | None = None, latency: float = 0.01):
        source = SAMPLE_PRODUCTS if products is None else products
        self._products = {p.product_id: p for p in source}
        self.latency = latency

    async def get_product(self, product_id: str) -> ProductRecord | None:
        """Get catalog attributes for a product, None if unknown."""
        await asyncio.sleep(self.latency)
        return self._products.get(product_id)

    async def list_active_products(self) -> list[ProductRecord]:
        """List all products flagged active."""
        await asyncio.sleep(self.latency)
        return [p for p in self._products.values() if p.active]

    def upsert(self, product: ProductRecord) -> None:
        self._products[product.product_id] = product
