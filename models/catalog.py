"""
Records exchanged with the external collaborators (catalog, sales history,
competitor feed, price history store).
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductRecord(BaseModel):
    """Catalog attributes for one product."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str = ""
    price: float = Field(gt=0)
    cost_price: float | None = Field(default=None, gt=0)
    stock: int = Field(ge=0)
    lead_time_days: int | None = Field(default=None, ge=1)
    category: str = ""
    reorder_level: int | None = Field(default=None, ge=0)
    order_cost: float | None = Field(default=None, gt=0)
    active: bool = True


class OrderLine(BaseModel):
    """A single order-line event for one product."""

    model_config = ConfigDict(frozen=True)

    date: date
    quantity: int = Field(ge=0)
    revenue: float = Field(default=0.0, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_datetime(cls, value):
        # Providers often hand back timestamps; only the calendar day matters
        if isinstance(value, datetime):
            return value.date()
        return value


class CompetitorPrice(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    price: float = Field(gt=0)


class PriceChange(BaseModel):
    """An entry in the price history store."""

    model_config = ConfigDict(frozen=True)

    old_price: float = Field(gt=0)
    new_price: float = Field(gt=0)
    changed_at: datetime = Field(default_factory=datetime.now)
    reason: str = ""
