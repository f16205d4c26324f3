"""
Per-item result type for bulk operations.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from .enums import ForecastState
from .exceptions import ForecastError

T = TypeVar("T")


@dataclass(frozen=True)
class ItemResult(Generic[T]):
    """Either a value or an error for one product, never both."""

    product_id: str
    value: T | None = None
    error: ForecastError | None = None
    state: ForecastState = ForecastState.DONE

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("ItemResult needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, product_id: str, value: T) -> "ItemResult[T]":
        return cls(product_id, value=value, state=ForecastState.DONE)

    @classmethod
    def failure(cls, product_id: str, error: ForecastError) -> "ItemResult[T]":
        return cls(product_id, error=error, state=ForecastState.FAILED)
