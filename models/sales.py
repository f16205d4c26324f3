"""
Sales time-series value objects.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SalesObservation:
    """One calendar day of aggregated sales for a product."""

    date: date
    quantity: int
    revenue: float
    weekday: int  # 0 = Monday ... 6 = Sunday
