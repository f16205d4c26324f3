"""
Turns raw order-line events into a gap-filled daily sales series.
"""

import logging
from collections.abc import Iterable
from datetime import date, timedelta

import pandas as pd

from models.catalog import OrderLine
from models.sales import SalesObservation

logger = logging.getLogger(__name__)


class SalesHistoryAggregator:
    """
    Aggregates order lines into exactly one SalesObservation per calendar day
    of the window [today - window_days, today), zero-filling days without sales.
    """

    def __init__(self, window_days: int = 90):
        self.window_days = window_days

    def window_start(self, today: date, window_days: int | None = None) -> date:
        return today - timedelta(days=self.window_days if window_days is None else window_days)

    def aggregate(
        self,
        order_lines: Iterable[OrderLine],
        today: date,
        window_days: int | None = None,
    ) -> list[SalesObservation]:
        days = self.window_days if window_days is None else window_days
        if days <= 0:
            return []

        start = self.window_start(today, days)
        calendar = pd.date_range(start=start, periods=days, freq="D")

        rows = [
            {"date": pd.Timestamp(line.date), "quantity": line.quantity, "revenue": line.revenue}
            for line in order_lines
            if start <= line.date < today
        ]
        frame = pd.DataFrame(rows, columns=["date", "quantity", "revenue"])
        daily = (
            frame.groupby("date")[["quantity", "revenue"]]
            .sum()
            .reindex(calendar, fill_value=0)
        )
        logger.debug(f"Aggregated {len(rows)} order lines into {len(daily)} days starting {start}")

        return [
            SalesObservation(
                date=day.date(),
                quantity=int(row.quantity),
                revenue=round(float(row.revenue), 2),
                weekday=day.weekday(),
            )
            for day, row in zip(daily.index, daily.itertuples(index=False))
        ]

    @staticmethod
    def total_units(observations: Iterable[SalesObservation], last_days: int | None = None) -> int:
        """Units sold across the series, optionally only the trailing last_days."""
        series = list(observations)
        if last_days is not None:
            series = series[-last_days:] if last_days > 0 else []
        return sum(o.quantity for o in series)
