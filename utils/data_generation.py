import logging
from datetime import date

import numpy as np
import pandas as pd

from models.catalog import OrderLine

logger = logging.getLogger(__name__)


def generate_synthetic_order_lines(
    start_date: date,
    num_days: int = 90,
    seed: int = 42,
    base_daily_units: float = 6.0,
    unit_price: float = 25.0,
    weekend_sales_effect: float = 0.4,
    daily_trend: float = 0.0,
    seasonal_effect_amplitude: float = 0.1,
    orders_per_day_lambda: float = 3.0,
    zero_sales_prob: float = 0.05,
    noise_std_dev: float = 0.15,
) -> pd.DataFrame:
    """
    Generates synthetic order lines for one product.

    Args:
        start_date: First calendar day of the history.
        num_days: Number of days to simulate.
        seed: Random seed for reproducibility.
        base_daily_units: Baseline expected units per day (Poisson mean).
        unit_price: Price charged per unit; revenue = quantity * unit_price.
        weekend_sales_effect: Multiplicative lift on Saturdays and Sundays.
        daily_trend: Linear growth per day relative to the baseline.
        seasonal_effect_amplitude: Amplitude of the monthly sine wave.
        orders_per_day_lambda: Average number of order lines a day's units are split into.
        zero_sales_prob: Probability that a day has no sales at all (stock-outs, closures).
        noise_std_dev: Std dev of multiplicative normal noise on daily demand.

    Returns:
        DataFrame with one row per order line: date, quantity, revenue.
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range(start=start_date, periods=num_days, freq="D")

    rows = []
    for i, day in enumerate(dates):
        if rng.random() < zero_sales_prob:
            continue
        is_weekend = day.dayofweek >= 5
        month_effect = 1.0 + np.sin((day.month - 1) / 12 * 2 * np.pi) * seasonal_effect_amplitude
        dow_effect = 1.0 + weekend_sales_effect * is_weekend
        trend_effect = max(0.0, 1.0 + daily_trend * i)
        noise = max(0.0, rng.normal(1.0, noise_std_dev))

        expected = base_daily_units * month_effect * dow_effect * trend_effect * noise
        units = int(rng.poisson(max(0.1, expected)))
        if units == 0:
            continue

        # Split the day's units across a few order lines
        num_lines = int(min(units, max(1, rng.poisson(orders_per_day_lambda))))
        splits = rng.multinomial(units - num_lines, [1 / num_lines] * num_lines) + 1
        for quantity in splits:
            rows.append(
                {
                    "date": day.date(),
                    "quantity": int(quantity),
                    "revenue": round(int(quantity) * unit_price, 2),
                }
            )

    lines = pd.DataFrame(rows, columns=["date", "quantity", "revenue"])
    logger.debug(f"Generated {len(lines)} order lines over {num_days} days.")
    return lines


def to_order_lines(frame: pd.DataFrame) -> list[OrderLine]:
    """Convert a date/quantity/revenue frame into OrderLine records."""
    return [
        OrderLine(date=row.date, quantity=int(row.quantity), revenue=float(row.revenue))
        for row in frame.itertuples(index=False)
    ]
