from datetime import date, timedelta

import pandas as pd
import pytest
from pandas.api.types import is_float_dtype, is_integer_dtype

from models.catalog import OrderLine
from utils.data_generation import generate_synthetic_order_lines, to_order_lines

TEST_START_DATE = date(2024, 1, 1)
TEST_NUM_DAYS = 28
TEST_SEED = 123


@pytest.fixture(scope="module")
def generated_lines() -> pd.DataFrame:
    """Generate one product's history once for the module."""
    return generate_synthetic_order_lines(
        start_date=TEST_START_DATE, num_days=TEST_NUM_DAYS, seed=TEST_SEED, unit_price=12.5
    )


def test_output_columns_and_types(generated_lines):
    assert list(generated_lines.columns) == ["date", "quantity", "revenue"]
    assert is_integer_dtype(generated_lines["quantity"])
    assert is_float_dtype(generated_lines["revenue"])


def test_dates_within_requested_range(generated_lines):
    end = TEST_START_DATE + timedelta(days=TEST_NUM_DAYS)
    assert all(TEST_START_DATE <= d < end for d in generated_lines["date"])


def test_quantities_positive_and_revenue_consistent(generated_lines):
    assert (generated_lines["quantity"] >= 1).all()
    assert (generated_lines["revenue"] == (generated_lines["quantity"] * 12.5).round(2)).all()


def test_reproducible_with_same_seed(generated_lines):
    again = generate_synthetic_order_lines(
        start_date=TEST_START_DATE, num_days=TEST_NUM_DAYS, seed=TEST_SEED, unit_price=12.5
    )
    pd.testing.assert_frame_equal(generated_lines, again)


def test_different_seed_changes_data(generated_lines):
    other = generate_synthetic_order_lines(
        start_date=TEST_START_DATE, num_days=TEST_NUM_DAYS, seed=TEST_SEED + 1, unit_price=12.5
    )
    assert not generated_lines.equals(other)


def test_zero_sales_probability_one_gives_no_lines():
    frame = generate_synthetic_order_lines(TEST_START_DATE, num_days=10, zero_sales_prob=1.0)
    assert frame.empty
    assert list(frame.columns) == ["date", "quantity", "revenue"]


def test_weekend_effect_lifts_weekend_sales():
    frame = generate_synthetic_order_lines(
        TEST_START_DATE, num_days=140, seed=5, weekend_sales_effect=1.5, zero_sales_prob=0.0
    )
    daily = frame.groupby("date")["quantity"].sum()
    weekend = daily[[d.weekday() >= 5 for d in daily.index]].mean()
    weekday = daily[[d.weekday() < 5 for d in daily.index]].mean()
    assert weekend > weekday


def test_to_order_lines(generated_lines):
    lines = to_order_lines(generated_lines)
    assert len(lines) == len(generated_lines)
    assert all(isinstance(line, OrderLine) for line in lines)
    assert sum(line.quantity for line in lines) == int(generated_lines["quantity"].sum())
