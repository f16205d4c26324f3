from datetime import date, timedelta

import pytest

from config.config import DEFAULT_MONTH_FACTORS
from forecasting.seasonality import SeasonalDecomposer
from models.sales import SalesObservation

START = date(2024, 12, 1)


def make_series(quantities: list[int], start: date = START) -> list[SalesObservation]:
    series = []
    for i, quantity in enumerate(quantities):
        day = start + timedelta(days=i)
        series.append(SalesObservation(day, quantity, quantity * 2.0, day.weekday()))
    return series


def test_flat_history_gives_unit_weekday_factors():
    profile = SeasonalDecomposer().decompose(make_series([10] * 90))

    assert profile.weekday_factors == pytest.approx((1.0,) * 7)


def test_weekday_factors_reflect_weekday_means():
    series = [
        SalesObservation(o.date, 10 if o.weekday == 5 else 5, 0.0, o.weekday)
        for o in make_series([0] * 70)
    ]
    factors = SeasonalDecomposer().weekday_factors(series)

    overall_mean = (6 * 5 + 10) / 7
    assert factors[5] == pytest.approx(10 / overall_mean)
    for weekday in (0, 1, 2, 3, 4, 6):
        assert factors[weekday] == pytest.approx(5 / overall_mean)


def test_all_zero_history_defaults_to_one():
    factors = SeasonalDecomposer().weekday_factors(make_series([0] * 30))
    assert factors == (1.0,) * 7


def test_empty_history_defaults_to_one():
    assert SeasonalDecomposer().weekday_factors([]) == (1.0,) * 7


def test_weekday_without_observations_gets_factor_one():
    # Three consecutive days only cover three weekdays
    series = make_series([4, 8, 12])
    factors = SeasonalDecomposer().weekday_factors(series)

    covered = {o.weekday for o in series}
    for weekday in range(7):
        if weekday not in covered:
            assert factors[weekday] == 1.0


def test_closed_weekday_is_floored_not_zero():
    series = [
        SalesObservation(o.date, 0 if o.weekday == 6 else 6, 0.0, o.weekday)
        for o in make_series([0] * 28)
    ]
    factors = SeasonalDecomposer(factor_floor=0.05).weekday_factors(series)

    assert factors[6] == 0.05
    assert all(f > 0 for f in factors)


def test_month_factors_use_fixed_profile():
    profile = SeasonalDecomposer().decompose(make_series([3] * 30))

    assert dict(profile.month_factors) == DEFAULT_MONTH_FACTORS
    assert profile.factor_for(date(2025, 12, 1)) == pytest.approx(
        profile.weekday_factors[date(2025, 12, 1).weekday()] * 1.3
    )


def test_month_factor_overrides_are_floored():
    overrides = {m: 1.0 for m in range(1, 13)}
    overrides[2] = 0.0
    decomposer = SeasonalDecomposer(month_factors=overrides, factor_floor=0.01)

    assert decomposer.month_factors[2] == 0.01


def test_incomplete_month_factors_rejected():
    with pytest.raises(ValueError, match="missing months"):
        SeasonalDecomposer(month_factors={1: 1.0, 2: 1.0})


def test_profile_is_immutable():
    profile = SeasonalDecomposer().decompose(make_series([1] * 14))
    with pytest.raises(TypeError):
        profile.month_factors[1] = 5.0  # type: ignore[index]
