from datetime import date, timedelta

import numpy as np
import pytest

from config.config import ForecastConfig
from forecasting.demand import DemandForecaster
from forecasting.seasonality import SeasonalDecomposer
from forecasting.trend import TrendEstimator
from models.exceptions import InvalidInputError
from models.forecast import SeasonalProfile
from models.sales import SalesObservation

TODAY = date(2025, 3, 10)  # Monday; the next weeks fall in March (month factor 1.0)
FLAT_PROFILE = SeasonalProfile((1.0,) * 7, {m: 1.0 for m in range(1, 13)})


def history(quantities: list[int], today: date = TODAY) -> list[SalesObservation]:
    start = today - timedelta(days=len(quantities))
    series = []
    for i, quantity in enumerate(quantities):
        day = start + timedelta(days=i)
        series.append(SalesObservation(day, quantity, float(quantity), day.weekday()))
    return series


@pytest.fixture
def forecaster() -> DemandForecaster:
    return DemandForecaster()


def test_flat_history_forecast(forecaster: DemandForecaster):
    forecast = forecaster.forecast(history([10] * 90), 0.0, FLAT_PROFILE, 7, TODAY)

    assert forecast.horizon_days == 7
    assert [p.date for p in forecast.daily_predictions] == [TODAY + timedelta(days=i) for i in range(1, 8)]
    assert forecast.quantities() == [10] * 7
    assert all(p.low == 9 and p.high == 11 for p in forecast.daily_predictions)
    assert forecast.total_predicted == 70
    assert forecast.insufficient_data is False


def test_trend_is_applied_linearly(forecaster: DemandForecaster):
    forecast = forecaster.forecast(history([10] * 30), 0.1, FLAT_PROFILE, 3, TODAY)
    # 10 * (1 + 0.1 * i), not compounded
    assert forecast.quantities() == [11, 12, 13]


def test_steep_negative_trend_never_goes_below_zero(forecaster: DemandForecaster):
    forecast = forecaster.forecast(history([10] * 30), -0.5, FLAT_PROFILE, 10, TODAY)

    assert all(p.quantity == 0 and p.low == 0 and p.high == 0 for p in forecast.daily_predictions[2:])


def test_weekday_pattern_carries_into_forecast(forecaster: DemandForecaster):
    """Saturdays sell twice as much as other days and the forecast follows."""
    series = history([0] * 91)
    series = [SalesObservation(o.date, 10 if o.weekday == 5 else 5, 0.0, o.weekday) for o in series]
    profile = SeasonalDecomposer().decompose(series)
    trend = TrendEstimator().estimate(series)

    forecast = forecaster.forecast(series, trend, profile, 7, TODAY)

    for point in forecast.daily_predictions:
        expected = 10 if point.date.weekday() == 5 else 5
        assert abs(point.quantity - expected) <= 1


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("trend", [-0.2, -0.01, 0.0, 0.03])
def test_forecast_band_ordering(forecaster: DemandForecaster, seed: int, trend: float):
    rng = np.random.default_rng(seed)
    series = history([int(q) for q in rng.poisson(4, size=60)])
    profile = SeasonalDecomposer().decompose(series)

    forecast = forecaster.forecast(series, trend, profile, 30, TODAY)

    for point in forecast.daily_predictions:
        assert 0 <= point.low <= point.quantity <= point.high


@pytest.mark.parametrize("horizon", [0, -1])
def test_non_positive_horizon_is_invalid(forecaster: DemandForecaster, horizon: int):
    with pytest.raises(InvalidInputError):
        forecaster.forecast(history([1] * 10), 0.0, FLAT_PROFILE, horizon, TODAY)


def test_all_zero_history_gives_zero_forecast_with_low_confidence(forecaster: DemandForecaster):
    forecast = forecaster.forecast(history([0] * 90), 0.0, FLAT_PROFILE, 14, TODAY)

    assert forecast.total_predicted == 0
    assert forecast.insufficient_data is True
    # Only the volume component scores
    assert forecast.confidence == 40


def test_empty_history(forecaster: DemandForecaster):
    forecast = forecaster.forecast([], 0.0, FLAT_PROFILE, 5, TODAY)

    assert forecast.quantities() == [0] * 5
    assert forecast.confidence == 0
    assert forecast.insufficient_data is True


def test_confidence_is_capped(forecaster: DemandForecaster):
    assert forecaster.confidence(history([10] * 90)) == 95


def test_confidence_components(forecaster: DemandForecaster):
    # 46 days, sales every other day: volume 20.4, cv 1 -> 0, recent 15, coverage 7.5
    quantities = [4 if i % 2 else 0 for i in range(46)]
    assert forecaster.confidence(history(quantities)) == 43


def test_confidence_ignores_stale_sales(forecaster: DemandForecaster):
    quantities = [5] * 83 + [0] * 7
    recent = [5] * 90
    assert forecaster.confidence(history(quantities)) < forecaster.confidence(history(recent))


def test_confidence_monotonic_for_constant_sales(forecaster: DemandForecaster):
    scores = [forecaster.confidence(history([5] * n)) for n in range(10, 91)]
    assert scores == sorted(scores)
    assert scores[0] < scores[-1]


def test_short_history_flagged_insufficient():
    forecaster = DemandForecaster(ForecastConfig(min_trend_observations=7))
    assert forecaster.is_insufficient(history([3] * 6)) is True
    assert forecaster.is_insufficient(history([3] * 7)) is False
