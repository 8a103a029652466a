import datetime as dt

import pytest

from networth_core.domain.family import InMemoryFamily
from networth_core.domain.models import AccountGroup, FutureEvent, SeriesPoint, monthly_rate
from networth_core.services.forecaster import ForecastEngine, add_months


AS_OF = dt.date(2024, 6, 15)


def _family(
    history=None,
    income=10000.0,
    expense=8000.0,
    properties=50000.0,
    investments=30000.0,
    events=(),
) -> InMemoryFamily:
    if history is None:
        history = [
            SeriesPoint(dt.date(2024, 4, 15), 100000.0),
            SeriesPoint(dt.date(2024, 5, 15), 105000.0),
            SeriesPoint(dt.date(2024, 6, 15), 110000.0),
        ]
    return InMemoryFamily(
        currency="USD",
        current_net_worth=110000.0,
        history=list(history),
        groups=[
            AccountGroup("Properties", properties),
            AccountGroup("Investments", investments),
            AccountGroup("Depository", 30000.0),
        ],
        events=list(events),
        income_median=income,
        expense_median=expense,
    )


def _forecast_values(engine: ForecastEngine):
    return [p.value for p in engine.forecast_series().values[3:]]


def test_initializes_with_growth_rates_as_fractions():
    engine = ForecastEngine(
        _family(),
        income_growth_rate=3.0,
        expense_growth_rate=2.0,
        property_growth_rate=5.0,
        investment_growth_rate=7.0,
        as_of=AS_OF,
    )
    assert engine.income_growth_rate == 0.03
    assert engine.expense_growth_rate == 0.02
    assert engine.property_growth_rate == 0.05
    assert engine.investment_growth_rate == 0.07


def test_forecast_series_with_appreciation():
    engine = ForecastEngine(
        _family(),
        timeline="1Y",
        property_growth_rate=12.0,
        investment_growth_rate=24.0,
        as_of=AS_OF,
    )
    series = engine.forecast_series()

    assert len(series.values) == 15
    expected = 50000 * 1.12 ** (1 / 12) + 30000 * 1.24 ** (1 / 12) + 32000
    assert series.values[3].value == pytest.approx(expected)
    assert abs(series.values[3].value - 113016) < 100
    assert series.start_date == dt.date(2022, 6, 1)
    assert series.end_date == dt.date(2025, 6, 15)
    assert series.interval == "1 month"


@pytest.mark.parametrize("timeline,months", [("1Y", 12), ("2Y", 24), ("5Y", 60), ("10Y", 12), (None, 12)])
def test_series_length_is_history_plus_timeline(timeline, months):
    engine = ForecastEngine(_family(), timeline=timeline, as_of=AS_OF)
    assert engine.months_in_timeline == months
    assert len(engine.forecast_series().values) == 3 + months


def test_forecast_dates_step_one_month_from_last_history_point():
    engine = ForecastEngine(_family(), timeline="2Y", as_of=AS_OF)
    dates = [p.date for p in engine.forecast_series().values[3:]]
    assert dates[0] == dt.date(2024, 7, 15)
    assert dates == [add_months(dt.date(2024, 6, 15), k) for k in range(1, 25)]


def test_month_arithmetic_clamps_to_month_end():
    history = [SeriesPoint(dt.date(2024, 1, 31), 1000.0)]
    engine = ForecastEngine(_family(history=history), as_of=dt.date(2024, 1, 31))
    dates = [p.date for p in engine.forecast_series().values[1:4]]
    assert dates == [dt.date(2024, 2, 29), dt.date(2024, 3, 31), dt.date(2024, 4, 30)]


def test_zero_rates_grow_linearly_with_cash_flow():
    engine = ForecastEngine(_family(), as_of=AS_OF)
    values = _forecast_values(engine)
    assert values == [110000.0 + k * 2000.0 for k in range(1, 13)]


def test_property_rate_compounds_geometrically():
    engine = ForecastEngine(
        _family(income=5000.0, expense=5000.0),
        property_growth_rate=12.0,
        as_of=AS_OF,
    )
    values = _forecast_values(engine)
    for k, value in enumerate(values, start=1):
        properties = value - 30000.0 - 30000.0
        assert properties == pytest.approx(50000.0 * 1.12 ** (k / 12), rel=1e-9)


def test_income_growth_compounds_from_start_each_month():
    engine = ForecastEngine(_family(expense=0.0), income_growth_rate=10.0, as_of=AS_OF)
    values = _forecast_values(engine)
    monthly = 1.10 ** (1 / 12) - 1
    expected = 110000.0
    for k, value in enumerate(values, start=1):
        expected += 10000.0 * (1 + monthly) ** k
        assert value == pytest.approx(expected, rel=1e-9)


def test_income_event_shifts_its_month_and_later():
    baseline = _forecast_values(ForecastEngine(_family(), as_of=AS_OF))
    event = FutureEvent(date=dt.date(2024, 9, 3), amount=5000.0, is_income=True)
    with_event = _forecast_values(ForecastEngine(_family(events=[event]), as_of=AS_OF))

    deltas = [b - a for a, b in zip(baseline, with_event)]
    assert deltas[:2] == [0.0, 0.0]
    assert all(d == pytest.approx(5000.0) for d in deltas[2:])


def test_expense_event_reduces_residual():
    event = FutureEvent(date=dt.date(2024, 7, 1), amount=-3000.0, is_income=False)
    values = _forecast_values(ForecastEngine(_family(events=[event]), as_of=AS_OF))
    assert values[0] == pytest.approx(110000.0 + 2000.0 - 3000.0)


def test_events_on_or_before_today_and_past_horizon_are_ignored():
    events = [
        FutureEvent(date=AS_OF, amount=1000.0, is_income=True),
        FutureEvent(date=dt.date(2024, 1, 10), amount=1000.0, is_income=True),
        FutureEvent(date=dt.date(2025, 7, 1), amount=1000.0, is_income=True),
    ]
    baseline = _forecast_values(ForecastEngine(_family(), as_of=AS_OF))
    values = _forecast_values(ForecastEngine(_family(events=events), as_of=AS_OF))
    assert values == baseline


def test_empty_history_returns_degenerate_series():
    engine = ForecastEngine(_family(history=[]), as_of=AS_OF)
    series = engine.forecast_series()
    assert series.is_empty
    assert engine.projected_net_worth().amount == 110000.0
    assert engine.has_sufficient_data() is False


def test_has_sufficient_data_requires_three_points():
    history = [
        SeriesPoint(dt.date(2024, 5, 15), 105000.0),
        SeriesPoint(dt.date(2024, 6, 15), 110000.0),
    ]
    assert ForecastEngine(_family(history=history), as_of=AS_OF).has_sufficient_data() is False
    assert ForecastEngine(_family(), as_of=AS_OF).has_sufficient_data() is True


def test_has_sufficient_data_requires_income_and_expenses():
    assert ForecastEngine(_family(income=None), as_of=AS_OF).has_sufficient_data() is False
    assert ForecastEngine(_family(expense=0.0), as_of=AS_OF).has_sufficient_data() is False


def test_history_outside_window_is_not_used():
    history = [SeriesPoint(dt.date(2021, 1, 15), 1.0)] + list(_family().history)
    engine = ForecastEngine(_family(history=history), as_of=AS_OF)
    assert len(engine.historical_series().values) == 3


def test_monthly_amounts_normalize_and_default():
    engine = ForecastEngine(_family(income=None, expense=-8000.0), as_of=AS_OF)
    assert engine.monthly_income().amount == 0.0
    assert engine.monthly_expenses().amount == 8000.0
    assert engine.monthly_cash_flow().amount == -8000.0
    assert engine.monthly_cash_flow().currency == "USD"


def test_total_projected_cash_flow_is_single_step():
    engine = ForecastEngine(
        _family(),
        income_growth_rate=12.0,
        expense_growth_rate=0.0,
        as_of=AS_OF,
    )
    expected = 10000.0 * 1.12 ** (1 / 12) - 8000.0
    assert engine.total_projected_cash_flow().amount == pytest.approx(expected)


def test_total_projected_cash_flow_short_circuits_on_zero_flow():
    engine = ForecastEngine(_family(income=5000.0, expense=5000.0), income_growth_rate=50.0, as_of=AS_OF)
    assert engine.total_projected_cash_flow().amount == 0.0


def test_forecast_series_is_memoized():
    family = _family()
    engine = ForecastEngine(family, as_of=AS_OF)
    first = engine.forecast_series()
    family.events.append(FutureEvent(date=dt.date(2024, 8, 1), amount=1.0, is_income=True))
    assert engine.forecast_series() is first
    assert engine.compute() is engine.compute()


def test_compute_collects_headline_numbers():
    result = ForecastEngine(_family(), timeline="1Y", as_of=AS_OF).compute()
    assert result.current_net_worth.amount == 110000.0
    assert result.projected_net_worth.amount == pytest.approx(110000.0 + 12 * 2000.0)
    assert result.projected_change.amount == pytest.approx(24000.0)
    assert result.monthly_cash_flow.amount == 2000.0
    assert result.has_sufficient_data is True
    assert result.params.timeline == "1Y"


def test_monthly_rates_come_from_stored_fractions():
    engine = ForecastEngine(
        _family(),
        income_growth_rate=6.0,
        expense_growth_rate=3.0,
        property_growth_rate=12.0,
        investment_growth_rate=24.0,
        as_of=AS_OF,
    )
    assert engine.rates.income == monthly_rate(engine.income_growth_rate)
    assert engine.rates.expense == monthly_rate(engine.expense_growth_rate)
    assert engine.rates.property == pytest.approx(1.12 ** (1 / 12) - 1)
    assert engine.rates.investment == pytest.approx(1.24 ** (1 / 12) - 1)
