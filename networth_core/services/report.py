from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List

from networth_core.domain.family import FamilyData
from networth_core.domain.models import ForecastResult, FutureEvent, TimeSeries
from networth_core.services.forecaster import add_months


def upcoming_events(family: FamilyData, as_of: dt.date, months: int) -> List[FutureEvent]:
    end = add_months(as_of, months)
    return sorted(family.future_events(as_of, end), key=lambda e: e.date)


def series_to_payload(series: TimeSeries) -> Dict[str, Any]:
    return {
        "start_date": series.start_date.isoformat(),
        "end_date": series.end_date.isoformat(),
        "interval": series.interval,
        "data_points": [{"date": date, "value": value} for date, value in series.to_pairs()],
    }


def forecast_to_payload(result: ForecastResult, events: Iterable[FutureEvent] = ()) -> Dict[str, Any]:
    """JSON-ready view of a forecast. Amounts stay numeric; formatting is left to the caller."""
    params = result.params
    return {
        "as_of_date": result.as_of.isoformat(),
        "timeline": params.timeline,
        "has_sufficient_data": result.has_sufficient_data,
        "currency": result.currency,
        "current_net_worth": result.current_net_worth.amount,
        "projected_net_worth": result.projected_net_worth.amount,
        "projected_change": result.projected_change.amount,
        "monthly_income": result.monthly_income.amount,
        "monthly_expenses": result.monthly_expenses.amount,
        "monthly_cash_flow": result.monthly_cash_flow.amount,
        "total_projected_cash_flow": result.total_projected_cash_flow.amount,
        "income_growth_rate": params.income_growth_rate,
        "expense_growth_rate": params.expense_growth_rate,
        "property_growth_rate": params.property_growth_rate,
        "investment_growth_rate": params.investment_growth_rate,
        "forecast_series": series_to_payload(result.forecast_series),
        "future_events": [
            {
                "date": e.date.isoformat(),
                "amount": e.amount,
                "type": e.kind,
                "description": e.description,
            }
            for e in events
        ],
    }
