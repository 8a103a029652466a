from __future__ import annotations

import datetime as dt
import logging
from functools import cached_property
from typing import List, Optional

import pandas as pd

from networth_core.domain.family import FamilyData
from networth_core.domain.models import (
    AssetBuckets,
    ForecastParams,
    ForecastResult,
    FutureEvent,
    Money,
    MonthlyRates,
    SeriesPoint,
    TimeSeries,
    months_in_timeline,
    monthly_rate,
)

logger = logging.getLogger(__name__)

HISTORY_MONTHS = 24
HISTORY_INTERVAL = "1 month"
MIN_HISTORY_POINTS = 3


def add_months(date: dt.date, months: int) -> dt.date:
    # DateOffset clamps to the last day of shorter months (Jan 31 + 1 -> Feb 28/29)
    return (pd.Timestamp(date) + pd.DateOffset(months=months)).date()


def month_end(date: dt.date) -> dt.date:
    return (pd.Timestamp(date) + pd.offsets.MonthEnd(0)).date()


class ForecastEngine:
    """
    Net worth projection for one family.

    Construct one engine per request. Every derived value is computed once and
    reused for the lifetime of the instance, including the "today" used to
    select future events.
    """

    def __init__(
        self,
        family: FamilyData,
        timeline: Optional[str] = "1Y",
        income_growth_rate: float = 0.0,
        expense_growth_rate: float = 0.0,
        property_growth_rate: float = 0.0,
        investment_growth_rate: float = 0.0,
        as_of: Optional[dt.date] = None,
    ):
        self.family = family
        self.timeline = timeline
        self.income_growth_rate = float(income_growth_rate) / 100.0
        self.expense_growth_rate = float(expense_growth_rate) / 100.0
        self.property_growth_rate = float(property_growth_rate) / 100.0
        self.investment_growth_rate = float(investment_growth_rate) / 100.0
        self.as_of = as_of or dt.date.today()
        self.params = ForecastParams(
            timeline=timeline or "1Y",
            income_growth_rate=float(income_growth_rate),
            expense_growth_rate=float(expense_growth_rate),
            property_growth_rate=float(property_growth_rate),
            investment_growth_rate=float(investment_growth_rate),
        )

    @classmethod
    def from_params(
        cls, family: FamilyData, params: ForecastParams, as_of: Optional[dt.date] = None
    ) -> "ForecastEngine":
        return cls(
            family,
            timeline=params.timeline,
            income_growth_rate=params.income_growth_rate,
            expense_growth_rate=params.expense_growth_rate,
            property_growth_rate=params.property_growth_rate,
            investment_growth_rate=params.investment_growth_rate,
            as_of=as_of,
        )

    @property
    def currency(self) -> str:
        return self.family.currency

    @property
    def months_in_timeline(self) -> int:
        return months_in_timeline(self.timeline)

    @cached_property
    def rates(self) -> MonthlyRates:
        return MonthlyRates(
            income=monthly_rate(self.income_growth_rate),
            expense=monthly_rate(self.expense_growth_rate),
            property=monthly_rate(self.property_growth_rate),
            investment=monthly_rate(self.investment_growth_rate),
        )

    def _money(self, amount: float) -> Money:
        return Money(float(amount), self.currency)

    # Scalars

    def current_net_worth(self) -> Money:
        return self._money(self.family.net_worth() or 0.0)

    @cached_property
    def _monthly_income(self) -> float:
        return float(self.family.median_income(interval="month") or 0)

    @cached_property
    def _monthly_expenses(self) -> float:
        return abs(float(self.family.median_expense(interval="month") or 0))

    def monthly_income(self) -> Money:
        return self._money(self._monthly_income)

    def monthly_expenses(self) -> Money:
        return self._money(self._monthly_expenses)

    def monthly_cash_flow(self) -> Money:
        return self._money(self._monthly_income - self._monthly_expenses)

    def total_projected_cash_flow(self) -> Money:
        """
        One month ahead: income and expenses each grown by a single month of
        their compound rate. Not derived from forecast_series().
        """
        if self._monthly_income - self._monthly_expenses == 0:
            return self._money(0.0)

        projected_income = self._monthly_income * (1 + self.rates.income)
        projected_expenses = self._monthly_expenses * (1 + self.rates.expense)
        return self._money(projected_income - projected_expenses)

    # Series

    @cached_property
    def _historical_series(self) -> TimeSeries:
        start = add_months(self.as_of, -HISTORY_MONTHS).replace(day=1)
        end = month_end(self.as_of)
        return self.family.net_worth_series(start, end, HISTORY_INTERVAL)

    def historical_series(self) -> TimeSeries:
        return self._historical_series

    def _events_until(self, end_date: dt.date) -> List[FutureEvent]:
        start = self.as_of + dt.timedelta(days=1)
        events = sorted(self.family.future_events(start, end_date), key=lambda e: e.date)
        return [e for e in events if start <= e.date <= end_date]

    @cached_property
    def _forecast_series(self) -> TimeSeries:
        historical = self._historical_series
        if historical.is_empty:
            logger.debug("No net worth history as of %s; returning history unchanged", self.as_of)
            return historical

        last_date = historical.last.date
        months = self.months_in_timeline
        buckets = AssetBuckets.from_groups(self.family.asset_groups(), historical.last.value)
        logger.debug(
            "Buckets at %s: properties=%.2f investments=%.2f residual=%.2f",
            last_date,
            buckets.properties_value,
            buckets.investments_value,
            buckets.residual_value,
        )

        rates = self.rates
        events = self._events_until(add_months(last_date, months))
        logger.debug("Applying %d future events over %d months", len(events), months)

        base_income = self._monthly_income
        base_expenses = self._monthly_expenses
        points: List[SeriesPoint] = []

        for month in range(1, months + 1):
            forecast_date = add_months(last_date, month)

            buckets.grow(rates.property, rates.investment)

            # Compounded from the start each month so rounding does not accumulate
            income = base_income * (1 + rates.income) ** month
            expenses = base_expenses * (1 + rates.expense) ** month
            buckets.apply_cash(income - expenses)

            for event in events:
                if event.occurs_in(forecast_date):
                    buckets.apply_cash(event.signed_amount)

            points.append(SeriesPoint(date=forecast_date, value=buckets.total))

        return historical.extend(points)

    def forecast_series(self) -> TimeSeries:
        return self._forecast_series

    def projected_net_worth(self) -> Money:
        series = self._forecast_series
        if series.is_empty:
            return self.current_net_worth()
        return self._money(series.last.value)

    def has_sufficient_data(self) -> bool:
        return (
            len(self._historical_series.values) >= MIN_HISTORY_POINTS
            and self._monthly_income != 0
            and self._monthly_expenses != 0
        )

    @cached_property
    def _result(self) -> ForecastResult:
        return ForecastResult(
            params=self.params,
            as_of=self.as_of,
            current_net_worth=self.current_net_worth(),
            projected_net_worth=self.projected_net_worth(),
            monthly_income=self.monthly_income(),
            monthly_expenses=self.monthly_expenses(),
            monthly_cash_flow=self.monthly_cash_flow(),
            total_projected_cash_flow=self.total_projected_cash_flow(),
            forecast_series=self.forecast_series(),
            has_sufficient_data=self.has_sufficient_data(),
        )

    def compute(self) -> ForecastResult:
        return self._result


def forecast_net_worth(
    family: FamilyData, params: ForecastParams, as_of: Optional[dt.date] = None
) -> ForecastResult:
    return ForecastEngine.from_params(family, params, as_of=as_of).compute()
