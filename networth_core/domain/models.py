from __future__ import annotations

import dataclasses
import datetime as dt
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


PROPERTY_GROUPS = ("Properties",)
INVESTMENT_GROUPS = ("Investments", "Cryptos")

TIMELINE_MONTHS: Dict[str, int] = {
    "1Y": 12,
    "2Y": 24,
    "5Y": 60,
}
DEFAULT_TIMELINE_MONTHS = 12


def months_in_timeline(timeline: Optional[str]) -> int:
    return TIMELINE_MONTHS.get(timeline or "", DEFAULT_TIMELINE_MONTHS)


def monthly_rate(annual_rate: float) -> float:
    """Equivalent monthly compound rate: (1 + r_m) ** 12 == 1 + annual_rate."""
    return math.pow(1 + annual_rate, 1 / 12) - 1


@dataclasses.dataclass(frozen=True)
class Money:
    amount: float
    currency: str = "USD"

    def add(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError("Currency mismatch")
        return Money(self.amount + other.amount, self.currency)

    def sub(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError("Currency mismatch")
        return Money(self.amount - other.amount, self.currency)


@dataclasses.dataclass(frozen=True)
class SeriesPoint:
    date: dt.date
    value: float


@dataclasses.dataclass(frozen=True)
class TimeSeries:
    start_date: dt.date
    end_date: dt.date
    interval: str
    values: Tuple[SeriesPoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        dates = [p.date for p in self.values]
        if any(a > b for a, b in zip(dates, dates[1:])):
            raise ValueError("Series points must be sorted by date")
        if dates and not (self.start_date <= dates[0] and dates[-1] <= self.end_date):
            raise ValueError(
                f"Series points {dates[0]}..{dates[-1]} fall outside {self.start_date}..{self.end_date}"
            )

    @property
    def is_empty(self) -> bool:
        return not self.values

    @property
    def last(self) -> Optional[SeriesPoint]:
        return self.values[-1] if self.values else None

    def extend(self, points: Sequence[SeriesPoint]) -> "TimeSeries":
        """
        New series with `points` appended after the existing ones.
        start_date and interval are kept; end_date moves to the last new point.
        """
        if not points:
            return self
        return TimeSeries(
            start_date=self.start_date,
            end_date=points[-1].date,
            interval=self.interval,
            values=self.values + tuple(points),
        )

    def to_pairs(self) -> List[Tuple[str, float]]:
        return [(p.date.isoformat(), p.value) for p in self.values]


@dataclasses.dataclass(frozen=True)
class AccountGroup:
    name: str
    total: float


@dataclasses.dataclass
class AssetBuckets:
    """
    Three disjoint running totals of net worth. Only the residual bucket
    receives cash flow and one-time events.
    """

    properties_value: float = 0.0
    investments_value: float = 0.0
    residual_value: float = 0.0

    @classmethod
    def from_groups(cls, groups: Iterable[AccountGroup], net_worth: float) -> "AssetBuckets":
        groups = list(groups)
        properties = next((float(g.total) for g in groups if g.name in PROPERTY_GROUPS), 0.0)
        investments = sum(float(g.total) for g in groups if g.name in INVESTMENT_GROUPS)
        return cls(
            properties_value=properties,
            investments_value=investments,
            residual_value=float(net_worth) - properties - investments,
        )

    @property
    def total(self) -> float:
        return self.properties_value + self.investments_value + self.residual_value

    def grow(self, property_rate: float, investment_rate: float) -> None:
        self.properties_value *= 1 + property_rate
        self.investments_value *= 1 + investment_rate

    def apply_cash(self, amount: float) -> None:
        self.residual_value += amount


@dataclasses.dataclass(frozen=True)
class FutureEvent:
    date: dt.date
    amount: float
    is_income: bool
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", abs(float(self.amount)))

    @property
    def kind(self) -> str:
        return "income" if self.is_income else "expense"

    @property
    def signed_amount(self) -> float:
        return self.amount if self.is_income else -self.amount

    def occurs_in(self, date: dt.date) -> bool:
        return self.date.month == date.month and self.date.year == date.year


@dataclasses.dataclass(frozen=True)
class MonthlyRates:
    income: float = 0.0
    expense: float = 0.0
    property: float = 0.0
    investment: float = 0.0


@dataclasses.dataclass(frozen=True)
class ForecastParams:
    """Growth rates are annual percentages (5.0 means 5%)."""

    timeline: str = "1Y"
    income_growth_rate: float = 0.0
    expense_growth_rate: float = 0.0
    property_growth_rate: float = 0.0
    investment_growth_rate: float = 0.0

    @property
    def months(self) -> int:
        return months_in_timeline(self.timeline)


@dataclasses.dataclass(frozen=True)
class FamilyProfile:
    currency: str = "USD"
    net_worth: float = 0.0
    asset_groups: Tuple[AccountGroup, ...] = ()
    median_income: Optional[float] = None
    median_expense: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class LedgerEntry:
    date: dt.date
    amount: float
    category: str
    kind: str  # "income" or "expense"


@dataclasses.dataclass(frozen=True)
class ForecastResult:
    params: ForecastParams
    as_of: dt.date
    current_net_worth: Money
    projected_net_worth: Money
    monthly_income: Money
    monthly_expenses: Money
    monthly_cash_flow: Money
    total_projected_cash_flow: Money
    forecast_series: TimeSeries
    has_sufficient_data: bool

    @property
    def currency(self) -> str:
        return self.current_net_worth.currency

    @property
    def projected_change(self) -> Money:
        return self.projected_net_worth.sub(self.current_net_worth)


@dataclasses.dataclass
class ScenarioComparison:
    baseline: ForecastResult
    scenario: ForecastResult
    delta: List[Tuple[dt.date, float]]
