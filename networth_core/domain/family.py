from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Iterable, List, Optional, Protocol, Sequence

from networth_core.domain.models import AccountGroup, FutureEvent, SeriesPoint, TimeSeries


class FamilyData(Protocol):
    """Read-only view of a household that the forecast engine consumes."""

    currency: str

    def net_worth(self) -> float: ...

    def net_worth_series(self, start_date: dt.date, end_date: dt.date, interval: str) -> TimeSeries: ...

    def median_income(self, interval: str = "month") -> Optional[float]: ...

    def median_expense(self, interval: str = "month") -> Optional[float]: ...

    def asset_groups(self) -> Iterable[AccountGroup]: ...

    def future_events(self, start_date: dt.date, end_date: dt.date) -> Sequence[FutureEvent]: ...


@dataclasses.dataclass
class InMemoryFamily:
    currency: str = "USD"
    current_net_worth: float = 0.0
    history: List[SeriesPoint] = dataclasses.field(default_factory=list)
    groups: List[AccountGroup] = dataclasses.field(default_factory=list)
    events: List[FutureEvent] = dataclasses.field(default_factory=list)
    income_median: Optional[float] = None
    expense_median: Optional[float] = None

    def net_worth(self) -> float:
        return self.current_net_worth

    def net_worth_series(self, start_date: dt.date, end_date: dt.date, interval: str = "1 month") -> TimeSeries:
        points = sorted(
            (p for p in self.history if start_date <= p.date <= end_date),
            key=lambda p: p.date,
        )
        return TimeSeries(start_date=start_date, end_date=end_date, interval=interval, values=points)

    def median_income(self, interval: str = "month") -> Optional[float]:
        return self.income_median

    def median_expense(self, interval: str = "month") -> Optional[float]:
        return self.expense_median

    def asset_groups(self) -> List[AccountGroup]:
        return list(self.groups)

    def future_events(self, start_date: dt.date, end_date: dt.date) -> List[FutureEvent]:
        selected = [e for e in self.events if start_date <= e.date <= end_date]
        return sorted(selected, key=lambda e: e.date)
