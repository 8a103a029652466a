from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from networth_core.domain.family import InMemoryFamily
from networth_core.domain.models import (
    FamilyProfile,
    FutureEvent,
    LedgerEntry,
    SeriesPoint,
    TimeSeries,
)
from networth_core.io.ledger import median_monthly


HISTORY_COLUMNS = {"date", "value"}
EVENT_COLUMNS = {"date", "amount", "kind"}
EVENT_KINDS = {"income", "expense"}


def _read_csv(csv_path: str | Path, required: set, label: str) -> pd.DataFrame:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path)
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in {label} CSV: {missing}")
    df["date"] = pd.to_datetime(df["date"]).dt.date
    return df


def load_net_worth_history(csv_path: str | Path, interval: str = "1 month") -> TimeSeries:
    df = _read_csv(csv_path, HISTORY_COLUMNS, "net worth history").sort_values("date")
    points = [SeriesPoint(date=row["date"], value=float(row["value"])) for _, row in df.iterrows()]
    if not points:
        return TimeSeries(start_date=dt.date.min, end_date=dt.date.max, interval=interval)
    return TimeSeries(start_date=points[0].date, end_date=points[-1].date, interval=interval, values=points)


def load_future_events(csv_path: str | Path) -> List[FutureEvent]:
    df = _read_csv(csv_path, EVENT_COLUMNS, "future events")
    events: List[FutureEvent] = []
    for _, row in df.iterrows():
        kind = str(row["kind"]).strip().lower()
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind {row['kind']!r}; expected income or expense")
        description = row.get("description", "")
        events.append(
            FutureEvent(
                date=row["date"],
                amount=float(row["amount"]),
                is_income=kind == "income",
                description="" if pd.isna(description) else str(description),
            )
        )
    return sorted(events, key=lambda e: e.date)


def build_family(
    profile: FamilyProfile,
    history: Optional[TimeSeries] = None,
    ledger: Optional[Iterable[LedgerEntry]] = None,
    events: Optional[Iterable[FutureEvent]] = None,
) -> InMemoryFamily:
    """
    Assemble an in-memory family. Ledger medians only fill in income/expense
    the profile leaves unset.
    """
    income = profile.median_income
    expense = profile.median_expense
    if ledger is not None:
        entries = list(ledger)
        if income is None:
            income = median_monthly(entries, "income")
        if expense is None:
            expense = median_monthly(entries, "expense")

    return InMemoryFamily(
        currency=profile.currency,
        current_net_worth=profile.net_worth,
        history=list(history.values) if history is not None else [],
        groups=list(profile.asset_groups),
        events=list(events or []),
        income_median=income,
        expense_median=expense,
    )
