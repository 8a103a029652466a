from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from networth_core.domain.models import LedgerEntry


REQUIRED_COLUMNS = {"date", "amount", "category", "kind"}


def load_ledger(csv_path: str | Path) -> List[LedgerEntry]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path)
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in ledger CSV: {missing}")

    df["date"] = pd.to_datetime(df["date"]).dt.date
    entries: List[LedgerEntry] = []
    for _, row in df.iterrows():
        entries.append(
            LedgerEntry(
                date=row["date"],
                amount=float(row["amount"]),
                category=str(row["category"]),
                kind=str(row["kind"]).lower(),
            )
        )
    return entries


def median_monthly(entries: Iterable[LedgerEntry], kind: str) -> Optional[float]:
    """
    Median of monthly totals for one kind ("income" or "expense").
    Months with no entries of that kind are not counted. None when there is no data.
    """
    rows = [{"date": e.date, "amount": e.amount} for e in entries if e.kind == kind]
    if not rows:
        return None

    df = pd.DataFrame(rows)
    df["month"] = pd.to_datetime(df["date"]).dt.to_period("M")
    monthly = df.groupby("month")["amount"].sum()
    return float(monthly.median())
