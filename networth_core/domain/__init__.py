from networth_core.domain.family import FamilyData, InMemoryFamily  # noqa: F401
from networth_core.domain.models import (  # noqa: F401
    AccountGroup,
    AssetBuckets,
    FamilyProfile,
    ForecastParams,
    ForecastResult,
    FutureEvent,
    LedgerEntry,
    Money,
    MonthlyRates,
    ScenarioComparison,
    SeriesPoint,
    TimeSeries,
    months_in_timeline,
    monthly_rate,
)

__all__ = [
    "AccountGroup",
    "AssetBuckets",
    "FamilyData",
    "FamilyProfile",
    "ForecastParams",
    "ForecastResult",
    "FutureEvent",
    "InMemoryFamily",
    "LedgerEntry",
    "Money",
    "MonthlyRates",
    "ScenarioComparison",
    "SeriesPoint",
    "TimeSeries",
    "months_in_timeline",
    "monthly_rate",
]
