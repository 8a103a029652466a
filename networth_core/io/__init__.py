from networth_core.io.ledger import load_ledger, median_monthly  # noqa: F401
from networth_core.io.config import (  # noqa: F401
    forecast_params_from_dict,
    load_family_profile,
    load_forecast_params,
)
from networth_core.io.history import (  # noqa: F401
    build_family,
    load_future_events,
    load_net_worth_history,
)

__all__ = [
    "build_family",
    "forecast_params_from_dict",
    "load_family_profile",
    "load_forecast_params",
    "load_future_events",
    "load_ledger",
    "load_net_worth_history",
    "median_monthly",
]
