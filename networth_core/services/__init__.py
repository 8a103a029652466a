from networth_core.services.forecaster import ForecastEngine, forecast_net_worth  # noqa: F401
from networth_core.services.report import forecast_to_payload, upcoming_events  # noqa: F401
from networth_core.services.scenario import compare_scenarios  # noqa: F401

__all__ = [
    "ForecastEngine",
    "forecast_net_worth",
    "forecast_to_payload",
    "upcoming_events",
    "compare_scenarios",
]
