from __future__ import annotations

import datetime as dt
from typing import Optional

import numpy as np

from networth_core.domain.family import FamilyData
from networth_core.domain.models import ForecastParams, ScenarioComparison
from networth_core.services.forecaster import ForecastEngine


def compare_scenarios(
    family: FamilyData,
    baseline: ForecastParams,
    scenario: ForecastParams,
    as_of: Optional[dt.date] = None,
) -> ScenarioComparison:
    """
    Runs two independent forecasts over the same family and reports
    scenario - baseline for every date present in both series.
    """
    as_of = as_of or dt.date.today()
    baseline_result = ForecastEngine.from_params(family, baseline, as_of=as_of).compute()
    scenario_result = ForecastEngine.from_params(family, scenario, as_of=as_of).compute()

    base_values = {p.date: p.value for p in baseline_result.forecast_series.values}
    shared = [p for p in scenario_result.forecast_series.values if p.date in base_values]
    scen = np.array([p.value for p in shared], dtype=float)
    base = np.array([base_values[p.date] for p in shared], dtype=float)
    diff = np.subtract(scen, base)

    return ScenarioComparison(
        baseline=baseline_result,
        scenario=scenario_result,
        delta=[(p.date, float(d)) for p, d in zip(shared, diff)],
    )
