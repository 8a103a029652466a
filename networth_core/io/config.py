from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from networth_core.domain.models import AccountGroup, FamilyProfile, ForecastParams


def load_forecast_params(path: str | Path) -> ForecastParams:
    data = _read_json(path)
    return forecast_params_from_dict(data)


def forecast_params_from_dict(data: Dict[str, Any]) -> ForecastParams:
    return ForecastParams(
        timeline=str(data.get("timeline") or "1Y"),
        income_growth_rate=float(data.get("income_growth_rate", 0.0) or 0.0),
        expense_growth_rate=float(data.get("expense_growth_rate", 0.0) or 0.0),
        property_growth_rate=float(data.get("property_growth_rate", 0.0) or 0.0),
        investment_growth_rate=float(data.get("investment_growth_rate", 0.0) or 0.0),
    )


def load_family_profile(path: str | Path) -> FamilyProfile:
    data = _read_json(path)
    groups = []
    for item in data.get("asset_groups", []) or []:
        if "name" not in item:
            raise ValueError(f"Asset group without a name in {path}: {item}")
        groups.append(AccountGroup(name=str(item["name"]), total=float(item.get("total", 0.0) or 0.0)))

    return FamilyProfile(
        currency=str(data.get("currency", "USD")),
        net_worth=float(data.get("net_worth", 0.0) or 0.0),
        asset_groups=tuple(groups),
        median_income=_optional_float(data.get("median_income")),
        median_expense=_optional_float(data.get("median_expense")),
    )


def _optional_float(value: Any):
    return None if value is None else float(value)


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
