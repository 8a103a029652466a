from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from networth_core.domain.family import InMemoryFamily
from networth_core.domain.models import ForecastParams, ForecastResult
from networth_core.io import config as config_io
from networth_core.io import history as history_io
from networth_core.io import ledger as ledger_io
from networth_core.services import forecaster, report
from networth_core.services import scenario as scenario_service

app = typer.Typer(help="Net worth forecasting CLI.")

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _parse_as_of(raw: Optional[str]) -> dt.date:
    if not raw:
        return dt.date.today()
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"--as-of must be YYYY-MM-DD, got {raw!r}") from exc


def _load_family(
    profile: Path,
    history: Optional[Path],
    ledger: Optional[Path],
    events: Optional[Path],
) -> InMemoryFamily:
    try:
        family_profile = config_io.load_family_profile(profile)
        series = history_io.load_net_worth_history(history) if history else None
        entries = ledger_io.load_ledger(ledger) if ledger else None
        future = history_io.load_future_events(events) if events else None
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    return history_io.build_family(family_profile, history=series, ledger=entries, events=future)


def _load_params(
    params: Optional[Path],
    timeline: Optional[str],
    income_growth_rate: Optional[float],
    expense_growth_rate: Optional[float],
    property_growth_rate: Optional[float],
    investment_growth_rate: Optional[float],
) -> ForecastParams:
    """Options given on the command line win over the params file."""
    base = {}
    if params:
        try:
            base = vars(config_io.load_forecast_params(params)).copy()
        except (FileNotFoundError, ValueError) as exc:
            raise typer.BadParameter(str(exc)) from exc
    overrides = {
        "timeline": timeline,
        "income_growth_rate": income_growth_rate,
        "expense_growth_rate": expense_growth_rate,
        "property_growth_rate": property_growth_rate,
        "investment_growth_rate": investment_growth_rate,
    }
    base.update({k: v for k, v in overrides.items() if v is not None})
    return config_io.forecast_params_from_dict(base)


def _run(family: InMemoryFamily, params: ForecastParams, as_of: dt.date) -> ForecastResult:
    result = forecaster.forecast_net_worth(family, params, as_of=as_of)
    if not result.has_sufficient_data:
        logger.warning("Not enough history or income/expense data; forecast is low confidence")
    return result


@app.command()
def forecast(
    profile: Path = typer.Option(..., help="Family profile JSON (currency, net_worth, asset_groups)"),
    history: Optional[Path] = typer.Option(None, help="CSV of monthly net worth with date,value"),
    ledger: Optional[Path] = typer.Option(None, help="CSV ledger with date,amount,category,kind"),
    events: Optional[Path] = typer.Option(None, help="CSV of future events with date,amount,kind[,description]"),
    params: Optional[Path] = typer.Option(None, help="Forecast params JSON"),
    timeline: Optional[str] = typer.Option(None, help="Forecast horizon: 1Y|2Y|5Y"),
    income_growth_rate: Optional[float] = typer.Option(None, help="Annual income growth, percent"),
    expense_growth_rate: Optional[float] = typer.Option(None, help="Annual expense growth, percent"),
    property_growth_rate: Optional[float] = typer.Option(None, help="Annual property appreciation, percent"),
    investment_growth_rate: Optional[float] = typer.Option(None, help="Annual investment growth, percent"),
    as_of: Optional[str] = typer.Option(None, help="Forecast date YYYY-MM-DD (defaults to today)"),
    out: Optional[Path] = typer.Option(None, help="Output path for forecast JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Project net worth forward and emit the forecast as JSON."""
    _setup_logging(verbose)
    family = _load_family(profile, history, ledger, events)
    forecast_params = _load_params(
        params, timeline, income_growth_rate, expense_growth_rate, property_growth_rate, investment_growth_rate
    )
    as_of_date = _parse_as_of(as_of)
    result = _run(family, forecast_params, as_of_date)
    payload = report.forecast_to_payload(
        result, report.upcoming_events(family, as_of_date, forecast_params.months)
    )
    if out:
        _save_json(out, payload)
        typer.echo(f"Forecast written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def summary(
    profile: Path = typer.Option(..., help="Family profile JSON (currency, net_worth, asset_groups)"),
    history: Optional[Path] = typer.Option(None, help="CSV of monthly net worth with date,value"),
    ledger: Optional[Path] = typer.Option(None, help="CSV ledger with date,amount,category,kind"),
    events: Optional[Path] = typer.Option(None, help="CSV of future events with date,amount,kind[,description]"),
    params: Optional[Path] = typer.Option(None, help="Forecast params JSON"),
    timeline: Optional[str] = typer.Option(None, help="Forecast horizon: 1Y|2Y|5Y"),
    as_of: Optional[str] = typer.Option(None, help="Forecast date YYYY-MM-DD (defaults to today)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Print the headline forecast numbers."""
    _setup_logging(verbose)
    console = Console()
    family = _load_family(profile, history, ledger, events)
    forecast_params = _load_params(params, timeline, None, None, None, None)
    result = _run(family, forecast_params, _parse_as_of(as_of))

    table = Table(title=f"Net worth forecast ({forecast_params.timeline})")
    table.add_column("Metric")
    table.add_column(result.currency, justify="right")
    rows = [
        ("Current net worth", result.current_net_worth),
        ("Projected net worth", result.projected_net_worth),
        ("Projected change", result.projected_change),
        ("Monthly income", result.monthly_income),
        ("Monthly expenses", result.monthly_expenses),
        ("Monthly cash flow", result.monthly_cash_flow),
        ("Projected cash flow (next month)", result.total_projected_cash_flow),
    ]
    for label, money in rows:
        table.add_row(label, f"{money.amount:,.2f}")
    console.print(table)

    if not result.has_sufficient_data:
        console.print("[yellow]Not enough data yet: add more history, income and expenses for a reliable forecast.[/yellow]")


@app.command()
def compare(
    profile: Path = typer.Option(..., help="Family profile JSON (currency, net_worth, asset_groups)"),
    scenario_params: Path = typer.Option(..., help="Scenario forecast params JSON"),
    history: Optional[Path] = typer.Option(None, help="CSV of monthly net worth with date,value"),
    ledger: Optional[Path] = typer.Option(None, help="CSV ledger with date,amount,category,kind"),
    events: Optional[Path] = typer.Option(None, help="CSV of future events with date,amount,kind[,description]"),
    params: Optional[Path] = typer.Option(None, help="Baseline forecast params JSON"),
    as_of: Optional[str] = typer.Option(None, help="Forecast date YYYY-MM-DD (defaults to today)"),
    out: Optional[Path] = typer.Option(None, help="Output path for comparison JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Compare a growth-rate scenario against the baseline forecast."""
    _setup_logging(verbose)
    family = _load_family(profile, history, ledger, events)
    baseline = _load_params(params, None, None, None, None, None)
    scenario = _load_params(scenario_params, None, None, None, None, None)
    comparison = scenario_service.compare_scenarios(family, baseline, scenario, as_of=_parse_as_of(as_of))

    payload = {
        "baseline_projected_net_worth": comparison.baseline.projected_net_worth.amount,
        "scenario_projected_net_worth": comparison.scenario.projected_net_worth.amount,
        "delta": [{"date": d.isoformat(), "value": v} for d, v in comparison.delta],
    }
    if out:
        _save_json(out, payload)
        typer.echo(f"Comparison written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
