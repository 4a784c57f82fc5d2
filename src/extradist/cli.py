"""Typer-based CLI entry point."""

from __future__ import annotations

import math
import numbers
from pathlib import Path
from typing import Any

import numpy as np
import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import EngineConfig, get_config, load_config
from .core import CallStatus, EvaluationResult
from .distributions import Distribution, get_distribution, list_distributions
from .engine import evaluate

app = typer.Typer(help="extradist vectorised distribution CLI.")
console = Console()

DISTRIBUTION_ARGUMENT = typer.Argument(..., help="Registered distribution name.")

VALUES_ARGUMENT = typer.Argument(
    ...,
    help="Values to evaluate (comma-separated rows for multivariate distributions).",
)

COUNT_ARGUMENT = typer.Argument(..., min=0, help="Number of variates to draw.")

PARAM_OPTION = typer.Option(
    None,
    "--param",
    "-p",
    help="Parameter vector as name=v1,v2 (use ';' between rows of matrix parameters).",
    show_default=False,
)

LOG_OPTION = typer.Option(
    False,
    "--log/--natural",
    help="Report (or read, for quantiles) probabilities on the log scale.",
    show_default=True,
)

UPPER_TAIL_OPTION = typer.Option(
    False,
    "--upper-tail/--lower-tail",
    help="Use P(X > x) instead of P(X <= x).",
    show_default=True,
)

SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Seed for the random stream (defaults to the configured seed).",
    show_default=False,
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    readable=True,
    help="YAML file with an `engine` section overriding the default options.",
    show_default=False,
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose output.")
VERSION_OPTION = typer.Option(False, "--version", help="Show version and exit.")


@app.callback(invoke_without_command=True)
def cli_callback(  # noqa: B008
    ctx: typer.Context,
    verbose: bool = VERBOSE_OPTION,
    version: bool = VERSION_OPTION,
) -> None:
    if verbose or version:
        console.print(f"[bold green]extradist {__version__}[/bold green]")
    if ctx.invoked_subcommand is None and not ctx.resilient_parsing:
        raise typer.Exit()


@app.command()
def registry() -> None:
    """List registered distributions."""
    table = Table(title="Registered Distributions")
    table.add_column("Name")
    table.add_column("Parameters")
    table.add_column("Operations")
    table.add_column("Description", overflow="fold")
    for name in list_distributions():
        dist = get_distribution(name)
        table.add_row(
            dist.name,
            ", ".join(dist.parameters),
            ", ".join(dist.operations()),
            dist.notes or "",
        )
    console.print(table)


@app.command()
def pdf(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    values: list[str] = VALUES_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
    log_prob: bool = LOG_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Evaluate the density (or mass) function."""
    _run(distribution, "pdf", values, params, config, log_prob=log_prob)


@app.command()
def cdf(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    values: list[str] = VALUES_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
    upper_tail: bool = UPPER_TAIL_OPTION,
    log_prob: bool = LOG_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Evaluate the cumulative distribution function."""
    _run(
        distribution,
        "cdf",
        values,
        params,
        config,
        lower_tail=not upper_tail,
        log_prob=log_prob,
    )


@app.command()
def quantile(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    values: list[str] = VALUES_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
    upper_tail: bool = UPPER_TAIL_OPTION,
    log_prob: bool = LOG_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Evaluate the quantile (inverse cumulative) function."""
    _run(
        distribution,
        "quantile",
        values,
        params,
        config,
        lower_tail=not upper_tail,
        log_prob=log_prob,
    )


@app.command()
def sample(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    count: int = COUNT_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
    seed: int | None = SEED_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Draw random variates, one per position in ascending order."""
    dist = _lookup(distribution)
    cfg = _load_engine_config(config)
    parsed = _parse_parameters(dist, params)
    kwargs: dict[str, Any] = {}
    if seed is not None:
        kwargs["seed"] = seed
    try:
        result = evaluate(dist.name, "sample", count, *parsed, config=cfg, **kwargs)
    except (KeyError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    _report(result, cfg, title=f"{dist.name} sample")


def main_entry() -> None:
    app()


def main() -> None:  # pragma: no cover - console entry
    main_entry()


def _run(
    distribution: str,
    operation: str,
    values: list[str],
    params: list[str] | None,
    config: Path | None,
    **options: Any,
) -> None:
    dist = _lookup(distribution)
    cfg = _load_engine_config(config)
    parsed = _parse_parameters(dist, params)
    try:
        data = _parse_values(dist, values)
        result = evaluate(dist.name, operation, data, *parsed, config=cfg, **options)
    except (KeyError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    _report(result, cfg, title=f"{dist.name} {operation}")


def _lookup(name: str) -> Distribution:
    try:
        return get_distribution(name)
    except KeyError as exc:
        available = ", ".join(list_distributions())
        console.print(f"[red]Unknown distribution '{name}'.[/red] Available: {available}")
        raise typer.Exit(code=1) from exc


def _load_engine_config(path: Path | None) -> EngineConfig:
    if path is None:
        return get_config()
    try:
        return load_config(path)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _parse_rows(text: str) -> list[list[float]]:
    rows: list[list[float]] = []
    for chunk in text.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            rows.append([float(item) for item in chunk.split(",") if item.strip()])
        except ValueError as exc:
            raise typer.BadParameter(f"Could not parse numbers from '{chunk}'.") from exc
    return rows


def _parse_parameters(dist: Distribution, raw: list[str] | None) -> list[np.ndarray]:
    parsed: dict[str, np.ndarray] = {}
    for item in raw or []:
        name, sep, text = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise typer.BadParameter(f"Expected name=values, got '{item}'.")
        if name not in dist.parameters:
            expected = ", ".join(dist.parameters)
            raise typer.BadParameter(
                f"Unknown parameter '{name}' for {dist.name} (expected: {expected})."
            )
        rows = _parse_rows(text)
        if name in dist.matrix_parameters:
            parsed[name] = np.asarray(rows, dtype=float)
        else:
            parsed[name] = np.asarray([value for row in rows for value in row], dtype=float)
    missing = [name for name in dist.parameters if name not in parsed]
    if missing:
        raise typer.BadParameter(f"Missing parameter(s) for {dist.name}: {', '.join(missing)}.")
    return [parsed[name] for name in dist.parameters]


def _parse_values(dist: Distribution, values: list[str]) -> np.ndarray:
    rows = [row for value in values for row in _parse_rows(value)]
    if dist.multivariate:
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise ValueError("All observation rows must have the same number of entries.")
        return np.asarray(rows, dtype=float)
    return np.asarray([value for row in rows for value in row], dtype=float)


def _format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, numbers.Real):
        val = float(value)
        if math.isnan(val):
            return "NaN"
        if math.isinf(val):
            return "Inf" if val > 0 else "-Inf"
        return f"{val:.6g}"
    return str(value)


def _report(result: EvaluationResult, cfg: EngineConfig, *, title: str) -> None:
    if result.status is CallStatus.ABORTED:
        console.print(f"[red]Evaluation aborted:[/red] {result.message}")
        raise typer.Exit(code=1)

    table = Table(title=title)
    table.add_column("Index", justify="right", no_wrap=True)
    table.add_column("Value", justify="right", no_wrap=True)
    for index, value in enumerate(result.values):
        table.add_row(str(index), _format_value(value))
    console.print(table)

    if result.status is CallStatus.PARTIAL_INVALID:
        summary = f"{result.message} ({result.invalid} invalid position(s))"
        if cfg.warning_policy == "raise":
            console.print(f"[red]Error:[/red] {summary}")
            raise typer.Exit(code=1)
        if cfg.warning_policy != "ignore":
            console.print(f"[yellow]Warning:[/yellow] {summary}")
