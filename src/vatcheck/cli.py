from __future__ import annotations

import json
import logging
import pathlib
from dataclasses import asdict
from typing import List, Optional

import typer
import structlog
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import load_config
from .engine.validator import CheckResult, VatNumberValidator
from .errors import ConfigurationError

console = Console()
log = structlog.get_logger()
app = typer.Typer(add_completion=False, no_args_is_help=True, help="vatcheck: offline VAT number checksum validator")


def version_callback(value: bool):
    if value:
        from . import __version__
        console.print(f"vatcheck {__version__}")
        raise typer.Exit()


@app.callback()
def common(
    ctx: typer.Context,
    config: Optional[pathlib.Path] = typer.Option(None, "--config", help="Path to vatcheck.yaml"),
    extra_vat: Optional[str] = typer.Option(
        None, "--extra-vat", help="module:callable accepting numbers before the scheme table"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logs"),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """Global options (config, hook, verbosity)."""
    structlog.configure(
        processors=[structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
    )
    try:
        cfg = load_config(config)
        if extra_vat:
            cfg = cfg.model_copy(update={"extra_vat": extra_vat})
        validator = VatNumberValidator.from_config(cfg)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    ctx.obj = {"config": cfg, "validator": validator}
    log.info("verbose_enabled")
    log.info("config_loaded", path=str(config) if config else None, countries=cfg.countries, extra_vat=cfg.extra_vat)


def _log_results(results: List[CheckResult]) -> None:
    for r in results:
        log.info("vat_checked", normalized=r.normalized, country=r.country, valid=r.valid)


@app.command()
def check(
    ctx: typer.Context,
    numbers: List[str] = typer.Argument(..., help="VAT numbers to check (quote numbers containing spaces)"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
):
    """Check one or more VAT numbers. Exits with 1 if any is invalid."""
    validator: VatNumberValidator = ctx.obj["validator"]
    results = validator.validate_many(numbers)
    _log_results(results)

    if as_json:
        console.print_json(json.dumps([asdict(r) for r in results]))
    else:
        table = Table("Input", "Normalized", "Country", "Result")
        for r in results:
            verdict = "[green]valid[/green]" if r.valid else "[red]invalid[/red]"
            table.add_row(Text(r.raw), r.normalized, r.country or "-", verdict)
        console.print(table)

    if not all(r.valid for r in results):
        raise typer.Exit(code=1)


@app.command()
def scan(
    ctx: typer.Context,
    src: pathlib.Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Text file with one VAT number per line"
    ),
):
    """Check every non-blank line of a file and list the invalid ones."""
    validator: VatNumberValidator = ctx.obj["validator"]

    lines = [
        (lineno, line.strip())
        for lineno, line in enumerate(src.read_text(errors="ignore").splitlines(), start=1)
        if line.strip()
    ]
    results = validator.validate_many(value for _, value in lines)
    _log_results(results)

    invalid = [(lineno, r) for (lineno, _), r in zip(lines, results) if not r.valid]
    console.print(f"Checked {len(results)} numbers, {len(invalid)} invalid")
    for lineno, r in invalid:
        console.print(f"[red]{src.name}:{lineno}[/red]", Text(r.raw))

    if invalid:
        raise typer.Exit(code=1)


@app.command()
def schemes(
    ctx: typer.Context,
    country: Optional[List[str]] = typer.Option(None, "--country", "-c", help="Only show these countries"),
):
    """List the number formats `check` dispatches against, in order."""
    table_data = ctx.obj["validator"].table
    try:
        if country:
            table_data = table_data.restrict(country)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e), param_hint="--country")

    table = Table("#", "Country", "Label", "Pattern")
    for i, scheme in enumerate(table_data, start=1):
        table.add_row(str(i), scheme.country, Text(scheme.label), Text(scheme.pattern.pattern))
    console.print(table)
