"""
formflow command line.

Commands:
- serve: run the demo application with uvicorn
- calculate: print the home loan figures for given inputs
- validate: check a JSON record against a named form schema
"""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from formflow import __version__
from formflow.derived.loan import (
    FIXED_TERMS,
    PROPERTY_MIN,
    TERM_MAX,
    TERM_MIN,
    create_loan_engine,
    format_currency,
)
from formflow.forms import FORMS, get_schema
from formflow.validation.engine import ValidationEngine

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(
    help="""formflow – accessible, schema-validated forms

Commands:
  • serve      Run the demo forms app
  • calculate  Home loan figures from the command line
  • validate   Check a JSON record against a form schema
""",
    no_args_is_help=True,
)


def configure_logging(level: str) -> None:
    """Configure the root logger once for CLI commands."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"formflow {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """formflow CLI main callback for global options."""
    pass


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: FORMFLOW_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: FORMFLOW_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Run the demo forms application."""
    import uvicorn

    from formflow.runtime.config import AppConfig

    config = AppConfig.from_env()
    if host:
        config.host = host
    if port:
        config.port = port
    if log_level:
        config.log_level = log_level.upper()
    configure_logging(config.log_level)

    logging.getLogger(__name__).info("Serving formflow on http://%s:%d", config.host, config.port)
    if reload:
        # Reload needs an import string; the factory rereads the environment
        os.environ["FORMFLOW_SECRET_KEY"] = config.secret_key
        uvicorn.run(
            "formflow.runtime.app:create_app",
            factory=True,
            host=config.host,
            port=config.port,
            reload=True,
            log_level=config.log_level.lower(),
        )
        return

    from formflow.runtime.app import create_app

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


@app.command()
def calculate(
    property_price: int = typer.Option(..., "--property-price", help="Estimated property price"),
    deposit: int = typer.Option(0, "--deposit", help="Deposit amount"),
    term: int = typer.Option(30, "--term", help=f"Loan term in years ({TERM_MIN}-{TERM_MAX})"),
    fixed_term: int = typer.Option(6, "--fixed-term", help="Fixed term in months"),
    custom_rate: str | None = typer.Option(None, "--custom-rate", help="Custom rate (% p.a.)"),
) -> None:
    """Print loan amount, rate and total interest."""
    if property_price < PROPERTY_MIN:
        typer.echo(f"ERROR: Minimum property price is {format_currency(PROPERTY_MIN)}", err=True)
        raise typer.Exit(code=2)
    if not TERM_MIN <= term <= TERM_MAX:
        typer.echo(f"ERROR: Term must be between {TERM_MIN} and {TERM_MAX} years", err=True)
        raise typer.Exit(code=2)
    if custom_rate is None and fixed_term not in FIXED_TERMS:
        terms = ", ".join(str(t) for t in FIXED_TERMS)
        typer.echo(f"ERROR: Fixed term must be one of: {terms}", err=True)
        raise typer.Exit(code=2)

    record = {
        "property_price": property_price,
        "deposit": deposit,
        "term": term,
        "rate_type": "custom" if custom_rate is not None else "fixed",
        "fixed_term": str(fixed_term),
        "custom_rate": custom_rate or "",
    }
    snapshot = create_loan_engine().recompute(record)

    table = Table(title="Your loan")
    table.add_column("Figure", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Loan amount", format_currency(snapshot["loan_amount"]))
    table.add_row("Deposit", f"{format_currency(deposit)} ({snapshot['deposit_percentage']:.1f}%)")
    table.add_row("Rate", f"{snapshot['selected_rate']:.2f}% p.a.")
    table.add_row("Total interest*", format_currency(snapshot["total_interest"]))
    console.print(table)
    console.print("*Estimated total interest over the loan term. Actual repayments may vary.")


@app.command()
def validate(
    form: str = typer.Argument(..., help=f"Form name: {', '.join(FORMS)}"),
    record_path: Path = typer.Argument(..., help="JSON file holding the record", exists=True),
) -> None:
    """Validate a JSON record against a form schema."""
    try:
        schema = get_schema(form)
    except KeyError as e:
        typer.echo(f"ERROR: {e.args[0]}", err=True)
        raise typer.Exit(code=2) from None

    try:
        record = json.loads(record_path.read_text())
    except json.JSONDecodeError as e:
        typer.echo(f"ERROR: {record_path} is not valid JSON: {e}", err=True)
        raise typer.Exit(code=2) from None
    if not isinstance(record, dict):
        typer.echo(f"ERROR: {record_path} must hold a JSON object", err=True)
        raise typer.Exit(code=2)

    result = ValidationEngine(schema).validate(record)
    if not result.is_valid:
        typer.echo("Validation failed:\n", err=True)
        for error in result.errors:
            typer.echo(f"ERROR: {error.field_path}: {error.message} ({error.kind.value})", err=True)
        raise typer.Exit(code=1)

    console.print("[green]OK[/green]: record is valid.")
    typer.echo(json.dumps(result.record, indent=2, default=str))


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
