"""AI summary commands."""

from __future__ import annotations

from pathlib import Path

import typer
from loguru import logger

from .common import config_option, date_option, domain_errors, open_store, parse_day


def summarize(
    day: str | None = date_option("Date to summarize (YYYY-MM-DD), defaults to today."),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Gemini model to use (falls back to config).",
    ),
    config: Path = config_option(),
) -> None:
    """Generate the team summary for a day with Gemini and store it."""
    from reportsys.summary import summarize_day

    report_date = parse_day(day)
    app_config, store = open_store(config)
    summary_config = app_config.summary
    if model is not None:
        summary_config = summary_config.model_copy(update={"model": model})

    with domain_errors():
        stored = summarize_day(store, report_date, summary_config)
    typer.echo(stored.content)


def summary(
    day: str | None = date_option("Date to show (YYYY-MM-DD), defaults to today."),
    config: Path = config_option(),
) -> None:
    """Show the stored summary for a day."""
    report_date = parse_day(day)
    _, store = open_store(config)
    with domain_errors():
        stored = store.get_ai_summary(report_date)
    if stored is None:
        logger.warning("No summary stored for {}", report_date)
        raise typer.Exit(code=1)
    typer.echo(f"Summary of {stored.report_count} report(s) for {stored.date}")
    typer.echo(stored.content)


__all__ = ["summarize", "summary"]
