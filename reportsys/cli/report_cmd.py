"""Daily report commands."""

from __future__ import annotations

from pathlib import Path

import polars as pl
import typer
from loguru import logger

from ..fields import (
    ACHIEVEMENTS,
    AUTHOR_NAME,
    COMPLETED_TASKS,
    CREATED_AT,
    ID,
    IDEAS_SUGGESTIONS,
    TOMORROW_TASKS,
)
from ..models import DailyReportDraft, require_sections
from .common import (
    config_option,
    date_option,
    domain_errors,
    open_store,
    parse_day,
    require_login,
)

REPORT_COLUMNS = [ID, AUTHOR_NAME, ACHIEVEMENTS, COMPLETED_TASKS, IDEAS_SUGGESTIONS, TOMORROW_TASKS, CREATED_AT]


def submit(
    achievements: str = typer.Option("", "--achievements", "-a", help="What you achieved today."),
    completed: str = typer.Option("", "--completed", help="Tasks you completed."),
    ideas: str = typer.Option("", "--ideas", help="Ideas and suggestions (optional)."),
    tomorrow: str = typer.Option("", "--tomorrow", "-t", help="What you plan to do tomorrow."),
    day: str | None = date_option(),
    config: Path = config_option(),
) -> None:
    """Submit (or replace) your report for a day."""
    report_date = parse_day(day)
    _, store = open_store(config)
    with domain_errors():
        user = require_login(store)
        draft = DailyReportDraft(
            user_id=user.id,
            date=report_date,
            achievements=achievements,
            completed_tasks=completed,
            ideas_suggestions=ideas,
            tomorrow_tasks=tomorrow,
        )
        require_sections(draft)
        report = store.upsert_daily_report(draft)
    logger.success("Saved report {} for {}", report.id, report.date)


def reports(
    day: str | None = date_option("Date to list (YYYY-MM-DD), defaults to today."),
    config: Path = config_option(),
) -> None:
    """Show every report submitted for a day."""
    report_date = parse_day(day)
    _, store = open_store(config)
    with domain_errors():
        found = store.get_daily_reports(report_date)

    if not found:
        typer.echo(f"No reports for {report_date}.")
        return

    df = pl.DataFrame([report.to_document() for report in found]).select(REPORT_COLUMNS)
    typer.echo(f"{len(found)} report(s) for {report_date}")
    with pl.Config(fmt_str_lengths=80, tbl_rows=-1):
        typer.echo(df)


def delete_report(
    report_id: str = typer.Argument(..., help="Id of one of your reports."),
    config: Path = config_option(),
) -> None:
    """Delete one of your own reports."""
    _, store = open_store(config)
    with domain_errors():
        store.delete_daily_report(report_id)
    logger.success("Deleted report {}", report_id)


def stats(
    user_id: str | None = typer.Option(None, "--user-id", "-u", help="Defaults to the logged-in user."),
    config: Path = config_option(),
) -> None:
    """Count a user's reports and show the latest report date."""
    _, store = open_store(config)
    with domain_errors():
        if user_id is None:
            user_id = require_login(store).id
        result = store.user_report_stats(user_id)
    typer.echo(f"Total reports: {result.total_reports}")
    typer.echo(f"Last report date: {result.last_report_date or '-'}")


__all__ = ["delete_report", "reports", "stats", "submit"]
