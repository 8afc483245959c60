"""CLI commands for reportsys."""

import sys

import typer
from dotenv import load_dotenv
from loguru import logger

from ..const import BASE_DIR
from .auth_cmd import demo, login, logout, profile, register, whoami
from .data_cmd import clear, export, import_, seed, stat, users
from .report_cmd import delete_report, reports, stats, submit
from .summary_cmd import summarize, summary

# Load environment variables before creating the app
load_dotenv(BASE_DIR / ".env")

app = typer.Typer(help="CLI entry point for reportsys.")

# Register commands
app.command(help="Create an account and log into it.")(register)
app.command(help="Log in as an existing user.")(login)
app.command(help="Forget the current user.")(logout)
app.command(help="Print the logged-in user.")(whoami)
app.command(help="Update your display name and/or email.")(profile)
app.command(help="Log into the demo account, creating it on first use.")(demo)
app.command(help="Submit or replace your report for a day.")(submit)
app.command(help="Show every report submitted for a day.")(reports)
app.command("delete-report", help="Delete one of your own reports.")(delete_report)
app.command(help="Show a user's report count and latest report date.")(stats)
app.command(help="Summarize a day's reports using the Gemini API.")(summarize)
app.command(help="Show the stored summary for a day.")(summary)
app.command(help="List every registered user.")(users)
app.command(help="Write all collections to a JSON backup.")(export)
app.command("import", help="Restore collections from a JSON backup.")(import_)
app.command(help="Delete every stored collection.")(clear)
app.command(help="Create the demo user if the store is empty.")(seed)
app.command(help="Show collection statistics.")(stat)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages."),
) -> None:
    """Team daily report commands."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else "INFO",
    )


__all__ = ["app"]
