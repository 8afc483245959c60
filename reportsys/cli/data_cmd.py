"""Maintenance commands: listing, backup, restore and demo data."""

from __future__ import annotations

import json
from pathlib import Path

import polars as pl
import typer
from loguru import logger

from ..fields import CREATED_AT, EMAIL, ID, NAME
from ..models import ExportData
from ..storage.documents import STORAGE_KEYS
from .common import config_option, domain_errors, open_store


def users(config: Path = config_option()) -> None:
    """List every registered user."""
    _, store = open_store(config)
    with domain_errors():
        found = store.list_all_users()
    if not found:
        typer.echo("No users.")
        return
    df = pl.DataFrame([user.to_document() for user in found]).select([ID, NAME, EMAIL, CREATED_AT])
    with pl.Config(tbl_rows=-1):
        typer.echo(df)


def export(
    output: Path = typer.Argument(..., help="Where to write the JSON backup."),
    config: Path = config_option(),
) -> None:
    """Write all collections to a JSON backup."""
    _, store = open_store(config)
    with domain_errors():
        data = store.export_data()
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as wf:
        json.dump(data.to_document(), wf, ensure_ascii=False, indent=2)
    logger.success("Exported {} collection(s) to {}", len(data.to_document()), output)


def import_(
    input_path: Path = typer.Argument(..., help="JSON backup produced by `export`."),
    config: Path = config_option(),
) -> None:
    """Restore the collections contained in a JSON backup."""
    if not input_path.exists():
        logger.error("Backup file not found: {}", input_path)
        raise typer.Exit(code=1)

    with input_path.open("r", encoding="utf-8") as rf:
        try:
            raw = json.load(rf)
        except json.JSONDecodeError as exc:
            logger.error("Backup {} is not valid JSON: {}", input_path, exc)
            raise typer.Exit(code=1) from exc

    _, store = open_store(config)
    with domain_errors():
        store.import_data(raw)
    logger.success("Imported {} collection(s) from {}", len(ExportData.model_validate(raw).to_document()), input_path)


def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    config: Path = config_option(),
) -> None:
    """Delete every stored collection, session included."""
    if not yes:
        typer.confirm("Delete all users, reports and summaries?", abort=True)
    _, store = open_store(config)
    with domain_errors():
        store.clear_all_data()
    logger.info("All data cleared.")


def seed(config: Path = config_option()) -> None:
    """Create the demo user if the store is empty."""
    _, store = open_store(config)
    with domain_errors():
        demo = store.seed_demo_user()
    if demo is None:
        logger.info("Users already exist, nothing seeded.")
    else:
        logger.success("Seeded demo user {}", demo.email)


def stat(config: Path = config_option()) -> None:
    """Show which collections exist and how many records each holds."""
    app_config, store = open_store(config)
    with domain_errors():
        document = store.export_data().to_document()

    typer.echo("=" * 60)
    typer.echo(f"Storage: {app_config.storage.backend} ({app_config.storage.data_dir})")
    typer.echo("=" * 60)
    for name, key in STORAGE_KEYS.items():
        value = document.get(name)
        if value is None:
            typer.echo(f"{name:<15} {key:<28} missing")
        elif isinstance(value, (list, dict)) and name != "CURRENT_USER":
            typer.echo(f"{name:<15} {key:<28} {len(value):,} record(s)")
        else:
            typer.echo(f"{name:<15} {key:<28} {value.get(EMAIL, '?')}")


__all__ = ["clear", "export", "import_", "seed", "stat", "users"]
