"""Helpers shared by the CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator

import typer
from loguru import logger

from ..config import AppConfig, load_config
from ..const import DEFAULT_CONFIG_PATH
from ..errors import ReportsysError
from ..models import User
from ..storage import LocalDataStore, Session, create_backend


def config_option():
    return typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to the configuration TOML file.",
    )


def date_option(help: str = "Report date (YYYY-MM-DD), defaults to today."):
    return typer.Option(None, "--date", "-d", help=help)


def load_app_config(path: Path) -> AppConfig:
    """Load ``path``; the default location may be absent, in which case defaults apply."""
    if path == DEFAULT_CONFIG_PATH and not path.exists():
        logger.debug("No config at {}, using defaults", path)
        return AppConfig()
    logger.debug("Loading config from {}", path)
    return load_config(AppConfig, path)


def open_store(path: Path) -> tuple[AppConfig, LocalDataStore]:
    app_config = load_app_config(path)
    with domain_errors():
        backend = create_backend(app_config.storage)
    return app_config, LocalDataStore(backend, session=Session(backend))


def parse_day(value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from exc


def require_login(store: LocalDataStore) -> User:
    user = store.current_user()
    if user is None:
        logger.error("Not logged in; run `reportsys login` first.")
        raise typer.Exit(code=1)
    return user


@contextmanager
def domain_errors() -> Iterator[None]:
    """Turn domain errors into a logged message and exit code 1."""
    try:
        yield
    except ReportsysError as exc:
        logger.error("{}: {}", type(exc).__name__, exc)
        raise typer.Exit(code=1) from exc


__all__ = [
    "config_option",
    "date_option",
    "domain_errors",
    "load_app_config",
    "open_store",
    "parse_day",
    "require_login",
]
