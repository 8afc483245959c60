"""Account and session commands."""

from __future__ import annotations

from pathlib import Path

import typer
from loguru import logger

from ..errors import AuthenticationError
from ..storage.local_store import DEMO_EMAIL, DEMO_NAME, DEMO_PASSWORD
from .common import config_option, domain_errors, open_store, require_login


def register(
    email: str = typer.Option(..., "--email", "-e", help="Email address used to log in."),
    name: str = typer.Option(..., "--name", "-n", help="Display name shown on reports."),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    config: Path = config_option(),
) -> None:
    """Create an account and log into it."""
    _, store = open_store(config)
    with domain_errors():
        user = store.register(email, password, name)
    logger.success("Registered {} ({})", user.email, user.id)


def login(
    email: str = typer.Option(..., "--email", "-e"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
    config: Path = config_option(),
) -> None:
    """Log in as an existing user."""
    _, store = open_store(config)
    with domain_errors():
        user = store.login(email, password)
    logger.success("Logged in as {} <{}>", user.name, user.email)


def logout(config: Path = config_option()) -> None:
    """Forget the current user."""
    _, store = open_store(config)
    with domain_errors():
        store.logout()
    logger.info("Logged out.")


def whoami(config: Path = config_option()) -> None:
    """Print the logged-in user."""
    _, store = open_store(config)
    with domain_errors():
        user = store.current_user()
    if user is None:
        typer.echo("Not logged in.")
        raise typer.Exit(code=1)
    typer.echo(f"{user.name} <{user.email}> ({user.id})")


def profile(
    name: str | None = typer.Option(None, "--name", "-n", help="New display name."),
    email: str | None = typer.Option(None, "--email", "-e", help="New email address."),
    config: Path = config_option(),
) -> None:
    """Update the logged-in user's name and/or email."""
    if name is None and email is None:
        raise typer.BadParameter("Pass --name and/or --email.")
    _, store = open_store(config)
    with domain_errors():
        user = require_login(store)
        updated = store.update_profile(user.id, name=name, email=email)
    logger.success("Profile updated: {} <{}>", updated.name, updated.email)


def demo(config: Path = config_option()) -> None:
    """Log into the demo account, creating it on first use."""
    _, store = open_store(config)
    with domain_errors():
        try:
            user = store.login(DEMO_EMAIL, DEMO_PASSWORD)
        except AuthenticationError:
            logger.info("Demo account missing, creating it.")
            user = store.register(DEMO_EMAIL, DEMO_PASSWORD, DEMO_NAME)
    logger.success("Logged in as {} <{}>", user.name, user.email)


__all__ = ["demo", "login", "logout", "profile", "register", "whoami"]
