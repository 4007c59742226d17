"""Typer CLI for managing the page's thread settings.

Usage:
    python -m src.cli.thread_settings_cli setup
    python -m src.cli.thread_settings_cli clear menu
    python -m src.cli.thread_settings_cli profile <psid>
"""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent.parent
from dotenv import load_dotenv

load_dotenv(_project_root / ".env")
load_dotenv(_project_root / ".env.local")

import asyncio
from enum import Enum

import typer

from src.config import get_settings
from src.models.thread_settings import ThreadSetting, ThreadSettingKind
from src.services.facebook_service import GraphAPIError, get_user_info
from src.services.thread_settings_service import (
    apply_thread_setting,
    build_startup_settings,
    configure_thread_settings,
)

app = typer.Typer(help="Manage Messenger thread settings for the configured page.")


class ClearTarget(str, Enum):
    greeting = "greeting"
    get_started = "get-started"
    menu = "menu"
    all = "all"


CLEAR_TARGETS = {
    ClearTarget.greeting: [ThreadSettingKind.GREETING],
    ClearTarget.get_started: [ThreadSettingKind.GET_STARTED_BUTTON],
    ClearTarget.menu: [ThreadSettingKind.PERSISTENT_MENU],
    ClearTarget.all: list(ThreadSettingKind),
}


@app.command()
def setup():
    """Set greeting text, Get Started button and persistent menu."""
    settings = get_settings()
    thread_settings = build_startup_settings(settings.greeting_text, settings.server_url)
    applied = asyncio.run(
        configure_thread_settings(settings.facebook_page_access_token, thread_settings)
    )
    typer.echo(f"Applied {applied}/{len(thread_settings)} thread settings.")
    if applied < len(thread_settings):
        raise typer.Exit(code=1)


@app.command()
def clear(target: ClearTarget = typer.Argument(..., help="Which setting to remove")):
    """Remove one thread setting, or all of them."""
    settings = get_settings()
    failed = False
    for kind in CLEAR_TARGETS[target]:
        try:
            asyncio.run(
                apply_thread_setting(
                    settings.facebook_page_access_token, ThreadSetting.clear(kind)
                )
            )
            typer.echo(f"Removed {kind.value}.")
        except GraphAPIError as e:
            typer.secho(f"Cannot remove {kind.value}: {e}", fg=typer.colors.RED, err=True)
            failed = True
    if failed:
        raise typer.Exit(code=1)


@app.command()
def profile(psid: str = typer.Argument(..., help="Page-scoped user ID")):
    """Fetch and print a user's public profile."""
    settings = get_settings()
    try:
        user_info = asyncio.run(get_user_info(settings.facebook_page_access_token, psid))
    except GraphAPIError as e:
        typer.secho(f"Get User Info FAILED: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(user_info.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
