from __future__ import annotations

import json
import logging

import typer
from rich import print

from . import __version__
from .commands.common import configure_logging, read_config_or_exit, store_from_path
from .commands.name_cmds import add_cmd, delete_cmd, edit_cmd, list_cmd
from .commands.shell_cmds import run_shell
from .config import get_config_path, load_config

app = typer.Typer(help="namelist: a searchable list of names kept in SQLite")


def _version_callback(value: bool) -> None:
    if value:
        print(f"namelist {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Searchable name list with add, edit and delete."""

    cfg = load_config()
    configure_logging(logging.DEBUG if verbose else cfg.log_level)


@app.command("list")
def list_names(
    db_path: str = typer.Option(None, help="Path to SQLite database"),
    search: str = typer.Option("", "--search", "-s", help="Filter names"),
) -> None:
    """Show names sorted by name."""

    list_cmd(store_from_path=store_from_path, cfg=load_config(), db_path=db_path, search=search)


@app.command("add")
def add_name(
    text: str = typer.Argument(..., help="Name"),
    subtext: str = typer.Argument(..., help="Description"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Add a name with its description."""

    add_cmd(
        store_from_path=store_from_path,
        cfg=load_config(),
        db_path=db_path,
        text=text,
        subtext=subtext,
    )


@app.command("edit")
def edit_name(
    record_id: int = typer.Argument(..., help="Name id"),
    text: str = typer.Option(None, "--text", help="New name"),
    subtext: str = typer.Option(None, "--subtext", help="New description"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Edit a name; prompts for fields not given."""

    edit_cmd(
        store_from_path=store_from_path,
        cfg=load_config(),
        db_path=db_path,
        record_id=record_id,
        text=text,
        subtext=subtext,
    )


@app.command("delete")
def delete_name(
    record_id: int = typer.Argument(..., help="Name id"),
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Delete a name."""

    delete_cmd(store_from_path=store_from_path, cfg=load_config(), db_path=db_path, record_id=record_id)


@app.command("shell")
def shell(
    db_path: str = typer.Option(None, help="Path to SQLite database"),
) -> None:
    """Open the interactive name list."""

    cfg = load_config()
    store = store_from_path(db_path, cfg)
    try:
        run_shell(store, cfg)
    finally:
        store.close()


@app.command("config")
def show_config() -> None:
    """Print the effective configuration."""

    read_config_or_exit()
    payload = {"config_path": str(get_config_path()), **load_config().to_dict()}
    typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
