from __future__ import annotations

import logging
from typing import Any

import typer
from rich import print
from rich.markup import escape
from rich.console import Console
from rich.logging import RichHandler

from namelist.config import NameListConfig, load_config, read_config_file
from namelist.store import NameStore


def store_from_path(db_path: str | None, cfg: NameListConfig | None = None) -> NameStore:
    if db_path:
        return NameStore(db_path)
    return NameStore((cfg or load_config()).db_path)


def read_config_or_exit() -> dict[str, Any]:
    try:
        return read_config_file()
    except ValueError as exc:
        print(f"[red]Invalid config file: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def configure_logging(level: str | int) -> None:
    logger = logging.getLogger("namelist")
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(level)
