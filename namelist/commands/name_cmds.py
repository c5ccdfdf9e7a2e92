from __future__ import annotations

import typer
from rich import print
from rich.markup import escape

from ..config import NameListConfig
from ..controller import NameListController
from ..dialogs import PromptFn, add_record, default_prompt, delete_record, edit_record
from ..screen import NameListScreen
from ..store import NameStore, TransactionError


def list_cmd(
    *,
    store_from_path,
    cfg: NameListConfig,
    db_path: str | None,
    search: str,
) -> None:
    """Print the name list, optionally filtered."""

    store: NameStore = store_from_path(db_path, cfg)
    screen = NameListScreen()
    controller = NameListController(
        store,
        screen,
        search_mode=cfg.search_mode,
        highlight_style=cfg.highlight_style,
    )
    try:
        controller.set_filter(search)
        print(screen.render(controller))
    finally:
        controller.close()
        store.close()


def add_cmd(
    *,
    store_from_path,
    cfg: NameListConfig,
    db_path: str | None,
    text: str,
    subtext: str,
) -> None:
    """Add a name; both fields are required."""

    store: NameStore = store_from_path(db_path, cfg)
    try:
        try:
            record = add_record(store, text, subtext)
        except TransactionError as exc:
            print(f"[red]Add failed: {escape(str(exc))}[/red]")
            raise typer.Exit(code=1) from exc
        if record is None:
            raise typer.Exit(code=1)
        print(f"Added name {record.id}")
    finally:
        store.close()


def edit_cmd(
    *,
    store_from_path,
    cfg: NameListConfig,
    db_path: str | None,
    record_id: int,
    text: str | None,
    subtext: str | None,
    prompt: PromptFn = default_prompt,
) -> None:
    """Overwrite a name's fields, prompting for any not given."""

    store: NameStore = store_from_path(db_path, cfg)
    try:
        record = store.get(record_id)
        if record is None:
            print(f"[red]Name {record_id} not found[/red]")
            raise typer.Exit(code=1)
        if text is None:
            text = prompt("Name", record.text)
        if subtext is None:
            subtext = prompt("Description", record.subtext)
        try:
            updated = edit_record(store, record, text, subtext)
        except TransactionError as exc:
            print(f"[red]Edit failed: {escape(str(exc))}[/red]")
            raise typer.Exit(code=1) from exc
        if updated is None:
            raise typer.Exit(code=1)
        print(f"Updated name {record_id}")
    finally:
        store.close()


def delete_cmd(
    *,
    store_from_path,
    cfg: NameListConfig,
    db_path: str | None,
    record_id: int,
) -> None:
    """Delete a name by id."""

    store: NameStore = store_from_path(db_path, cfg)
    try:
        record = store.get(record_id)
        if record is None:
            print(f"[red]Name {record_id} not found[/red]")
            raise typer.Exit(code=1)
        try:
            delete_record(store, record)
        except TransactionError as exc:
            print(f"[red]Delete failed: {escape(str(exc))}[/red]")
            raise typer.Exit(code=1) from exc
    finally:
        store.close()
    print(f"Deleted name {record_id}")
