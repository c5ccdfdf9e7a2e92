from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from rich.text import Text

from . import dialogs
from .changes import apply_changes
from .highlight import DEFAULT_HIGHLIGHT_STYLE, highlight_text
from .store import (
    CollectionChange,
    ErrorChange,
    InitialChange,
    NameStore,
    NotificationToken,
    Record,
    ResultSet,
    UpdateChange,
    build_filter,
)

logger = logging.getLogger(__name__)


class TableDisplay(Protocol):
    def reload_data(self) -> None: ...

    def perform_batch_updates(
        self, deletions: list[int], insertions: list[int], modifications: list[int]
    ) -> None: ...


@dataclass(frozen=True)
class Cell:
    title: Text
    subtitle: Text


class NameListController:
    """Keeps one live query over the store and mirrors it into a table display.

    The display is told what changed; it reads rows back through
    ``number_of_rows`` and ``cell_for_row``.
    """

    def __init__(
        self,
        store: NameStore,
        display: TableDisplay,
        *,
        search_mode: str = "literal",
        highlight_style: str = DEFAULT_HIGHLIGHT_STYLE,
    ) -> None:
        self.store = store
        self.display = display
        self.search_mode = search_mode
        self.highlight_style = highlight_style
        self.search_value: str | None = None
        self.results: ResultSet | None = None
        self.rows: list[Record] = []
        self._token: NotificationToken | None = None
        self._generation = 0
        self.set_filter("")

    @property
    def is_filtering(self) -> bool:
        return bool(self.search_value)

    @property
    def subscribed(self) -> bool:
        return self._token is not None and self._token.active

    def set_filter(self, value: str) -> None:
        if value == self.search_value:
            return
        predicate = build_filter(value, self.search_mode)
        if predicate is not None:
            logger.debug("filtering names: %s", predicate.describe())
        results = self.store.query(predicate, sort_key="text", ascending=True)

        if self._token is not None:
            self._token.invalidate()
            self._token = None
        self.search_value = value
        self._generation += 1
        generation = self._generation

        def on_change(change: CollectionChange) -> None:
            if generation != self._generation:
                return
            self._handle_change(change)

        self.results = results
        self._token = results.observe(on_change)

    def _handle_change(self, change: CollectionChange) -> None:
        if isinstance(change, InitialChange):
            self.rows = list(change.results)
            self.display.reload_data()
        elif isinstance(change, UpdateChange):
            self.rows = apply_changes(self.rows, change, change.results)
            self.display.perform_batch_updates(
                list(change.deletions), list(change.insertions), list(change.modifications)
            )
        elif isinstance(change, ErrorChange):
            logger.warning("name list observation failed: %s", change.error)

    def close(self) -> None:
        self._generation += 1
        if self._token is not None:
            self._token.invalidate()
            self._token = None

    def number_of_rows(self) -> int:
        return len(self.rows)

    def record_at(self, index: int) -> Record:
        if not 0 <= index < len(self.rows):
            raise IndexError(f"no row at index {index}")
        return self.rows[index]

    def cell_for_row(self, index: int) -> Cell:
        record = self.record_at(index)
        if self.is_filtering and self.search_value:
            return Cell(
                title=highlight_text(self.search_value, record.text, self.highlight_style),
                subtitle=highlight_text(self.search_value, record.subtext, self.highlight_style),
            )
        return Cell(title=Text(record.text), subtitle=Text(record.subtext))

    def add(self, prompt: dialogs.PromptFn = dialogs.default_prompt) -> Record | None:
        return dialogs.present_add_dialog(self.store, prompt)

    def edit_at(
        self, index: int, prompt: dialogs.PromptFn = dialogs.default_prompt
    ) -> Record | None:
        return dialogs.present_edit_dialog(self.store, self.record_at(index), prompt)

    def delete_at(self, index: int) -> None:
        dialogs.delete_record(self.store, self.record_at(index))
