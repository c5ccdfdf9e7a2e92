from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from .controller import NameListController

logger = logging.getLogger(__name__)

TITLE = "Names"
SEARCH_PLACEHOLDER = "Search Names"


class NameListScreen:
    """Terminal rendition of the name list.

    Receives reload and batch notifications from the controller and draws the
    current rows as a ``rich`` table when asked to render.
    """

    def __init__(self) -> None:
        self.reload_count = 0
        self.batch_count = 0
        self.last_batch: tuple[list[int], list[int], list[int]] | None = None

    def reload_data(self) -> None:
        self.reload_count += 1
        self.last_batch = None

    def perform_batch_updates(
        self, deletions: list[int], insertions: list[int], modifications: list[int]
    ) -> None:
        self.batch_count += 1
        self.last_batch = (list(deletions), list(insertions), list(modifications))
        logger.debug(
            "batch update: deleted %s inserted %s reloaded %s",
            deletions,
            insertions,
            modifications,
        )

    def batch_summary(self) -> str:
        if self.last_batch is None:
            return ""
        deletions, insertions, modifications = self.last_batch
        return f"+{len(insertions)} -{len(deletions)} ~{len(modifications)}"

    def render(self, controller: NameListController) -> Table:
        search = controller.search_value or ""
        caption = Text(f"search: {search}" if search else SEARCH_PLACEHOLDER)
        summary = self.batch_summary()
        if summary:
            caption.append(f"  [{summary}]")
        table = Table(title=TITLE, caption=caption, show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name")
        table.add_column("Description")
        for index in range(controller.number_of_rows()):
            cell = controller.cell_for_row(index)
            row_style = "bold" if self.last_batch and index in self.last_batch[1] else None
            table.add_row(Text(str(index + 1)), cell.title, cell.subtitle, style=row_style)
        return table
