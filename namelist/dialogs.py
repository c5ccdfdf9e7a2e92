from __future__ import annotations

import logging
from collections.abc import Callable

from rich.prompt import Prompt

from .store import NameStore, Record

logger = logging.getLogger(__name__)

PromptFn = Callable[[str, str], str]

NAME_LABEL = "Name"
DESCRIPTION_LABEL = "Description"


def default_prompt(label: str, default: str) -> str:
    if default:
        return Prompt.ask(label, default=default)
    return Prompt.ask(label)


def add_record(store: NameStore, text: str | None, subtext: str | None) -> Record | None:
    """Insert a record when both fields are filled in; otherwise do nothing."""

    if not text or not subtext:
        return None
    record = store.add(text, subtext)
    logger.debug("added record %d", record.id)
    return record


def edit_record(
    store: NameStore, record: Record, text: str | None, subtext: str | None
) -> Record | None:
    """Overwrite both fields of ``record`` when both are filled in."""

    if not text or not subtext:
        return None
    updated = store.update(record.id, text=text, subtext=subtext)
    logger.debug("edited record %d", record.id)
    return updated


def delete_record(store: NameStore, record: Record) -> None:
    store.delete(record.id)
    logger.debug("deleted record %d", record.id)


def present_add_dialog(store: NameStore, prompt: PromptFn = default_prompt) -> Record | None:
    text = prompt(NAME_LABEL, "")
    subtext = prompt(DESCRIPTION_LABEL, "")
    return add_record(store, text, subtext)


def present_edit_dialog(
    store: NameStore, record: Record, prompt: PromptFn = default_prompt
) -> Record | None:
    text = prompt(NAME_LABEL, record.text)
    subtext = prompt(DESCRIPTION_LABEL, record.subtext)
    return edit_record(store, record, text, subtext)
