from __future__ import annotations

import logging
import re

from rich.text import Text

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_STYLE = "black on yellow"


def highlight_ranges(pattern: str, target: str) -> list[tuple[int, int]] | None:
    """Return ``(start, end)`` spans where ``pattern`` matches, ignoring case.

    The search input is used as a regular expression as typed. ``None`` means
    it did not compile and the label should render without highlighting.
    """

    try:
        regex = re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.debug("highlight pattern %r did not compile: %s", pattern, exc)
        return None
    return [match.span() for match in regex.finditer(target) if match.end() > match.start()]


def highlight_text(pattern: str, target: str, style: str = DEFAULT_HIGHLIGHT_STYLE) -> Text:
    text = Text(target)
    for start, end in highlight_ranges(pattern, target) or []:
        text.stylize(style, start, end)
    return text
