from __future__ import annotations

from typing import NamedTuple

from rich import print
from rich.markup import escape

from ..config import NameListConfig
from ..controller import NameListController
from ..dialogs import PromptFn, default_prompt
from ..screen import NameListScreen
from ..store import NameStore, TransactionError

SHELL_HELP = """[bold]Commands[/bold]
  / TEXT, search TEXT   filter the list
  clear                 show every name
  add                   add a name
  edit N                edit row N
  delete N              delete row N
  help                  show this help
  quit                  leave the shell"""

VERB_ALIASES = {
    "/": "search",
    "s": "search",
    "search": "search",
    "clear": "clear",
    "a": "add",
    "add": "add",
    "e": "edit",
    "edit": "edit",
    "d": "delete",
    "rm": "delete",
    "delete": "delete",
    "?": "help",
    "h": "help",
    "help": "help",
    "q": "quit",
    "quit": "quit",
    "exit": "quit",
}


class ShellCommand(NamedTuple):
    verb: str
    arg: str


def parse_shell_command(line: str) -> ShellCommand | None:
    stripped = line.strip()
    if not stripped:
        return None
    if stripped.startswith("/"):
        return ShellCommand("search", stripped[1:].strip())
    head, _, rest = stripped.partition(" ")
    verb = VERB_ALIASES.get(head.lower())
    if verb is None:
        return ShellCommand("unknown", stripped)
    return ShellCommand(verb, rest.strip())


def _row_index(arg: str, controller: NameListController) -> int | None:
    try:
        row = int(arg)
    except ValueError:
        print(f"[red]Not a row number: {escape(repr(arg))}[/red]")
        return None
    if not 1 <= row <= controller.number_of_rows():
        print(f"[red]No row {row}[/red]")
        return None
    return row - 1


def run_shell(
    store: NameStore,
    cfg: NameListConfig,
    *,
    read_line=input,
    prompt: PromptFn = default_prompt,
) -> None:
    """Interactive name list: search, add, edit and delete until quit or EOF."""

    screen = NameListScreen()
    controller = NameListController(
        store,
        screen,
        search_mode=cfg.search_mode,
        highlight_style=cfg.highlight_style,
    )
    try:
        print(screen.render(controller))
        while True:
            try:
                line = read_line("> ")
            except EOFError:
                break
            command = parse_shell_command(line)
            if command is None:
                continue
            if command.verb == "quit":
                break
            if command.verb == "help":
                print(SHELL_HELP)
                continue
            if command.verb == "unknown":
                print(f"[yellow]Unknown command: {escape(command.arg)}[/yellow] (try help)")
                continue
            try:
                if command.verb == "search":
                    controller.set_filter(command.arg)
                elif command.verb == "clear":
                    controller.set_filter("")
                elif command.verb == "add":
                    controller.add(prompt)
                elif command.verb in {"edit", "delete"}:
                    index = _row_index(command.arg, controller)
                    if index is None:
                        continue
                    if command.verb == "edit":
                        controller.edit_at(index, prompt)
                    else:
                        controller.delete_at(index)
            except TransactionError as exc:
                print(f"[red]{escape(str(exc))}[/red]")
                continue
            print(screen.render(controller))
    finally:
        controller.close()
