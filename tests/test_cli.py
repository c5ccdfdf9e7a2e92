from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from namelist.cli import app
from namelist.commands.shell_cmds import ShellCommand, parse_shell_command
from namelist.store import NameStore

runner = CliRunner()


def _db(tmp_path: Path) -> Path:
    return tmp_path / "names.sqlite"


def _texts(db_path: Path) -> list[tuple[str, str]]:
    store = NameStore(db_path)
    try:
        return [(record.text, record.subtext) for record in store.query()]
    finally:
        store.close()


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("list", "add", "edit", "delete", "shell", "config"):
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "namelist" in result.stdout


def test_add_then_list(tmp_path: Path) -> None:
    result = runner.invoke(app, ["add", "Anna", "x"])
    assert result.exit_code == 0
    assert "Added name" in result.stdout
    runner.invoke(app, ["add", "Beth", "Anna's friend"])
    runner.invoke(app, ["add", "Cara", "y"])

    listing = runner.invoke(app, ["list"])

    assert listing.exit_code == 0
    assert "Names" in listing.stdout
    for name in ("Anna", "Beth", "Cara"):
        assert name in listing.stdout


def test_list_with_search_filters_rows(tmp_path: Path) -> None:
    for text, subtext in (("Anna", "x"), ("Beth", "Anna's friend"), ("Cara", "y")):
        runner.invoke(app, ["add", text, subtext])

    result = runner.invoke(app, ["list", "--search", "ann"])

    assert result.exit_code == 0
    assert "Anna" in result.stdout
    assert "Beth" in result.stdout
    assert "Cara" not in result.stdout
    assert "search: ann" in result.stdout


def test_add_with_empty_field_exits_without_writing(tmp_path: Path) -> None:
    result = runner.invoke(app, ["add", "Anna", ""])

    assert result.exit_code == 1
    assert _texts(_db(tmp_path)) == []


def test_db_path_option(tmp_path: Path) -> None:
    other = tmp_path / "other.sqlite"

    result = runner.invoke(app, ["add", "Anna", "x", "--db-path", str(other)])

    assert result.exit_code == 0
    assert _texts(other) == [("Anna", "x")]
    assert _texts(_db(tmp_path)) == []


def test_edit_with_options(tmp_path: Path) -> None:
    store = NameStore(_db(tmp_path))
    record = store.add("Anna", "x")
    store.close()

    result = runner.invoke(app, ["edit", str(record.id), "--text", "Anne", "--subtext", "z"])

    assert result.exit_code == 0
    assert _texts(_db(tmp_path)) == [("Anne", "z")]


def test_edit_prompts_for_missing_fields(tmp_path: Path) -> None:
    store = NameStore(_db(tmp_path))
    record = store.add("Anna", "x")
    store.close()

    result = runner.invoke(app, ["edit", str(record.id), "--text", "Anne"], input="\n")

    assert result.exit_code == 0
    assert _texts(_db(tmp_path)) == [("Anne", "x")]


def test_edit_unknown_id(tmp_path: Path) -> None:
    result = runner.invoke(app, ["edit", "42", "--text", "a", "--subtext", "b"])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_delete(tmp_path: Path) -> None:
    store = NameStore(_db(tmp_path))
    record = store.add("Anna", "x")
    store.add("Beth", "y")
    store.close()

    result = runner.invoke(app, ["delete", str(record.id)])

    assert result.exit_code == 0
    assert _texts(_db(tmp_path)) == [("Beth", "y")]


def test_delete_unknown_id(tmp_path: Path) -> None:
    result = runner.invoke(app, ["delete", "42"])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_config_prints_effective_values(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("NAMELIST_SEARCH_MODE", "simplified")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["search_mode"] == "simplified"
    assert payload["config_path"] == str(tmp_path / "config.json")


def test_config_rejects_invalid_file(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{not-json}")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 1
    assert "Invalid config file" in result.stdout


def test_shell_add_search_edit_delete(tmp_path: Path) -> None:
    script = "\n".join(
        [
            "add",
            "Anna",
            "x",
            "add",
            "Cara",
            "y",
            "/ ann",
            "edit 1",
            "Anne",
            "",
            "clear",
            "delete 2",
            "quit",
        ]
    )

    result = runner.invoke(app, ["shell"], input=script + "\n")

    assert result.exit_code == 0
    assert _texts(_db(tmp_path)) == [("Anne", "x")]
    assert "search: ann" in result.stdout


def test_shell_reports_bad_rows_and_unknown_commands(tmp_path: Path) -> None:
    result = runner.invoke(app, ["shell"], input="edit 3\ndelete nope\nfrobnicate\nhelp\n")

    assert result.exit_code == 0
    assert "No row 3" in result.stdout
    assert "Not a row number" in result.stdout
    assert "Unknown command" in result.stdout
    assert "Commands" in result.stdout


def test_parse_shell_command() -> None:
    assert parse_shell_command("") is None
    assert parse_shell_command("/ann b") == ShellCommand("search", "ann b")
    assert parse_shell_command("search  x bo ") == ShellCommand("search", "x bo")
    assert parse_shell_command("E 2") == ShellCommand("edit", "2")
    assert parse_shell_command("rm 1") == ShellCommand("delete", "1")
    assert parse_shell_command("q") == ShellCommand("quit", "")
    assert parse_shell_command("what") == ShellCommand("unknown", "what")


def test_list_search_with_markup_brackets(tmp_path: Path) -> None:
    runner.invoke(app, ["add", "Anna", "x"])

    result = runner.invoke(app, ["list", "--search", "[/]"])

    assert result.exit_code == 0
    assert "search: [/]" in result.stdout
    assert "Anna" not in result.stdout


def test_list_search_caption_keeps_bracketed_text(tmp_path: Path) -> None:
    result = runner.invoke(app, ["list", "--search", "[bold]x"])

    assert result.exit_code == 0
    assert "search: [bold]x" in result.stdout


def test_shell_survives_markup_in_input(tmp_path: Path) -> None:
    script = "\n".join(["add", "Anna", "x", "/ [/]", "[/red]oops", "edit [/]", "clear", "quit"])

    result = runner.invoke(app, ["shell"], input=script + "\n")

    assert result.exit_code == 0
    assert "search: [/]" in result.stdout
    assert "Unknown command: [/red]oops" in result.stdout
    assert "Not a row number: '[/]'" in result.stdout
    assert _texts(_db(tmp_path)) == [("Anna", "x")]
