from __future__ import annotations

from pathlib import Path

import pytest

from namelist.store import NameStore


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NAMELIST_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.setenv("NAMELIST_DB", str(tmp_path / "names.sqlite"))
    for var in ("NAMELIST_SEARCH_MODE", "NAMELIST_HIGHLIGHT_STYLE", "NAMELIST_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def store(tmp_path: Path):
    store = NameStore(tmp_path / "store.sqlite")
    yield store
    store.close()
