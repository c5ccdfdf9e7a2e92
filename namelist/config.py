from __future__ import annotations

import json
import os
import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .db import DEFAULT_DB_PATH
from .highlight import DEFAULT_HIGHLIGHT_STYLE
from .store.filters import SEARCH_MODES

DEFAULT_CONFIG_PATH = Path("~/.config/namelist/config.json").expanduser()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONFIG_ENV_OVERRIDES = {
    "db_path": "NAMELIST_DB",
    "search_mode": "NAMELIST_SEARCH_MODE",
    "highlight_style": "NAMELIST_HIGHLIGHT_STYLE",
    "log_level": "NAMELIST_LOG_LEVEL",
}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("NAMELIST_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def write_config_file(data: dict[str, Any], path: Path | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
    return config_path


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class NameListConfig:
    db_path: str = str(DEFAULT_DB_PATH)
    # "literal" issues the search predicate with its redundant prefix branch;
    # "simplified" drops it. Both select the same records.
    search_mode: str = "literal"
    highlight_style: str = DEFAULT_HIGHLIGHT_STYLE
    log_level: str = "WARNING"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce_choice(value: object, default: str, choices: tuple[str, ...], *, key: str) -> str:
    if isinstance(value, str):
        normalized = value.strip()
        if key == "log_level":
            normalized = normalized.upper()
        else:
            normalized = normalized.lower()
        if normalized in choices:
            return normalized
    warnings.warn(f"Invalid value for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_str(value: object, default: str, *, key: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    warnings.warn(f"Invalid value for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def load_config(path: Path | None = None) -> NameListConfig:
    cfg = NameListConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError:
            data = {}
        if isinstance(data, dict):
            cfg = _apply_dict(cfg, data)
    cfg = _apply_dict(cfg, get_env_overrides())
    return cfg


def _apply_dict(cfg: NameListConfig, data: dict[str, Any]) -> NameListConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key == "search_mode":
            cfg.search_mode = _coerce_choice(value, cfg.search_mode, SEARCH_MODES, key=key)
            continue
        if key == "log_level":
            cfg.log_level = _coerce_choice(value, cfg.log_level, LOG_LEVELS, key=key)
            continue
        setattr(cfg, key, _coerce_str(value, getattr(cfg, key), key=key))
    return cfg
