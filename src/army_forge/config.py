"""Settings file loading."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SETTINGS_PATH = PACKAGE_DIR / "data" / "settings.json"


class ConfigError(ValueError):
    """Error loading or validating settings."""


@dataclass(frozen=True)
class ForgeConfig:
    data_dir: Path
    default_army_book: str
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    points_limit: int | None = None

    def army_book_path(self, uid: str | None = None) -> Path:
        return self.data_dir / f"{uid or self.default_army_book}.json"


def load_config(path: Path | None = None) -> ForgeConfig:
    """Load settings; relative ``data_dir`` values resolve against the settings file."""
    path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    try:
        with path.open("r", encoding="utf-8") as handle:
            data: Any = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Settings file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: settings must be object")

    data_dir = Path(str(data.get("data_dir", "army_books")))
    if not data_dir.is_absolute():
        data_dir = path.resolve().parent / data_dir

    default_book = data.get("default_army_book")
    if not isinstance(default_book, str) or not default_book:
        raise ConfigError(f"{path}: default_army_book must be string")

    points_limit = data.get("points_limit")
    if points_limit is not None and (not isinstance(points_limit, int) or points_limit <= 0):
        raise ConfigError(f"{path}: points_limit must be a positive integer")

    try:
        port = int(data.get("port", 8000))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{path}: port must be integer") from exc

    return ForgeConfig(
        data_dir=data_dir,
        default_army_book=default_book,
        host=str(data.get("host", "127.0.0.1")),
        port=port,
        log_level=str(data.get("log_level", "INFO")).upper(),
        points_limit=points_limit,
    )
