"""UI events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UiEvent:
    kind: str  # "info" | "warning" | "error"
    message: str
    data: dict[str, Any] | None = None
