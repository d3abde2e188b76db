"""Action definitions for reducer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, Union


@dataclass(frozen=True)
class AddUnit:
    definition_id: str


@dataclass(frozen=True)
class RemoveUnit:
    unit_id: str


@dataclass(frozen=True)
class SetCombined:
    unit_id: str
    combined: bool


@dataclass(frozen=True)
class SelectOption:
    unit_id: str
    section_id: str
    option_id: str


@dataclass(frozen=True)
class DeselectOption:
    unit_id: str
    section_id: str
    option_id: str


Action: TypeAlias = Union[
    AddUnit,
    RemoveUnit,
    SetCombined,
    SelectOption,
    DeselectOption,
]
