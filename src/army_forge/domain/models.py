"""Catalog records and per-unit list state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from army_forge.domain.types import Affects, GainType, UpgradeType


@dataclass()
class EquipmentItem:
    name: str
    label: str
    count: int
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SpecialRule:
    name: str
    rating: str | None = None

    @property
    def display_name(self) -> str:
        if self.rating:
            return f"{self.name}({self.rating})"
        return self.name


@dataclass()
class Gain:
    """A granted item or rule. ``count`` is settled when the option is applied."""

    type: GainType
    name: str
    label: str
    count: int = 1
    content: list["Gain"] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def copy(self, count: int | None = None) -> "Gain":
        return replace(
            self,
            count=self.count if count is None else count,
            content=[item.copy() for item in self.content],
            extra=dict(self.extra),
        )


@dataclass(frozen=True)
class UpgradeOption:
    id: str
    label: str
    cost: str | None
    gains: list[Gain]


@dataclass(frozen=True)
class UpgradeDefinition:
    """One upgrade section, e.g. ``Replace one Rifle:``."""

    id: str
    label: str
    type: UpgradeType
    affects: Affects
    select: int | None
    replace_what: list[str] | None
    options: list[UpgradeOption]

    def option(self, option_id: str) -> UpgradeOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True)
class UpgradePackage:
    uid: str
    hint: str
    sections: list[UpgradeDefinition]


@dataclass(frozen=True)
class UnitDefinition:
    id: str
    name: str
    size: int
    cost: int
    quality: int | None
    defense: int | None
    equipment: list[EquipmentItem]
    special_rules: list[SpecialRule]
    upgrades: list[str]


@dataclass(frozen=True)
class ArmyBook:
    uid: str
    name: str
    version: str | None
    units: list[UnitDefinition]
    upgrade_packages: dict[str, UpgradePackage]

    def unit(self, definition_id: str) -> UnitDefinition | None:
        for unit in self.units:
            if unit.id == definition_id:
                return unit
        return None

    def sections_for(self, package_uids: list[str]) -> list[UpgradeDefinition]:
        sections: list[UpgradeDefinition] = []
        for uid in package_uids:
            package = self.upgrade_packages.get(uid)
            if package is not None:
                sections.extend(package.sections)
        return sections


@dataclass()
class SelectedUpgrade:
    """An option as it was applied, with gain counts resolved."""

    id: str
    label: str
    cost: str | None
    count: int
    gains: list[Gain]


@dataclass()
class Unit:
    """A unit instance in an army list. Owns its equipment counts and upgrade stack."""

    id: str
    definition_id: str
    name: str
    size: int
    cost: int
    equipment: list[EquipmentItem]
    special_rules: list[SpecialRule]
    upgrades: list[str]
    combined: bool = False
    selected_upgrades: list[SelectedUpgrade] = field(default_factory=list)

    @staticmethod
    def from_definition(definition: UnitDefinition, unit_id: str) -> "Unit":
        return Unit(
            id=unit_id,
            definition_id=definition.id,
            name=definition.name,
            size=definition.size,
            cost=definition.cost,
            equipment=[replace(item, extra=dict(item.extra)) for item in definition.equipment],
            special_rules=list(definition.special_rules),
            upgrades=list(definition.upgrades),
        )
