"""Army list state container."""

from __future__ import annotations

from dataclasses import dataclass, field

from army_forge.domain.models import ArmyBook, Unit, UpgradeDefinition
from army_forge.systems.costs import list_total


@dataclass()
class ArmyList:
    army_book: ArmyBook
    name: str = "New List"
    points_limit: int | None = None
    units: list[Unit] = field(default_factory=list)
    unit_seq: int = 0

    @property
    def total(self) -> int:
        return list_total(self.units)

    @property
    def over_limit(self) -> bool:
        return self.points_limit is not None and self.total > self.points_limit

    def unit(self, unit_id: str) -> Unit | None:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def sections_for(self, unit: Unit) -> list[UpgradeDefinition]:
        return self.army_book.sections_for(unit.upgrades)

    def section(self, unit: Unit, section_id: str) -> UpgradeDefinition | None:
        for section in self.sections_for(unit):
            if section.id == section_id:
                return section
        return None

    def next_unit_id(self) -> str:
        self.unit_seq += 1
        return f"u{self.unit_seq}"
