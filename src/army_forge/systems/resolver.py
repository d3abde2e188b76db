"""Locating the quantity a replace upgrade draws from or gives back to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from army_forge.domain.models import Unit
from army_forge.rules.text import compare_names


@dataclass(frozen=True)
class QuantityRef:
    """Key to a count owned by a unit: a base equipment entry or a gain of a selected upgrade."""

    upgrade_index: int | None
    index: int

    @property
    def is_equipment(self) -> bool:
        return self.upgrade_index is None

    def count(self, unit: Unit) -> int:
        if self.upgrade_index is None:
            return unit.equipment[self.index].count
        return unit.selected_upgrades[self.upgrade_index].gains[self.index].count

    def adjust(self, unit: Unit, delta: int) -> int:
        """Add ``delta`` to the count, never going below zero. Returns the new count."""
        value = max(0, self.count(unit) + delta)
        if self.upgrade_index is None:
            unit.equipment[self.index].count = value
        else:
            unit.selected_upgrades[self.upgrade_index].gains[self.index].count = value
        return value


def _gain_matches(unit: Unit, name: str):
    for upgrade_index in range(len(unit.selected_upgrades) - 1, -1, -1):
        for gain_index, gain in enumerate(unit.selected_upgrades[upgrade_index].gains):
            if compare_names(gain.name, name):
                yield QuantityRef(upgrade_index, gain_index)


def _last_equipment(unit: Unit, name: str) -> QuantityRef | None:
    for index in range(len(unit.equipment) - 1, -1, -1):
        if compare_names(unit.equipment[index].name, name):
            return QuantityRef(None, index)
    return None


def find_source(
    unit: Unit, name: str, reserved: Mapping[QuantityRef, int] | None = None
) -> QuantityRef | None:
    """Find what an item named ``name`` would be taken from.

    Selected upgrades are searched most recent first for a gain that still has
    count left; otherwise the last matching base equipment entry is returned,
    whatever its count. ``reserved`` holds amounts already promised from a ref.
    """
    reserved = reserved or {}
    for ref in _gain_matches(unit, name):
        if ref.count(unit) - reserved.get(ref, 0) > 0:
            return ref
    return _last_equipment(unit, name)


def find_restore_target(unit: Unit, name: str) -> QuantityRef | None:
    """Same search order as find_source, but a drained gain is still a valid target."""
    ref = next(_gain_matches(unit, name), None)
    if ref is not None:
        return ref
    return _last_equipment(unit, name)
