"""Point totals."""

from __future__ import annotations

from typing import Iterable

from army_forge.domain.models import Unit
from army_forge.rules.catalog import parse_cost


def unit_total(unit: Unit) -> int:
    cost = unit.cost * (2 if unit.combined else 1)
    for selected in unit.selected_upgrades:
        cost += parse_cost(selected.cost) or 0
    return cost


def list_total(units: Iterable[Unit]) -> int:
    return sum(unit_total(unit) for unit in units)
