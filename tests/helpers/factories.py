from __future__ import annotations

from pathlib import Path
from typing import Callable

from army_forge.domain.models import (
    EquipmentItem,
    Gain,
    SpecialRule,
    Unit,
    UpgradeDefinition,
    UpgradeOption,
)
from army_forge.domain.types import Affects, GainType, UpgradeType
from army_forge.rules.catalog import load_army_book
from army_forge.sim.state import ArmyList


def sample_book_path() -> Path:
    return Path(__file__).resolve().parents[2] / "src" / "army_forge" / "data" / "army_books" / "battle-brothers.json"


def make_unit(
    *,
    size: int = 5,
    cost: int = 100,
    equipment: dict[str, int] | None = None,
    rules: list[SpecialRule] | None = None,
) -> Unit:
    """Create a bare unit; ``equipment`` maps names to remaining counts."""
    items = equipment if equipment is not None else {"CCW": size}
    return Unit(
        id="u1",
        definition_id="test",
        name="Test Unit",
        size=size,
        cost=cost,
        equipment=[EquipmentItem(name=name, label=name, count=count) for name, count in items.items()],
        special_rules=list(rules or []),
        upgrades=[],
    )


def make_option(option_id: str, *gain_names: str, cost: str | None = None, gain_type: GainType = GainType.WEAPON) -> UpgradeOption:
    gains = [Gain(type=gain_type, name=name, label=name) for name in gain_names]
    return UpgradeOption(id=option_id, label=" + ".join(gain_names) or option_id, cost=cost, gains=gains)


def make_upgrade(
    upgrade_type: UpgradeType,
    *options: UpgradeOption,
    affects: Affects = None,
    select: int | None = None,
    replace_what: list[str] | None = None,
    section_id: str = "S-0",
) -> UpgradeDefinition:
    return UpgradeDefinition(
        id=section_id,
        label=f"{upgrade_type.value} section",
        type=upgrade_type,
        affects=affects,
        select=select,
        replace_what=replace_what,
        options=list(options),
    )


def make_list(
    *,
    points_limit: int | None = None,
    apply: Callable[[ArmyList], None] | None = None,
) -> ArmyList:
    """Create a fresh list over the packaged sample army book."""
    state = ArmyList(army_book=load_army_book(sample_book_path()), points_limit=points_limit)
    if apply is not None:
        apply(state)
    return state
