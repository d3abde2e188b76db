"""Whether an option may be selected on a unit right now."""

from __future__ import annotations

from army_forge.domain.models import Unit, UpgradeDefinition, UpgradeOption
from army_forge.domain.types import ControlType, UpgradeType
from army_forge.systems.controls import get_control_type
from army_forge.systems.resolver import find_source


def is_applied(unit: Unit, option: UpgradeOption) -> bool:
    return any(selected.id == option.id for selected in unit.selected_upgrades)


def count_applied(unit: Unit, option: UpgradeOption) -> int:
    return sum(1 for selected in unit.selected_upgrades if selected.id == option.id)


def count_applied_in_group(unit: Unit, upgrade: UpgradeDefinition) -> int:
    return sum(count_applied(unit, option) for option in upgrade.options)


def is_valid(unit: Unit, upgrade: UpgradeDefinition, option: UpgradeOption) -> bool:
    control_type = get_control_type(unit, upgrade)
    already_selected = count_applied(unit, option)
    applied_in_group = count_applied_in_group(unit, upgrade)

    # A radio group can always be re-targeted once something in it is chosen
    if control_type is ControlType.RADIO and applied_in_group > 0:
        return True

    if upgrade.type is UpgradeType.REPLACE:
        for what in upgrade.replace_what or []:
            source = find_source(unit, what)
            if source is None or source.count(unit) <= 0:
                return False
        if upgrade.select is not None and applied_in_group >= upgrade.select:
            return False

    if upgrade.type is UpgradeType.UPGRADE:
        if upgrade.select is not None:
            if already_selected >= upgrade.select:
                return False
        elif already_selected >= unit.size:
            return False

    return True
