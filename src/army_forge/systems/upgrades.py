"""Applying and removing upgrade options on a unit."""

from __future__ import annotations

import logging

from army_forge.domain.models import SelectedUpgrade, Unit, UpgradeDefinition, UpgradeOption
from army_forge.domain.types import UpgradeType
from army_forge.rules.text import compare_names, parse_rule
from army_forge.systems.resolver import QuantityRef, find_restore_target, find_source

logger = logging.getLogger(__name__)


class UpgradeError(RuntimeError):
    """An upgrade could not be applied or removed."""


class ResolutionError(UpgradeError):
    """Nothing on the unit matches an item the upgrade replaces."""


class NotAppliedError(UpgradeError):
    """Removal requested for an option that is not on the unit."""


def required_count(unit: Unit, upgrade: UpgradeDefinition) -> int:
    """How many models an application of ``upgrade`` affects."""
    if isinstance(upgrade.affects, int) and not isinstance(upgrade.affects, bool):
        return upgrade.affects
    if upgrade.affects == "all":
        return unit.size or 1
    return 1


def _grant(unit: Unit, option: UpgradeOption, count: int) -> SelectedUpgrade:
    gains = []
    for gain in option.gains:
        granted = gain.copy(count=count)
        if granted.type.has_content:
            for item in granted.content:
                item.count = count
        gains.append(granted)
    selected = SelectedUpgrade(id=option.id, label=option.label, cost=option.cost, count=count, gains=gains)
    unit.selected_upgrades.append(selected)
    return selected


def _plan_replacements(unit: Unit, upgrade: UpgradeDefinition, required: int) -> tuple[list[QuantityRef], int]:
    """Resolve every replaced name before touching any count."""
    reserved: dict[QuantityRef, int] = {}
    sources: list[QuantityRef] = []
    available: int | None = None
    for what in upgrade.replace_what or []:
        source = find_source(unit, what, reserved)
        if source is None:
            logger.error("Cannot find %s to replace on unit %s", what, unit.id)
            raise ResolutionError(f"Cannot find {what} to replace")
        remaining = max(0, source.count(unit) - reserved.get(source, 0))
        available = remaining if available is None else min(available, remaining)
        reserved[source] = reserved.get(source, 0) + min(required, remaining)
        sources.append(source)
    return sources, required if available is None else available


def apply(unit: Unit, upgrade: UpgradeDefinition, option: UpgradeOption) -> SelectedUpgrade:
    """Select ``option`` on ``unit``, pushing a SelectedUpgrade onto its stack.

    Replace upgrades take ``required`` from each replaced item and grant no more
    than the smallest quantity that was actually available. All replaced names
    are resolved first; a ResolutionError leaves the unit untouched.
    """
    required = required_count(unit, upgrade)

    if upgrade.type is UpgradeType.UPGRADE_RULE:
        what = (upgrade.replace_what or [""])[0]
        for index, rule in enumerate(unit.special_rules):
            if compare_names(rule.display_name, what):
                del unit.special_rules[index]
                break
        return _grant(unit, option, required)

    if upgrade.type is UpgradeType.UPGRADE:
        return _grant(unit, option, required)

    if upgrade.type is UpgradeType.REPLACE:
        logger.debug("Replace %s x%d on unit %s", upgrade.replace_what, required, unit.id)
        sources, available = _plan_replacements(unit, upgrade, required)
        for source in sources:
            source.adjust(unit, -required)
        return _grant(unit, option, min(required, available))

    raise UpgradeError(f"Unknown upgrade type: {upgrade.type}")


def remove(unit: Unit, upgrade: UpgradeDefinition, option: UpgradeOption) -> list[str]:
    """Deselect the most recent application of ``option``.

    Returns the replaced names that could not be given back; restoration of the
    others still happens.
    """
    remove_at = None
    for index in range(len(unit.selected_upgrades) - 1, -1, -1):
        if unit.selected_upgrades[index].id == option.id:
            remove_at = index
            break
    if remove_at is None:
        raise NotAppliedError(f"Option {option.id} is not applied to unit {unit.id}")

    removed = unit.selected_upgrades.pop(remove_at)
    count = removed.gains[0].count if removed.gains else removed.count

    if upgrade.type is UpgradeType.UPGRADE_RULE:
        # Re-add original rule
        unit.special_rules.append(parse_rule((upgrade.replace_what or [""])[0]))
        return []

    unrestored: list[str] = []
    if upgrade.type is UpgradeType.REPLACE:
        for what in upgrade.replace_what or []:
            target = find_restore_target(unit, what)
            if target is None:
                logger.warning("Could not restore %s on unit %s", what, unit.id)
                unrestored.append(what)
                continue
            target.adjust(unit, count)
    return unrestored
