"""Selection control classification for upgrade sections."""

from __future__ import annotations

import logging

from army_forge.domain.models import Unit, UpgradeDefinition
from army_forge.domain.types import ControlType, UpgradeType

logger = logging.getLogger(__name__)


def get_control_type(unit: Unit, upgrade: UpgradeDefinition) -> ControlType:
    if upgrade.type is UpgradeType.UPGRADE:
        # "Upgrade any model with:"
        if upgrade.affects == "any" and unit.size > 1:
            return ControlType.UPDOWN
        # "Upgrade with one:"
        if upgrade.select == 1:
            return ControlType.RADIO
        if upgrade.select is not None:
            return ControlType.UPDOWN
        return ControlType.CHECK

    # "Upgrade Psychic(1):"
    if upgrade.type is UpgradeType.UPGRADE_RULE:
        return ControlType.CHECK

    if upgrade.type is UpgradeType.REPLACE:
        # "Replace [weapon]:" / "Replace up to two [weapons]:"
        if upgrade.affects is None:
            if upgrade.select is not None:
                return ControlType.UPDOWN
            return ControlType.RADIO
        # "Replace one [weapon]:" / "Replace all [weapons]:"
        if upgrade.affects == 1 or upgrade.affects == "all":
            return ControlType.RADIO
        # "Replace any [weapon]:" / "Replace 2 [weapons]:"
        if upgrade.affects == "any" or _is_count(upgrade.affects):
            return ControlType.UPDOWN

    logger.error("No control type for upgrade %s (%r)", upgrade.id, upgrade.label)
    return ControlType.UPDOWN


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
