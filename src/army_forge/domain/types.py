"""Common types and enums."""

from __future__ import annotations

from enum import Enum
from typing import Literal, TypeAlias, Union


class UpgradeType(str, Enum):
    """Upgrade section kinds."""

    UPGRADE = "upgrade"
    UPGRADE_RULE = "upgradeRule"
    REPLACE = "replace"


class GainType(str, Enum):
    """What a selected option hands to the unit."""

    ITEM = "ArmyBookItem"
    WEAPON = "ArmyBookWeapon"
    RULE = "ArmyBookRule"

    @property
    def has_content(self) -> bool:
        return self is GainType.ITEM


class ControlType(str, Enum):
    """Selection control shape for an upgrade section."""

    CHECK = "check"
    RADIO = "radio"
    UPDOWN = "updown"


# "any" | "all" | positive int | None (absent)
Affects: TypeAlias = Union[Literal["any", "all"], int, None]
