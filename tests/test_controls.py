from __future__ import annotations

import logging

import pytest

from army_forge.domain.types import ControlType, UpgradeType
from army_forge.systems.controls import get_control_type
from tests.helpers.factories import make_unit, make_upgrade


@pytest.mark.parametrize(
    ("upgrade_type", "affects", "select", "size", "expected"),
    [
        (UpgradeType.UPGRADE, "any", None, 5, ControlType.UPDOWN),
        (UpgradeType.UPGRADE, "any", None, 1, ControlType.CHECK),
        (UpgradeType.UPGRADE, "any", 1, 1, ControlType.RADIO),
        (UpgradeType.UPGRADE, None, 1, 5, ControlType.RADIO),
        (UpgradeType.UPGRADE, None, 2, 5, ControlType.UPDOWN),
        (UpgradeType.UPGRADE, None, None, 5, ControlType.CHECK),
        (UpgradeType.UPGRADE, "all", None, 5, ControlType.CHECK),
        (UpgradeType.UPGRADE_RULE, None, None, 1, ControlType.CHECK),
        (UpgradeType.UPGRADE_RULE, "any", 3, 5, ControlType.CHECK),
        (UpgradeType.REPLACE, None, 2, 5, ControlType.UPDOWN),
        (UpgradeType.REPLACE, None, None, 5, ControlType.RADIO),
        (UpgradeType.REPLACE, 1, None, 5, ControlType.RADIO),
        (UpgradeType.REPLACE, "all", None, 5, ControlType.RADIO),
        (UpgradeType.REPLACE, "any", None, 5, ControlType.UPDOWN),
        (UpgradeType.REPLACE, 2, None, 5, ControlType.UPDOWN),
    ],
)
def test_control_type_table(upgrade_type, affects, select, size, expected) -> None:
    unit = make_unit(size=size)
    upgrade = make_upgrade(upgrade_type, affects=affects, select=select, replace_what=["CCW"])

    assert get_control_type(unit, upgrade) is expected


def test_unclassifiable_replace_falls_back_to_updown_and_reports(caplog: pytest.LogCaptureFixture) -> None:
    unit = make_unit()
    upgrade = make_upgrade(UpgradeType.REPLACE, affects="some", replace_what=["CCW"])  # type: ignore[arg-type]

    with caplog.at_level(logging.ERROR, logger="army_forge.systems.controls"):
        control = get_control_type(unit, upgrade)

    assert control is ControlType.UPDOWN
    assert "No control type" in caplog.text
