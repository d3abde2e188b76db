from __future__ import annotations

from army_forge.domain.models import Unit


def assert_counts_non_negative(unit: Unit) -> None:
    for item in unit.equipment:
        assert item.count >= 0
    for selected in unit.selected_upgrades:
        for gain in selected.gains:
            assert gain.count >= 0
            for content in gain.content:
                assert content.count >= 0


def equipment_counts(unit: Unit) -> dict[str, int]:
    return {item.name: item.count for item in unit.equipment}
