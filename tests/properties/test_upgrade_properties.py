from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from army_forge.domain.types import ControlType, UpgradeType
from army_forge.systems import upgrades
from army_forge.systems.controls import get_control_type
from army_forge.systems.validity import is_valid
from tests.helpers.factories import make_option, make_unit, make_upgrade
from tests.helpers.invariants import assert_counts_non_negative, equipment_counts
from tests.helpers.strategies import affects_strategy, select_strategy, upgrade_type_strategy


@given(size=st.integers(min_value=1, max_value=8), applied=st.integers(min_value=0, max_value=10))
@settings(max_examples=30)
def test_unlimited_upgrade_caps_at_unit_size(size: int, applied: int) -> None:
    unit = make_unit(size=size)
    upgrade = make_upgrade(UpgradeType.UPGRADE, make_option("banner", "Banner"), affects="any")
    option = upgrade.options[0]
    for _ in range(applied):
        upgrades.apply(unit, upgrade, option)

    assert is_valid(unit, upgrade, option) is (applied < size)


@given(
    size=st.integers(min_value=1, max_value=6),
    affects=affects_strategy(),
    applications=st.integers(min_value=1, max_value=4),
)
@settings(max_examples=30)
def test_replace_round_trip_restores_counts(size: int, affects, applications: int) -> None:
    unit = make_unit(size=size, equipment={"Rifle": size, "CCW": size})
    upgrade = make_upgrade(
        UpgradeType.REPLACE, make_option("carbine", "Carbine"), affects=affects, replace_what=["Rifle"]
    )
    option = upgrade.options[0]
    before = equipment_counts(unit)

    applied = 0
    for _ in range(applications):
        if not is_valid(unit, upgrade, option):
            break
        upgrades.apply(unit, upgrade, option)
        applied += 1
        assert_counts_non_negative(unit)

    for _ in range(applied):
        assert upgrades.remove(unit, upgrade, option) == []
        assert_counts_non_negative(unit)

    assert equipment_counts(unit) == before
    assert unit.selected_upgrades == []


@given(
    steps=st.lists(
        st.tuples(st.sampled_from(["apply", "remove"]), st.sampled_from(["carbine", "flamer"])),
        max_size=15,
    )
)
@settings(max_examples=30)
def test_counts_never_go_negative(steps: list[tuple[str, str]]) -> None:
    unit = make_unit(size=3, equipment={"Rifle": 3})
    carbine = make_upgrade(
        UpgradeType.REPLACE, make_option("carbine", "Carbine"), affects="any", replace_what=["Rifle"]
    )
    flamer = make_upgrade(
        UpgradeType.REPLACE, make_option("flamer", "Flamer"), affects="any", replace_what=["Carbine"]
    )
    sections = {"carbine": carbine, "flamer": flamer}

    for verb, key in steps:
        upgrade = sections[key]
        option = upgrade.options[0]
        if verb == "apply":
            if is_valid(unit, upgrade, option):
                upgrades.apply(unit, upgrade, option)
        elif any(selected.id == option.id for selected in unit.selected_upgrades):
            upgrades.remove(unit, upgrade, option)
        assert_counts_non_negative(unit)

    held = equipment_counts(unit)["Rifle"] + sum(
        gain.count for selected in unit.selected_upgrades for gain in selected.gains
    )
    assert held <= 3


@given(
    upgrade_type=upgrade_type_strategy(),
    affects=affects_strategy(),
    select=select_strategy(),
    size=st.integers(min_value=1, max_value=10),
)
@settings(max_examples=30)
def test_every_section_gets_a_control(upgrade_type, affects, select, size: int) -> None:
    unit = make_unit(size=size)
    upgrade = make_upgrade(upgrade_type, affects=affects, select=select, replace_what=["CCW"])

    assert get_control_type(unit, upgrade) in set(ControlType)
