from __future__ import annotations

from dataclasses import dataclass

from army_forge.domain.actions import (
    Action,
    AddUnit,
    DeselectOption,
    RemoveUnit,
    SelectOption,
    SetCombined,
)
from army_forge.domain.events import UiEvent
from army_forge.domain.models import Unit, UpgradeDefinition, UpgradeOption
from army_forge.domain.types import ControlType
from army_forge.sim.state import ArmyList
from army_forge.systems import upgrades
from army_forge.systems.controls import get_control_type
from army_forge.systems.validity import count_applied, is_applied, is_valid


@dataclass()
class ActionResult:
    ok: bool
    message: str | None
    message_kind: str | None
    state: ArmyList
    ui_events: list[UiEvent]


def _lookup(state: ArmyList, unit_id: str, section_id: str, option_id: str) -> tuple[Unit, UpgradeDefinition, UpgradeOption]:
    unit = state.unit(unit_id)
    if unit is None:
        raise ValueError(f"Unknown unit: {unit_id}")
    section = state.section(unit, section_id)
    if section is None:
        raise ValueError(f"Unknown upgrade section for {unit.name}: {section_id}")
    option = section.option(option_id)
    if option is None:
        raise ValueError(f"Unknown option: {option_id}")
    return unit, section, option


def apply_action(state: ArmyList, action: Action) -> ActionResult:
    ui_events: list[UiEvent] = []

    def ok(message: str | None, kind: str = "info") -> ActionResult:
        return ActionResult(ok=True, message=message, message_kind=kind, state=state, ui_events=list(ui_events))

    def fail(message: str) -> ActionResult:
        return ActionResult(ok=False, message=message, message_kind="error", state=state, ui_events=list(ui_events))

    def report_unrestored(unit: Unit, names: list[str]) -> None:
        for name in names:
            ui_events.append(
                UiEvent(kind="warning", message=f"Could not restore {name}", data={"unitId": unit.id, "item": name})
            )

    if isinstance(action, AddUnit):
        definition = state.army_book.unit(action.definition_id)
        if definition is None:
            return fail(f"Unknown unit type: {action.definition_id}")
        unit = Unit.from_definition(definition, state.next_unit_id())
        state.units.append(unit)
        return ok(f"{unit.name} added", "accent")

    if isinstance(action, RemoveUnit):
        unit = state.unit(action.unit_id)
        if unit is None:
            return fail(f"Unknown unit: {action.unit_id}")
        state.units.remove(unit)
        return ok(f"{unit.name} removed", "info")

    if isinstance(action, SetCombined):
        unit = state.unit(action.unit_id)
        if unit is None:
            return fail(f"Unknown unit: {action.unit_id}")
        unit.combined = action.combined
        return ok("Unit combined" if action.combined else "Unit split", "info")

    if isinstance(action, SelectOption):
        try:
            unit, section, option = _lookup(state, action.unit_id, action.section_id, action.option_id)
            control = get_control_type(unit, section)
            # check and radio controls hold an option at most once
            if control is not ControlType.UPDOWN and is_applied(unit, option):
                return ok(f"{option.label} already selected", "info")
            if not is_valid(unit, section, option):
                return fail(f"{option.label} cannot be selected")
            if control is ControlType.RADIO:
                for sibling in section.options:
                    for _ in range(count_applied(unit, sibling)):
                        report_unrestored(unit, upgrades.remove(unit, section, sibling))
            upgrades.apply(unit, section, option)
            return ok(f"{option.label} selected", "accent")
        except (ValueError, upgrades.UpgradeError) as exc:
            return fail(str(exc))

    if isinstance(action, DeselectOption):
        try:
            unit, section, option = _lookup(state, action.unit_id, action.section_id, action.option_id)
            if not is_applied(unit, option):
                return fail(f"{option.label} is not selected")
            report_unrestored(unit, upgrades.remove(unit, section, option))
            return ok(f"{option.label} removed", "info")
        except (ValueError, upgrades.UpgradeError) as exc:
            return fail(str(exc))

    return fail("Unknown action")
