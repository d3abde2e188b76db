from __future__ import annotations

from army_forge.domain.models import Gain, Unit
from army_forge.sim.state import ArmyList
from army_forge.systems.controls import get_control_type
from army_forge.systems.costs import unit_total
from army_forge.systems.validity import count_applied, is_valid
from army_forge.web.api import schemas


def build_state_response(state: ArmyList) -> schemas.ListStateResponse:
    return schemas.ListStateResponse(
        army_book=state.army_book.uid,
        name=state.name,
        points_limit=state.points_limit,
        total=state.total,
        over_limit=state.over_limit,
        units=[_unit_state(state, unit) for unit in state.units],
    )


def _gain(gain: Gain) -> schemas.GainEntry:
    return schemas.GainEntry(
        type=gain.type.value,
        name=gain.name,
        label=gain.label,
        count=gain.count,
        content=[_gain(item) for item in gain.content],
    )


def _unit_state(state: ArmyList, unit: Unit) -> schemas.UnitState:
    sections = []
    for section in state.sections_for(unit):
        options = []
        for option in section.options:
            applied = count_applied(unit, option)
            options.append(
                schemas.OptionState(
                    id=option.id,
                    label=option.label,
                    cost=option.cost,
                    applied=applied > 0,
                    count=applied,
                    valid=is_valid(unit, section, option),
                )
            )
        sections.append(
            schemas.SectionState(
                id=section.id,
                label=section.label,
                type=section.type.value,
                control=get_control_type(unit, section).value,
                options=options,
            )
        )

    return schemas.UnitState(
        id=unit.id,
        definition_id=unit.definition_id,
        name=unit.name,
        size=unit.size,
        combined=unit.combined,
        total=unit_total(unit),
        equipment=[
            schemas.EquipmentEntry(name=item.name, label=item.label, count=item.count)
            for item in unit.equipment
            if item.count > 0
        ],
        special_rules=[rule.display_name for rule in unit.special_rules],
        selected_upgrades=[
            schemas.SelectedUpgradeEntry(
                id=selected.id,
                label=selected.label,
                cost=selected.cost,
                gains=[_gain(gain) for gain in selected.gains],
            )
            for selected in unit.selected_upgrades
        ],
        sections=sections,
    )
