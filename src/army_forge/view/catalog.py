from __future__ import annotations

from army_forge.domain.models import ArmyBook, UnitDefinition


def build_catalog(book: ArmyBook) -> dict:
    def describe_equipment(unit: UnitDefinition) -> list[str]:
        labels = []
        for item in unit.equipment:
            per_model = item.count // unit.size if unit.size else item.count
            labels.append(f"{per_model}x {item.label}" if per_model > 1 else item.label)
        return labels

    def upgrade_labels(unit: UnitDefinition) -> list[str]:
        return [section.label for section in book.sections_for(unit.upgrades)]

    return {
        "uid": book.uid,
        "name": book.name,
        "version": book.version,
        "units": [
            {
                "id": unit.id,
                "name": unit.name,
                "size": unit.size,
                "cost": unit.cost,
                "quality": unit.quality,
                "defense": unit.defense,
                "equipment": describe_equipment(unit),
                "specialRules": [rule.display_name for rule in unit.special_rules],
                "upgrades": upgrade_labels(unit),
            }
            for unit in book.units
        ],
    }
