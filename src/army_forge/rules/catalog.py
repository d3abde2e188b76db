"""Army book loading and normalization."""

from __future__ import annotations

import json
import logging
import re
import secrets
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from army_forge.domain.models import (
    ArmyBook,
    EquipmentItem,
    Gain,
    SpecialRule,
    UnitDefinition,
    UpgradeDefinition,
    UpgradeOption,
    UpgradePackage,
)
from army_forge.domain.types import GainType
from army_forge.rules.text import parse_rule, parse_upgrade_text, split_quantity_prefix

logger = logging.getLogger(__name__)

_COST = re.compile(r"^\s*([+-]?\d+)")
_OPTION_ID_LENGTH = 5


class CatalogError(ValueError):
    """Error loading or validating an army book."""


def parse_cost(value: Any) -> int | None:
    """Leading integer of a cost string (``"+10pts"`` -> 10); None when absent or unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = _COST.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def new_option_id() -> str:
    return secrets.token_urlsafe(_OPTION_ID_LENGTH)[:_OPTION_ID_LENGTH]


def normalize_army_book(
    raw: dict[str, Any],
    *,
    source: str = "<army book>",
    id_factory: Callable[[], str] | None = None,
) -> ArmyBook:
    """Turn raw army book JSON into quantity-resolved catalog records.

    Equipment counts are resolved against the unit size, gain quantity prefixes
    are expanded into one gain per item, and options without an id get a fresh
    short id. Ids drawn here are only stable for the returned instance.
    """
    if not isinstance(raw, dict):
        raise CatalogError(f"{source}: army book must be object")
    uid = raw.get("uid", raw.get("id"))
    if not isinstance(uid, str):
        raise CatalogError(f"{source}: uid must be string")

    packages_raw = raw.get("upgradePackages", [])
    if not isinstance(packages_raw, list):
        raise CatalogError(f"{source}: upgradePackages must be array")

    make_id = id_factory or new_option_id
    taken = _catalog_option_ids(packages_raw, source)
    packages: dict[str, UpgradePackage] = {}
    for item in packages_raw:
        package = _normalize_package(item, source, make_id, taken)
        packages[package.uid] = package

    units_raw = raw.get("units", [])
    if not isinstance(units_raw, list):
        raise CatalogError(f"{source}: units must be array")
    units = [_normalize_unit(item, source) for item in units_raw]
    for unit in units:
        for package_uid in unit.upgrades:
            if package_uid not in packages:
                raise CatalogError(f"{source}: unit {unit.id} references unknown upgrade package {package_uid}")

    version = raw.get("version")
    return ArmyBook(
        uid=uid,
        name=str(raw.get("name", uid)),
        version=str(version) if version is not None else None,
        units=units,
        upgrade_packages=packages,
    )


def _catalog_option_ids(packages_raw: list[Any], source: str) -> set[str]:
    """Ids the catalog already carries; generated ids must avoid all of them."""
    taken: set[str] = set()
    for package in packages_raw:
        if not isinstance(package, dict):
            continue
        for section in package.get("sections") or []:
            if not isinstance(section, dict):
                continue
            for option in section.get("options") or []:
                if not isinstance(option, dict) or not option.get("id"):
                    continue
                option_id = str(option["id"])
                if option_id in taken:
                    raise CatalogError(f"{source}: duplicate option id {option_id}")
                taken.add(option_id)
    return taken


def _normalize_unit(item: Any, source: str) -> UnitDefinition:
    if not isinstance(item, dict):
        raise CatalogError(f"{source}: unit entry must be object")
    unit_id = item.get("id")
    if not isinstance(unit_id, str):
        raise CatalogError(f"{source}: unit.id must be string")
    size = item.get("size", 1)
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise CatalogError(f"{source}: unit {unit_id} size must be a positive integer")
    cost = parse_cost(item.get("cost", 0))
    if cost is None:
        raise CatalogError(f"{source}: unit {unit_id} cost must be numeric")

    equipment_raw = item.get("equipment", [])
    if not isinstance(equipment_raw, list):
        raise CatalogError(f"{source}: unit {unit_id} equipment must be array")
    upgrades = item.get("upgrades", [])
    if not isinstance(upgrades, list):
        raise CatalogError(f"{source}: unit {unit_id} upgrades must be array")

    return UnitDefinition(
        id=unit_id,
        name=str(item.get("name", unit_id)),
        size=size,
        cost=cost,
        quality=_optional_int(item.get("quality")),
        defense=_optional_int(item.get("defense")),
        equipment=[_normalize_equipment(entry, size, source, unit_id) for entry in equipment_raw],
        special_rules=[_normalize_rule(entry, source, unit_id) for entry in item.get("specialRules", [])],
        upgrades=[str(uid) for uid in upgrades],
    )


def _normalize_equipment(entry: Any, size: int, source: str, unit_id: str) -> EquipmentItem:
    if not isinstance(entry, dict):
        raise CatalogError(f"{source}: unit {unit_id} equipment entry must be object")
    label = entry.get("label", entry.get("name"))
    if not isinstance(label, str):
        raise CatalogError(f"{source}: unit {unit_id} equipment.label must be string")
    per_model, stripped = split_quantity_prefix(label)
    name = entry.get("name")
    if not isinstance(name, str):
        name = stripped
    return EquipmentItem(
        name=name,
        label=stripped,
        count=per_model * size if per_model is not None else size,
        extra=_extra(entry, ("name", "label", "count")),
    )


def _normalize_rule(entry: Any, source: str, unit_id: str) -> SpecialRule:
    if isinstance(entry, str):
        return parse_rule(entry)
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise CatalogError(f"{source}: unit {unit_id} special rule must be string or object with name")
    rating = entry.get("rating")
    return SpecialRule(name=entry["name"], rating=str(rating) if rating not in (None, "") else None)


def _normalize_package(
    item: Any, source: str, make_id: Callable[[], str], taken: set[str]
) -> UpgradePackage:
    if not isinstance(item, dict):
        raise CatalogError(f"{source}: upgrade package must be object")
    uid = item.get("uid")
    if not isinstance(uid, str):
        raise CatalogError(f"{source}: upgradePackage.uid must be string")
    sections_raw = item.get("sections", [])
    if not isinstance(sections_raw, list):
        raise CatalogError(f"{source}: package {uid} sections must be array")
    sections = [
        _normalize_section(section, f"{uid}-{index}", source, make_id, taken)
        for index, section in enumerate(sections_raw)
    ]
    return UpgradePackage(uid=uid, hint=str(item.get("hint", "")), sections=sections)


def _normalize_section(
    section: Any,
    default_id: str,
    source: str,
    make_id: Callable[[], str],
    taken: set[str],
) -> UpgradeDefinition:
    if not isinstance(section, dict):
        raise CatalogError(f"{source}: section entry must be object")
    label = section.get("label")
    if not isinstance(label, str):
        raise CatalogError(f"{source}: section {default_id} label must be string")
    parsed = parse_upgrade_text(label)
    options_raw = section.get("options", [])
    if not isinstance(options_raw, list):
        raise CatalogError(f"{source}: section {default_id} options must be array")
    return UpgradeDefinition(
        id=str(section.get("id") or default_id),
        label=label,
        type=parsed.type,
        affects=parsed.affects,
        select=parsed.select,
        replace_what=parsed.replace_what,
        options=[_normalize_option(option, source, make_id, taken) for option in options_raw],
    )


def _normalize_option(
    option: Any, source: str, make_id: Callable[[], str], taken: set[str]
) -> UpgradeOption:
    if not isinstance(option, dict):
        raise CatalogError(f"{source}: option entry must be object")
    option_id = option.get("id")
    if option_id:
        option_id = str(option_id)
    else:
        option_id = make_id()
        while option_id in taken:
            logger.warning("Generated option id %s already taken; drawing another", option_id)
            option_id = make_id()
        taken.add(option_id)

    cost = option.get("cost")
    if cost not in (None, "") and parse_cost(cost) is None:
        raise CatalogError(f"{source}: option {option_id} cost must be numeric, got {cost!r}")

    gains_raw = option.get("gains", [])
    if not isinstance(gains_raw, list):
        raise CatalogError(f"{source}: option {option_id} gains must be array")
    gains: list[Gain] = []
    for original in gains_raw:
        gain = _normalize_gain(original, source, option_id)
        quantity, _ = split_quantity_prefix(str(original.get("name", "")))
        gains.append(gain)
        # "2x Laser Cannon" becomes two single gains
        for _ in range((quantity or 1) - 1):
            gains.append(gain.copy())

    label = option.get("label")
    if not isinstance(label, str):
        label = ", ".join(gain.label for gain in gains)
    return UpgradeOption(
        id=option_id,
        label=label,
        cost=str(cost) if cost not in (None, "") else None,
        gains=gains,
    )


def _normalize_gain(original: Any, source: str, option_id: str) -> Gain:
    if not isinstance(original, dict):
        raise CatalogError(f"{source}: option {option_id} gain must be object")
    try:
        gain_type = GainType(original.get("type"))
    except ValueError as exc:
        raise CatalogError(f"{source}: option {option_id} has unknown gain type {original.get('type')!r}") from exc
    name = original.get("name")
    if not isinstance(name, str):
        raise CatalogError(f"{source}: option {option_id} gain.name must be string")
    _, name = split_quantity_prefix(name)
    label = original.get("label")
    _, label = split_quantity_prefix(label) if isinstance(label, str) else (None, name)

    content: list[Gain] = []
    if gain_type.has_content:
        for entry in original.get("content", []):
            content.append(_normalize_gain(entry, source, option_id))

    return Gain(
        type=gain_type,
        name=name,
        label=label,
        content=content,
        extra=_extra(original, ("type", "name", "label", "count", "content")),
    )


def _extra(entry: dict[str, Any], known: tuple[str, ...]) -> dict[str, Any]:
    return {key: value for key, value in entry.items() if key not in known}


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _load_json(path: Path) -> dict[str, Any]:
    """Load JSON file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise CatalogError(f"Army book not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Invalid JSON in {path}: {exc}") from exc


@lru_cache(maxsize=32)
def _load_cached(path: Path) -> ArmyBook:
    return normalize_army_book(_load_json(path), source=str(path))


def load_army_book(path: Path) -> ArmyBook:
    """Load and normalize an army book; repeated loads of one path share option ids."""
    return _load_cached(Path(path).resolve())


def list_army_books(data_dir: Path) -> list[dict[str, str]]:
    books: list[dict[str, str]] = []
    for path in sorted(Path(data_dir).glob("*.json")):
        data = _load_json(path)
        uid = data.get("uid", data.get("id", path.stem))
        books.append({"uid": str(uid), "name": str(data.get("name", uid)), "file": path.name})
    return books
