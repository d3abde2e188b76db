"""Upgrade label and special rule text parsing, plus tolerant name matching."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from army_forge.domain.models import SpecialRule
from army_forge.domain.types import Affects, UpgradeType

QUANTITY_PREFIX = re.compile(r"^(\d+)x\s")

NUMBER_WORDS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_UPGRADE_MODELS = re.compile(r"^upgrade\s+(?P<quant>\S+)\s+models?\s+with(?:\s+(?P<select>.+))?$", re.IGNORECASE)
_UPGRADE_WITH = re.compile(r"^upgrade\s+with(?:\s+(?P<select>.+))?$", re.IGNORECASE)
_UPGRADE_RULE = re.compile(r"^upgrade\s+(?P<rule>.+)$", re.IGNORECASE)
_REPLACE = re.compile(r"^replace\s+(?P<rest>.+)$", re.IGNORECASE)
_UP_TO = re.compile(r"^up\s+to\s+(?P<count>\S+)\s+(?P<what>.+)$", re.IGNORECASE)
_WHAT_SEPARATOR = re.compile(r"\s*,\s*|\s+and\s+", re.IGNORECASE)
_RULE = re.compile(r"^(?P<name>[^()]+?)\s*(?:\((?P<rating>[^()]*)\))?$")


class ParseError(ValueError):
    """Label or rule text does not follow the expected grammar."""


@dataclass(frozen=True)
class UpgradeText:
    type: UpgradeType
    affects: Affects = None
    select: int | None = None
    replace_what: list[str] | None = None


def split_quantity_prefix(text: str) -> tuple[int | None, str]:
    """Split ``"3x Rifle"`` into ``(3, "Rifle")``; no prefix gives ``(None, text)``."""
    match = QUANTITY_PREFIX.match(text)
    if match is None:
        return None, text
    return int(match.group(1)), text[match.end():]


def _number(word: str) -> int | None:
    word = word.strip().lower()
    if word.isdigit():
        return int(word)
    return NUMBER_WORDS.get(word)


def _selection(label: str, text: str | None) -> int | None:
    if text is None:
        return None
    text = text.strip().lower()
    if text == "any":
        return None
    up_to = re.match(r"^up\s+to\s+(\S+)$", text)
    count = _number(up_to.group(1) if up_to else text)
    if count is None or count < 1:
        raise ParseError(f"Unrecognised selection '{text}' in upgrade label: {label!r}")
    return count


def _affects(label: str, word: str) -> Affects:
    lowered = word.lower()
    if lowered in ("any", "all"):
        return lowered  # type: ignore[return-value]
    count = _number(lowered)
    if count is None or count < 1:
        raise ParseError(f"Unrecognised model count '{word}' in upgrade label: {label!r}")
    return count


def _split_what(label: str, text: str) -> list[str]:
    names = [part.strip().strip("[]").strip() for part in _WHAT_SEPARATOR.split(text)]
    names = [name for name in names if name]
    if not names:
        raise ParseError(f"Nothing to replace in upgrade label: {label!r}")
    return names


def _parse_replace(label: str, rest: str) -> UpgradeText:
    up_to = _UP_TO.match(rest)
    if up_to:
        select = _selection(label, f"up to {up_to.group('count')}")
        return UpgradeText(UpgradeType.REPLACE, select=select, replace_what=_split_what(label, up_to.group("what")))

    first, _, remainder = rest.partition(" ")
    lowered = first.lower()
    if remainder and (lowered in ("any", "all") or _number(lowered) is not None):
        return UpgradeText(
            UpgradeType.REPLACE,
            affects=_affects(label, first),
            replace_what=_split_what(label, remainder),
        )
    return UpgradeText(UpgradeType.REPLACE, replace_what=_split_what(label, rest))


def parse_upgrade_text(label: str) -> UpgradeText:
    """Parse an upgrade section label such as ``"Replace one [Rifle]:"``."""
    if not isinstance(label, str):
        raise ParseError(f"Upgrade label must be text, got {type(label).__name__}")
    text = re.sub(r"\s+", " ", label.strip()).rstrip(":").strip()

    match = _UPGRADE_MODELS.match(text)
    if match:
        return UpgradeText(
            UpgradeType.UPGRADE,
            affects=_affects(label, match.group("quant")),
            select=_selection(label, match.group("select")),
        )

    match = _UPGRADE_WITH.match(text)
    if match:
        return UpgradeText(UpgradeType.UPGRADE, select=_selection(label, match.group("select")))

    match = _UPGRADE_RULE.match(text)
    if match:
        return UpgradeText(UpgradeType.UPGRADE_RULE, replace_what=[match.group("rule").strip()])

    match = _REPLACE.match(text)
    if match:
        return _parse_replace(label, match.group("rest"))

    raise ParseError(f"Unrecognised upgrade label: {label!r}")


def parse_rule(text: str) -> SpecialRule:
    """Parse ``"Fear(1)"`` back into a SpecialRule."""
    cleaned = re.sub(r"\s+", " ", (text or "").strip())
    if not cleaned:
        raise ParseError("Special rule text is empty")
    match = _RULE.match(cleaned)
    if match is None:
        raise ParseError(f"Unrecognised special rule: {text!r}")
    rating = match.group("rating")
    return SpecialRule(name=match.group("name").strip(), rating=rating.strip() if rating else None)


def _singular(word: str) -> str:
    if len(word) > 4 and word.endswith("ies"):
        return word[:-3] + "y"
    if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def normalize_name(text: str | None) -> str:
    if not text:
        return ""
    value = unicodedata.normalize("NFKD", str(text))
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    _, value = split_quantity_prefix(value.strip())
    value = re.sub(r"\s+", " ", value.strip()).casefold()
    return " ".join(_singular(word) for word in value.split(" "))


def compare_names(a: str | None, b: str | None) -> bool:
    """Name equality that ignores case, spacing, quantity prefixes and plurals."""
    return normalize_name(a) == normalize_name(b)
