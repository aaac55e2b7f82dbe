"""
Module: common.syllabus

Purpose:
    Unit-to-topic tables used by the topic classifier. Provides the
    built-in five-unit syllabus, a JSON loader for subject-specific
    syllabi, and helpers to canonicalize unit labels.

Key Functions:
    - load_syllabus(): Load a syllabus table from a JSON file
    - canonical_unit_label(): Normalize "unit iv" / "UNIT-4" to "Unit 4"
    - roman_to_int(): Convert a Roman numeral to an integer

Key Constants:
    - DEFAULT_SYLLABUS: Built-in five-unit table

Dependencies:
    - json (std)

Used By:
    - examace.extractor.classification: Structural and keyword lookup
    - examace.extractor.detection.headers: Unit labels from headers
    - examace.cli: --syllabus option
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Tuple


__all__ = [
    "TopicDefinition",
    "Syllabus",
    "DEFAULT_SYLLABUS",
    "GENERAL_UNIT",
    "GENERAL_TOPIC",
    "load_syllabus",
    "canonical_unit_label",
    "roman_to_int",
]


GENERAL_UNIT = "General"
GENERAL_TOPIC = "General Concepts"

_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10}
_UNIT_LABEL_RE = re.compile(r"^\s*unit\s*[-:]?\s*([ivx]+|\d+|[a-z])\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class TopicDefinition:
    """
    One syllabus unit.

    Attributes:
        name: Human-readable topic name for the unit.
        keywords: Keyword phrases that vote for this unit.
    """
    name: str
    keywords: Tuple[str, ...] = ()


class Syllabus(Mapping[str, TopicDefinition]):
    """
    Ordered, read-only mapping of unit label to TopicDefinition.

    Order matters: the classifier breaks keyword-vote ties in favour of
    the unit listed first.
    """

    def __init__(self, units: Mapping[str, TopicDefinition]):
        self._units: Dict[str, TopicDefinition] = dict(units)

    def __getitem__(self, key: str) -> TopicDefinition:
        return self._units[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        return f"Syllabus({list(self._units)})"

    def to_dict(self) -> Dict[str, object]:
        return {
            "units": {
                unit: {"name": topic.name, "keywords": list(topic.keywords)}
                for unit, topic in self._units.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Syllabus:
        """
        Build from {"units": {"Unit 1": {"name": ..., "keywords": [...]}}}.

        Unit keys are canonicalized so "UNIT I" and "Unit 1" collide.

        Raises:
            ValueError: If the payload has no "units" mapping or a unit
                has no name.
        """
        raw_units = data.get("units")
        if not isinstance(raw_units, Mapping) or not raw_units:
            raise ValueError("Syllabus must contain a non-empty 'units' mapping")
        units: Dict[str, TopicDefinition] = {}
        for key, payload in raw_units.items():
            if not isinstance(payload, Mapping):
                raise ValueError(f"Unit {key!r} must be an object")
            name = str(payload.get("name") or "").strip()
            if not name:
                raise ValueError(f"Unit {key!r} has no name")
            keywords = tuple(
                str(k).strip() for k in payload.get("keywords", []) if str(k).strip()
            )
            units[canonical_unit_label(str(key))] = TopicDefinition(name, keywords)
        return cls(units)


DEFAULT_SYLLABUS = Syllabus({
    "Unit 1": TopicDefinition(
        "Introduction & Basics",
        ("history", "scope", "definition", "characteristics", "introduction"),
    ),
    "Unit 2": TopicDefinition(
        "Core Concepts",
        ("architecture", "component", "diagram", "block", "structure"),
    ),
    "Unit 3": TopicDefinition(
        "Advanced Analysis",
        ("algorithm", "complexity", "time", "space", "big-o", "master", "theorem"),
    ),
    "Unit 4": TopicDefinition(
        "System Design",
        ("design", "uml", "pattern", "factory", "singleton", "observer"),
    ),
    "Unit 5": TopicDefinition(
        "Case Studies",
        ("case", "study", "implementation", "real-time", "example", "application"),
    ),
})


def roman_to_int(value: str) -> Optional[int]:
    """
    Convert a Roman numeral to an integer.

    Returns None if the value contains non-Roman characters.

    Example:
        >>> roman_to_int("IV")
        4
        >>> roman_to_int("A") is None
        True
    """
    upper = value.strip().upper()
    if not upper or any(ch not in _ROMAN_VALUES for ch in upper):
        return None
    total = 0
    for i, ch in enumerate(upper):
        current = _ROMAN_VALUES[ch]
        nxt = _ROMAN_VALUES[upper[i + 1]] if i + 1 < len(upper) else 0
        total += -current if current < nxt else current
    return total


def canonical_unit_label(value: Optional[str]) -> str:
    """
    Normalize a unit label to "Unit N".

    Roman numerals become digits; single letters are uppercased. Labels
    that do not look like a unit are returned stripped.

    Example:
        >>> canonical_unit_label("UNIT-IV")
        'Unit 4'
        >>> canonical_unit_label("unit b")
        'Unit B'
    """
    if not value:
        return GENERAL_UNIT
    match = _UNIT_LABEL_RE.match(value)
    if not match:
        return value.strip()
    ident = match.group(1)
    if ident.isdigit():
        return f"Unit {int(ident)}"
    roman = roman_to_int(ident)
    if roman is not None:
        return f"Unit {roman}"
    return f"Unit {ident.upper()}"


@lru_cache(maxsize=None)
def _load_cached(resolved: str) -> Syllabus:
    text = Path(resolved).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Syllabus file {resolved} is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ValueError(f"Syllabus file {resolved} must contain a JSON object")
    return Syllabus.from_dict(payload)


def load_syllabus(path: Optional[Path] = None) -> Syllabus:
    """
    Load a syllabus table from JSON, or the default table.

    Args:
        path: JSON file path. None returns DEFAULT_SYLLABUS.

    Returns:
        Parsed Syllabus (cached per resolved path).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid syllabus.
    """
    if path is None:
        return DEFAULT_SYLLABUS
    return _load_cached(str(Path(path).resolve()))
