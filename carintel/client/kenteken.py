"""
Dutch licence plate (kenteken) helpers.

A plate is 4 to 8 letters and digits with at least one of each. Display form
groups it with dashes according to its letter/digit pattern; the RDW API wants
the normalized form without dashes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEPARATORS = re.compile(r"[\s-]")

# (pattern on the cleaned plate, group sizes)
_GROUPINGS = (
    (re.compile(r"^[A-Z]{2}[0-9]{4}$"), (2, 2, 2)),
    (re.compile(r"^[0-9]{2}[A-Z]{2}[0-9]{2}$"), (2, 2, 2)),
    (re.compile(r"^[0-9]{4}[A-Z]{2}$"), (2, 2, 2)),
    (re.compile(r"^[A-Z]{4}[0-9]{2}$"), (2, 2, 2)),
    (re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z]{2}$"), (2, 2, 2)),
    (re.compile(r"^[A-Z]{2}[0-9]{3}[A-Z]$"), (2, 3, 1)),
    (re.compile(r"^[A-Z][0-9]{3}[A-Z]{2}$"), (1, 3, 2)),
    (re.compile(r"^[0-9][A-Z]{3}[0-9]{2}$"), (1, 3, 2)),
    (re.compile(r"^[0-9]{3}[A-Z]{2}[0-9]$"), (3, 2, 1)),
    (re.compile(r"^[A-Z]{3}[0-9]{2}[A-Z]$"), (3, 2, 1)),
    (re.compile(r"^[0-9]{2}[A-Z]{3}[0-9]$"), (2, 3, 1)),
)

# Grouping used when no known pattern matches, by length.
_FALLBACK_GROUPS = {
    4: (2, 2),
    5: (2, 3),
    6: (2, 2, 2),
    7: (2, 3, 2),
    8: (2, 3, 3),
}

_EXTRACT_PATTERNS = (
    re.compile(r"[A-Z]{2}-[0-9]{2}-[0-9]{2}"),
    re.compile(r"[0-9]{2}-[A-Z]{2}-[0-9]{2}"),
    re.compile(r"[0-9]{2}-[0-9]{2}-[A-Z]{2}"),
    re.compile(r"[A-Z]{2}-[0-9]{3}-[A-Z]"),
    re.compile(r"[A-Z]-[0-9]{3}-[A-Z]{2}"),
)


def _clean(value: str) -> str:
    return _SEPARATORS.sub("", value or "").upper()


def _group(cleaned: str, sizes: tuple[int, ...]) -> str:
    parts = []
    start = 0
    for size in sizes:
        parts.append(cleaned[start : start + size])
        start += size
    return "-".join(parts)


def format_license_plate(value: str) -> str:
    cleaned = _clean(value)
    if not 4 <= len(cleaned) <= 8:
        return cleaned

    for pattern, sizes in _GROUPINGS:
        if pattern.match(cleaned):
            return _group(cleaned, sizes)
    return _group(cleaned, _FALLBACK_GROUPS[len(cleaned)])


def is_valid_license_plate(value: str) -> bool:
    cleaned = _clean(value)
    if not 4 <= len(cleaned) <= 8:
        return False
    if not re.fullmatch(r"[A-Z0-9]+", cleaned):
        return False
    return bool(re.search(r"[A-Z]", cleaned)) and bool(re.search(r"[0-9]", cleaned))


def normalize_license_plate(value: str) -> str:
    return (value or "").replace("-", "").upper()


def wildcard_to_regex(wildcard: str) -> re.Pattern[str]:
    """
    `*` matches any run of characters; everything else is literal. Case-insensitive.
    """
    body = ".*".join(re.escape(part) for part in (wildcard or "").split("*"))
    return re.compile(f"^{body}$", re.IGNORECASE)


def matches_wildcard(plate: str, wildcard: str) -> bool:
    return wildcard_to_regex(wildcard).match(plate or "") is not None


@dataclass(frozen=True)
class PlateCheck:
    formatted: str
    normalized: str
    is_valid: bool
    error: str | None = None


def validate_and_format(value: str) -> PlateCheck:
    if not (value or "").strip():
        return PlateCheck(formatted="", normalized="", is_valid=False, error="Kenteken is verplicht")

    formatted = format_license_plate(value)
    valid = is_valid_license_plate(formatted)
    return PlateCheck(
        formatted=formatted,
        normalized=normalize_license_plate(formatted),
        is_valid=valid,
        error=None if valid else "Ongeldig kenteken formaat",
    )


def extract_license_plate(text: str) -> str | None:
    upper = (text or "").upper()
    for pattern in _EXTRACT_PATTERNS:
        found = pattern.search(upper)
        if found:
            return found.group(0)
    return None
