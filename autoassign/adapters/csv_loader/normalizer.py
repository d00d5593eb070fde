"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import re

_TRUE_VALUES = {"1", "true", "yes", "y", "on", "enabled"}
_FALSE_VALUES = {"0", "false", "no", "n", "off", "disabled"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Replaces runs of spaces / non-breaking spaces / dashes with one underscore
    - Lowercases and drops anything that is not alphanumeric or underscore
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0\-]+", "_", name)
    name = name.lower()
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_country_list(raw: str | None) -> list[str]:
    """Parse 'Thailand; Vietnam, Bali' into ['Thailand', 'Vietnam', 'Bali'].

    Country names may contain spaces, so only commas, semicolons and pipes
    separate entries. Order is kept and duplicates dropped.
    """
    if not raw:
        return []
    out: list[str] = []
    for part in re.split(r"[,;|]", raw):
        part = part.strip()
        if part and part not in out:
            out.append(part)
    return out


def parse_bool(raw: str | None, default: bool = True) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def normalize_status(raw: str | None, default: str = "active") -> str:
    """'Active ' → 'active', 'On Leave' → 'on-leave'."""
    if not raw or not raw.strip():
        return default
    return re.sub(r"[\s_]+", "-", raw.strip().lower())
