"""CountryMatchPolicy — does a staff member operate in the enquiry's destination?"""

from __future__ import annotations

from autoassign.domain.entities.country import CountryCatalog


def normalize_operational_countries(raw: object) -> list[str]:
    """Coerce whatever the directory returned into a list of non-empty strings."""
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(v).strip() for v in raw if v is not None and str(v).strip()]


def has_country_match(
    raw_operational_countries: list[str],
    country_name: str,
    catalog: CountryCatalog,
) -> bool:
    """Case-insensitive match of *country_name* against a staff member's countries.

    Raw values are first mapped as country IDs/codes. Only when none of them
    maps are they compared as literal country names.
    """
    safe = normalize_operational_countries(raw_operational_countries)
    if not safe:
        return False

    known = catalog.get_by_name(country_name)
    target = (known.name if known else country_name or "").strip().lower()
    if not target:
        return False

    mapped = catalog.names_for(safe)
    if mapped:
        return any(n.lower() == target for n in mapped)

    return any(n.lower() == target for n in safe)


def display_countries(raw_operational_countries: list[str], catalog: CountryCatalog) -> list[str]:
    """Mapped names when any map, otherwise the raw values."""
    safe = normalize_operational_countries(raw_operational_countries)
    mapped = catalog.names_for(safe)
    return mapped if mapped else safe
