"""Country entity and the lookup catalog used for operational-country matching."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Country:
    id: str
    name: str
    code: str | None = None


@dataclass
class CountryCatalog:
    """In-memory view of the countries table.

    Staff operational countries may hold country IDs, ISO codes or plain
    names depending on which table they came from; the catalog maps the first
    two onto canonical names.
    """

    countries: list[Country] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_key: dict[str, Country] = {}
        self._by_name: dict[str, Country] = {}
        for c in self.countries:
            self._by_key[str(c.id).strip().lower()] = c
            if c.code:
                self._by_key.setdefault(c.code.strip().lower(), c)
            self._by_name[c.name.strip().lower()] = c

    def get_by_name(self, name: str | None) -> Country | None:
        if not name:
            return None
        return self._by_name.get(name.strip().lower())

    def names_for(self, raw_values: list[str]) -> list[str]:
        """Map raw ID/code values to country names, dropping unknown values."""
        names: list[str] = []
        for raw in raw_values:
            if raw is None:
                continue
            country = self._by_key.get(str(raw).strip().lower())
            if country and country.name not in names:
                names.append(country.name)
        return names
