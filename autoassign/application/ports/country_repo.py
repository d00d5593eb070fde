"""Port interface for the countries reference table."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.country import Country


class CountryRepository(ABC):
    @abstractmethod
    async def get_all(self) -> list[Country]:
        ...
