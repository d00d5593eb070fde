"""Port interface for staff metadata lookups."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.staff import StaffRecord


class StaffDirectory(ABC):
    @abstractmethod
    async def find_by_ids(self, ids: list[str]) -> list[StaffRecord]:
        ...
