"""Port interface for the staff auto-assignment sequence."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.staff import StaffSequenceEntry


class StaffSequenceRepository(ABC):
    @abstractmethod
    async def fetch_sequence(self) -> list[StaffSequenceEntry]:
        ...
