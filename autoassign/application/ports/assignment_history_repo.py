"""Port interface for the append-only assignment history log."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.assignment import AssignmentHistoryRecord


class AssignmentHistoryRepository(ABC):
    @abstractmethod
    async def latest_staff_id(self, staff_ids: list[str]) -> str | None:
        """Staff ID of the most recent history entry among staff_ids."""
        ...

    @abstractmethod
    async def get_by_enquiry(self, enquiry_id: str) -> list[AssignmentHistoryRecord]:
        ...
