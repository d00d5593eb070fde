"""Port interface for enquiry persistence."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.enquiry import Enquiry


class EnquiryRepository(ABC):
    @abstractmethod
    async def get_by_id(self, enquiry_id: str, lock: bool = False) -> Enquiry | None:
        """Look up an enquiry by row UUID or business ID.

        With lock=True the row stays locked until the surrounding transaction
        ends, serializing concurrent assignment runs for the same enquiry.
        """
        ...

    @abstractmethod
    async def get_unassigned(self) -> list[Enquiry]:
        ...

    @abstractmethod
    async def assign(
        self,
        enquiry_id: str,
        staff_id: str,
        assigned_by: str | None,
        reason: str | None,
        is_auto_assigned: bool,
    ) -> None:
        """Set the assignee, mark the enquiry assigned and append history.

        Raises:
            EnquiryNotFoundError: if the business ID is unknown.
        """
        ...
