"""Port interface for active-workload counts."""

from abc import ABC, abstractmethod


class WorkloadRepository(ABC):
    @abstractmethod
    async def count_active(self, staff_id: str, country_name: str | None = None) -> int:
        """Number of enquiries in status "assigned" held by staff_id.

        Only enquiries for country_name are counted when it is given.
        """
        ...
