"""Port interface for agent–staff pairings."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.assignment import AgentStaffAssignment


class RelationshipRepository(ABC):
    @abstractmethod
    async def find_for_agent(
        self, agent_id: str, staff_ids: list[str]
    ) -> AgentStaffAssignment | None:
        """Return the pairing for agent_id among staff_ids.

        When several match, the most recently created one wins.
        """
        ...
