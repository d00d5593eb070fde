"""Agent–staff relationship lookup restricted to eligible staff."""

from __future__ import annotations

import logging

from autoassign.application.ports.relationship_repo import RelationshipRepository

logger = logging.getLogger(__name__)


class RelationshipResolver:
    def __init__(self, relationship_repo: RelationshipRepository):
        self._relationships = relationship_repo

    async def get_agent_staff_relation(
        self, agent_id: str | None, eligible_ids: list[str]
    ) -> str | None:
        """Staff ID already paired with agent_id, if that staff is eligible."""
        if not agent_id or not eligible_ids:
            return None
        try:
            pairing = await self._relationships.find_for_agent(agent_id, eligible_ids)
        except Exception:
            logger.warning("Relationship lookup failed for agent %s", agent_id, exc_info=True)
            return None
        if pairing is None or not pairing.staff_id:
            return None
        return str(pairing.staff_id)
