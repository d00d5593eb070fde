"""Round-robin selection anchored on the assignment history log."""

from __future__ import annotations

import logging

from autoassign.application.ports.assignment_history_repo import AssignmentHistoryRepository
from autoassign.application.use_cases.eligible_staff import StaffDirectoryResolver
from autoassign.domain.entities.staff import EligibleStaff
from autoassign.domain.policies.round_robin import next_in_rotation

logger = logging.getLogger(__name__)


class RoundRobinSelector:
    def __init__(
        self,
        history_repo: AssignmentHistoryRepository,
        resolver: StaffDirectoryResolver,
    ):
        self._history = history_repo
        self._resolver = resolver

    async def next_sequence_round_robin(self, allowed_ids: list[str] | None = None) -> str | None:
        """Rotate over allowed_ids, or over the whole enabled sequence.

        Country, status and workload are ignored here.
        """
        if allowed_ids:
            ordered_ids = [str(i) for i in allowed_ids]
        else:
            ordered_ids = await self._resolver.strict_sequence_ids()
        if not ordered_ids:
            return None

        last_id = await self._last_assigned(ordered_ids)
        return next_in_rotation(ordered_ids, last_id)

    async def next_round_robin_staff(
        self,
        eligible: list[EligibleStaff],
        allowed_ids: list[str] | None = None,
    ) -> EligibleStaff | None:
        """Rotate over an eligible pool, optionally restricted to allowed_ids."""
        pool = list(eligible)
        if allowed_ids:
            allow = {str(i) for i in allowed_ids}
            pool = [s for s in pool if s.id in allow]
        if not pool:
            return None

        ordered_ids = [s.id for s in pool]
        last_id = await self._last_assigned(ordered_ids)
        chosen_id = next_in_rotation(ordered_ids, last_id)
        return next((s for s in pool if s.id == chosen_id), pool[0])

    async def _last_assigned(self, ordered_ids: list[str]) -> str | None:
        try:
            last_id = await self._history.latest_staff_id(ordered_ids)
        except Exception:
            # Treated as a cold start
            logger.warning("Assignment history lookup failed", exc_info=True)
            return None
        return str(last_id) if last_id else None
