"""AssignQueryUseCase — rule cascade that picks a staff member for an enquiry."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from autoassign.application.ports.enquiry_repo import EnquiryRepository
from autoassign.application.ports.rule_toggle_repo import RuleToggleRepository
from autoassign.application.use_cases.agent_relationship import RelationshipResolver
from autoassign.application.use_cases.eligible_staff import StaffDirectoryResolver
from autoassign.application.use_cases.round_robin import RoundRobinSelector
from autoassign.domain.entities.enquiry import Enquiry
from autoassign.domain.entities.staff import EligibleStaff
from autoassign.domain.policies.workload import lowest_workload_tier
from autoassign.domain.value_objects.enums import AssignmentRuleLabel
from autoassign.domain.value_objects.rule_toggles import ALL_RULES, RuleToggles

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNER_TAG = "system-auto"


@dataclass
class AssignmentOutcome:
    """Summary of one assignment run. staff_id is None when nothing was assigned."""

    enquiry_id: str
    staff_id: str | None = None
    rule_label: AssignmentRuleLabel | None = None
    error: str | None = None

    @property
    def assigned(self) -> bool:
        return self.staff_id is not None


class AssignQueryUseCase:
    """Applies the rule cascade to a single enquiry.

    Priority: country expertise → agent–staff relationship → workload balance
    → round robin → sequence order. The first tier that yields a candidate
    wins and the enquiry is written back exactly once.
    """

    def __init__(
        self,
        enquiry_repo: EnquiryRepository,
        rule_repo: RuleToggleRepository,
        resolver: StaffDirectoryResolver,
        relationships: RelationshipResolver,
        round_robin: RoundRobinSelector,
        assigner_tag: str = DEFAULT_ASSIGNER_TAG,
    ):
        self._enquiries = enquiry_repo
        self._rules = rule_repo
        self._resolver = resolver
        self._relationships = relationships
        self._rr = round_robin
        self._assigner_tag = assigner_tag

    async def execute(self, enquiry_id: str) -> AssignmentOutcome:
        enquiry = await self._load_enquiry(enquiry_id)
        if enquiry is None:
            logger.info("Enquiry %s not found, nothing to assign", enquiry_id)
            return AssignmentOutcome(enquiry_id=enquiry_id, error="Enquiry not found")

        business_id = enquiry.enquiry_id
        country_name = enquiry.country_name()
        toggles = await self._load_toggles()

        if not country_name or not toggles.expertise_match_enabled:
            staff_id, label = await self._decide_by_sequence(enquiry, toggles)
        else:
            staff_id, label = await self._decide_by_country(enquiry, country_name, toggles)

        if staff_id is None:
            logger.info("Enquiry %s: no eligible staff, left unassigned", business_id)
            return AssignmentOutcome(enquiry_id=business_id)

        await self._enquiries.assign(business_id, staff_id, self._assigner_tag, label.value, True)
        logger.info("Enquiry %s → staff %s (%s)", business_id, staff_id, label.value)
        return AssignmentOutcome(enquiry_id=business_id, staff_id=staff_id, rule_label=label)

    # ─── Branch A: no country, or expertise matching disabled ────────

    async def _decide_by_sequence(
        self, enquiry: Enquiry, toggles: RuleToggles
    ) -> tuple[str | None, AssignmentRuleLabel | None]:
        seq_ids = await self._resolver.strict_sequence_ids()
        if not seq_ids:
            return None, None

        if toggles.relationship_enabled:
            rel_staff_id = await self._relationships.get_agent_staff_relation(
                enquiry.agent_reference(), seq_ids
            )
            if rel_staff_id:
                return rel_staff_id, AssignmentRuleLabel.AGENT_STAFF_RELATIONSHIP

        if toggles.workload_balance_enabled:
            eligible = await self._resolver.get_eligible_staff(
                enquiry.country_name(), enforce_country_filter=False
            )
            decision = await self._balance_workload(eligible, toggles)
            if decision[0] is not None:
                return decision

        staff_id = await self._rr.next_sequence_round_robin()
        if toggles.round_robin_enabled:
            return staff_id, AssignmentRuleLabel.ROUND_ROBIN_SEQUENCE_ONLY
        return staff_id, AssignmentRuleLabel.SEQUENCE_ORDER

    # ─── Branch B: country known and expertise matching enabled ──────

    async def _decide_by_country(
        self, enquiry: Enquiry, country_name: str, toggles: RuleToggles
    ) -> tuple[str | None, AssignmentRuleLabel | None]:
        eligible = await self._resolver.get_eligible_staff(
            country_name, enforce_country_filter=True
        )
        if not eligible:
            logger.info(
                "Enquiry %s: nobody operates in %r, falling back to sequence",
                enquiry.enquiry_id, country_name,
            )
            staff_id = await self._rr.next_sequence_round_robin()
            if toggles.round_robin_enabled:
                return staff_id, AssignmentRuleLabel.ROUND_ROBIN_SEQUENCE_ONLY
            return staff_id, AssignmentRuleLabel.SEQUENCE_ORDER

        if toggles.relationship_enabled:
            rel_staff_id = await self._relationships.get_agent_staff_relation(
                enquiry.agent_reference(), [s.id for s in eligible]
            )
            if rel_staff_id:
                return rel_staff_id, AssignmentRuleLabel.AGENT_STAFF_RELATIONSHIP

        if toggles.workload_balance_enabled:
            decision = await self._balance_workload(eligible, toggles)
            if decision[0] is not None:
                return decision

        if toggles.round_robin_enabled:
            chosen = await self._rr.next_round_robin_staff(eligible)
            return (chosen.id if chosen else None), AssignmentRuleLabel.ROUND_ROBIN

        staff_id = await self._rr.next_sequence_round_robin()
        return staff_id, AssignmentRuleLabel.SEQUENCE_ORDER

    # ─── Shared tiers ────────────────────────────────────────────────

    async def _balance_workload(
        self, eligible: list[EligibleStaff], toggles: RuleToggles
    ) -> tuple[str | None, AssignmentRuleLabel | None]:
        lowest = lowest_workload_tier(eligible)
        if len(lowest) == 1:
            return lowest[0].id, AssignmentRuleLabel.WORKLOAD_BALANCE

        if len(lowest) > 1:
            tie_ids = [s.id for s in lowest]
            if toggles.round_robin_enabled:
                chosen = await self._rr.next_round_robin_staff(eligible, allowed_ids=tie_ids)
                if chosen:
                    return chosen.id, AssignmentRuleLabel.ROUND_ROBIN_TIE_BREAK
            else:
                staff_id = await self._rr.next_sequence_round_robin(allowed_ids=tie_ids)
                if staff_id:
                    return staff_id, AssignmentRuleLabel.SEQUENCE_ORDER_TIE_BREAK

        return None, None

    async def _load_enquiry(self, enquiry_id: str) -> Enquiry | None:
        try:
            return await self._enquiries.get_by_id(enquiry_id, lock=True)
        except Exception:
            logger.warning("Could not load enquiry %s", enquiry_id, exc_info=True)
            return None

    async def _load_toggles(self) -> RuleToggles:
        try:
            enabled_map = await self._rules.get_enabled_map([r.value for r in ALL_RULES])
        except Exception:
            # Fail open: every rule enabled
            logger.warning("Rule toggles unavailable, using defaults", exc_info=True)
            enabled_map = {}
        return RuleToggles.from_map(enabled_map)


class BatchAssignUseCase:
    """Run the cascade for every enquiry that has no assignee yet."""

    def __init__(self, assign_query: AssignQueryUseCase, enquiry_repo: EnquiryRepository):
        self._assign = assign_query
        self._enquiries = enquiry_repo

    async def execute(self) -> list[AssignmentOutcome]:
        enquiries = await self._enquiries.get_unassigned()
        logger.info("Batch assigning %d unassigned enquiries", len(enquiries))

        results = []
        for enquiry in enquiries:
            results.append(await self._assign.execute(enquiry.enquiry_id))

        assigned = sum(1 for r in results if r.assigned)
        logger.info("Batch complete: %d/%d assigned", assigned, len(results))
        return results
