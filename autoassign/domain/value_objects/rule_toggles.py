"""Rule toggles — explicit fail-open resolution of the assignment rule switches."""

from __future__ import annotations

from dataclasses import dataclass

from autoassign.domain.value_objects.enums import RuleName

ALL_RULES: tuple[RuleName, ...] = (
    RuleName.EXPERTISE_MATCH,
    RuleName.AGENT_STAFF_RELATIONSHIP,
    RuleName.WORKLOAD_BALANCE,
    RuleName.ROUND_ROBIN,
)


@dataclass(frozen=True)
class RuleToggle:
    name: RuleName
    enabled: bool | None = None

    @property
    def enabled_or_default(self) -> bool:
        # A rule with no stored value is enabled
        return self.enabled is not False


@dataclass(frozen=True)
class RuleToggles:
    """Toggle state for one assignment run."""

    expertise_match: RuleToggle
    agent_staff_relationship: RuleToggle
    workload_balance: RuleToggle
    round_robin: RuleToggle

    @classmethod
    def from_map(cls, enabled_map: dict[str, bool | None] | None) -> RuleToggles:
        enabled_map = enabled_map or {}

        def _toggle(rule: RuleName) -> RuleToggle:
            return RuleToggle(name=rule, enabled=enabled_map.get(rule.value))

        return cls(
            expertise_match=_toggle(RuleName.EXPERTISE_MATCH),
            agent_staff_relationship=_toggle(RuleName.AGENT_STAFF_RELATIONSHIP),
            workload_balance=_toggle(RuleName.WORKLOAD_BALANCE),
            round_robin=_toggle(RuleName.ROUND_ROBIN),
        )

    @property
    def expertise_match_enabled(self) -> bool:
        return self.expertise_match.enabled_or_default

    @property
    def relationship_enabled(self) -> bool:
        return self.agent_staff_relationship.enabled_or_default

    @property
    def workload_balance_enabled(self) -> bool:
        return self.workload_balance.enabled_or_default

    @property
    def round_robin_enabled(self) -> bool:
        return self.round_robin.enabled_or_default

    def as_list(self) -> list[RuleToggle]:
        return [
            self.expertise_match,
            self.agent_staff_relationship,
            self.workload_balance,
            self.round_robin,
        ]
