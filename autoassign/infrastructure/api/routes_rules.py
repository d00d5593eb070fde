"""Assignment rule endpoints — read and flip the rule switches."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.database import get_session
from autoassign.adapters.persistence.repositories import SqlRuleToggleRepository
from autoassign.domain.value_objects.enums import RuleName
from autoassign.domain.value_objects.rule_toggles import ALL_RULES, RuleToggles
from autoassign.infrastructure.api.dependencies import get_rule_repo

router = APIRouter(prefix="/assignment-rules", tags=["rules"])


class RuleUpdate(BaseModel):
    enabled: bool


@router.get("")
async def list_rules(rule_repo: SqlRuleToggleRepository = Depends(get_rule_repo)):
    """Effective state of every rule; rules without a stored value are enabled."""
    toggles = RuleToggles.from_map(await rule_repo.get_enabled_map([r.value for r in ALL_RULES]))
    return {
        "rules": [
            {
                "name": t.name.value,
                "enabled": t.enabled_or_default,
                "explicit": t.enabled is not None,
            }
            for t in toggles.as_list()
        ]
    }


@router.put("/{rule_name}")
async def update_rule(
    rule_name: str,
    body: RuleUpdate,
    rule_repo: SqlRuleToggleRepository = Depends(get_rule_repo),
    session: AsyncSession = Depends(get_session),
):
    try:
        rule = RuleName(rule_name)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown rule: {rule_name}")

    await rule_repo.set_enabled(rule.value, body.enabled)
    await session.commit()
    return {"name": rule.value, "enabled": body.enabled}
