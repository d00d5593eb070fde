"""Assignment endpoints — run the auto-assignment engine and inspect its inputs."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.database import get_session
from autoassign.adapters.persistence.repositories import SqlAssignmentHistoryRepository
from autoassign.application.use_cases.assign_query import (
    AssignmentOutcome,
    AssignQueryUseCase,
    BatchAssignUseCase,
)
from autoassign.application.use_cases.eligible_staff import StaffDirectoryResolver
from autoassign.infrastructure.api.dependencies import (
    get_assign_query_uc,
    get_batch_assign_uc,
    get_history_repo,
    get_staff_resolver,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.post("")
async def assign_all(
    batch_uc: BatchAssignUseCase = Depends(get_batch_assign_uc),
    session: AsyncSession = Depends(get_session),
):
    """Auto-assign every enquiry that has no assignee yet."""
    try:
        results = await batch_uc.execute()
        await session.commit()
    except Exception as e:
        logger.exception("Batch assignment failed")
        raise HTTPException(status_code=500, detail=str(e))

    assigned = [r for r in results if r.assigned]
    return {
        "status": "ok",
        "total_processed": len(results),
        "assigned": len(assigned),
        "unassigned": len(results) - len(assigned),
        "results": [_outcome_to_dict(r) for r in results],
    }


@router.get("/eligible")
async def eligible_staff(
    country: str = "",
    enforce_country_filter: bool = True,
    resolver: StaffDirectoryResolver = Depends(get_staff_resolver),
):
    """Preview the candidate pool the engine would use for a destination."""
    staff = await resolver.get_eligible_staff(country, enforce_country_filter)
    return {
        "country": country,
        "enforce_country_filter": enforce_country_filter,
        "total": len(staff),
        "staff": [
            {
                "id": s.id,
                "name": s.name,
                "sequence_order": s.sequence_order,
                "operational_countries": s.operational_countries,
                "workload_count": s.workload_count,
            }
            for s in staff
        ],
    }


@router.get("/{enquiry_id}/history")
async def assignment_history(
    enquiry_id: str,
    history_repo: SqlAssignmentHistoryRepository = Depends(get_history_repo),
):
    """Assignment history of one enquiry, oldest first."""
    records = await history_repo.get_by_enquiry(enquiry_id)
    return {
        "enquiry_id": enquiry_id,
        "total": len(records),
        "history": [
            {
                "staff_id": r.staff_id,
                "assigned_by": r.assigned_by,
                "rule_applied": r.rule_applied,
                "is_auto_assigned": r.is_auto_assigned,
                "assigned_at": r.assigned_at.isoformat() if r.assigned_at else None,
            }
            for r in records
        ],
    }


@router.post("/{enquiry_id}")
async def assign_single(
    enquiry_id: str,
    assign_uc: AssignQueryUseCase = Depends(get_assign_query_uc),
    session: AsyncSession = Depends(get_session),
):
    """Auto-assign a single enquiry by business ID or row UUID."""
    try:
        result = await assign_uc.execute(enquiry_id)
        await session.commit()
    except Exception as e:
        logger.exception("Assignment failed for enquiry %s", enquiry_id)
        raise HTTPException(status_code=500, detail=str(e))

    if result.error:
        raise HTTPException(status_code=404, detail=result.error)

    return {"status": "ok" if result.assigned else "unassigned", **_outcome_to_dict(result)}


def _outcome_to_dict(r: AssignmentOutcome) -> dict:
    return {
        "enquiry_id": r.enquiry_id,
        "staff_id": r.staff_id,
        "rule": r.rule_label.value if r.rule_label else None,
        "error": r.error,
    }
