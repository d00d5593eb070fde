"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.database import get_session
from autoassign.adapters.persistence.repositories import (
    FallbackStaffDirectory,
    SqlAssignmentHistoryRepository,
    SqlCountryRepository,
    SqlEnquiryRepository,
    SqlProfilesDirectory,
    SqlRelationshipRepository,
    SqlRuleToggleRepository,
    SqlStaffSequenceRepository,
    SqlStaffTableDirectory,
    SqlWorkloadRepository,
)
from autoassign.application.use_cases.agent_relationship import RelationshipResolver
from autoassign.application.use_cases.assign_query import (
    AssignQueryUseCase,
    BatchAssignUseCase,
)
from autoassign.application.use_cases.eligible_staff import StaffDirectoryResolver
from autoassign.application.use_cases.round_robin import RoundRobinSelector
from autoassign.config import settings


def get_rule_repo(session: AsyncSession = Depends(get_session)) -> SqlRuleToggleRepository:
    return SqlRuleToggleRepository(session)


def get_history_repo(
    session: AsyncSession = Depends(get_session),
) -> SqlAssignmentHistoryRepository:
    return SqlAssignmentHistoryRepository(session)


def _build_resolver(session: AsyncSession) -> StaffDirectoryResolver:
    return StaffDirectoryResolver(
        sequence_repo=SqlStaffSequenceRepository(session),
        directory=FallbackStaffDirectory(
            SqlStaffTableDirectory(session),
            SqlProfilesDirectory(session),
        ),
        workload_repo=SqlWorkloadRepository(session),
        country_repo=SqlCountryRepository(session),
    )


def get_staff_resolver(session: AsyncSession = Depends(get_session)) -> StaffDirectoryResolver:
    return _build_resolver(session)


def _build_assign_query_uc(session: AsyncSession) -> AssignQueryUseCase:
    resolver = _build_resolver(session)
    return AssignQueryUseCase(
        enquiry_repo=SqlEnquiryRepository(session),
        rule_repo=SqlRuleToggleRepository(session),
        resolver=resolver,
        relationships=RelationshipResolver(SqlRelationshipRepository(session)),
        round_robin=RoundRobinSelector(SqlAssignmentHistoryRepository(session), resolver),
        assigner_tag=settings.auto_assign_tag,
    )


def get_assign_query_uc(session: AsyncSession = Depends(get_session)) -> AssignQueryUseCase:
    return _build_assign_query_uc(session)


def get_batch_assign_uc(session: AsyncSession = Depends(get_session)) -> BatchAssignUseCase:
    return BatchAssignUseCase(
        assign_query=_build_assign_query_uc(session),
        enquiry_repo=SqlEnquiryRepository(session),
    )
