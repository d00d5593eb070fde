"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
import math
import re

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.models import (
    AgentStaffAssignmentModel,
    AssignmentHistoryModel,
    AssignmentRuleModel,
    CountryModel,
    EnquiryModel,
    ProfileModel,
    StaffModel,
    StaffSequenceModel,
    WorkflowEventModel,
)
from autoassign.application.ports.assignment_history_repo import AssignmentHistoryRepository
from autoassign.application.ports.country_repo import CountryRepository
from autoassign.application.ports.enquiry_repo import EnquiryRepository
from autoassign.application.ports.relationship_repo import RelationshipRepository
from autoassign.application.ports.rule_toggle_repo import RuleToggleRepository
from autoassign.application.ports.staff_directory import StaffDirectory
from autoassign.application.ports.staff_sequence_repo import StaffSequenceRepository
from autoassign.application.ports.workload_repo import WorkloadRepository
from autoassign.domain.entities.assignment import AgentStaffAssignment, AssignmentHistoryRecord
from autoassign.domain.entities.country import Country
from autoassign.domain.entities.enquiry import Enquiry
from autoassign.domain.entities.staff import (
    DEFAULT_STAFF_NAME,
    StaffRecord,
    StaffSequenceEntry,
)
from autoassign.domain.exceptions import EnquiryNotFoundError
from autoassign.domain.policies.country_match import normalize_operational_countries
from autoassign.domain.value_objects.enums import EnquiryStatus

logger = logging.getLogger(__name__)

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)

_MISSING_AGENT_VALUES = {"", "null", "undefined", "nan"}

_LEGACY_ID_RE = re.compile(r"^[0-9]+$")

CLOSED_STATUSES = (EnquiryStatus.CONFIRMED.value, EnquiryStatus.CANCELLED.value)

# ─── Mappers ─────────────────────────────────────────────────────────


def parse_agent_reference(raw: object) -> tuple[str | None, str | None]:
    """Split a raw agent_id column into (agent_uuid, legacy_id).

    Plain digit strings are legacy IDs and keep their original text, so
    "007" still matches the pairing rows stored as "007". Placeholder strings
    mean no agent and anything else is taken as the agent UUID.
    """
    if raw is None or isinstance(raw, bool):
        return None, None
    if isinstance(raw, int):
        return None, str(raw)
    if isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            return None, str(int(raw))
        return None, None

    norm = str(raw).strip()
    if norm.lower() in _MISSING_AGENT_VALUES:
        return None, None
    if _LEGACY_ID_RE.match(norm):
        return None, norm
    return norm, None


def _enquiry_to_domain(m: EnquiryModel) -> Enquiry:
    agent_uuid, agent_legacy_id = parse_agent_reference(m.agent_id)
    return Enquiry(
        id=str(m.id),
        enquiry_id=m.enquiry_id,
        destination_country=(m.country_name or "").strip(),
        agent_uuid=agent_uuid,
        agent_legacy_id=agent_legacy_id,
        status=m.status or EnquiryStatus.NEW.value,
        assigned_to=str(m.assigned_to) if m.assigned_to else None,
    )


def staff_row_to_domain(
    row_id: object, name: object, status: object, operational_countries: object
) -> StaffRecord:
    """Normalize a staff- or profiles-shaped row into a StaffRecord."""
    return StaffRecord(
        id=str(row_id),
        name=str(name) if name else DEFAULT_STAFF_NAME,
        status=str(status) if status else None,
        operational_countries=normalize_operational_countries(operational_countries),
    )


def _sequence_to_domain(m: StaffSequenceModel) -> StaffSequenceEntry:
    return StaffSequenceEntry(
        staff_id=str(m.staff_id),
        sequence_order=m.sequence_order,
        auto_assign_enabled=m.auto_assign_enabled is not False,
    )


def _history_to_domain(m: AssignmentHistoryModel) -> AssignmentHistoryRecord:
    return AssignmentHistoryRecord(
        id=m.id,
        enquiry_id=str(m.enquiry_id),
        staff_id=str(m.staff_id),
        assigned_by=m.assigned_by,
        rule_applied=m.rule_applied,
        is_auto_assigned=m.is_auto_assigned,
        assigned_at=m.assigned_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class _SqlRepository:
    def __init__(self, session: AsyncSession):
        self._s = session

    async def _read(self, stmt):
        """Execute a read inside a savepoint.

        A failed statement rolls back only the savepoint, so the request's
        transaction stays usable for the next lookup and the write-back.
        """
        async with self._s.begin_nested():
            return await self._s.execute(stmt)


class SqlEnquiryRepository(_SqlRepository, EnquiryRepository):
    async def get_by_id(self, enquiry_id: str, lock: bool = False) -> Enquiry | None:
        m = await self._find(enquiry_id, lock=lock)
        return _enquiry_to_domain(m) if m else None

    async def get_unassigned(self) -> list[Enquiry]:
        result = await self._read(
            select(EnquiryModel)
            .where(
                EnquiryModel.assigned_to.is_(None),
                EnquiryModel.status.notin_(CLOSED_STATUSES),
            )
            .order_by(EnquiryModel.created_at, EnquiryModel.enquiry_id)
        )
        return [_enquiry_to_domain(m) for m in result.scalars()]

    async def assign(
        self,
        enquiry_id: str,
        staff_id: str,
        assigned_by: str | None,
        reason: str | None,
        is_auto_assigned: bool,
    ) -> None:
        found = await self._find(enquiry_id, lock=True)
        if found is None:
            raise EnquiryNotFoundError(enquiry_id)

        previous_id = str(found.assigned_to) if found.assigned_to else None
        previous_status = found.status
        previous_name = await self._display_name(previous_id) if previous_id else None
        new_name = await self._display_name(staff_id)

        await self._s.execute(
            update(EnquiryModel)
            .where(EnquiryModel.id == found.id)
            .values(assigned_to=staff_id, status=EnquiryStatus.ASSIGNED.value)
        )
        self._s.add(
            AssignmentHistoryModel(
                enquiry_id=found.id,
                staff_id=staff_id,
                assigned_by=assigned_by,
                reason=reason,
                rule_applied=reason,
                is_auto_assigned=is_auto_assigned,
            )
        )

        details = f"Assigned to {new_name or staff_id}"
        if previous_id:
            details += f" (prev: {previous_name or previous_id})"
        self._s.add(
            WorkflowEventModel(
                enquiry_id=found.id,
                event_type="assigned",
                user_id=assigned_by,
                user_role="system" if is_auto_assigned else None,
                details=details,
                metadata_={
                    "assignedTo": staff_id,
                    "assignedToName": new_name,
                    "assignedBy": assigned_by,
                    "isAutoAssigned": is_auto_assigned,
                    "reason": reason,
                    "previousAssignedId": previous_id,
                    "previousAssignedName": previous_name,
                    "oldStatus": previous_status,
                    "newStatus": EnquiryStatus.ASSIGNED.value,
                },
            )
        )
        await self._s.flush()

    async def _find(self, enquiry_id: str, lock: bool = False) -> EnquiryModel | None:
        if UUID_RE.match(enquiry_id):
            stmt = select(EnquiryModel).where(EnquiryModel.id == enquiry_id)
        else:
            stmt = select(EnquiryModel).where(EnquiryModel.enquiry_id == enquiry_id)
        if lock:
            stmt = stmt.with_for_update()
        result = await self._read(stmt.limit(1))
        return result.scalar_one_or_none()

    async def _display_name(self, staff_id: str) -> str | None:
        if not UUID_RE.match(staff_id):
            return None
        staff = await self._s.get(StaffModel, staff_id)
        if staff and (staff.name or staff.email):
            return staff.name or staff.email
        profile = await self._s.get(ProfileModel, staff_id)
        if profile:
            return profile.full_name or profile.name or profile.email
        return None


class SqlStaffSequenceRepository(_SqlRepository, StaffSequenceRepository):
    async def fetch_sequence(self) -> list[StaffSequenceEntry]:
        result = await self._read(
            select(StaffSequenceModel).order_by(StaffSequenceModel.sequence_order)
        )
        return [_sequence_to_domain(m) for m in result.scalars()]


class SqlStaffTableDirectory(_SqlRepository, StaffDirectory):
    """Reads the primary `staff` table."""

    async def find_by_ids(self, ids: list[str]) -> list[StaffRecord]:
        if not ids:
            return []
        result = await self._read(select(StaffModel).where(StaffModel.id.in_(ids)))
        return [
            staff_row_to_domain(m.id, m.name, m.status, m.operational_countries)
            for m in result.scalars()
        ]


class SqlProfilesDirectory(_SqlRepository, StaffDirectory):
    """Reads the legacy `profiles` table."""

    async def find_by_ids(self, ids: list[str]) -> list[StaffRecord]:
        if not ids:
            return []
        result = await self._read(select(ProfileModel).where(ProfileModel.id.in_(ids)))
        return [
            staff_row_to_domain(m.id, m.name or m.full_name, m.status, m.operational_countries)
            for m in result.scalars()
        ]


class FallbackStaffDirectory(StaffDirectory):
    """Tries each directory in turn and returns the first non-empty result."""

    def __init__(self, *directories: StaffDirectory):
        self._directories = directories

    async def find_by_ids(self, ids: list[str]) -> list[StaffRecord]:
        for directory in self._directories:
            records = await directory.find_by_ids(ids)
            if records:
                return records
            logger.debug("%s returned no rows, trying next directory", type(directory).__name__)
        return []


class SqlWorkloadRepository(_SqlRepository, WorkloadRepository):
    async def count_active(self, staff_id: str, country_name: str | None = None) -> int:
        stmt = select(func.count(EnquiryModel.id)).where(
            EnquiryModel.assigned_to == staff_id,
            EnquiryModel.status == EnquiryStatus.ASSIGNED.value,
        )
        if country_name:
            stmt = stmt.where(EnquiryModel.country_name == country_name)
        result = await self._read(stmt)
        return int(result.scalar() or 0)


class SqlRelationshipRepository(_SqlRepository, RelationshipRepository):
    async def find_for_agent(
        self, agent_id: str, staff_ids: list[str]
    ) -> AgentStaffAssignment | None:
        if not staff_ids:
            return None
        result = await self._read(
            select(AgentStaffAssignmentModel)
            .where(
                AgentStaffAssignmentModel.agent_id == agent_id,
                AgentStaffAssignmentModel.staff_id.in_(staff_ids),
            )
            .order_by(
                AgentStaffAssignmentModel.created_at.desc(),
                AgentStaffAssignmentModel.staff_id,
            )
            .limit(1)
        )
        m = result.scalar_one_or_none()
        if m is None:
            return None
        return AgentStaffAssignment(
            agent_id=m.agent_id, staff_id=str(m.staff_id), created_at=m.created_at
        )


class SqlAssignmentHistoryRepository(_SqlRepository, AssignmentHistoryRepository):
    async def latest_staff_id(self, staff_ids: list[str]) -> str | None:
        if not staff_ids:
            return None
        result = await self._read(
            select(AssignmentHistoryModel.staff_id)
            .where(AssignmentHistoryModel.staff_id.in_(staff_ids))
            .order_by(AssignmentHistoryModel.assigned_at.desc(), AssignmentHistoryModel.id.desc())
            .limit(1)
        )
        staff_id = result.scalar_one_or_none()
        return str(staff_id) if staff_id else None

    async def get_by_enquiry(self, enquiry_id: str) -> list[AssignmentHistoryRecord]:
        stmt = select(AssignmentHistoryModel).join(EnquiryModel)
        if UUID_RE.match(enquiry_id):
            stmt = stmt.where(EnquiryModel.id == enquiry_id)
        else:
            stmt = stmt.where(EnquiryModel.enquiry_id == enquiry_id)
        result = await self._read(stmt.order_by(AssignmentHistoryModel.assigned_at))
        return [_history_to_domain(m) for m in result.scalars()]


class SqlRuleToggleRepository(_SqlRepository, RuleToggleRepository):
    async def get_enabled_map(self, rule_names: list[str]) -> dict[str, bool | None]:
        result = await self._read(
            select(AssignmentRuleModel).where(AssignmentRuleModel.rule_name.in_(rule_names))
        )
        return {m.rule_name: m.enabled for m in result.scalars()}

    async def set_enabled(self, rule_name: str, enabled: bool) -> None:
        result = await self._s.execute(
            select(AssignmentRuleModel)
            .where(AssignmentRuleModel.rule_name == rule_name)
            .with_for_update()
        )
        m = result.scalar_one_or_none()
        if m is None:
            self._s.add(AssignmentRuleModel(rule_name=rule_name, enabled=enabled))
        else:
            m.enabled = enabled
        await self._s.flush()


class SqlCountryRepository(_SqlRepository, CountryRepository):
    async def get_all(self) -> list[Country]:
        result = await self._read(select(CountryModel).order_by(CountryModel.name))
        return [Country(id=str(m.id), name=m.name, code=m.code) for m in result.scalars()]
