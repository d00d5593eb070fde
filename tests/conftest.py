"""Pytest configuration and shared fixtures — in-memory fakes for every port."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from autoassign.application.ports.assignment_history_repo import AssignmentHistoryRepository
from autoassign.application.ports.country_repo import CountryRepository
from autoassign.application.ports.enquiry_repo import EnquiryRepository
from autoassign.application.ports.relationship_repo import RelationshipRepository
from autoassign.application.ports.rule_toggle_repo import RuleToggleRepository
from autoassign.application.ports.staff_directory import StaffDirectory
from autoassign.application.ports.staff_sequence_repo import StaffSequenceRepository
from autoassign.application.ports.workload_repo import WorkloadRepository
from autoassign.application.use_cases.agent_relationship import RelationshipResolver
from autoassign.application.use_cases.assign_query import AssignQueryUseCase
from autoassign.application.use_cases.eligible_staff import StaffDirectoryResolver
from autoassign.application.use_cases.round_robin import RoundRobinSelector
from autoassign.domain.entities.assignment import AgentStaffAssignment, AssignmentHistoryRecord
from autoassign.domain.entities.country import Country
from autoassign.domain.entities.enquiry import Enquiry
from autoassign.domain.entities.staff import StaffRecord, StaffSequenceEntry
from autoassign.domain.exceptions import EnquiryNotFoundError

S1 = "11111111-1111-4111-8111-111111111111"
S2 = "22222222-2222-4222-8222-222222222222"
S3 = "33333333-3333-4333-8333-333333333333"

T0 = datetime(2026, 1, 1, 9, 0, 0)


class InMemoryStore:
    """Backing data shared by all fakes. Add a port name to `failing` to make it raise."""

    def __init__(self):
        self.sequence: list[StaffSequenceEntry] = []
        self.staff: dict[str, StaffRecord] = {}
        self.profiles: dict[str, StaffRecord] = {}
        self.countries: list[Country] = []
        self.enquiries: dict[str, Enquiry] = {}
        self.pairings: list[AgentStaffAssignment] = []
        self.history: list[AssignmentHistoryRecord] = []
        self.rules: dict[str, bool] = {}
        self.assign_calls: list[tuple] = []
        self.failing: set[str] = set()
        self._clock = T0

    # ─── builders ────────────────────────────────────────────────

    def add_staff(self, staff_id, name, countries=None, order=None, status="active",
                  enabled=True, table="staff"):
        record = StaffRecord(
            id=staff_id, name=name, status=status,
            operational_countries=list(countries or []),
        )
        (self.staff if table == "staff" else self.profiles)[staff_id] = record
        self.sequence.append(
            StaffSequenceEntry(staff_id=staff_id, sequence_order=order, auto_assign_enabled=enabled)
        )
        return record

    def add_enquiry(self, enquiry_id="ENQ-1", country="Thailand", agent_uuid=None,
                    agent_legacy_id=None, status="new", assigned_to=None):
        enquiry = Enquiry(
            id=f"row-{enquiry_id}", enquiry_id=enquiry_id, destination_country=country,
            agent_uuid=agent_uuid, agent_legacy_id=agent_legacy_id,
            status=status, assigned_to=assigned_to,
        )
        self.enquiries[enquiry_id] = enquiry
        return enquiry

    def add_workload(self, staff_id, count, country="Thailand"):
        for i in range(count):
            self.add_enquiry(
                enquiry_id=f"WL-{staff_id[:4]}-{country}-{i}-{len(self.enquiries)}",
                country=country, status="assigned", assigned_to=staff_id,
            )

    def record_history(self, staff_id, enquiry_id="OLD"):
        self.history.append(
            AssignmentHistoryRecord(
                id=len(self.history) + 1, enquiry_id=enquiry_id, staff_id=staff_id,
                assigned_at=self._tick(),
            )
        )

    def pair(self, agent_id, staff_id, created_at=None):
        self.pairings.append(
            AgentStaffAssignment(agent_id=agent_id, staff_id=staff_id, created_at=created_at or self._tick())
        )

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def check(self, port: str) -> None:
        if port in self.failing:
            raise RuntimeError(f"{port} unavailable")


class FakeEnquiryRepo(EnquiryRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, enquiry_id, lock=False):
        self._store.check("enquiries")
        if enquiry_id in self._store.enquiries:
            return self._store.enquiries[enquiry_id]
        return next((e for e in self._store.enquiries.values() if e.id == enquiry_id), None)

    async def get_unassigned(self):
        return [
            e for e in self._store.enquiries.values()
            if not e.assigned_to and e.status not in ("confirmed", "cancelled")
        ]

    async def assign(self, enquiry_id, staff_id, assigned_by, reason, is_auto_assigned):
        self._store.assign_calls.append((enquiry_id, staff_id, assigned_by, reason, is_auto_assigned))
        enquiry = self._store.enquiries.get(enquiry_id)
        if enquiry is None:
            raise EnquiryNotFoundError(enquiry_id)
        enquiry.assigned_to = staff_id
        enquiry.status = "assigned"
        self._store.history.append(
            AssignmentHistoryRecord(
                id=len(self._store.history) + 1, enquiry_id=enquiry.id, staff_id=staff_id,
                assigned_by=assigned_by, rule_applied=reason,
                is_auto_assigned=is_auto_assigned, assigned_at=self._store._tick(),
            )
        )


class FakeSequenceRepo(StaffSequenceRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def fetch_sequence(self):
        self._store.check("sequence")
        return list(self._store.sequence)


class FakeDirectory(StaffDirectory):
    def __init__(self, store: InMemoryStore, table: str = "staff"):
        self._store = store
        self._table = table

    async def find_by_ids(self, ids):
        self._store.check("directory")
        rows = self._store.staff if self._table == "staff" else self._store.profiles
        # Reverse so callers cannot rely on input order
        return [rows[i] for i in reversed(ids) if i in rows]


class FakeWorkloadRepo(WorkloadRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def count_active(self, staff_id, country_name=None):
        self._store.check("workload")
        return sum(
            1 for e in self._store.enquiries.values()
            if e.assigned_to == staff_id and e.status == "assigned"
            and (not country_name or e.destination_country == country_name)
        )


class FakeRelationshipRepo(RelationshipRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def find_for_agent(self, agent_id, staff_ids):
        self._store.check("relationship")
        matches = [
            p for p in self._store.pairings
            if p.agent_id == agent_id and p.staff_id in staff_ids
        ]
        if not matches:
            return None
        matches.sort(key=lambda p: p.staff_id)
        matches.sort(key=lambda p: p.created_at, reverse=True)
        return matches[0]


class FakeHistoryRepo(AssignmentHistoryRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def latest_staff_id(self, staff_ids):
        self._store.check("history")
        relevant = [h for h in self._store.history if h.staff_id in staff_ids]
        if not relevant:
            return None
        return max(relevant, key=lambda h: (h.assigned_at, h.id)).staff_id

    async def get_by_enquiry(self, enquiry_id):
        enquiry = self._store.enquiries.get(enquiry_id)
        row_id = enquiry.id if enquiry else enquiry_id
        return [h for h in self._store.history if h.enquiry_id == row_id]


class FakeRuleRepo(RuleToggleRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_enabled_map(self, rule_names):
        self._store.check("rules")
        return {n: self._store.rules[n] for n in rule_names if n in self._store.rules}

    async def set_enabled(self, rule_name, enabled):
        self._store.rules[rule_name] = enabled


class FakeCountryRepo(CountryRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_all(self):
        self._store.check("countries")
        return list(self._store.countries)


class FallbackFakeDirectory(StaffDirectory):
    def __init__(self, *directories):
        self._directories = directories

    async def find_by_ids(self, ids):
        for d in self._directories:
            rows = await d.find_by_ids(ids)
            if rows:
                return rows
        return []


# ─── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def resolver(store) -> StaffDirectoryResolver:
    return StaffDirectoryResolver(
        sequence_repo=FakeSequenceRepo(store),
        directory=FallbackFakeDirectory(FakeDirectory(store, "staff"), FakeDirectory(store, "profiles")),
        workload_repo=FakeWorkloadRepo(store),
        country_repo=FakeCountryRepo(store),
    )


@pytest.fixture
def selector(store, resolver) -> RoundRobinSelector:
    return RoundRobinSelector(FakeHistoryRepo(store), resolver)


@pytest.fixture
def relationships(store) -> RelationshipResolver:
    return RelationshipResolver(FakeRelationshipRepo(store))


@pytest.fixture
def engine(store, resolver, selector, relationships) -> AssignQueryUseCase:
    return AssignQueryUseCase(
        enquiry_repo=FakeEnquiryRepo(store),
        rule_repo=FakeRuleRepo(store),
        resolver=resolver,
        relationships=relationships,
        round_robin=selector,
    )


@pytest.fixture
def fakes(store):
    """Port fakes by name, for tests that wire their own use cases."""
    return {
        "enquiries": FakeEnquiryRepo(store),
        "rules": FakeRuleRepo(store),
        "history": FakeHistoryRepo(store),
    }


@pytest.fixture
def thailand_pair(store):
    """Two active staff operating in Thailand, in sequence order S1, S2."""
    store.add_staff(S1, "Anna", countries=["Thailand"], order=1)
    store.add_staff(S2, "Boris", countries=["Thailand"], order=2)
    return store
