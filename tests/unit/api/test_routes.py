"""Tests for the HTTP API with use cases wired to in-memory fakes."""

from __future__ import annotations

import pytest
from conftest import S1, S2
from fastapi.testclient import TestClient

from autoassign.adapters.persistence.database import get_session
from autoassign.application.use_cases.assign_query import BatchAssignUseCase
from autoassign.infrastructure.api.dependencies import (
    get_assign_query_uc,
    get_batch_assign_uc,
    get_history_repo,
    get_rule_repo,
    get_staff_resolver,
)
from autoassign.main import app


class _Result:
    def scalar(self):
        return 1


class FakeSession:
    def __init__(self, fail_commit: bool = False):
        self.commits = 0
        self._fail_commit = fail_commit

    async def execute(self, statement):
        return _Result()

    async def commit(self):
        if self._fail_commit:
            raise RuntimeError("commit failed")
        self.commits += 1

    async def rollback(self):
        pass


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(store, engine, resolver, fakes, session):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_assign_query_uc] = lambda: engine
    app.dependency_overrides[get_batch_assign_uc] = lambda: BatchAssignUseCase(engine, fakes["enquiries"])
    app.dependency_overrides[get_staff_resolver] = lambda: resolver
    app.dependency_overrides[get_rule_repo] = lambda: fakes["rules"]
    app.dependency_overrides[get_history_repo] = lambda: fakes["history"]
    yield TestClient(app)
    app.dependency_overrides.clear()


# ─── Health ──────────────────────────────────────────────────────────


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"


# ─── Single assignment ───────────────────────────────────────────────


def test_assign_single(client, thailand_pair, session):
    thailand_pair.add_enquiry("ENQ-1")

    resp = client.post("/api/assignments/ENQ-1")

    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "enquiry_id": "ENQ-1",
        "staff_id": S1,
        "rule": "Round Robin (Tie-break)",
        "error": None,
    }
    assert session.commits == 1


def test_assign_single_nobody_eligible(client, store):
    store.add_enquiry("ENQ-1")

    resp = client.post("/api/assignments/ENQ-1")

    assert resp.status_code == 200
    assert resp.json()["status"] == "unassigned"
    assert resp.json()["staff_id"] is None


def test_assign_single_not_found(client, thailand_pair):
    resp = client.post("/api/assignments/ENQ-404")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Enquiry not found"


def test_assign_single_commit_failure(client, thailand_pair):
    thailand_pair.add_enquiry("ENQ-1")
    app.dependency_overrides[get_session] = lambda: FakeSession(fail_commit=True)

    resp = client.post("/api/assignments/ENQ-1")

    assert resp.status_code == 500


# ─── Batch and inspection ────────────────────────────────────────────


def test_assign_all(client, thailand_pair):
    thailand_pair.add_enquiry("ENQ-A")
    thailand_pair.add_enquiry("ENQ-B")

    resp = client.post("/api/assignments")

    data = resp.json()
    assert resp.status_code == 200
    assert data["total_processed"] == 2
    assert data["assigned"] == 2
    assert [r["staff_id"] for r in data["results"]] == [S1, S2]


def test_eligible_preview(client, store):
    store.add_staff(S1, "Anna", countries=["Thailand"], order=1)
    store.add_staff(S2, "Boris", countries=["Vietnam"], order=2)

    resp = client.get("/api/assignments/eligible", params={"country": "Thailand"})

    data = resp.json()
    assert data["total"] == 1
    assert data["staff"][0]["name"] == "Anna"

    resp = client.get(
        "/api/assignments/eligible",
        params={"country": "Thailand", "enforce_country_filter": "false"},
    )
    assert resp.json()["total"] == 2


def test_history_after_assignment(client, thailand_pair):
    thailand_pair.add_enquiry("ENQ-1")
    client.post("/api/assignments/ENQ-1")

    resp = client.get("/api/assignments/ENQ-1/history")

    data = resp.json()
    assert data["total"] == 1
    assert data["history"][0]["staff_id"] == S1
    assert data["history"][0]["assigned_by"] == "system-auto"
    assert data["history"][0]["is_auto_assigned"] is True


# ─── Rules ───────────────────────────────────────────────────────────


def test_list_rules_defaults(client, store):
    store.rules["round-robin"] = False

    rules = {r["name"]: r for r in client.get("/api/assignment-rules").json()["rules"]}

    assert rules["expertise-match"] == {"name": "expertise-match", "enabled": True, "explicit": False}
    assert rules["round-robin"]["enabled"] is False
    assert rules["round-robin"]["explicit"] is True


def test_update_rule(client, store, session):
    resp = client.put("/api/assignment-rules/workload-balance", json={"enabled": False})

    assert resp.status_code == 200
    assert store.rules["workload-balance"] is False
    assert session.commits == 1


def test_update_unknown_rule(client):
    resp = client.put("/api/assignment-rules/coin-flip", json={"enabled": True})
    assert resp.status_code == 422
