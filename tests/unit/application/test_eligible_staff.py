"""Tests for StaffDirectoryResolver."""

from __future__ import annotations

import pytest
from conftest import S1, S2, S3

from autoassign.domain.entities.country import Country


@pytest.mark.asyncio
async def test_strict_sequence_ids_ordered_and_enabled_only(resolver, store):
    store.add_staff(S3, "Chen", order=3)
    store.add_staff(S1, "Anna", order=1)
    store.add_staff(S2, "Boris", order=2, enabled=False)

    assert await resolver.strict_sequence_ids() == [S1, S3]


@pytest.mark.asyncio
async def test_strict_sequence_ids_ignores_staff_status(resolver, store):
    store.add_staff(S1, "Anna", order=1, status="inactive")
    assert await resolver.strict_sequence_ids() == [S1]


@pytest.mark.asyncio
async def test_strict_sequence_ids_failure_is_empty(resolver, store):
    store.add_staff(S1, "Anna", order=1)
    store.failing.add("sequence")
    assert await resolver.strict_sequence_ids() == []


@pytest.mark.asyncio
async def test_pool_follows_sequence_order(resolver, store):
    # Directory fake returns rows in reverse order
    store.add_staff(S2, "Boris", countries=["Thailand"], order=2)
    store.add_staff(S1, "Anna", countries=["Thailand"], order=1)
    store.add_staff(S3, "Chen", countries=["Thailand"], order=3)

    pool = await resolver.get_eligible_staff("Thailand")

    assert [s.id for s in pool] == [S1, S2, S3]
    assert [s.sequence_order for s in pool] == [1, 2, 3]


@pytest.mark.asyncio
async def test_pool_country_filter_and_workload(resolver, store):
    store.add_staff(S1, "Anna", countries=["Thailand", "Vietnam"], order=1)
    store.add_staff(S2, "Boris", countries=["Vietnam"], order=2)
    store.add_workload(S1, 2, country="Thailand")
    store.add_workload(S1, 4, country="Vietnam")

    pool = await resolver.get_eligible_staff("Thailand")

    assert len(pool) == 1
    assert pool[0].id == S1
    assert pool[0].name == "Anna"
    assert pool[0].workload_count == 2


@pytest.mark.asyncio
async def test_pool_without_country_filter_counts_all_workload(resolver, store):
    store.add_staff(S1, "Anna", countries=["Vietnam"], order=1)
    store.add_workload(S1, 2, country="Thailand")
    store.add_workload(S1, 4, country="Vietnam")

    pool = await resolver.get_eligible_staff("Thailand", enforce_country_filter=False)

    assert [s.workload_count for s in pool] == [6]


@pytest.mark.asyncio
async def test_pool_displays_catalog_names(resolver, store):
    store.countries = [
        Country(id="c-th", name="Thailand", code="TH"),
        Country(id="c-vn", name="Vietnam", code="VN"),
    ]
    store.add_staff(S1, "Anna", countries=["c-th", "VN"], order=1)

    pool = await resolver.get_eligible_staff("Thailand")

    assert pool[0].operational_countries == ["Thailand", "Vietnam"]


@pytest.mark.asyncio
async def test_pool_catalog_failure_matches_raw_names(resolver, store):
    store.add_staff(S1, "Anna", countries=["thailand"], order=1)
    store.failing.add("countries")

    pool = await resolver.get_eligible_staff("Thailand")

    assert [s.id for s in pool] == [S1]


@pytest.mark.asyncio
async def test_pool_excludes_inactive(resolver, store):
    store.add_staff(S1, "Anna", countries=["Thailand"], order=1, status="Inactive")
    store.add_staff(S2, "Boris", countries=["Thailand"], order=2, status=None)

    pool = await resolver.get_eligible_staff("Thailand")

    assert [s.id for s in pool] == [S2]


@pytest.mark.asyncio
async def test_pool_failure_is_empty(resolver, store):
    store.add_staff(S1, "Anna", countries=["Thailand"], order=1)
    store.failing.add("directory")

    assert await resolver.get_eligible_staff("Thailand") == []


@pytest.mark.asyncio
async def test_pool_empty_sequence(resolver, store):
    assert await resolver.get_eligible_staff("Thailand") == []


@pytest.mark.asyncio
async def test_calculate_workload(resolver, store):
    store.add_workload(S1, 3)
    store.add_enquiry("ENQ-X", status="confirmed", assigned_to=S1)

    assert await resolver.calculate_workload(S1) == 3
    assert await resolver.calculate_workload(S1, "Vietnam") == 0
    assert await resolver.calculate_workload(S2) == 0


@pytest.mark.asyncio
async def test_calculate_workload_failure_is_zero(resolver, store):
    store.add_workload(S1, 3)
    store.failing.add("workload")

    assert await resolver.calculate_workload(S1) == 0
