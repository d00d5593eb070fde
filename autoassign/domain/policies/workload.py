"""WorkloadPolicy — find the staff tied at the lowest active workload."""

from __future__ import annotations

from autoassign.domain.entities.staff import EligibleStaff


def lowest_workload_tier(eligible: list[EligibleStaff]) -> list[EligibleStaff]:
    """Return every candidate sharing the minimum workload count.

    The sort is stable, so the tier keeps the pool's sequence order.
    """
    if not eligible:
        return []
    by_workload = sorted(eligible, key=lambda s: s.workload_count)
    min_count = by_workload[0].workload_count
    return [s for s in by_workload if s.workload_count == min_count]
