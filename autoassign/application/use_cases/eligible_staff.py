"""Staff directory resolution — build the sequence-ordered candidate pool."""

from __future__ import annotations

import logging

from autoassign.application.ports.country_repo import CountryRepository
from autoassign.application.ports.staff_directory import StaffDirectory
from autoassign.application.ports.staff_sequence_repo import StaffSequenceRepository
from autoassign.application.ports.workload_repo import WorkloadRepository
from autoassign.domain.entities.country import CountryCatalog
from autoassign.domain.entities.staff import EligibleStaff, ordered_sequence
from autoassign.domain.policies.country_match import display_countries, has_country_match

logger = logging.getLogger(__name__)


class StaffDirectoryResolver:
    """Combines the staff sequence, staff metadata and workload counts.

    Every lookup failure degrades to an empty (or zero) result so the
    assignment cascade can move on to its next tier.
    """

    def __init__(
        self,
        sequence_repo: StaffSequenceRepository,
        directory: StaffDirectory,
        workload_repo: WorkloadRepository,
        country_repo: CountryRepository,
    ):
        self._sequence = sequence_repo
        self._directory = directory
        self._workload = workload_repo
        self._countries = country_repo

    async def strict_sequence_ids(self) -> list[str]:
        """Staff IDs of the enabled sequence, in sequence order."""
        try:
            entries = await self._sequence.fetch_sequence()
        except Exception:
            logger.warning("Could not fetch staff sequence", exc_info=True)
            return []
        return [str(e.staff_id) for e in ordered_sequence(entries)]

    async def calculate_workload(self, staff_id: str, country_name: str | None = None) -> int:
        try:
            count = await self._workload.count_active(staff_id, country_name or None)
        except Exception:
            logger.warning("Workload lookup failed for staff %s", staff_id, exc_info=True)
            return 0
        return max(int(count or 0), 0)

    async def get_eligible_staff(
        self, country_name: str, enforce_country_filter: bool = True
    ) -> list[EligibleStaff]:
        """Active, sequence-enabled staff (optionally operating in country_name).

        Returns:
            EligibleStaff ascending by sequence order; empty on any failure.
        """
        try:
            return await self._build_pool(country_name, enforce_country_filter)
        except Exception:
            logger.warning(
                "Eligible staff lookup failed (country=%r, enforce=%s)",
                country_name, enforce_country_filter, exc_info=True,
            )
            return []

    async def _build_pool(
        self, country_name: str, enforce_country_filter: bool
    ) -> list[EligibleStaff]:
        entries = ordered_sequence(await self._sequence.fetch_sequence())
        seq_by_id = {str(e.staff_id): e for e in entries}
        if not seq_by_id:
            return []

        records = await self._directory.find_by_ids(list(seq_by_id))
        catalog = await self._load_catalog()

        eligible: list[EligibleStaff] = []
        for record in records:
            entry = seq_by_id.get(str(record.id))
            in_sequence = entry is not None and entry.auto_assign_enabled is not False
            country_ok = (
                has_country_match(record.operational_countries, country_name, catalog)
                if enforce_country_filter
                else True
            )
            if not (record.is_active() and in_sequence and country_ok):
                continue

            workload = await self.calculate_workload(
                record.id, country_name if enforce_country_filter else None
            )
            eligible.append(
                EligibleStaff(
                    id=str(record.id),
                    name=record.name,
                    sequence_order=entry.sequence_order,
                    operational_countries=display_countries(record.operational_countries, catalog),
                    workload_count=workload,
                )
            )

        # Directory rows come back in arbitrary order
        eligible.sort(key=lambda s: s.sequence_order or 0)
        logger.debug(
            "Eligible pool for %r (enforce=%s): %s",
            country_name, enforce_country_filter, [s.id for s in eligible],
        )
        return eligible

    async def _load_catalog(self) -> CountryCatalog:
        try:
            return CountryCatalog(await self._countries.get_all())
        except Exception:
            logger.warning("Country catalog unavailable, matching raw names", exc_info=True)
            return CountryCatalog()
