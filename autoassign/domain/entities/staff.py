"""Staff entities — roster entries, directory records and the derived eligible pool."""

from dataclasses import dataclass, field

from autoassign.domain.value_objects.enums import StaffStatus

DEFAULT_STAFF_NAME = "Staff Member"


@dataclass
class StaffSequenceEntry:
    staff_id: str
    sequence_order: int | None = None
    auto_assign_enabled: bool = True

    @property
    def sort_key(self) -> int:
        return self.sequence_order or 0


@dataclass
class StaffRecord:
    id: str
    name: str = DEFAULT_STAFF_NAME
    status: str | None = StaffStatus.ACTIVE.value
    operational_countries: list[str] = field(default_factory=list)

    def is_active(self) -> bool:
        # Missing status is treated as active
        return (self.status or StaffStatus.ACTIVE.value).strip().lower() == StaffStatus.ACTIVE.value


@dataclass
class EligibleStaff:
    id: str
    name: str
    sequence_order: int | None
    operational_countries: list[str] = field(default_factory=list)
    workload_count: int = 0


def ordered_sequence(entries: list[StaffSequenceEntry]) -> list[StaffSequenceEntry]:
    """Enabled entries, ascending by sequence order (stable for equal orders)."""
    enabled = [e for e in entries if e.auto_assign_enabled is not False]
    return sorted(enabled, key=lambda e: e.sort_key)
