"""Assignment entities — history of past decisions and agent–staff pairings."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AssignmentHistoryRecord:
    id: int | None
    enquiry_id: str
    staff_id: str
    assigned_by: str | None = None
    rule_applied: str | None = None
    is_auto_assigned: bool = False
    assigned_at: datetime | None = None


@dataclass
class AgentStaffAssignment:
    agent_id: str
    staff_id: str
    created_at: datetime | None = field(default=None)
