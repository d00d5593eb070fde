"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class RuleName(str, Enum):
    EXPERTISE_MATCH = "expertise-match"
    AGENT_STAFF_RELATIONSHIP = "agent-staff-relationship"
    WORKLOAD_BALANCE = "workload-balance"
    ROUND_ROBIN = "round-robin"


class AssignmentRuleLabel(str, Enum):
    """Label recorded with every automatic assignment."""

    AGENT_STAFF_RELATIONSHIP = "Agent–Staff Relationship"
    WORKLOAD_BALANCE = "Workload Balance"
    ROUND_ROBIN_TIE_BREAK = "Round Robin (Tie-break)"
    SEQUENCE_ORDER_TIE_BREAK = "Sequence Order (Tie-break)"
    ROUND_ROBIN_SEQUENCE_ONLY = "Round Robin (Sequence Only)"
    SEQUENCE_ORDER = "Sequence Order"
    ROUND_ROBIN = "Round Robin"


class EnquiryStatus(str, Enum):
    NEW = "new"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    PROPOSAL_SENT = "proposal-sent"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"
