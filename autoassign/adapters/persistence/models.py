"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autoassign.adapters.persistence.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class CountryModel(Base):
    __tablename__ = "countries"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    code: Mapped[str | None] = mapped_column(String(3), nullable=True)


class StaffModel(Base):
    __tablename__ = "staff"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=_uuid)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True, default="active")
    operational_countries: Mapped[list[str] | None] = mapped_column(
        ARRAY(String(100)), nullable=True, default=list
    )


class ProfileModel(Base):
    """Legacy user profiles; operational_countries is free-form JSON here."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=_uuid)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    operational_countries: Mapped[object | None] = mapped_column(JSONB, nullable=True)


class StaffSequenceModel(Base):
    __tablename__ = "staff_sequence"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    staff_id: Mapped[str] = mapped_column(UUID(as_uuid=False), unique=True, nullable=False)
    sequence_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    auto_assign_enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)

    __table_args__ = (Index("idx_staff_sequence_order", "sequence_order"),)


class AgentStaffAssignmentModel(Base):
    __tablename__ = "agent_staff_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agent_id: Mapped[str] = mapped_column(String(64), nullable=False)
    staff_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("agent_id", "staff_id", name="uq_agent_staff"),
        Index("idx_agent_staff_agent", "agent_id"),
    )


class EnquiryModel(Base):
    __tablename__ = "enquiries"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=_uuid)
    enquiry_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # UUID or legacy numeric ID stored as text
    agent_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="new")
    assigned_to: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    history: Mapped[list["AssignmentHistoryModel"]] = relationship(back_populates="enquiry")

    __table_args__ = (
        Index("idx_enquiries_assigned_status", "assigned_to", "status"),
        Index("idx_enquiries_country", "country_name"),
    )


class AssignmentHistoryModel(Base):
    __tablename__ = "assignment_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    enquiry_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("enquiries.id", ondelete="CASCADE"), nullable=False
    )
    staff_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rule_applied: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_auto_assigned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    enquiry: Mapped["EnquiryModel"] = relationship(back_populates="history")

    __table_args__ = (
        Index("idx_assignment_history_staff_time", "staff_id", "assigned_at"),
        Index("idx_assignment_history_enquiry", "enquiry_id"),
    )


class AssignmentRuleModel(Base):
    __tablename__ = "assignment_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rule_name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )


class WorkflowEventModel(Base):
    __tablename__ = "workflow_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    enquiry_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("enquiries.id", ondelete="CASCADE"), nullable=False
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_role: Mapped[str | None] = mapped_column(String(30), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("idx_workflow_events_enquiry", "enquiry_id"),)
