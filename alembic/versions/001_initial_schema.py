"""Initial schema — directory, sequence, enquiries and assignment tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Countries
    op.create_table(
        "countries",
        sa.Column("id", UUID(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("code", sa.String(3), nullable=True),
    )

    # Staff
    op.create_table(
        "staff",
        sa.Column("id", UUID(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=True, server_default="active"),
        sa.Column(
            "operational_countries", ARRAY(sa.String(100)), nullable=True, server_default="{}"
        ),
    )

    # Profiles (legacy directory)
    op.create_table(
        "profiles",
        sa.Column("id", UUID(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("operational_countries", JSONB, nullable=True),
    )

    # Staff sequence
    op.create_table(
        "staff_sequence",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("staff_id", UUID(as_uuid=False), unique=True, nullable=False),
        sa.Column("sequence_order", sa.Integer, nullable=True),
        sa.Column("auto_assign_enabled", sa.Boolean, nullable=True, server_default="true"),
    )
    op.create_index("idx_staff_sequence_order", "staff_sequence", ["sequence_order"])

    # Agent–staff relationships
    op.create_table(
        "agent_staff_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.String(64), nullable=False),
        sa.Column("staff_id", UUID(as_uuid=False), nullable=False),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("agent_id", "staff_id", name="uq_agent_staff"),
    )
    op.create_index("idx_agent_staff_agent", "agent_staff_assignments", ["agent_id"])

    # Enquiries
    op.create_table(
        "enquiries",
        sa.Column("id", UUID(as_uuid=False), primary_key=True),
        sa.Column("enquiry_id", sa.String(50), unique=True, nullable=False),
        sa.Column("agent_id", sa.String(64), nullable=True),
        sa.Column("country_name", sa.String(100), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="new"),
        sa.Column("assigned_to", UUID(as_uuid=False), nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_enquiries_assigned_status", "enquiries", ["assigned_to", "status"])
    op.create_index("idx_enquiries_country", "enquiries", ["country_name"])

    # Assignment history
    op.create_table(
        "assignment_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "enquiry_id",
            UUID(as_uuid=False),
            sa.ForeignKey("enquiries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("staff_id", UUID(as_uuid=False), nullable=False),
        sa.Column("assigned_by", sa.String(64), nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("rule_applied", sa.String(100), nullable=True),
        sa.Column("is_auto_assigned", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "assigned_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index(
        "idx_assignment_history_staff_time", "assignment_history", ["staff_id", "assigned_at"]
    )
    op.create_index("idx_assignment_history_enquiry", "assignment_history", ["enquiry_id"])

    # Assignment rule switches
    op.create_table(
        "assignment_rules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("rule_name", sa.String(50), unique=True, nullable=False),
        sa.Column("enabled", sa.Boolean, nullable=False, server_default="true"),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    # Workflow events
    op.create_table(
        "workflow_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "enquiry_id",
            UUID(as_uuid=False),
            sa.ForeignKey("enquiries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("user_role", sa.String(30), nullable=True),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("metadata", JSONB, nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_workflow_events_enquiry", "workflow_events", ["enquiry_id"])


def downgrade() -> None:
    op.drop_table("workflow_events")
    op.drop_table("assignment_rules")
    op.drop_table("assignment_history")
    op.drop_table("enquiries")
    op.drop_table("agent_staff_assignments")
    op.drop_table("staff_sequence")
    op.drop_table("profiles")
    op.drop_table("staff")
    op.drop_table("countries")
