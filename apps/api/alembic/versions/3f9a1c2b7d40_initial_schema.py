"""initial schema: tenants, users, audit log, appointments, plans, notes, reports

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-17 09:00:00.000000

Creates every table and enum type, and installs the trigger that makes
audit_log_entries append-only at the database level (UPDATE and DELETE
raise).
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUMS: dict[str, tuple[str, ...]] = {
    "tenant_status": ("active", "inactive", "suspended"),
    "user_role": ("student", "teacher", "counselor", "specialist", "admin"),
    "user_status": ("active", "inactive", "suspended"),
    "appointment_status": ("requested", "scheduled", "completed", "cancelled", "denied"),
    "appointment_urgency": ("low", "normal", "high", "urgent"),
    "record_priority": ("low", "medium", "high"),
    "intervention_plan_status": ("active", "completed", "on_hold", "cancelled"),
    "report_type": ("user_summary", "credit_tracking", "attendance_summary", "system_usage"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id",
        _uuid(),
        sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def _user_fk(name: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        _uuid(),
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
        index=True,
    )


def upgrade() -> None:
    """Create the schema."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "tenants",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("status", _enum("tenant_status"), nullable=False, index=True),
        sa.Column("settings", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
    )
    op.create_index("ix_tenants_domain", "tenants", ["domain"], unique=True)
    op.create_index("ix_tenants_created_at", "tenants", ["created_at"])

    op.create_table(
        "users",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column(
            "tenant_id",
            _uuid(),
            sa.ForeignKey("tenants.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", _enum("user_role"), nullable=False, index=True),
        sa.Column("status", _enum("user_status"), nullable=False, index=True),
        sa.Column("must_change_password", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "audit_log_entries",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("sequence", sa.BigInteger(), sa.Identity(always=True), nullable=False, unique=True),
        sa.Column("tenant_id", _uuid(), nullable=True, index=True),
        sa.Column("actor_id", sa.String(100), nullable=True, index=True),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("entity_type", sa.String(50), nullable=False, index=True),
        sa.Column("entity_id", sa.String(100), nullable=True),
        sa.Column("details", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_audit_log_entries_tenant_created",
        "audit_log_entries",
        ["tenant_id", "created_at"],
    )

    # Append-only: refuse UPDATE and DELETE regardless of the client
    op.execute(
        """
        CREATE FUNCTION audit_log_entries_immutable() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'audit_log_entries is append-only (% refused)', TG_OP;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER audit_log_entries_no_update_delete
        BEFORE UPDATE OR DELETE ON audit_log_entries
        FOR EACH ROW EXECUTE FUNCTION audit_log_entries_immutable()
        """
    )

    op.create_table(
        "appointment_requests",
        sa.Column("id", _uuid(), primary_key=True),
        _tenant_fk(),
        _user_fk("student_id"),
        sa.Column("requested_by", _uuid(), nullable=False),
        _user_fk("staff_id", ondelete="SET NULL", nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("preferred_times", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("urgency", _enum("appointment_urgency"), nullable=False),
        sa.Column("status", _enum("appointment_status"), nullable=False, index=True),
        sa.Column("response_message", sa.Text(), nullable=True),
        sa.Column("responded_by", _uuid(), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("appointment_id", _uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointment_requests_created_at", "appointment_requests", ["created_at"])

    op.create_table(
        "appointments",
        sa.Column("id", _uuid(), primary_key=True),
        _tenant_fk(),
        _user_fk("student_id"),
        _user_fk("staff_id"),
        sa.Column(
            "request_id",
            _uuid(),
            sa.ForeignKey("appointment_requests.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("appointment_type", sa.String(50), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", _enum("appointment_status"), nullable=False, index=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointments_created_at", "appointments", ["created_at"])

    op.create_table(
        "intervention_plans",
        sa.Column("id", _uuid(), primary_key=True),
        _tenant_fk(),
        _user_fk("student_id"),
        _user_fk("author_id"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("goals", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("strategies", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("timeline", sa.String(200), nullable=True),
        sa.Column("priority", _enum("record_priority"), nullable=False),
        sa.Column("status", _enum("intervention_plan_status"), nullable=False, index=True),
        sa.Column(
            "authorized_teachers",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("parent_notified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("review_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_intervention_plans_created_at", "intervention_plans", ["created_at"])

    op.create_table(
        "student_notes",
        sa.Column("id", _uuid(), primary_key=True),
        _tenant_fk(),
        _user_fk("student_id"),
        _user_fk("author_id"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_confidential", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priority", _enum("record_priority"), nullable=False),
        sa.Column("tags", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("visible_to", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        *_timestamps(),
    )
    op.create_index("ix_student_notes_created_at", "student_notes", ["created_at"])

    op.create_table(
        "report_definitions",
        sa.Column("id", _uuid(), primary_key=True),
        _tenant_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", _enum("report_type"), nullable=False, index=True),
        sa.Column("parameters", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("schedule", postgresql.JSONB(), nullable=True),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_report_definitions_created_at", "report_definitions", ["created_at"])

    op.create_table(
        "report_results",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column(
            "report_id",
            _uuid(),
            sa.ForeignKey("report_definitions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _tenant_fk(),
        sa.Column("result_data", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("parameters", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("run_by", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_report_results_report_created",
        "report_results",
        ["report_id", "created_at"],
    )


def downgrade() -> None:
    """Drop everything created by upgrade()."""
    for table in (
        "report_results",
        "report_definitions",
        "student_notes",
        "intervention_plans",
        "appointments",
        "appointment_requests",
    ):
        op.drop_table(table)

    op.execute("DROP TRIGGER IF EXISTS audit_log_entries_no_update_delete ON audit_log_entries")
    op.execute("DROP FUNCTION IF EXISTS audit_log_entries_immutable()")
    op.drop_table("audit_log_entries")
    op.drop_table("users")
    op.drop_table("tenants")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
