"""wellness: eventos, instâncias, inscrições, presença e questionários

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("recurrence_type", sa.String(10), nullable=False),
        sa.Column("recurrence_pattern", sa.JSON(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("capacity >= 1", name="ck_events_capacity_positive"),
    )

    op.create_table(
        "event_instances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE",
                  name="fk_event_instances_event_id_events"), nullable=False),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("confirmed", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("is_orphaned", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.UniqueConstraint("event_id", "date_time", name="uq_event_instance_datetime"),
        sa.CheckConstraint("capacity >= 1", name="ck_event_instances_capacity_positive"),
        sa.CheckConstraint("confirmed >= 0", name="ck_event_instances_confirmed_non_negative"),
        sa.CheckConstraint("confirmed <= capacity", name="ck_event_instances_confirmed_lte_capacity"),
    )
    op.create_index("ix_event_instances_event_datetime", "event_instances", ["event_id", "date_time"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("instance_id", sa.Integer(), sa.ForeignKey("event_instances.id",
                  name="fk_registrations_instance_id_event_instances"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_registrations_user_id", "registrations", ["user_id"])
    op.create_index("ix_registrations_instance_id", "registrations", ["instance_id"])
    op.create_index("ix_registrations_token", "registrations", ["token"], unique=True)
    # canceladas não contam para a unicidade
    op.create_index(
        "uq_registrations_active_seat",
        "registrations",
        ["user_id", "instance_id"],
        unique=True,
        sqlite_where=sa.text("status = 'confirmed'"),
        postgresql_where=sa.text("status = 'confirmed'"),
    )

    op.create_table(
        "attendances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("registration_id", sa.Integer(), sa.ForeignKey("registrations.id",
                  name="fk_attendances_registration_id_registrations"), nullable=False),
        sa.Column("attended_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("checked_in_by", sa.String(64), nullable=False),
        sa.UniqueConstraint("registration_id", name="uq_attendances_registration_id"),
    )

    op.create_table(
        "wellness_assessments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("registration_id", sa.Integer(), sa.ForeignKey("registrations.id",
                  name="fk_wellness_assessments_registration_id_registrations"), nullable=False),
        sa.Column("type", sa.String(4), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("sleep_quality", sa.Integer(), nullable=True),
        sa.Column("stress_level", sa.Integer(), nullable=True),
        sa.Column("mood", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("registration_id", "type", name="uq_assessment_registration_type"),
        sa.CheckConstraint("type IN ('PRE', 'POST')", name="ck_wellness_assessments_type_valid"),
        sa.CheckConstraint("status IN ('PENDING', 'COMPLETED')", name="ck_wellness_assessments_status_valid"),
    )
    op.create_index("ix_wellness_assessments_registration_id", "wellness_assessments", ["registration_id"])


def downgrade() -> None:
    op.drop_table("wellness_assessments")
    op.drop_table("attendances")
    op.drop_index("uq_registrations_active_seat", table_name="registrations")
    op.drop_table("registrations")
    op.drop_table("event_instances")
    op.drop_table("events")
