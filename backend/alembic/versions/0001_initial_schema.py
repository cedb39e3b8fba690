"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Tennis Meetup Scheduler:
users, admin_bootstrap, schedules, schedule_participants.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

participation_status = sa.Enum("Attending", "NotAttending", "Undecided", name="participation_status")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False, unique=True),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])

    # --- admin_bootstrap (single claim row, id = 1) ---
    op.create_table(
        "admin_bootstrap",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- schedules ---
    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("location_detail", sa.Text, nullable=True),
        sa.Column(
            "created_by", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_schedules_id", "schedules", ["id"])
    op.create_index("ix_schedules_date", "schedules", ["date"])
    op.create_index("ix_schedules_created_by", "schedules", ["created_by"])

    # --- schedule_participants ---
    op.create_table(
        "schedule_participants",
        sa.Column(
            "schedule_id", sa.Integer, sa.ForeignKey("schedules.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("status", participation_status, nullable=False, server_default="Undecided"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_schedule_participants_user_id", "schedule_participants", ["user_id"])


def downgrade() -> None:
    op.drop_table("schedule_participants")
    op.drop_table("schedules")
    op.drop_table("admin_bootstrap")
    op.drop_table("users")
    participation_status.drop(op.get_bind(), checkfirst=True)
