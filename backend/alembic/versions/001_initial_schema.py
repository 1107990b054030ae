"""Initial schema: users, seats, reservations with partial unique indexes.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_ONLY = sa.text("status = 'ACTIVE'")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(10), nullable=False, server_default=sa.text("'USER'")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('USER', 'ADMIN')", name="user_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "seats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seat_number", sa.String(20), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("has_monitor", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_seats_id", "seats", ["id"])
    op.create_index("ix_seats_seat_number", "seats", ["seat_number"], unique=True)
    op.create_index("ix_seats_active_location", "seats", ["is_active", "location"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("seat_id", sa.Integer(), sa.ForeignKey("seats.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=True),
        sa.Column("end_time", sa.String(5), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'ACTIVE'")),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'CANCELLED', 'COMPLETED')", name="reservation_status"
        ),
    )
    op.create_index("ix_reservations_id", "reservations", ["id"])
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_seat_id", "reservations", ["seat_id"])
    op.create_index("ix_reservations_status_date", "reservations", ["status", "date"])
    # One ACTIVE booking per seat per day, and per user per day. Cancelled
    # and completed rows fall outside the index and never block a rebooking.
    op.create_index(
        "uq_reservations_seat_date_active",
        "reservations",
        ["seat_id", "date"],
        unique=True,
        postgresql_where=ACTIVE_ONLY,
    )
    op.create_index(
        "uq_reservations_user_date_active",
        "reservations",
        ["user_id", "date"],
        unique=True,
        postgresql_where=ACTIVE_ONLY,
    )


def downgrade() -> None:
    op.drop_table("reservations")
    op.drop_table("seats")
    op.drop_table("users")
