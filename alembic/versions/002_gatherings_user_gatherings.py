"""gatherings, user_gatherings 테이블 (status 기본값 ONGOING)

Revision ID: 002
Revises: 001
Create Date: 2025-01-01 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "gatherings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("registration_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=30), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("host_user_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="ONGOING", nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["host_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gatherings_id"), "gatherings", ["id"], unique=False)
    op.create_index(op.f("ix_gatherings_host_user_id"), "gatherings", ["host_user_id"], unique=False)

    op.create_table(
        "user_gatherings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("gathering_id", sa.Integer(), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["gathering_id"], ["gatherings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "gathering_id", name="uq_user_gathering_user_gathering"),
    )
    op.create_index(op.f("ix_user_gatherings_id"), "user_gatherings", ["id"], unique=False)
    op.create_index(op.f("ix_user_gatherings_gathering_id"), "user_gatherings", ["gathering_id"], unique=False)
    op.create_index(op.f("ix_user_gatherings_user_id"), "user_gatherings", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_gatherings_user_id"), table_name="user_gatherings")
    op.drop_index(op.f("ix_user_gatherings_gathering_id"), table_name="user_gatherings")
    op.drop_index(op.f("ix_user_gatherings_id"), table_name="user_gatherings")
    op.drop_table("user_gatherings")
    op.drop_index(op.f("ix_gatherings_host_user_id"), table_name="gatherings")
    op.drop_index(op.f("ix_gatherings_id"), table_name="gatherings")
    op.drop_table("gatherings")
