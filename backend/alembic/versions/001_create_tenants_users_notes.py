"""Create tenants, users and notes tables

Revision ID: 001
Revises: None
Create Date: 2025-09-22 09:10:09.000000+00:00

What:  Initial schema: tenants own users and notes.
How:   Enum types for plan and role; foreign keys
         users.tenant_id → tenants.id  ON DELETE RESTRICT
         notes.tenant_id → tenants.id  ON DELETE RESTRICT
         notes.owner_id  → users.id    ON DELETE SET NULL
       Unique slug and email; indexes on every foreign key.

Rollback: downgrade() drops all three tables and both enum types.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

plan_enum = sa.Enum("FREE", "PRO", name="plan")
role_enum = sa.Enum("ADMIN", "MEMBER", name="role")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("plan", plan_enum, server_default="FREE", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("idx_tenants_slug", "tenants", ["slug"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.Column("role", role_enum, server_default="MEMBER", nullable=False),
        sa.Column("tenant_id", sa.String(36), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="RESTRICT", onupdate="CASCADE"),
    )
    op.create_index("idx_users_tenant_id", "users", ["tenant_id"])

    op.create_table(
        "notes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tenant_id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="RESTRICT", onupdate="CASCADE"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="SET NULL", onupdate="CASCADE"),
    )
    op.create_index("idx_notes_tenant_id", "notes", ["tenant_id"])
    op.create_index("idx_notes_owner_id", "notes", ["owner_id"])
    op.create_index("idx_notes_tenant_created_at", "notes", ["tenant_id", "created_at"])


def downgrade() -> None:
    """WARNING: destructive, all tenants, users and notes are lost."""
    op.drop_index("idx_notes_tenant_created_at", table_name="notes")
    op.drop_index("idx_notes_owner_id", table_name="notes")
    op.drop_index("idx_notes_tenant_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("idx_users_tenant_id", table_name="users")
    op.drop_table("users")
    op.drop_index("idx_tenants_slug", table_name="tenants")
    op.drop_table("tenants")
    role_enum.drop(op.get_bind(), checkfirst=True)
    plan_enum.drop(op.get_bind(), checkfirst=True)
