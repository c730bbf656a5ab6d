"""Initial schema - roles, profiles

Revision ID: 0001
Revises: None
Create Date: 2026-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all core tables."""

    # --- roles ---
    op.create_table(
        "roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_roles"),
    )
    # Role names are unique regardless of case
    op.create_index(
        "uq_roles_name_lower",
        "roles",
        [sa.text("lower(name)")],
        unique=True,
    )

    # --- profiles (FK -> roles) ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("role_type", sa.String(20), nullable=False, server_default="user"),
        sa.Column("role_id", sa.Uuid(), nullable=True),
        sa.Column("custom_permissions", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_profiles"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_profiles_role_id_roles"),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
        sa.CheckConstraint(
            "status IN ('active', 'blocked', 'pending')", name="ck_profiles_status"
        ),
        sa.CheckConstraint(
            "role_type IN ('super_admin', 'custom_role', 'user')", name="ck_profiles_role_type"
        ),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])
    op.create_index("ix_profiles_role_id", "profiles", ["role_id"])


def downgrade() -> None:
    """Drop all core tables."""
    op.drop_index("ix_profiles_role_id", table_name="profiles")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("uq_roles_name_lower", table_name="roles")
    op.drop_table("roles")
