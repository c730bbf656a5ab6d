"""Seed system roles

Revision ID: 0002
Revises: 0001
Create Date: 2026-09-14

Creates the system roles (Content Manager, Support Staff, Media Manager,
Analytics Viewer, Viewer). System roles can never be edited or deleted.
"""
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa

from backoffice.core.rbac.roles import SYSTEM_ROLES, get_system_role_permissions

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


roles_table = sa.table(
    "roles",
    sa.column("id", sa.Uuid()),
    sa.column("name", sa.String()),
    sa.column("description", sa.String()),
    sa.column("permissions", sa.JSON()),
    sa.column("is_system_role", sa.Boolean()),
)


def upgrade() -> None:
    """Insert system roles that are not present yet."""
    connection = op.get_bind()

    for role_key, role_config in SYSTEM_ROLES.items():
        existing = connection.execute(
            sa.text("SELECT id FROM roles WHERE lower(name) = :name"),
            {"name": role_config["name"].lower()},
        ).first()
        if existing:
            continue

        connection.execute(
            roles_table.insert().values(
                id=uuid.uuid4(),
                name=role_config["name"],
                description=role_config["description"],
                permissions=get_system_role_permissions(role_key),
                is_system_role=True,
            )
        )


def downgrade() -> None:
    """Remove system roles no user is assigned to."""
    op.execute(
        "DELETE FROM roles WHERE is_system_role = true "
        "AND id NOT IN (SELECT role_id FROM profiles WHERE role_id IS NOT NULL)"
    )
