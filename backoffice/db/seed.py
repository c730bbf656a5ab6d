"""Database seeding for the back office.

Creates the system roles and, optionally, the first super admin.

Usage:
    python -m backoffice.db.seed [--super-admin EMAIL]
"""

import argparse
import logging
import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from backoffice.core.rbac.roles import SYSTEM_ROLES, get_system_role_permissions
from backoffice.db.models import Role, RoleType, User, UserStatus

logger = logging.getLogger(__name__)


def seed_system_roles(db: Session) -> dict[str, Role]:
    """
    Create the system roles.

    Idempotent - roles that already exist are returned unchanged.

    Args:
        db: Database session

    Returns:
        Dict mapping role key to Role object
    """
    created_roles = {}

    for role_key, role_config in SYSTEM_ROLES.items():
        existing = db.query(Role).filter(
            func.lower(Role.name) == role_config["name"].lower()
        ).first()

        if existing:
            if not existing.is_system_role:
                logger.warning(
                    "Custom role %r shadows system role %s; leaving it untouched",
                    existing.name, role_key,
                )
            created_roles[role_key] = existing
            continue

        role = Role(
            id=uuid.uuid4(),
            name=role_config["name"],
            description=role_config["description"],
            permissions=get_system_role_permissions(role_key),
            is_system_role=True,
        )
        db.add(role)
        created_roles[role_key] = role
        logger.info("Seeded system role %s", role_config["name"])

    db.flush()
    return created_roles


def seed_super_admin(db: Session, email: str, full_name: Optional[str] = None) -> User:
    """Create an active super admin, or promote the existing user with that email."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, full_name=full_name or "Super Admin")
        db.add(user)

    user.role_type = RoleType.SUPER_ADMIN.value
    user.role_id = None
    user.custom_permissions = None
    user.status = UserStatus.ACTIVE.value
    db.flush()
    logger.info("Super admin ready: %s", email)
    return user


def main():
    """Entry point for seeding from the command line."""
    from backoffice.common.logger import setup_logger
    from backoffice.core.config import get_settings
    from backoffice.db.base import Base
    from backoffice.db.session import SessionLocal, engine

    parser = argparse.ArgumentParser(description="Seed back office roles")
    parser.add_argument("--super-admin", metavar="EMAIL", help="Create or promote a super admin")
    parser.add_argument("--create-tables", action="store_true", help="Create tables before seeding")
    args = parser.parse_args()

    setup_logger("backoffice", level=get_settings().log_level)

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_system_roles(db)
        if args.super_admin:
            seed_super_admin(db, args.super_admin)
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
