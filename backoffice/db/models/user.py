import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from backoffice.db.base import Base


class UserStatus(str, Enum):
    """Account status. Only active accounts can be granted permissions."""
    ACTIVE = "active"
    BLOCKED = "blocked"
    PENDING = "pending"


class RoleType(str, Enum):
    """How a user's permissions are determined."""
    SUPER_ADMIN = "super_admin"   # Every permission, no matrix lookup
    CUSTOM_ROLE = "custom_role"   # Permissions from an assigned Role
    USER = "user"                 # Per-user override matrix, or nothing


class User(Base):
    """A back office principal (profile row)."""
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=UserStatus.PENDING.value)
    role_type = Column(String(20), nullable=False, default=RoleType.USER.value)
    role_id = Column(Uuid, ForeignKey("roles.id"), nullable=True, index=True)
    custom_permissions = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    role = relationship("Role", back_populates="users", foreign_keys=[role_id])

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<User {self.email} {self.role_type}/{self.status}>"
