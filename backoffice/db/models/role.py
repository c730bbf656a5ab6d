import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Boolean, Index, Uuid, func
from sqlalchemy.orm import relationship

from backoffice.db.base import Base


class Role(Base):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    permissions = Column(JSON, nullable=False, default=dict)
    is_system_role = Column(Boolean, nullable=False, default=False)
    created_by = Column(Uuid, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="role", foreign_keys="User.role_id")

    # Role names are unique regardless of case
    __table_args__ = (
        Index("uq_roles_name_lower", func.lower(name), unique=True),
    )

    def __repr__(self) -> str:
        return f"<Role {self.name!r} system={self.is_system_role}>"
