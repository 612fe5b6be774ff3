import enum
import uuid

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from vault_plane.db.base import Base


class AcoType(str, enum.Enum):
    """Access controlled object types."""

    RESOURCE = "Resource"
    FOLDER = "Folder"


class AroType(str, enum.Enum):
    """Access requesting object types."""

    USER = "User"
    GROUP = "Group"


class PermissionLevel(enum.IntEnum):
    READ = 1
    UPDATE = 7
    OWNER = 15


class Permission(Base):
    __tablename__ = "permissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    aco = Column(String, nullable=False, index=True)
    aco_foreign_key = Column(String(36), nullable=False, index=True)
    aro = Column(String, nullable=False)
    aro_foreign_key = Column(String(36), nullable=False, index=True)

    type = Column(Integer, nullable=False)  # PermissionLevel value

    created = Column(DateTime(timezone=True), server_default=func.now())
    modified = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship(
        "User",
        primaryjoin="and_(foreign(Permission.aro_foreign_key) == User.id, Permission.aro == 'User')",
        viewonly=True,
    )
    group = relationship(
        "Group",
        primaryjoin="and_(foreign(Permission.aro_foreign_key) == Group.id, Permission.aro == 'Group')",
        viewonly=True,
    )

    __table_args__ = (
        UniqueConstraint("aco", "aco_foreign_key", "aro", "aro_foreign_key", name="uq_permission_aco_aro"),
    )
