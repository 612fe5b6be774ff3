import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from vault_plane.db.base import Base


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String, nullable=True)
    username = Column(String, nullable=True)
    uri = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    deleted = Column(Boolean, nullable=False, default=False)
    expired = Column(DateTime(timezone=True), nullable=True)

    # NULL metadata marks a legacy (v4) resource
    metadata_ = Column("metadata", Text, nullable=True)
    metadata_key_id = Column(String(36), ForeignKey("metadata_keys.id"), nullable=True)
    metadata_key_type = Column(String, nullable=True)  # "user_key", "shared_key"

    resource_type_id = Column(String(36), ForeignKey("resource_types.id"), nullable=True)

    created = Column(DateTime(timezone=True), server_default=func.now())
    modified = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    modified_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    creator = relationship("User", foreign_keys=[created_by], viewonly=True)
    modifier = relationship("User", foreign_keys=[modified_by], viewonly=True)
    resource_type = relationship("ResourceType", viewonly=True)
    secrets = relationship("Secret", viewonly=True)

    favorites = relationship(
        "Favorite",
        primaryjoin="and_(Resource.id == foreign(Favorite.foreign_key), "
        "Favorite.foreign_model == 'Resource')",
        viewonly=True,
    )

    # every edge on the resource
    permissions = relationship(
        "Permission",
        primaryjoin="and_(Resource.id == foreign(Permission.aco_foreign_key), "
        "Permission.aco == 'Resource')",
        viewonly=True,
    )

    # the requesting user's highest edge, only populated by the finder's permission join
    permission = relationship(
        "Permission",
        primaryjoin="and_(Resource.id == foreign(Permission.aco_foreign_key), "
        "Permission.aco == 'Resource')",
        uselist=False,
        viewonly=True,
    )
