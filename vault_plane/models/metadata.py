import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, func

from vault_plane.db.base import Base


class MetadataKey(Base):
    __tablename__ = "metadata_keys"

    TYPE_USER_KEY = "user_key"
    TYPE_SHARED_KEY = "shared_key"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    fingerprint = Column(String(51), nullable=False)
    armored_key = Column(Text, nullable=False)
    expired = Column(DateTime(timezone=True), nullable=True)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created = Column(DateTime(timezone=True), server_default=func.now())


class ResourceType(Base):
    __tablename__ = "resource_types"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    definition = Column(Text, nullable=True)  # JSON schema of the resource and secret
    deleted = Column(Boolean, nullable=False, default=False)
    created = Column(DateTime(timezone=True), server_default=func.now())
