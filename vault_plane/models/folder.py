import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, func
from vault_plane.db.base import Base


# Sentinel accepted in parent filters for "top level", stored as a NULL parent
ROOT_ID = "root"


class Folder(Base):
    __tablename__ = "folders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), server_default=func.now())
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)


class FolderRelation(Base):
    """Places an item under a parent folder from one user's point of view."""

    __tablename__ = "folders_relations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    foreign_model = Column(String, nullable=False)  # "Resource", "Folder"
    foreign_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    folder_parent_id = Column(String(36), ForeignKey("folders.id"), nullable=True)
    created = Column(DateTime(timezone=True), server_default=func.now())
