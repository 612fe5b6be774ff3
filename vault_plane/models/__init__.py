from vault_plane.db.base import Base
from vault_plane.models.user import User, Profile, Avatar
from vault_plane.models.group import Group, GroupUser
from vault_plane.models.folder import Folder, FolderRelation, ROOT_ID
from vault_plane.models.metadata import MetadataKey, ResourceType
from vault_plane.models.resource import Resource
from vault_plane.models.permission import Permission, PermissionLevel, AcoType, AroType
from vault_plane.models.secret import Secret, Favorite
