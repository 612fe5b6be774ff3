"""Shared fixtures: an in-memory database per test and helpers to seed it."""

import json
from datetime import datetime, timezone
from typing import Iterable, Optional

import pytest

from vault_plane.core.config import FeatureFlags
from vault_plane.db.session import make_engine, make_session_factory
from vault_plane.models import (
    Avatar,
    Base,
    Favorite,
    Folder,
    FolderRelation,
    Group,
    GroupUser,
    MetadataKey,
    Permission,
    PermissionLevel,
    Profile,
    Resource,
    ResourceType,
    Secret,
    User,
)
from vault_plane.services.resource_finder import ResourceFinder


class Seed:
    """Inserts rows with sensible defaults and commits right away."""

    def __init__(self, db):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def user(self, username: str, with_profile: bool = False) -> User:
        user = self._add(User(username=username))
        if with_profile:
            profile = self._add(Profile(user_id=user.id, first_name=username.title(), last_name="Doe"))
            self._add(Avatar(profile_id=profile.id, url=f"https://avatars.test/{username}.png"))
        return user

    def group(self, name: str, members: Iterable[User] = (), deleted: bool = False) -> Group:
        group = self._add(Group(name=name, deleted=deleted))
        for member in members:
            self.add_member(group, member)
        return group

    def add_member(self, group: Group, user: User) -> GroupUser:
        return self._add(GroupUser(group_id=group.id, user_id=user.id))

    def resource(self, name: str, **kwargs) -> Resource:
        return self._add(Resource(name=name, **kwargs))

    def permission(self, resource: Resource, aro, level: PermissionLevel) -> Permission:
        return self._add(
            Permission(
                aco="Resource",
                aco_foreign_key=resource.id,
                aro="Group" if isinstance(aro, Group) else "User",
                aro_foreign_key=aro.id,
                type=level.value,
            )
        )

    def favorite(self, user: User, resource: Resource) -> Favorite:
        return self._add(Favorite(user_id=user.id, foreign_model="Resource", foreign_key=resource.id))

    def secret(self, user: User, resource: Resource) -> Secret:
        return self._add(Secret(user_id=user.id, resource_id=resource.id, data=f"-----BEGIN PGP MESSAGE----- {user.username}"))

    def folder(self, name: str) -> Folder:
        return self._add(Folder(name=name))

    def place(self, resource: Resource, user: User, parent: Optional[Folder] = None) -> FolderRelation:
        return self._add(
            FolderRelation(
                foreign_model="Resource",
                foreign_id=resource.id,
                user_id=user.id,
                folder_parent_id=parent.id if parent else None,
            )
        )

    def metadata_key(self, expired: Optional[datetime] = None) -> MetadataKey:
        return self._add(MetadataKey(fingerprint="F" * 40, armored_key="-----BEGIN PGP PUBLIC KEY BLOCK-----", expired=expired))

    def resource_type(self, slug: str = "password-and-description") -> ResourceType:
        definition = {"resource": {"type": "object"}, "secret": {"type": "object"}}
        return self._add(ResourceType(slug=slug, name=slug.title(), definition=json.dumps(definition)))


@pytest.fixture
def db():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seed(db):
    return Seed(db)


@pytest.fixture
def finder():
    return ResourceFinder(FeatureFlags(folders=True, resource_types=True))


@pytest.fixture
def now():
    return datetime.now(timezone.utc)
