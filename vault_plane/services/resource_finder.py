"""Build the queries listing the resources a user can see.

Every entry point validates its identifiers first and returns an unexecuted
``ResourceQuery``; callers run it with ``query.all(db)``. Filters are plain
conjunctions, applied in a fixed order:

1. extensions registered on the finder
2. deleted resources out
3. id, favorite, ownership and sharing filters
4. parent folders, when the folders feature is enabled
5. the requesting user's highest permission join, or the generic visibility filter
6. inclusions, ordering and row post processing
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import and_, exists
from sqlalchemy.orm import aliased, contains_eager, joinedload, selectinload

from vault_plane.core.config import FeatureFlags, settings
from vault_plane.core.validation import ensure_uuid, ensure_uuid_list
from vault_plane.db.query import ResourceQuery
from vault_plane.models.permission import AcoType, Permission
from vault_plane.models.resource import Resource
from vault_plane.models.secret import Favorite, Secret
from vault_plane.models.user import Profile, User
from vault_plane.schemas.find_options import FindIndexOptions
from vault_plane.services.folder_filter import filter_by_folder_parent_ids
from vault_plane.services.formatters import decode_resource_type_definition, strip_resource_type_id
from vault_plane.services.hooks import FindIndexExtension
from vault_plane.services.permissions import (
    aro_condition,
    find_acos_by_aro_is_owner,
    find_all_by_aro,
    find_highest_by_aco_and_aro,
)

logger = logging.getLogger(__name__)

Options = Optional[Mapping[str, Any]]


class ResourceFinder:
    def __init__(
        self,
        features: Optional[FeatureFlags] = None,
        extensions: Sequence[FindIndexExtension] = (),
    ):
        self.features = features or FeatureFlags.from_settings(settings)
        self.extensions: List[FindIndexExtension] = list(extensions)

    def add_extension(self, extension: FindIndexExtension) -> None:
        self.extensions.append(extension)

    def build_index(self, user_id: str, options: Options = None) -> ResourceQuery:
        """
        Build the query listing the resources the user has access to.

        Raises InvalidInputException if user_id is not a valid UUID or the options do not validate.
        """
        ensure_uuid(user_id, "The user identifier should be a valid UUID.")
        options = FindIndexOptions.create(options)
        options.user_id = user_id

        query = ResourceQuery(Resource)
        for extension in self.extensions:
            extension.extend(query, options)

        query.where(Resource.deleted.is_(False))

        filters = options.filter
        if filters.has_id is not None:
            query.where(Resource.id.in_(filters.has_id))

        if filters.is_favorite is not None:
            self._filter_query_by_favorite(query, user_id, filters.is_favorite)

        if filters.is_owned_by_me is not None:
            self._filter_query_is_owned_by_user(query, user_id)

        if filters.is_shared_with_me is not None:
            self._filter_query_shared_with_user(query, user_id)

        if filters.is_shared_with_group is not None:
            self._filter_query_shared_with_group(query, filters.is_shared_with_group)

        if self.features.folders and filters.has_parent is not None:
            filter_by_folder_parent_ids(query, user_id, filters.has_parent)

        contain = options.contain
        # The permission join already restricts to the resources the user can access.
        if contain.permission is not None:
            self._contain_highest_permission(query, user_id)
        else:
            self.filter_resources_by_permissions(query, user_id)

        if contain.secret is not None:
            query.options(selectinload(Resource.secrets.and_(Secret.user_id == user_id)))

        if contain.creator is not None:
            query.options(joinedload(Resource.creator))

        if contain.modifier is not None:
            query.options(joinedload(Resource.modifier))

        if contain.favorite is not None:
            query.options(selectinload(Resource.favorites.and_(Favorite.user_id == user_id)))

        if contain.permissions_user_profile is not None:
            query.options(
                selectinload(Resource.permissions)
                .selectinload(Permission.user)
                .selectinload(User.profile)
                .selectinload(Profile.avatar)
            )

        if contain.permissions_group is not None:
            query.options(selectinload(Resource.permissions).selectinload(Permission.group))

        if contain.permissions is not None:
            query.options(selectinload(Resource.permissions))

        if contain.resource_type is not None:
            query.options(joinedload(Resource.resource_type))
            query.format_results(decode_resource_type_definition)

        # Kept for clients predating pagination.
        if options.order.resources_modified is not None:
            query.order_by(Resource.modified.desc())

        if not self.features.resource_types:
            query.format_results(strip_resource_type_id)

        logger.debug(
            f"Built resource index for user {user_id} "
            f"(filters: {filters.model_dump(exclude_none=True)}, "
            f"contain: {contain.model_dump(exclude_none=True)})"
        )
        return query

    def build_view(self, user_id: str, resource_id: str, options: Options = None) -> ResourceQuery:
        ensure_uuid(user_id, "The user identifier should be a valid UUID.")
        ensure_uuid(resource_id, "The resource identifier should be a valid UUID.")

        return self.build_index(user_id, options).where(Resource.id == resource_id)

    def build_by_ids(
        self,
        user_id: str,
        resource_ids: Iterable[str],
        options: Options = None,
    ) -> ResourceQuery:
        ensure_uuid(user_id, "The user identifier should be a valid UUID.")
        resource_ids = ensure_uuid_list(
            resource_ids,
            "The resources ids list can not be empty.",
            "The list of resources identifiers should contain only valid UUIDs.",
        )

        return self.build_index(user_id, options).where(Resource.id.in_(resource_ids))

    def build_by_group_access(self, group_id: str) -> ResourceQuery:
        """Resources shared with the group itself, whatever its members can see."""
        ensure_uuid(group_id, "The group identifier should be a valid UUID.")

        query = ResourceQuery(Resource).where(Resource.deleted.is_(False))
        return self._filter_query_shared_with_group(query, group_id)

    def filter_resources_by_permissions(self, query: ResourceQuery, user_id: str) -> ResourceQuery:
        """
        Keep the resources the user holds any permission on, directly or
        through one of the groups they are member of.
        """
        ensure_uuid(user_id, "The user identifier should be a valid UUID.")

        has_permission = exists().where(
            Permission.aco == AcoType.RESOURCE.value,
            Permission.aco_foreign_key == Resource.id,
            aro_condition(user_id, check_groups_users=True),
        )
        return query.where(has_permission)

    def _contain_highest_permission(self, query: ResourceQuery, user_id: str) -> ResourceQuery:
        highest = aliased(Permission, name="highest_permission")
        highest_id = (
            find_highest_by_aco_and_aro(AcoType.RESOURCE, Resource.id, user_id)
            .with_only_columns(Permission.id)
            .correlate(Resource)
            .scalar_subquery()
        )
        query.join(highest, highest.id == highest_id)
        return query.options(contains_eager(Resource.permission.of_type(highest)))

    def _filter_query_by_favorite(self, query: ResourceQuery, user_id: str, is_favorite: bool) -> ResourceQuery:
        favorite_of_user = and_(
            Favorite.foreign_key == Resource.id,
            Favorite.foreign_model == Resource.__name__,
            Favorite.user_id == user_id,
        )
        if is_favorite:
            return query.join(Favorite, favorite_of_user)
        return query.where(~exists().where(favorite_of_user))

    def _filter_query_is_owned_by_user(self, query: ResourceQuery, user_id: str) -> ResourceQuery:
        owned = find_acos_by_aro_is_owner(AcoType.RESOURCE, user_id, check_groups_users=True)
        return query.where(Resource.id.in_(owned))

    def _filter_query_shared_with_user(self, query: ResourceQuery, user_id: str) -> ResourceQuery:
        """
        Shared with the user means accessible but not owned, neither directly
        nor through a group.
        """
        owned = find_acos_by_aro_is_owner(AcoType.RESOURCE, user_id, check_groups_users=True)
        return query.where(Resource.id.not_in(owned))

    def _filter_query_shared_with_group(self, query: ResourceQuery, group_id: str) -> ResourceQuery:
        ensure_uuid(group_id, "The group identifier should be a valid UUID.")

        shared_with_group = find_all_by_aro(AcoType.RESOURCE, group_id).with_only_columns(
            Permission.aco_foreign_key
        )
        return query.where(Resource.id.in_(shared_with_group))
