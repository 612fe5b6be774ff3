"""Finders narrowing resources by metadata format and metadata key state."""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.orm import selectinload

from vault_plane.db.query import ResourceQuery
from vault_plane.models.metadata import MetadataKey
from vault_plane.models.permission import AcoType, AroType, Permission
from vault_plane.models.resource import Resource
from vault_plane.schemas.find_options import MetadataUpgradeOptions

logger = logging.getLogger(__name__)


def expiration_expression() -> ColumnElement[bool]:
    """Resources without expiry date, or expiring after the moment the query runs."""
    return or_(
        Resource.expired.is_(None),
        Resource.expired > func.current_timestamp(),
    )


def not_expired(query: ResourceQuery) -> ResourceQuery:
    return query.where(expiration_expression())


def v4_format(query: ResourceQuery) -> ResourceQuery:
    return query.where(
        Resource.deleted.is_(False),
        Resource.metadata_.is_(None),
    )


def v5_format(query: ResourceQuery) -> ResourceQuery:
    return query.where(
        Resource.deleted.is_(False),
        Resource.metadata_.is_not(None),
    )


def rotate_key_index() -> ResourceQuery:
    """
    Resources encrypted with a shared metadata key that has an expiry date set.

    Any non null expiry counts, whether or not it is already in the past.
    """
    query = ResourceQuery(Resource)
    query.where(
        Resource.deleted.is_(False),
        Resource.metadata_key_type == MetadataKey.TYPE_SHARED_KEY,
        Resource.metadata_.is_not(None),
        Resource.metadata_key_id.is_not(None),
    )
    return query.join(
        MetadataKey,
        and_(
            MetadataKey.id == Resource.metadata_key_id,
            MetadataKey.expired.is_not(None),
        ),
    )


def _permissions_count(aro: AroType):
    return (
        select(func.count())
        .select_from(Permission)
        .where(
            Permission.aco_foreign_key == Resource.id,
            Permission.aco == AcoType.RESOURCE.value,
            Permission.aro == aro.value,
        )
        .correlate(Resource)
        .scalar_subquery()
    )


def upgrade_index(options: Optional[Mapping[str, Any]] = None) -> ResourceQuery:
    """
    Legacy (v4) resources waiting to be upgraded to the v5 metadata format.

    filter.is-shared=True keeps resources shared with a group or with more than one user,
    filter.is-shared=False those whose only edge is a single user edge. A resource
    without any edge matches neither.
    """
    options = MetadataUpgradeOptions.create(options)
    query = v4_format(ResourceQuery(Resource))

    if options.contain.permissions:
        query.options(selectinload(Resource.permissions))

    is_shared = options.filter.is_shared
    if is_shared is None:
        return query

    group_permissions_count = _permissions_count(AroType.GROUP)
    user_permissions_count = _permissions_count(AroType.USER)
    logger.debug(f"Filtering metadata upgrade index on is-shared={is_shared}")

    if is_shared:
        return query.where(
            or_(
                user_permissions_count >= 2,
                group_permissions_count >= 1,
            )
        )
    return query.where(
        group_permissions_count == 0,
        user_permissions_count == 1,
    )
