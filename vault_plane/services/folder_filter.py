import logging
from typing import Iterable

from sqlalchemy import and_, or_

from vault_plane.db.query import ResourceQuery
from vault_plane.models.folder import ROOT_ID, FolderRelation

logger = logging.getLogger(__name__)


def filter_by_folder_parent_ids(
    query: ResourceQuery,
    user_id: str,
    parent_ids: Iterable[str],
) -> ResourceQuery:
    """
    Keep the items the user sees directly under one of the given folders.

    The ROOT_ID sentinel matches items sitting at the user's top level (no parent),
    and is OR-ed with the plain folder ids.
    """
    if isinstance(parent_ids, str):
        parent_ids = [parent_ids]
    parent_ids = list(parent_ids or [])
    if not parent_ids:
        return query

    include_root = ROOT_ID in parent_ids
    folder_ids = [parent_id for parent_id in parent_ids if parent_id != ROOT_ID]

    conditions = []
    if folder_ids:
        conditions.append(FolderRelation.folder_parent_id.in_(folder_ids))
    if include_root:
        conditions.append(FolderRelation.folder_parent_id.is_(None))

    logger.debug(f"Filtering on {len(folder_ids)} parent folder(s), root included: {include_root}")

    return query.join(
        FolderRelation,
        and_(
            FolderRelation.foreign_id == query.model.id,
            FolderRelation.foreign_model == query.model.__name__,
            FolderRelation.user_id == user_id,
            or_(*conditions),
        ),
    )
