import logging
from typing import Set

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from vault_plane.models.group import GroupUser

logger = logging.getLogger(__name__)


def group_ids_select(user_id: str) -> Select:
    """
    Ids of the groups the user is a member of, as a select usable in IN clauses.
    """
    return select(GroupUser.group_id).where(GroupUser.user_id == user_id)


def groups_of(db: Session, user_id: str) -> Set[str]:
    group_ids = set(db.scalars(group_ids_select(user_id)).all())
    logger.debug(f"User {user_id} is member of {len(group_ids)} group(s)")
    return group_ids
