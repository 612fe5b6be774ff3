"""Permission resolution over the aco/aro permission graph.

A user's effective access on an object is the union of the edges granted to
the user directly and the edges granted to every group the user is a member
of. Group membership only ever adds access; when several edges apply, the
highest level wins.

The ``find_*`` helpers return composable selects so the resource finder can
embed them as sub-queries. The other functions execute against a session.
"""

import logging
from typing import Optional, Set, Union

from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.orm import Session

from vault_plane.models.permission import AcoType, AroType, Permission, PermissionLevel
from vault_plane.services.group_membership import group_ids_select

logger = logging.getLogger(__name__)


def aro_condition(user_id: str, check_groups_users: bool = False) -> ColumnElement[bool]:
    """
    Match the edges granted to the identity, and when check_groups_users is set,
    the edges granted to any group the identity is member of.
    """
    if not check_groups_users:
        return Permission.aro_foreign_key == user_id

    return or_(
        Permission.aro_foreign_key == user_id,
        Permission.aro_foreign_key.in_(group_ids_select(user_id)),
    )


def find_all_by_aro(
    aco: AcoType,
    aro_foreign_key: str,
    check_groups_users: bool = False,
) -> Select:
    return select(Permission).where(
        Permission.aco == aco.value,
        aro_condition(aro_foreign_key, check_groups_users),
    )


def find_acos_by_aro_is_owner(
    aco: AcoType,
    user_id: str,
    check_groups_users: bool = False,
) -> Select:
    return select(Permission.aco_foreign_key).where(
        Permission.aco == aco.value,
        Permission.type == PermissionLevel.OWNER.value,
        aro_condition(user_id, check_groups_users),
    )


def find_highest_by_aco_and_aro(
    aco: AcoType,
    aco_foreign_key: Union[str, ColumnElement],
    user_id: str,
) -> Select:
    """
    The single edge carrying the highest level the user holds on the object,
    directly or through a group. On equal levels the direct user edge is preferred.

    aco_foreign_key may be a literal id or a column of an enclosing query,
    in which case the select is meant to be used as a correlated sub-query.
    """
    return (
        select(Permission)
        .where(
            Permission.aco == aco.value,
            Permission.aco_foreign_key == aco_foreign_key,
            aro_condition(user_id, check_groups_users=True),
        )
        .order_by(
            Permission.type.desc(),
            (Permission.aro == AroType.USER.value).desc(),
            Permission.id,
        )
        .limit(1)
    )


def highest_permission(
    db: Session,
    aco: AcoType,
    aco_id: str,
    user_id: str,
) -> Optional[PermissionLevel]:
    """
    Highest level the user holds on the object, or None when no edge applies.
    """
    permission = db.scalars(find_highest_by_aco_and_aro(aco, aco_id, user_id)).first()
    if permission is None:
        return None
    return PermissionLevel(permission.type)


def has_any_access(db: Session, aco: AcoType, aco_id: str, user_id: str) -> bool:
    return highest_permission(db, aco, aco_id, user_id) is not None


def find_all_by_identity(
    db: Session,
    aco: AcoType,
    identity_id: str,
    expand_groups: bool,
) -> Set[str]:
    """
    Ids of every object the identity holds an edge on.
    expand_groups must stay off for identity scoped lookups, e.g. what was shared with a group itself.
    """
    stmt = select(Permission.aco_foreign_key).where(
        Permission.aco == aco.value,
        aro_condition(identity_id, expand_groups),
    )
    return set(db.scalars(stmt).all())


def objects_owned_by(
    db: Session,
    aco: AcoType,
    user_id: str,
    expand_groups: bool,
) -> Set[str]:
    return set(db.scalars(find_acos_by_aro_is_owner(aco, user_id, expand_groups)).all())
