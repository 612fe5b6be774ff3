from typing import Protocol, runtime_checkable

from vault_plane.db.query import ResourceQuery
from vault_plane.schemas.find_options import FindIndexOptions


@runtime_checkable
class FindIndexExtension(Protocol):
    """Lets other features narrow the resource index without the finder knowing about them.

    ``extend`` is called once per build, before the finder applies any filter
    of its own. Implementations append to ``query`` in place (``query.model``
    tells which object set is being listed, ``options.user_id`` for whom);
    returning another query has no effect.
    """

    def extend(self, query: ResourceQuery, options: FindIndexOptions) -> None:
        ...
