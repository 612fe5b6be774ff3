from typing import Any, Callable, Dict, List, Set

from sqlalchemy import Select, inspect, select
from sqlalchemy.orm import Session

Row = Dict[str, Any]
ResultFormatter = Callable[[List[Row]], List[Row]]


def to_row(entity: Any) -> Row:
    """
    Flatten an ORM instance into a plain dict.
    Only relationships that were loaded by the query are included, nothing is lazy loaded.
    """
    state = inspect(entity)
    row: Row = {
        attr.columns[0].name: getattr(entity, attr.key)
        for attr in state.mapper.column_attrs
    }
    for rel in state.mapper.relationships:
        if rel.key in state.unloaded:
            continue
        value = getattr(entity, rel.key)
        if value is None:
            row[rel.key] = None
        elif rel.uselist:
            row[rel.key] = [to_row(item) for item in value]
        else:
            row[rel.key] = to_row(value)
    return row


class ResourceQuery:
    """
    A select under construction plus the formatters its rows go through once executed.

    Builder methods mutate the query in place and return it, so filters and
    extensions can keep appending to the same object.
    """

    def __init__(self, model: Any, stmt: Select | None = None):
        self.model = model
        self.stmt = stmt if stmt is not None else select(model)
        self._formatters: List[ResultFormatter] = []

    def where(self, *criteria) -> "ResourceQuery":
        self.stmt = self.stmt.where(*criteria)
        return self

    def join(self, target, onclause=None) -> "ResourceQuery":
        self.stmt = self.stmt.join(target, onclause)
        return self

    def options(self, *options) -> "ResourceQuery":
        self.stmt = self.stmt.options(*options)
        return self

    def order_by(self, *clauses) -> "ResourceQuery":
        self.stmt = self.stmt.order_by(*clauses)
        return self

    def format_results(self, formatter: ResultFormatter) -> "ResourceQuery":
        self._formatters.append(formatter)
        return self

    def all(self, db: Session) -> List[Row]:
        # user scoped eager loads (secrets, favorites) must not reuse another user's collections
        stmt = self.stmt.execution_options(populate_existing=True)
        entities = db.execute(stmt).unique().scalars().all()
        rows = [to_row(entity) for entity in entities]
        for formatter in self._formatters:
            rows = formatter(rows)
        return rows

    def ids(self, db: Session) -> Set[str]:
        return {row["id"] for row in self.all(db)}

    def __str__(self) -> str:
        return str(self.stmt)
