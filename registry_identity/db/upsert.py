"""Dialect-aware INSERT ... ON CONFLICT DO UPDATE."""

from typing import Any, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert(
    db: Session,
    model: Any,
    index_elements: Sequence[str],
    update_columns: Sequence[str],
):
    """Build an upsert statement for ``model`` on the session's dialect.

    On conflict with ``index_elements`` each of ``update_columns`` takes the
    proposed (``excluded``) value, never a re-read one. Values are supplied by
    the caller, either through ``.values(row)`` or as executemany parameters.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise ValueError(f"upsert is not supported on dialect {dialect!r}")

    stmt = insert(model)
    return stmt.on_conflict_do_update(
        index_elements=list(index_elements),
        set_={column: getattr(stmt.excluded, column) for column in update_columns},
    )
