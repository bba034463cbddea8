"""Dialect-specific INSERT constructs for upserts."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def upsert_insert(db: Session, model: type[Any]) -> Any:
    """
    INSERT statement supporting ``on_conflict_do_nothing`` and
    ``on_conflict_do_update`` for the session's dialect.

    Raises:
        NotImplementedError: For dialects other than PostgreSQL and SQLite
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upserts are not supported on {dialect}")
