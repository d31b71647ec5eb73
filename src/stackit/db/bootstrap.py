"""One-time schema verification run during process startup."""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from stackit.core.errors import SchemaError
from stackit.db.session import Base

logger = logging.getLogger(__name__)


def verify_schema(bind: Engine | Connection) -> None:
    """Check that every mapped table and column exists in the live database.

    Args:
        bind: Engine or connection to the database to inspect.

    Raises:
        SchemaError: If a table or column declared by the models is missing.
    """
    inspector = inspect(bind)
    existing_tables = set(inspector.get_table_names())

    problems: list[str] = []
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            problems.append(f"missing table {table.name}")
            continue
        existing_columns = {column["name"] for column in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name not in existing_columns:
                problems.append(f"missing column {table.name}.{column.name}")

    if problems:
        logger.error("Database schema check failed: %s", "; ".join(problems))
        raise SchemaError("Database schema is out of date: " + "; ".join(problems))

    logger.info("Database schema verified (%d tables)", len(Base.metadata.sorted_tables))
