"""Schema bootstrap helpers."""

from __future__ import annotations

import logging
import pathlib
from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SCHEMA_PATH = pathlib.Path(__file__).with_name("schema.sql")


def run_migrations(engine: Engine, schema_path: pathlib.Path = SCHEMA_PATH) -> int:
    """Apply schema.sql to the database and return the statement count."""
    statements = list(_load_statements(schema_path.read_text()))
    with engine.begin() as conn:
        for stmt in statements:
            conn.execute(text(stmt))
    logger.info("Applied %s schema statements from %s", len(statements), schema_path.name)
    return len(statements)


def _load_statements(sql: str) -> Iterable[str]:
    buffer: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        buffer.append(line)
        if stripped.endswith(";"):
            yield "\n".join(buffer)
            buffer.clear()
    if buffer:
        yield "\n".join(buffer)
