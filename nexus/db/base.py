"""Base database manager using SQLAlchemy query builder."""

import logging
from enum import Enum
from typing import List, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import and_, create_engine, event, func, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from ..errors import BusinessRuleError
from .schema import persons

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class DatabaseManager:
    """Database manager using SQLAlchemy query builder."""

    def __init__(self, database_url: str):
        """Initialize database connection."""
        self.engine: Engine = create_engine(database_url)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._test_connection()

    def _test_connection(self) -> None:
        """Test database connection."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection successful")
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            raise

    def close(self) -> None:
        """Close database connection."""
        self.engine.dispose()
        logger.info("Database connection closed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def to_model(model: Type[ModelT], row) -> ModelT:
    """Build a pydantic model from a result row."""
    return model.model_validate(dict(row._mapping))


def paginate(
    conn: Connection, stmt: Select, model: Type[ModelT], page: int, limit: int
) -> Tuple[List[ModelT], int]:
    """Run an ordered select for one page and count the full result."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = conn.execute(count_stmt).scalar() or 0
    rows = conn.execute(stmt.limit(limit).offset((page - 1) * limit)).fetchall()
    return [to_model(model, row) for row in rows], total


def column_values(model: BaseModel, exclude_unset: bool = False, **overrides) -> dict:
    """Dump a pydantic model into column values, storing enums by value."""
    values = model.model_dump(exclude_unset=exclude_unset)
    values.update(overrides)
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in values.items()
    }


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally; pair with LIKE_ESCAPE."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def person_name(row) -> str:
    """Display name of a ``persons`` row."""
    parts = [row.first_name, row.middle_name, row.last_name]
    return " ".join(p for p in parts if p)


def company_person(conn: Connection, company_id: int, person_id: int):
    """Fetch a person of the company or raise PERSON_NOT_FOUND."""
    row = conn.execute(
        select(persons).where(
            and_(persons.c.company_id == company_id, persons.c.id == person_id)
        )
    ).fetchone()
    if row is None:
        raise BusinessRuleError(
            f"Person {person_id} not found for this company", "PERSON_NOT_FOUND"
        )
    return row
