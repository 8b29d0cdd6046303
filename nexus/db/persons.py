"""Person database operations."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models import Person, PersonCreate, PersonUpdate
from .base import LIKE_ESCAPE, column_values, escape_like, paginate, to_model
from .schema import persons

logger = logging.getLogger(__name__)


class PersonOperations:
    """Person database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.persons_table = persons

    def _scoped(self, company_id: int, person_id: int):
        return and_(
            self.persons_table.c.company_id == company_id,
            self.persons_table.c.id == person_id,
        )

    def list_persons(
        self,
        company_id: int,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Person], int]:
        """List a company's persons."""
        t = self.persons_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if is_active is not None:
                    stmt = stmt.where(t.c.is_active == is_active)
                if search:
                    pattern = f"%{escape_like(search)}%"
                    stmt = stmt.where(
                        or_(
                            t.c.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                            t.c.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                            t.c.email.ilike(pattern, escape=LIKE_ESCAPE),
                            t.c.national_id.ilike(pattern, escape=LIKE_ESCAPE),
                        )
                    )
                stmt = stmt.order_by(t.c.last_name, t.c.first_name)
                return paginate(conn, stmt, Person, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing persons for company {company_id}: {e}")
            raise

    def get_person(self, company_id: int, person_id: int) -> Optional[Person]:
        """Get a person by ID within a company."""
        try:
            with self.engine.connect() as conn:
                stmt = select(self.persons_table).where(
                    self._scoped(company_id, person_id)
                )
                row = conn.execute(stmt).fetchone()
                return to_model(Person, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting person {person_id}: {e}")
            raise

    def create_person(self, company_id: int, person: PersonCreate) -> Person:
        """Insert a new person."""
        try:
            with self.engine.connect() as conn:
                stmt = (
                    insert(self.persons_table)
                    .values(**column_values(person, company_id=company_id))
                    .returning(self.persons_table)
                )
                row = conn.execute(stmt).fetchone()
                conn.commit()

                logger.info(
                    f"Inserted person: {person.first_name} {person.last_name} "
                    f"with ID: {row.id}"
                )
                return to_model(Person, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating person: {e}")
            raise ValueError(f"Invalid person: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating person: {e}")
            raise

    def update_person(
        self, company_id: int, person_id: int, person_update: PersonUpdate
    ) -> Optional[Person]:
        """Apply a partial update to a person."""
        values = column_values(person_update, exclude_unset=True)
        if not values:
            return self.get_person(company_id, person_id)

        try:
            with self.engine.connect() as conn:
                stmt = (
                    update(self.persons_table)
                    .where(self._scoped(company_id, person_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.persons_table)
                )
                row = conn.execute(stmt).fetchone()
                conn.commit()
                if row:
                    logger.info(f"Updated person {person_id}")
                    return to_model(Person, row)
                return None

        except IntegrityError as e:
            logger.error(f"Integrity error updating person {person_id}: {e}")
            raise ValueError(f"Invalid person update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating person {person_id}: {e}")
            raise

    def delete_person(self, company_id: int, person_id: int) -> bool:
        """Delete a person. Returns False when no such person exists."""
        try:
            with self.engine.connect() as conn:
                stmt = delete(self.persons_table).where(
                    self._scoped(company_id, person_id)
                )
                result = conn.execute(stmt)
                conn.commit()

                if result.rowcount > 0:
                    logger.info(f"Deleted person {person_id}")
                    return True
                return False

        except IntegrityError as e:
            logger.error(f"Integrity error deleting person {person_id}: {e}")
            raise ValueError(
                "Person is referenced by shareholder or capital records"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error deleting person {person_id}: {e}")
            raise
