"""Company database operations."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models import Company, CompanyCreate, CompanyStatus, CompanyUpdate
from .base import LIKE_ESCAPE, column_values, escape_like, paginate, to_model
from .schema import companies

logger = logging.getLogger(__name__)


class CompanyOperations:
    """Company database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.companies_table = companies

    def list_companies(
        self,
        status: Optional[CompanyStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Company], int]:
        """List companies, optionally filtered by status or name prefix."""
        try:
            with self.engine.connect() as conn:
                stmt = select(self.companies_table)
                if status is not None:
                    stmt = stmt.where(self.companies_table.c.status == status.value)
                if search:
                    stmt = stmt.where(
                        self.companies_table.c.name.ilike(
                            f"{escape_like(search)}%", escape=LIKE_ESCAPE
                        )
                    )
                stmt = stmt.order_by(self.companies_table.c.name)
                return paginate(conn, stmt, Company, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing companies: {e}")
            raise

    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        try:
            with self.engine.connect() as conn:
                stmt = select(self.companies_table).where(
                    self.companies_table.c.id == company_id
                )
                row = conn.execute(stmt).fetchone()
                return to_model(Company, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting company {company_id}: {e}")
            raise

    def create_company(self, company: CompanyCreate) -> Company:
        """Insert a new company."""
        try:
            with self.engine.connect() as conn:
                stmt = (
                    insert(self.companies_table)
                    .values(**column_values(company))
                    .returning(self.companies_table)
                )
                row = conn.execute(stmt).fetchone()
                conn.commit()

                logger.info(f"Inserted company: {company.name} with ID: {row.id}")
                return to_model(Company, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating company: {e}")
            raise ValueError(f"Company with TIN {company.tin} already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating company: {e}")
            raise

    def update_company(
        self, company_id: int, company_update: CompanyUpdate
    ) -> Optional[Company]:
        """Apply a partial update to a company."""
        values = column_values(company_update, exclude_unset=True)
        if not values:
            return self.get_company(company_id)

        try:
            with self.engine.connect() as conn:
                stmt = (
                    update(self.companies_table)
                    .where(self.companies_table.c.id == company_id)
                    .values(**values, updated_at=func.now())
                    .returning(self.companies_table)
                )
                row = conn.execute(stmt).fetchone()
                conn.commit()

                if row:
                    logger.info(f"Updated company {company_id}")
                    return to_model(Company, row)
                return None

        except IntegrityError as e:
            logger.error(f"Integrity error updating company {company_id}: {e}")
            raise ValueError(f"Invalid company update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating company {company_id}: {e}")
            raise

    def deactivate_company(self, company_id: int) -> Optional[Company]:
        """Mark a company inactive; companies are never hard deleted."""
        return self.update_company(
            company_id, CompanyUpdate(status=CompanyStatus.INACTIVE)
        )
