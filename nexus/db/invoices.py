"""Invoice and receipt database operations."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import InvalidStatusError
from ..models import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceType,
)
from ..models.invoice import INVOICE_TRANSITIONS, NUMBER_PREFIXES
from .base import column_values, paginate, to_model
from .schema import invoices

logger = logging.getLogger(__name__)


class InvoiceOperations:
    """Invoice and receipt database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.invoices_table = invoices

    def _scoped(self, company_id: int, invoice_id: int):
        return and_(
            self.invoices_table.c.company_id == company_id,
            self.invoices_table.c.id == invoice_id,
        )

    def _fetch(self, conn: Connection, company_id: int, invoice_id: int):
        return conn.execute(
            select(self.invoices_table).where(self._scoped(company_id, invoice_id))
        ).fetchone()

    def next_number(
        self, conn: Connection, company_id: int, invoice_type: InvoiceType, year: int
    ) -> str:
        """Next ``INV-YYYY-NNN`` / ``REC-YYYY-NNN`` number for the company."""
        t = self.invoices_table
        prefix = f"{NUMBER_PREFIXES[invoice_type]}-{year}-"
        numbers = conn.execute(
            select(t.c.number).where(
                and_(t.c.company_id == company_id, t.c.number.like(f"{prefix}%"))
            )
        ).scalars()
        sequence = 0
        for number in numbers:
            suffix = number[len(prefix):]
            if suffix.isdigit():
                sequence = max(sequence, int(suffix))
        return f"{prefix}{sequence + 1:03d}"

    def list_invoices(
        self,
        company_id: int,
        invoice_type: Optional[InvoiceType] = None,
        status: Optional[InvoiceStatus] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Invoice], int]:
        """List records, newest first."""
        t = self.invoices_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if invoice_type is not None:
                    stmt = stmt.where(t.c.type == invoice_type.value)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                stmt = stmt.order_by(t.c.date.desc(), t.c.id.desc())
                return paginate(conn, stmt, Invoice, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing invoices for company {company_id}: {e}")
            raise

    def get_invoice(self, company_id: int, invoice_id: int) -> Optional[Invoice]:
        """Get a record by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, invoice_id)
                return to_model(Invoice, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting invoice {invoice_id}: {e}")
            raise

    def create_invoice(self, company_id: int, invoice: InvoiceCreate) -> Invoice:
        """Create a record, numbering it when no number was supplied."""
        try:
            with self.engine.connect() as conn:
                number = invoice.number or self.next_number(
                    conn, company_id, invoice.type, invoice.date.year
                )
                row = conn.execute(
                    insert(self.invoices_table)
                    .values(
                        **column_values(invoice, company_id=company_id, number=number)
                    )
                    .returning(self.invoices_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Created {invoice.type.value} {number} (ID: {row.id})")
                return to_model(Invoice, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating invoice: {e}")
            raise ValueError(
                f"{invoice.type.value.capitalize()} number {invoice.number} already exists"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating invoice: {e}")
            raise

    def update_status(
        self, company_id: int, invoice_id: int, status_update: InvoiceStatusUpdate
    ) -> Optional[Invoice]:
        """Move a record along its allowed status transitions."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, invoice_id)
                if current is None:
                    return None
                current_status = InvoiceStatus(current.status)
                if status_update.status not in INVOICE_TRANSITIONS[current_status]:
                    raise InvalidStatusError(
                        f"Cannot change status from {current_status.value} "
                        f"to {status_update.status.value}"
                    )
                values = column_values(status_update, exclude_unset=True)
                row = conn.execute(
                    update(self.invoices_table)
                    .where(self._scoped(company_id, invoice_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.invoices_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Invoice {invoice_id} moved from {current_status.value} "
                    f"to {status_update.status.value}"
                )
                return to_model(Invoice, row)

        except SQLAlchemyError as e:
            logger.error(f"Error updating invoice {invoice_id} status: {e}")
            raise

    def delete_invoice(self, company_id: int, invoice_id: int) -> bool:
        """Delete a draft record. Returns False when it does not exist."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, invoice_id)
                if current is None:
                    return False
                if current.status != InvoiceStatus.DRAFT.value:
                    raise InvalidStatusError("Only draft records can be deleted")
                conn.execute(
                    delete(self.invoices_table).where(
                        self._scoped(company_id, invoice_id)
                    )
                )
                conn.commit()

                logger.info(f"Deleted invoice {invoice_id}")
                return True

        except SQLAlchemyError as e:
            logger.error(f"Error deleting invoice {invoice_id}: {e}")
            raise
