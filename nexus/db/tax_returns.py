"""Tax return database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    TaxPayment,
    TaxReturn,
    TaxReturnCreate,
    TaxReturnStatus,
    TaxReturnUpdate,
    TaxStatistics,
    TaxType,
)
from .base import column_values, paginate, to_model
from .schema import tax_returns

logger = logging.getLogger(__name__)

DEADLINE_LIMIT = 10


class TaxReturnOperations:
    """Tax return database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.returns_table = tax_returns

    def _scoped(self, company_id: int, return_id: int):
        return and_(
            self.returns_table.c.company_id == company_id,
            self.returns_table.c.id == return_id,
        )

    def _fetch(self, conn: Connection, company_id: int, return_id: int):
        return conn.execute(
            select(self.returns_table).where(self._scoped(company_id, return_id))
        ).fetchone()

    def _next_reference(
        self, conn: Connection, company_id: int, tax_type: TaxType, period: str
    ) -> str:
        """``TYPE-YEAR-NNN``, numbered per company, type and year."""
        t = self.returns_table
        prefix = f"{tax_type.value}-{period[:4]}-"
        count = conn.execute(
            select(func.count()).where(
                and_(
                    t.c.company_id == company_id,
                    t.c.reference.startswith(prefix, autoescape=True),
                )
            )
        ).scalar()
        return f"{prefix}{count + 1:03d}"

    def list_returns(
        self,
        company_id: int,
        tax_type: Optional[TaxType] = None,
        status: Optional[TaxReturnStatus] = None,
        period: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[TaxReturn], int]:
        """List returns by due date, latest first.

        ``period`` matches the start of the return period, so ``2026``
        selects every return filed for that year.
        """
        t = self.returns_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if tax_type is not None:
                    stmt = stmt.where(t.c.tax_type == tax_type.value)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if period:
                    stmt = stmt.where(t.c.period.startswith(period, autoescape=True))
                stmt = stmt.order_by(t.c.due_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, TaxReturn, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing tax returns: {e}")
            raise

    def get_return(self, company_id: int, return_id: int) -> Optional[TaxReturn]:
        """Get a tax return by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, return_id)
                return to_model(TaxReturn, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting tax return {return_id}: {e}")
            raise

    def create_return(self, company_id: int, tax_return: TaxReturnCreate) -> TaxReturn:
        """Record a pending return, numbering it when no reference is given."""
        try:
            with self.engine.connect() as conn:
                reference = tax_return.reference or self._next_reference(
                    conn, company_id, tax_return.tax_type, tax_return.period
                )
                row = conn.execute(
                    insert(self.returns_table)
                    .values(
                        **column_values(
                            tax_return,
                            company_id=company_id,
                            reference=reference,
                            status=TaxReturnStatus.PENDING.value,
                        )
                    )
                    .returning(self.returns_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Recorded tax return {reference} for company {company_id}")
                return to_model(TaxReturn, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating tax return: {e}")
            raise ValueError(f"Invalid tax return: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating tax return: {e}")
            raise

    def update_return(
        self, company_id: int, return_id: int, return_update: TaxReturnUpdate
    ) -> Optional[TaxReturn]:
        """Edit a return that has not been submitted."""
        values = column_values(return_update, exclude_unset=True)
        if not values:
            return self.get_return(company_id, return_id)

        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, return_id)
                if current is None:
                    return None
                if current.status != TaxReturnStatus.PENDING.value:
                    raise InvalidStatusError(
                        f"Only pending returns can be edited (status: {current.status})"
                    )
                row = conn.execute(
                    update(self.returns_table)
                    .where(self._scoped(company_id, return_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.returns_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Updated tax return {return_id}")
                return to_model(TaxReturn, row)

        except SQLAlchemyError as e:
            logger.error(f"Error updating tax return {return_id}: {e}")
            raise

    def submit_return(
        self, company_id: int, return_id: int, submitted_on: Optional[date] = None
    ) -> Optional[TaxReturn]:
        """Mark a pending return submitted."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, return_id)
                if current is None:
                    return None
                if current.status != TaxReturnStatus.PENDING.value:
                    raise InvalidStatusError(
                        "Tax return already submitted", "ALREADY_SUBMITTED"
                    )
                row = conn.execute(
                    update(self.returns_table)
                    .where(self._scoped(company_id, return_id))
                    .values(
                        status=TaxReturnStatus.SUBMITTED.value,
                        submission_date=submitted_on or date.today(),
                        updated_at=func.now(),
                    )
                    .returning(self.returns_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Submitted tax return {current.reference}")
                return to_model(TaxReturn, row)

        except SQLAlchemyError as e:
            logger.error(f"Error submitting tax return {return_id}: {e}")
            raise

    def record_payment(
        self, company_id: int, return_id: int, payment: TaxPayment
    ) -> Optional[TaxReturn]:
        """Add a payment to a submitted return; it is paid once settled in full.

        Raises:
            InvalidStatusError: If the return is not submitted.
            BusinessRuleError: If the payment exceeds what is outstanding.
        """
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, return_id)
                if current is None:
                    return None
                if current.status != TaxReturnStatus.SUBMITTED.value:
                    raise InvalidStatusError(
                        f"Payments are recorded on submitted returns "
                        f"(status: {current.status})"
                    )
                outstanding = current.amount - current.paid_amount
                if payment.amount > outstanding:
                    raise BusinessRuleError(
                        f"Payment of {payment.amount} exceeds outstanding "
                        f"{outstanding}",
                        "OVERPAYMENT",
                    )

                paid_amount = current.paid_amount + payment.amount
                values = {"paid_amount": paid_amount}
                if paid_amount == current.amount:
                    values["status"] = TaxReturnStatus.PAID.value
                    values["paid_date"] = payment.paid_on or date.today()
                row = conn.execute(
                    update(self.returns_table)
                    .where(self._scoped(company_id, return_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.returns_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Recorded payment of {payment.amount} on tax return "
                    f"{current.reference}"
                )
                return to_model(TaxReturn, row)

        except SQLAlchemyError as e:
            logger.error(f"Error recording payment on tax return {return_id}: {e}")
            raise

    def delete_return(self, company_id: int, return_id: int) -> bool:
        """Delete a pending return."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, return_id)
                if current is None:
                    return False
                if current.status != TaxReturnStatus.PENDING.value:
                    raise InvalidStatusError("Only pending returns can be deleted")
                conn.execute(
                    delete(self.returns_table).where(self._scoped(company_id, return_id))
                )
                conn.commit()

                logger.info(f"Deleted tax return {current.reference}")
                return True

        except SQLAlchemyError as e:
            logger.error(f"Error deleting tax return {return_id}: {e}")
            raise

    def deadlines(
        self,
        company_id: int,
        today: Optional[date] = None,
        limit: int = DEADLINE_LIMIT,
    ) -> List[TaxReturn]:
        """Pending returns due after ``today``, soonest first."""
        t = self.returns_table
        today = today or date.today()
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(t)
                    .where(
                        and_(
                            t.c.company_id == company_id,
                            t.c.status == TaxReturnStatus.PENDING.value,
                            t.c.due_date > today,
                        )
                    )
                    .order_by(t.c.due_date, t.c.id)
                    .limit(limit)
                ).fetchall()
                return [to_model(TaxReturn, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing tax deadlines: {e}")
            raise

    def overdue(self, company_id: int, today: Optional[date] = None) -> List[TaxReturn]:
        """Pending returns whose due date has passed, oldest first."""
        t = self.returns_table
        today = today or date.today()
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(t)
                    .where(
                        and_(
                            t.c.company_id == company_id,
                            t.c.status == TaxReturnStatus.PENDING.value,
                            t.c.due_date < today,
                        )
                    )
                    .order_by(t.c.due_date, t.c.id)
                ).fetchall()
                return [to_model(TaxReturn, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing overdue tax returns: {e}")
            raise

    def statistics(self, company_id: int, today: Optional[date] = None) -> TaxStatistics:
        """Counts by status, overdue returns and amounts by tax type."""
        t = self.returns_table
        today = today or date.today()
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        t.c.tax_type,
                        t.c.status,
                        t.c.amount,
                        t.c.paid_amount,
                        t.c.due_date,
                    ).where(t.c.company_id == company_id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing tax statistics: {e}")
            raise

        counts = {status.value: 0 for status in TaxReturnStatus}
        by_type = {}
        overdue = 0
        for row in rows:
            counts[row.status] += 1
            by_type[row.tax_type] = by_type.get(row.tax_type, Decimal("0")) + row.amount
            if row.status == TaxReturnStatus.PENDING.value and row.due_date < today:
                overdue += 1

        return TaxStatistics(
            total=len(rows),
            pending=counts[TaxReturnStatus.PENDING.value],
            submitted=counts[TaxReturnStatus.SUBMITTED.value],
            paid=counts[TaxReturnStatus.PAID.value],
            overdue=overdue,
            total_amount=sum((r.amount for r in rows), Decimal("0")),
            total_paid=sum((r.paid_amount for r in rows), Decimal("0")),
            by_type=by_type,
        )
