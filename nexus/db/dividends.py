"""Dividend declaration and distribution database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import Holding, allocate_pool, dividend_pool
from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    DeclarationStatus,
    DistributionPayment,
    DividendDeclaration,
    DividendDeclarationCreate,
    DividendDistribution,
    DividendStatistics,
    DividendType,
)
from .base import column_values, paginate, to_model
from .schema import dividend_declarations, dividend_distributions, shareholders

logger = logging.getLogger(__name__)

CALCULABLE_STATUSES = (
    DeclarationStatus.CONFIRMED.value,
    DeclarationStatus.DISTRIBUTED.value,
)


class DividendOperations:
    """Dividend declaration and distribution database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.declarations_table = dividend_declarations
        self.distributions_table = dividend_distributions

    def _scoped(self, company_id: int, declaration_id: int):
        return and_(
            self.declarations_table.c.company_id == company_id,
            self.declarations_table.c.id == declaration_id,
        )

    def _fetch(self, conn: Connection, company_id: int, declaration_id: int):
        stmt = select(self.declarations_table).where(
            self._scoped(company_id, declaration_id)
        )
        return conn.execute(stmt).fetchone()

    def _set_status(
        self, conn: Connection, company_id: int, declaration_id: int, status: str
    ):
        return conn.execute(
            update(self.declarations_table)
            .where(self._scoped(company_id, declaration_id))
            .values(status=status, updated_at=func.now())
            .returning(self.declarations_table)
        ).fetchone()

    def list_declarations(
        self,
        company_id: int,
        status: Optional[DeclarationStatus] = None,
        dividend_type: Optional[DividendType] = None,
        financial_year: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[DividendDeclaration], int]:
        """List declarations, newest first."""
        t = self.declarations_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if dividend_type is not None:
                    stmt = stmt.where(t.c.dividend_type == dividend_type.value)
                if financial_year:
                    stmt = stmt.where(t.c.financial_year == financial_year)
                stmt = stmt.order_by(t.c.declaration_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, DividendDeclaration, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing dividend declarations: {e}")
            raise

    def get_declaration(
        self, company_id: int, declaration_id: int
    ) -> Optional[DividendDeclaration]:
        """Get a declaration by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, declaration_id)
                return to_model(DividendDeclaration, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting dividend declaration {declaration_id}: {e}")
            raise

    def create_declaration(
        self, company_id: int, declaration: DividendDeclarationCreate
    ) -> DividendDeclaration:
        """Record a draft declaration; the pool is derived from profit."""
        pool = dividend_pool(
            declaration.profit_amount,
            declaration.dividend_percentage,
            declaration.currency,
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    insert(self.declarations_table)
                    .values(
                        **column_values(
                            declaration,
                            company_id=company_id,
                            dividend_pool=pool,
                            status=DeclarationStatus.DRAFT.value,
                        )
                    )
                    .returning(self.declarations_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Declared dividend {row.id} with pool {pool} {row.currency} "
                    f"for company {company_id}"
                )
                return to_model(DividendDeclaration, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating dividend declaration: {e}")
            raise ValueError(f"Invalid dividend declaration: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating dividend declaration: {e}")
            raise

    def confirm_declaration(
        self, company_id: int, declaration_id: int
    ) -> Optional[DividendDeclaration]:
        """Move a draft declaration to confirmed."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, declaration_id)
                if current is None:
                    return None
                if current.status != DeclarationStatus.DRAFT.value:
                    raise InvalidStatusError(
                        f"Only draft declarations can be confirmed "
                        f"(status: {current.status})"
                    )
                row = self._set_status(
                    conn, company_id, declaration_id, DeclarationStatus.CONFIRMED.value
                )
                conn.commit()

                logger.info(f"Confirmed dividend declaration {declaration_id}")
                return to_model(DividendDeclaration, row)

        except SQLAlchemyError as e:
            logger.error(f"Error confirming declaration {declaration_id}: {e}")
            raise

    def cancel_declaration(
        self, company_id: int, declaration_id: int
    ) -> Optional[DividendDeclaration]:
        """Cancel a declaration that has not been paid out."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, declaration_id)
                if current is None:
                    return None
                if current.status in (
                    DeclarationStatus.PAID.value,
                    DeclarationStatus.CANCELLED.value,
                ):
                    raise InvalidStatusError(
                        f"Cannot cancel a declaration in status {current.status}"
                    )
                paid = conn.execute(
                    select(func.count()).where(
                        and_(
                            self.distributions_table.c.declaration_id
                            == declaration_id,
                            self.distributions_table.c.is_paid.is_(True),
                        )
                    )
                ).scalar()
                if paid:
                    raise InvalidStatusError(
                        "Cannot cancel a declaration with paid distributions"
                    )
                conn.execute(
                    delete(self.distributions_table).where(
                        self.distributions_table.c.declaration_id == declaration_id
                    )
                )
                row = self._set_status(
                    conn, company_id, declaration_id, DeclarationStatus.CANCELLED.value
                )
                conn.commit()

                logger.info(f"Cancelled dividend declaration {declaration_id}")
                return to_model(DividendDeclaration, row)

        except SQLAlchemyError as e:
            logger.error(f"Error cancelling declaration {declaration_id}: {e}")
            raise

    def _check_holders(
        self, conn: Connection, company_id: int, holdings: Sequence[Holding]
    ) -> None:
        ids = {h.shareholder_id for h in holdings if h.shareholder_id is not None}
        if not ids:
            return
        known = set(
            conn.execute(
                select(shareholders.c.id).where(
                    and_(
                        shareholders.c.company_id == company_id,
                        shareholders.c.id.in_(ids),
                    )
                )
            ).scalars()
        )
        missing = sorted(ids - known)
        if missing:
            raise BusinessRuleError(
                f"Shareholders not found in this company: {missing}",
                "SHAREHOLDER_NOT_FOUND",
            )

    def calculate_distributions(
        self, company_id: int, declaration_id: int, holdings: Sequence[Holding]
    ) -> Optional[List[DividendDistribution]]:
        """Allocate the pool over ``holdings`` and store the distributions.

        Existing distributions are replaced unless any of them is paid.
        Holdings naming a shareholder must belong to the same company.
        """
        d = self.distributions_table
        try:
            with self.engine.connect() as conn:
                declaration = self._fetch(conn, company_id, declaration_id)
                if declaration is None:
                    return None
                if declaration.status not in CALCULABLE_STATUSES:
                    raise InvalidStatusError(
                        "Distributions can only be calculated for confirmed "
                        f"declarations (status: {declaration.status})"
                    )

                paid = conn.execute(
                    select(func.count()).where(
                        and_(d.c.declaration_id == declaration_id, d.c.is_paid.is_(True))
                    )
                ).scalar()
                if paid:
                    raise InvalidStatusError(
                        "Distributions already paid; cannot recalculate"
                    )
                self._check_holders(conn, company_id, holdings)

                allocations = allocate_pool(
                    declaration.dividend_pool,
                    holdings,
                    declaration.currency,
                    declaration.tax_rate,
                )

                conn.execute(delete(d).where(d.c.declaration_id == declaration_id))
                conn.execute(
                    insert(d),
                    [
                        {
                            "company_id": company_id,
                            "declaration_id": declaration_id,
                            "shareholder_id": a.shareholder_id,
                            "shareholder_name": a.shareholder_name,
                            "shares_held_at_time": a.shares,
                            "gross_amount": a.gross_amount,
                            "tax_amount": a.tax_amount,
                            "net_amount": a.net_amount,
                        }
                        for a in allocations
                    ],
                )
                self._set_status(
                    conn,
                    company_id,
                    declaration_id,
                    DeclarationStatus.DISTRIBUTED.value,
                )
                rows = conn.execute(
                    select(d)
                    .where(d.c.declaration_id == declaration_id)
                    .order_by(d.c.shares_held_at_time.desc(), d.c.id)
                ).fetchall()
                conn.commit()

                logger.info(
                    f"Calculated {len(rows)} distributions for declaration "
                    f"{declaration_id}"
                )
                return [to_model(DividendDistribution, row) for row in rows]

        except IntegrityError as e:
            logger.error(f"Integrity error storing distributions: {e}")
            raise ValueError(f"Invalid dividend distribution: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error calculating distributions for {declaration_id}: {e}")
            raise

    def list_distributions(
        self,
        company_id: int,
        declaration_id: int,
        is_paid: Optional[bool] = None,
    ) -> List[DividendDistribution]:
        """Distributions of a declaration, largest holding first."""
        d = self.distributions_table
        try:
            with self.engine.connect() as conn:
                stmt = select(d).where(
                    and_(
                        d.c.company_id == company_id,
                        d.c.declaration_id == declaration_id,
                    )
                )
                if is_paid is not None:
                    stmt = stmt.where(d.c.is_paid.is_(is_paid))
                stmt = stmt.order_by(d.c.shares_held_at_time.desc(), d.c.id)
                rows = conn.execute(stmt).fetchall()
                return [to_model(DividendDistribution, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing distributions for {declaration_id}: {e}")
            raise

    def mark_distribution_paid(
        self,
        company_id: int,
        distribution_id: int,
        payment: DistributionPayment,
    ) -> Optional[DividendDistribution]:
        """Record payment of a distribution.

        The declaration becomes paid once every distribution is paid.
        """
        d = self.distributions_table
        try:
            with self.engine.connect() as conn:
                current = conn.execute(
                    select(d).where(
                        and_(d.c.company_id == company_id, d.c.id == distribution_id)
                    )
                ).fetchone()
                if current is None:
                    return None
                if current.is_paid:
                    raise InvalidStatusError("Distribution is already paid")
                declaration = self._fetch(conn, company_id, current.declaration_id)
                if declaration.status != DeclarationStatus.DISTRIBUTED.value:
                    raise InvalidStatusError(
                        "Distributions can only be paid on distributed "
                        f"declarations (status: {declaration.status})"
                    )

                row = conn.execute(
                    update(d)
                    .where(d.c.id == distribution_id)
                    .values(
                        **column_values(
                            payment, paid_on=payment.paid_on or date.today()
                        ),
                        is_paid=True,
                        updated_at=func.now(),
                    )
                    .returning(d)
                ).fetchone()

                unpaid = conn.execute(
                    select(func.count()).where(
                        and_(
                            d.c.declaration_id == current.declaration_id,
                            d.c.is_paid.is_(False),
                        )
                    )
                ).scalar()
                if unpaid == 0:
                    self._set_status(
                        conn,
                        company_id,
                        current.declaration_id,
                        DeclarationStatus.PAID.value,
                    )
                conn.commit()

                logger.info(f"Marked distribution {distribution_id} paid")
                return to_model(DividendDistribution, row)

        except SQLAlchemyError as e:
            logger.error(f"Error marking distribution {distribution_id} paid: {e}")
            raise

    def statistics(self, company_id: int) -> DividendStatistics:
        """Aggregate a company's dividends."""
        t = self.declarations_table
        d = self.distributions_table
        try:
            with self.engine.connect() as conn:
                declarations = conn.execute(
                    select(
                        t.c.status,
                        t.c.dividend_type,
                        t.c.dividend_pool,
                        t.c.financial_year,
                        t.c.declaration_date,
                    ).where(t.c.company_id == company_id)
                ).fetchall()
                distributions = conn.execute(
                    select(d.c.net_amount, d.c.is_paid)
                    .select_from(d.join(t, d.c.declaration_id == t.c.id))
                    .where(
                        and_(
                            d.c.company_id == company_id,
                            t.c.status != DeclarationStatus.CANCELLED.value,
                        )
                    )
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing dividend statistics: {e}")
            raise

        by_status = {}
        by_type = {}
        by_year = {}
        total_pool = Decimal("0")
        for row in declarations:
            by_status[row.status] = by_status.get(row.status, 0) + 1
            by_type[row.dividend_type] = by_type.get(row.dividend_type, 0) + 1
            if row.status == DeclarationStatus.CANCELLED.value:
                continue
            total_pool += row.dividend_pool
            year = row.financial_year or str(row.declaration_date.year)
            by_year[year] = by_year.get(year, Decimal("0")) + row.dividend_pool

        total_paid = sum((r.net_amount for r in distributions if r.is_paid), Decimal("0"))
        outstanding = sum(
            (r.net_amount for r in distributions if not r.is_paid), Decimal("0")
        )
        return DividendStatistics(
            total_declarations=len(declarations),
            total_pool=total_pool,
            total_paid=total_paid,
            total_outstanding=outstanding,
            by_status=by_status,
            by_type=by_type,
            by_year=by_year,
        )
