"""Locked capital and early withdrawal database operations."""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import (
    accrued_interest,
    add_months,
    expected_interest,
    penalty_amount,
    total_roi_rate,
)
from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    CapitalStatistics,
    EarlyWithdrawalRequest,
    EarlyWithdrawalReview,
    LockedCapital,
    LockedCapitalCreate,
    LockedCapitalStatus,
    LockedCapitalUpdate,
    RoiProjection,
    WithdrawalRequestStatus,
)
from .base import column_values, paginate, to_model
from .schema import early_withdrawal_requests, locked_capitals, persons

logger = logging.getLogger(__name__)

UPCOMING_UNLOCK_DAYS = 30


class CapitalOperations:
    """Locked capital and early withdrawal database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.capital_table = locked_capitals
        self.requests_table = early_withdrawal_requests

    def _scoped(self, company_id: int, capital_id: int):
        return and_(
            self.capital_table.c.company_id == company_id,
            self.capital_table.c.id == capital_id,
        )

    def _fetch(self, conn: Connection, company_id: int, capital_id: int):
        stmt = select(self.capital_table).where(self._scoped(company_id, capital_id))
        return conn.execute(stmt).fetchone()

    def list_capital(
        self,
        company_id: int,
        status: Optional[LockedCapitalStatus] = None,
        investor_id: Optional[int] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[LockedCapital], int]:
        """List locked capital records, newest lock first."""
        t = self.capital_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if investor_id is not None:
                    stmt = stmt.where(t.c.investor_id == investor_id)
                stmt = stmt.order_by(t.c.lock_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, LockedCapital, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing locked capital for company {company_id}: {e}")
            raise

    def get_capital(self, company_id: int, capital_id: int) -> Optional[LockedCapital]:
        """Get a locked capital record."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, capital_id)
                return to_model(LockedCapital, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting locked capital {capital_id}: {e}")
            raise

    def create_capital(
        self, company_id: int, capital: LockedCapitalCreate
    ) -> LockedCapital:
        """Lock capital; the unlock date and total ROI are derived."""
        try:
            with self.engine.connect() as conn:
                investor = conn.execute(
                    select(persons.c.id).where(
                        and_(
                            persons.c.company_id == company_id,
                            persons.c.id == capital.investor_id,
                        )
                    )
                ).fetchone()
                if investor is None:
                    raise BusinessRuleError(
                        f"Investor {capital.investor_id} not found for this company",
                        "PERSON_NOT_FOUND",
                    )

                stmt = (
                    insert(self.capital_table)
                    .values(
                        **column_values(
                            capital,
                            company_id=company_id,
                            unlock_date=add_months(
                                capital.lock_date, capital.lock_period_months
                            ),
                            total_roi_rate=total_roi_rate(
                                capital.base_roi_rate, capital.bonus_rate
                            ),
                            status=LockedCapitalStatus.LOCKED.value,
                        )
                    )
                    .returning(self.capital_table)
                )
                row = conn.execute(stmt).fetchone()
                conn.commit()

                logger.info(
                    f"Locked {row.amount} {row.currency} for {row.investor_name} "
                    f"until {row.unlock_date} (ID: {row.id})"
                )
                return to_model(LockedCapital, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating locked capital: {e}")
            raise ValueError(f"Invalid locked capital: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating locked capital: {e}")
            raise

    def update_capital(
        self, company_id: int, capital_id: int, capital_update: LockedCapitalUpdate
    ) -> Optional[LockedCapital]:
        """Update a record that is still locked, recomputing total ROI."""
        values = column_values(capital_update, exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, capital_id)
                if current is None:
                    return None
                if current.status != LockedCapitalStatus.LOCKED.value:
                    raise InvalidStatusError(
                        f"Cannot update capital in status {current.status}"
                    )
                if not values:
                    return to_model(LockedCapital, current)

                base = values.get("base_roi_rate", current.base_roi_rate)
                bonus = values.get("bonus_rate", current.bonus_rate)
                row = conn.execute(
                    update(self.capital_table)
                    .where(self._scoped(company_id, capital_id))
                    .values(
                        **values,
                        total_roi_rate=total_roi_rate(base, bonus),
                        updated_at=func.now(),
                    )
                    .returning(self.capital_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Updated locked capital {capital_id}")
                return to_model(LockedCapital, row)

        except IntegrityError as e:
            logger.error(f"Integrity error updating locked capital {capital_id}: {e}")
            raise ValueError(f"Invalid locked capital update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating locked capital {capital_id}: {e}")
            raise

    def unlock_capital(self, company_id: int, capital_id: int) -> Optional[LockedCapital]:
        """Move a locked record to unlocked."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, capital_id)
                if current is None:
                    return None
                if current.status != LockedCapitalStatus.LOCKED.value:
                    raise InvalidStatusError(
                        f"Capital is not locked (status: {current.status})"
                    )
                row = conn.execute(
                    update(self.capital_table)
                    .where(self._scoped(company_id, capital_id))
                    .values(
                        status=LockedCapitalStatus.UNLOCKED.value,
                        updated_at=func.now(),
                    )
                    .returning(self.capital_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Unlocked capital {capital_id}")
                return to_model(LockedCapital, row)

        except SQLAlchemyError as e:
            logger.error(f"Error unlocking capital {capital_id}: {e}")
            raise

    def request_early_withdrawal(
        self,
        company_id: int,
        capital_id: int,
        reason: str,
        request_date: Optional[date] = None,
    ) -> Optional[EarlyWithdrawalRequest]:
        """File a withdrawal request against locked capital and set its penalty."""
        request_date = request_date or date.today()
        try:
            with self.engine.connect() as conn:
                capital = self._fetch(conn, company_id, capital_id)
                if capital is None:
                    return None
                if capital.status != LockedCapitalStatus.LOCKED.value:
                    raise InvalidStatusError(
                        "Early withdrawal can only be requested for locked capital"
                    )

                penalty = penalty_amount(
                    capital.amount,
                    capital.early_withdrawal_penalty_rate,
                    capital.currency,
                )
                row = conn.execute(
                    insert(self.requests_table)
                    .values(
                        company_id=company_id,
                        locked_capital_id=capital_id,
                        request_date=request_date,
                        reason=reason,
                        penalty_amount=penalty,
                        status=WithdrawalRequestStatus.PENDING.value,
                    )
                    .returning(self.requests_table)
                ).fetchone()
                conn.execute(
                    update(self.capital_table)
                    .where(self._scoped(company_id, capital_id))
                    .values(
                        status=LockedCapitalStatus.EARLY_WITHDRAWAL_REQUESTED.value,
                        penalty_amount=penalty,
                        updated_at=func.now(),
                    )
                )
                conn.commit()

                logger.info(
                    f"Early withdrawal requested for capital {capital_id} "
                    f"with penalty {penalty}"
                )
                return to_model(EarlyWithdrawalRequest, row)

        except SQLAlchemyError as e:
            logger.error(f"Error requesting early withdrawal for {capital_id}: {e}")
            raise

    def review_withdrawal(
        self,
        company_id: int,
        request_id: int,
        review: EarlyWithdrawalReview,
        reviewed_by: Optional[int] = None,
    ) -> Optional[Tuple[EarlyWithdrawalRequest, LockedCapital]]:
        """Approve or reject a pending request.

        Approval applies the penalty to the capital; rejection returns the
        capital to locked and clears the penalty.
        """
        r = self.requests_table
        try:
            with self.engine.connect() as conn:
                request = conn.execute(
                    select(r).where(
                        and_(r.c.company_id == company_id, r.c.id == request_id)
                    )
                ).fetchone()
                if request is None:
                    return None
                if request.status != WithdrawalRequestStatus.PENDING.value:
                    raise InvalidStatusError("Withdrawal request already processed")

                request_row = conn.execute(
                    update(r)
                    .where(r.c.id == request_id)
                    .values(
                        status=review.status.value,
                        reviewed_by=reviewed_by,
                        reviewed_at=datetime.now(timezone.utc),
                        review_notes=review.review_notes,
                        updated_at=func.now(),
                    )
                    .returning(r)
                ).fetchone()

                if review.status == WithdrawalRequestStatus.APPROVED:
                    capital_values = {"status": LockedCapitalStatus.PENALTY_APPLIED.value}
                else:
                    capital_values = {
                        "status": LockedCapitalStatus.LOCKED.value,
                        "penalty_amount": Decimal("0"),
                    }
                capital_row = conn.execute(
                    update(self.capital_table)
                    .where(self._scoped(company_id, request.locked_capital_id))
                    .values(**capital_values, updated_at=func.now())
                    .returning(self.capital_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Withdrawal request {request_id} {review.status.value}")
                return (
                    to_model(EarlyWithdrawalRequest, request_row),
                    to_model(LockedCapital, capital_row),
                )

        except SQLAlchemyError as e:
            logger.error(f"Error reviewing withdrawal request {request_id}: {e}")
            raise

    def list_withdrawal_requests(
        self,
        company_id: int,
        status: Optional[WithdrawalRequestStatus] = None,
        capital_id: Optional[int] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[EarlyWithdrawalRequest], int]:
        """List withdrawal requests, newest first."""
        r = self.requests_table
        try:
            with self.engine.connect() as conn:
                stmt = select(r).where(r.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(r.c.status == status.value)
                if capital_id is not None:
                    stmt = stmt.where(r.c.locked_capital_id == capital_id)
                stmt = stmt.order_by(r.c.created_at.desc(), r.c.id.desc())
                return paginate(conn, stmt, EarlyWithdrawalRequest, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing withdrawal requests: {e}")
            raise

    def accrue_interest(
        self, company_id: int, capital_id: int, as_of: Optional[date] = None
    ) -> Optional[LockedCapital]:
        """Recompute and store interest accrued up to ``as_of``."""
        as_of = as_of or date.today()
        try:
            with self.engine.connect() as conn:
                capital = self._fetch(conn, company_id, capital_id)
                if capital is None:
                    return None
                interest = accrued_interest(
                    capital.amount,
                    capital.total_roi_rate,
                    capital.lock_date,
                    capital.unlock_date,
                    as_of,
                    capital.currency,
                )
                row = conn.execute(
                    update(self.capital_table)
                    .where(self._scoped(company_id, capital_id))
                    .values(accrued_interest=interest, updated_at=func.now())
                    .returning(self.capital_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Accrued interest {interest} on capital {capital_id}")
                return to_model(LockedCapital, row)

        except SQLAlchemyError as e:
            logger.error(f"Error accruing interest on capital {capital_id}: {e}")
            raise

    def roi_projection(
        self, company_id: int, capital_id: int
    ) -> Optional[RoiProjection]:
        """Expected return if the capital stays locked to maturity."""
        capital = self.get_capital(company_id, capital_id)
        if capital is None:
            return None
        interest = expected_interest(
            capital.amount,
            capital.total_roi_rate,
            capital.lock_period_months,
            capital.currency,
        )
        return RoiProjection(
            capital_id=capital.id,
            principal=capital.amount,
            total_roi_rate=capital.total_roi_rate,
            lock_period_months=capital.lock_period_months,
            expected_interest=interest,
            maturity_value=capital.amount + interest,
            early_withdrawal_penalty=penalty_amount(
                capital.amount,
                capital.early_withdrawal_penalty_rate,
                capital.currency,
            ),
            unlock_date=capital.unlock_date,
        )

    def statistics(
        self, company_id: int, today: Optional[date] = None
    ) -> CapitalStatistics:
        """Aggregate a company's locked capital."""
        today = today or date.today()
        t = self.capital_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        t.c.id,
                        t.c.amount,
                        t.c.currency,
                        t.c.status,
                        t.c.accrued_interest,
                        t.c.unlock_date,
                    ).where(t.c.company_id == company_id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing capital statistics: {e}")
            raise

        by_status = {}
        by_currency = {}
        upcoming = []
        horizon = today + timedelta(days=UPCOMING_UNLOCK_DAYS)
        for row in rows:
            by_status[row.status] = by_status.get(row.status, 0) + 1
            by_currency[row.currency] = (
                by_currency.get(row.currency, Decimal("0")) + row.amount
            )
            if (
                row.status == LockedCapitalStatus.LOCKED.value
                and today <= row.unlock_date <= horizon
            ):
                upcoming.append(row.id)

        return CapitalStatistics(
            total_locked=len(rows),
            total_amount=sum((r.amount for r in rows), Decimal("0")),
            total_accrued_interest=sum(
                (r.accrued_interest for r in rows), Decimal("0")
            ),
            by_status=by_status,
            by_currency=by_currency,
            upcoming_unlocks=len(upcoming),
            upcoming_unlock_ids=upcoming,
        )
