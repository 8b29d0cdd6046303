"""Currency rate and transaction database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import convert_amount, inverse_rate
from ..errors import RateNotFoundError
from ..models import (
    ConversionRequest,
    ConversionResult,
    CurrencyRate,
    CurrencyRateCreate,
    CurrencyRateUpdate,
    CurrencyStatistics,
    CurrencyTransaction,
    CurrencyTransactionCreate,
    CurrencyTransactionType,
    LatestRates,
    SUPPORTED_CURRENCIES,
)
from .base import column_values, paginate, to_model
from .schema import currency_rates, currency_transactions

logger = logging.getLogger(__name__)


class CurrencyOperations:
    """Currency rate and transaction database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.rates_table = currency_rates
        self.transactions_table = currency_transactions

    @staticmethod
    def supported_currencies() -> List[str]:
        return list(SUPPORTED_CURRENCIES)

    # Rates

    def list_rates(
        self,
        company_id: int,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        active_only: bool = False,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[CurrencyRate], int]:
        """List rates, most recent first."""
        r = self.rates_table
        try:
            with self.engine.connect() as conn:
                stmt = select(r).where(r.c.company_id == company_id)
                if from_currency:
                    stmt = stmt.where(r.c.from_currency == from_currency.upper())
                if to_currency:
                    stmt = stmt.where(r.c.to_currency == to_currency.upper())
                if active_only:
                    stmt = stmt.where(r.c.is_active.is_(True))
                stmt = stmt.order_by(r.c.rate_date.desc(), r.c.id.desc())
                return paginate(conn, stmt, CurrencyRate, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing currency rates: {e}")
            raise

    def create_rate(self, company_id: int, rate: CurrencyRateCreate) -> CurrencyRate:
        """Record a rate for a pair and date."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    insert(self.rates_table)
                    .values(**column_values(rate, company_id=company_id))
                    .returning(self.rates_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Recorded rate {rate.from_currency}/{rate.to_currency} "
                    f"{rate.rate} on {rate.rate_date}"
                )
                return to_model(CurrencyRate, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating currency rate: {e}")
            raise ValueError(
                f"A {rate.from_currency}/{rate.to_currency} rate for "
                f"{rate.rate_date} already exists"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating currency rate: {e}")
            raise

    def update_rate(
        self, company_id: int, rate_id: int, rate_update: CurrencyRateUpdate
    ) -> Optional[CurrencyRate]:
        """Apply a partial update to a rate."""
        r = self.rates_table
        values = column_values(rate_update, exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    update(r)
                    .where(and_(r.c.company_id == company_id, r.c.id == rate_id))
                    .values(**values, updated_at=func.now())
                    .returning(r)
                ).fetchone()
                conn.commit()

                if row:
                    logger.info(f"Updated currency rate {rate_id}")
                    return to_model(CurrencyRate, row)
                return None

        except SQLAlchemyError as e:
            logger.error(f"Error updating currency rate {rate_id}: {e}")
            raise

    def deactivate_rate(self, company_id: int, rate_id: int) -> Optional[CurrencyRate]:
        return self.update_rate(company_id, rate_id, CurrencyRateUpdate(is_active=False))

    def _latest_rate(
        self,
        conn: Connection,
        company_id: int,
        from_currency: str,
        to_currency: str,
        on_or_before: Optional[date],
    ):
        r = self.rates_table
        stmt = select(r).where(
            and_(
                r.c.company_id == company_id,
                r.c.from_currency == from_currency,
                r.c.to_currency == to_currency,
                r.c.is_active.is_(True),
            )
        )
        if on_or_before is not None:
            stmt = stmt.where(r.c.rate_date <= on_or_before)
        stmt = stmt.order_by(r.c.rate_date.desc(), r.c.id.desc()).limit(1)
        return conn.execute(stmt).fetchone()

    def _find_rate(
        self,
        conn: Connection,
        company_id: int,
        from_currency: str,
        to_currency: str,
        on_or_before: Optional[date],
    ) -> Tuple[Decimal, Optional[date], bool]:
        """Stored rate, its date and whether it is quoted for the reverse pair."""
        if from_currency == to_currency:
            return Decimal("1"), on_or_before, False

        row = self._latest_rate(
            conn, company_id, from_currency, to_currency, on_or_before
        )
        if row is not None:
            return Decimal(row.rate), row.rate_date, False

        row = self._latest_rate(
            conn, company_id, to_currency, from_currency, on_or_before
        )
        if row is not None:
            return Decimal(row.rate), row.rate_date, True

        raise RateNotFoundError(from_currency, to_currency)

    def latest_rates(self, company_id: int, base_currency: str) -> LatestRates:
        """Latest active rate from ``base_currency`` to every other currency."""
        base = base_currency.upper()
        rates = {}
        as_of = {}
        try:
            with self.engine.connect() as conn:
                for currency in SUPPORTED_CURRENCIES:
                    if currency == base:
                        continue
                    try:
                        rate, rate_date, inverse = self._find_rate(
                            conn, company_id, base, currency, None
                        )
                    except RateNotFoundError:
                        continue
                    rates[currency] = inverse_rate(rate) if inverse else rate
                    as_of[currency] = rate_date

        except SQLAlchemyError as e:
            logger.error(f"Error reading latest rates for {base}: {e}")
            raise

        return LatestRates(base_currency=base, rates=rates, as_of=as_of)

    def convert(self, company_id: int, request: ConversionRequest) -> ConversionResult:
        """Convert an amount with the most recent applicable rate."""
        try:
            with self.engine.connect() as conn:
                rate, rate_date, inverse = self._find_rate(
                    conn,
                    company_id,
                    request.from_currency,
                    request.to_currency,
                    request.rate_date,
                )

        except SQLAlchemyError as e:
            logger.error(f"Error converting currency: {e}")
            raise

        return ConversionResult(
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            amount=request.amount,
            converted_amount=convert_amount(
                request.amount, rate, request.to_currency, inverse
            ),
            rate=inverse_rate(rate) if inverse else rate,
            rate_date=rate_date,
            inverse=inverse,
        )

    # Transactions

    def list_transactions(
        self,
        company_id: int,
        transaction_type: Optional[CurrencyTransactionType] = None,
        currency: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[CurrencyTransaction], int]:
        """List transactions, most recent first."""
        t = self.transactions_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if transaction_type is not None:
                    stmt = stmt.where(t.c.transaction_type == transaction_type.value)
                if currency:
                    code = currency.upper()
                    stmt = stmt.where(
                        (t.c.from_currency == code) | (t.c.to_currency == code)
                    )
                stmt = stmt.order_by(t.c.transaction_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, CurrencyTransaction, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing currency transactions: {e}")
            raise

    def create_transaction(
        self, company_id: int, transaction: CurrencyTransactionCreate
    ) -> CurrencyTransaction:
        """Record a transaction, filling the rate and target amount when absent."""
        try:
            with self.engine.connect() as conn:
                rate = transaction.exchange_rate
                if rate is None and transaction.to_amount is not None:
                    rate = (
                        Decimal(transaction.to_amount) / Decimal(transaction.from_amount)
                    ).quantize(Decimal("0.000001"))
                inverse = False
                if rate is None:
                    rate, _, inverse = self._find_rate(
                        conn,
                        company_id,
                        transaction.from_currency,
                        transaction.to_currency,
                        transaction.transaction_date,
                    )
                to_amount = transaction.to_amount
                if to_amount is None:
                    to_amount = convert_amount(
                        transaction.from_amount, rate, transaction.to_currency, inverse
                    )
                if inverse:
                    rate = inverse_rate(rate)

                row = conn.execute(
                    insert(self.transactions_table)
                    .values(
                        **column_values(
                            transaction,
                            company_id=company_id,
                            exchange_rate=rate,
                            to_amount=to_amount,
                        )
                    )
                    .returning(self.transactions_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Recorded {transaction.transaction_type.value} "
                    f"{transaction.from_amount} {transaction.from_currency} -> "
                    f"{to_amount} {transaction.to_currency}"
                )
                return to_model(CurrencyTransaction, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating currency transaction: {e}")
            raise ValueError(f"Invalid currency transaction: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating currency transaction: {e}")
            raise

    def statistics(self, company_id: int) -> CurrencyStatistics:
        """Rate and transaction totals."""
        r = self.rates_table
        t = self.transactions_table
        try:
            with self.engine.connect() as conn:
                rates = conn.execute(
                    select(r.c.from_currency, r.c.to_currency, r.c.is_active).where(
                        r.c.company_id == company_id
                    )
                ).fetchall()
                transactions = conn.execute(
                    select(t.c.transaction_type, t.c.from_currency, t.c.from_amount)
                    .where(t.c.company_id == company_id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing currency statistics: {e}")
            raise

        pairs = sorted({f"{row.from_currency}/{row.to_currency}" for row in rates})
        volume = {}
        by_type = {}
        for row in transactions:
            volume[row.from_currency] = (
                volume.get(row.from_currency, Decimal("0")) + row.from_amount
            )
            by_type[row.transaction_type] = by_type.get(row.transaction_type, 0) + 1
        return CurrencyStatistics(
            total_rates=len(rates),
            active_rates=sum(1 for row in rates if row.is_active),
            currency_pairs=pairs,
            total_transactions=len(transactions),
            volume_by_currency=volume,
            by_type=by_type,
        )
