"""Shareholder register database operations."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import BusinessRuleError, InsufficientSharesError
from ..models import (
    OwnershipStatistics,
    Shareholder,
    ShareholderCreate,
    ShareholderStatus,
    ShareholderUpdate,
    ShareTransfer,
    ShareTransferResult,
)
from .base import column_values, company_person, person_name, to_model
from .schema import shareholders

logger = logging.getLogger(__name__)

PERCENT_QUANTUM = Decimal("0.0001")


class ShareholderOperations:
    """Shareholder register database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.shareholders_table = shareholders

    def _scoped(self, company_id: int, shareholder_id: int):
        return and_(
            self.shareholders_table.c.company_id == company_id,
            self.shareholders_table.c.id == shareholder_id,
        )

    def _recompute_percentages(self, conn: Connection, company_id: int) -> None:
        """Recompute every holder's share of the company's active total."""
        t = self.shareholders_table
        rows = conn.execute(
            select(t.c.id, t.c.shares_held, t.c.status).where(
                t.c.company_id == company_id
            )
        ).fetchall()
        total = sum(
            r.shares_held for r in rows if r.status == ShareholderStatus.ACTIVE.value
        )
        for r in rows:
            if r.status == ShareholderStatus.ACTIVE.value and total > 0:
                percentage = (Decimal(r.shares_held) * 100 / Decimal(total)).quantize(
                    PERCENT_QUANTUM, rounding=ROUND_HALF_UP
                )
            else:
                percentage = Decimal("0")
            conn.execute(
                update(t).where(t.c.id == r.id).values(share_percentage=percentage)
            )

    def _fetch(self, conn: Connection, company_id: int, shareholder_id: int):
        stmt = select(self.shareholders_table).where(
            self._scoped(company_id, shareholder_id)
        )
        return conn.execute(stmt).fetchone()

    def list_shareholders(
        self, company_id: int, status: Optional[ShareholderStatus] = None
    ) -> List[Shareholder]:
        """List holders ordered by shares held, largest first."""
        t = self.shareholders_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                stmt = stmt.order_by(t.c.shares_held.desc(), t.c.id)
                rows = conn.execute(stmt).fetchall()
                return [to_model(Shareholder, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing shareholders for company {company_id}: {e}")
            raise

    def get_shareholder(
        self, company_id: int, shareholder_id: int
    ) -> Optional[Shareholder]:
        """Get a shareholder by ID within a company."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, shareholder_id)
                return to_model(Shareholder, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting shareholder {shareholder_id}: {e}")
            raise

    def create_shareholder(
        self, company_id: int, shareholder: ShareholderCreate
    ) -> Shareholder:
        """Add a holder to the register and rebalance percentages."""
        try:
            with self.engine.connect() as conn:
                person = company_person(conn, company_id, shareholder.person_id)
                stmt = (
                    insert(self.shareholders_table)
                    .values(
                        **column_values(
                            shareholder,
                            company_id=company_id,
                            shareholder_name=person_name(person),
                        )
                    )
                    .returning(self.shareholders_table.c.id)
                )
                shareholder_id = conn.execute(stmt).scalar()
                self._recompute_percentages(conn, company_id)
                row = self._fetch(conn, company_id, shareholder_id)
                conn.commit()

                logger.info(
                    f"Added shareholder {row.shareholder_name} with "
                    f"{row.shares_held} shares to company {company_id}"
                )
                return to_model(Shareholder, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating shareholder: {e}")
            raise ValueError(f"Invalid shareholder: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating shareholder: {e}")
            raise

    def update_shareholder(
        self, company_id: int, shareholder_id: int, shareholder_update: ShareholderUpdate
    ) -> Optional[Shareholder]:
        """Apply a partial update and rebalance percentages."""
        values = column_values(shareholder_update, exclude_unset=True)
        if not values:
            return self.get_shareholder(company_id, shareholder_id)

        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    update(self.shareholders_table)
                    .where(self._scoped(company_id, shareholder_id))
                    .values(**values, updated_at=func.now())
                )
                if result.rowcount == 0:
                    return None
                self._recompute_percentages(conn, company_id)
                row = self._fetch(conn, company_id, shareholder_id)
                conn.commit()

                logger.info(f"Updated shareholder {shareholder_id}")
                return to_model(Shareholder, row)

        except IntegrityError as e:
            logger.error(f"Integrity error updating shareholder {shareholder_id}: {e}")
            raise ValueError(f"Invalid shareholder update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating shareholder {shareholder_id}: {e}")
            raise

    def transfer_shares(
        self, company_id: int, shareholder_id: int, transfer: ShareTransfer
    ) -> Optional[ShareTransferResult]:
        """Move shares from a holder to a person.

        The receiving person's active holding is topped up, or a new holding
        is created. A holder left with no shares is marked transferred.
        Returns None when the source holder does not exist.
        """
        t = self.shareholders_table
        transfer_date = transfer.transfer_date or date.today()
        try:
            with self.engine.connect() as conn:
                source = self._fetch(conn, company_id, shareholder_id)
                if source is None:
                    return None
                if source.status != ShareholderStatus.ACTIVE.value:
                    raise BusinessRuleError(
                        "Only active shareholders can transfer shares", "INVALID_STATUS"
                    )
                if source.person_id == transfer.to_person_id:
                    raise BusinessRuleError("Cannot transfer shares to the same person")
                if transfer.shares_to_transfer > source.shares_held:
                    raise InsufficientSharesError(
                        f"Insufficient shares: holder has {source.shares_held}, "
                        f"requested {transfer.shares_to_transfer}"
                    )

                person = company_person(conn, company_id, transfer.to_person_id)
                target = conn.execute(
                    select(t).where(
                        and_(
                            t.c.company_id == company_id,
                            t.c.person_id == transfer.to_person_id,
                            t.c.status == ShareholderStatus.ACTIVE.value,
                        )
                    )
                ).fetchone()

                if target is not None:
                    target_id = target.id
                    conn.execute(
                        update(t)
                        .where(t.c.id == target_id)
                        .values(
                            shares_held=target.shares_held
                            + transfer.shares_to_transfer,
                            updated_at=func.now(),
                        )
                    )
                else:
                    target_id = conn.execute(
                        insert(t)
                        .values(
                            company_id=company_id,
                            person_id=transfer.to_person_id,
                            shareholder_name=person_name(person),
                            shareholder_type=source.shareholder_type,
                            shares_held=transfer.shares_to_transfer,
                            acquisition_date=transfer_date,
                            acquisition_price_per_share=transfer.transfer_price_per_share,
                            currency=source.currency,
                            notes=transfer.notes,
                        )
                        .returning(t.c.id)
                    ).scalar()

                remaining = source.shares_held - transfer.shares_to_transfer
                source_values = {"shares_held": remaining, "updated_at": func.now()}
                if remaining == 0:
                    source_values["status"] = ShareholderStatus.TRANSFERRED.value
                    source_values["transfer_date"] = transfer_date
                conn.execute(update(t).where(t.c.id == source.id).values(**source_values))

                self._recompute_percentages(conn, company_id)
                from_row = self._fetch(conn, company_id, source.id)
                to_row = self._fetch(conn, company_id, target_id)
                conn.commit()

                logger.info(
                    f"Transferred {transfer.shares_to_transfer} shares from "
                    f"shareholder {source.id} to person {transfer.to_person_id}"
                )
                return ShareTransferResult(
                    from_shareholder=to_model(Shareholder, from_row),
                    to_shareholder=to_model(Shareholder, to_row),
                )

        except IntegrityError as e:
            logger.error(f"Integrity error transferring shares: {e}")
            raise ValueError(f"Invalid share transfer: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error transferring shares: {e}")
            raise

    def active_holdings(self, company_id: int) -> List[Shareholder]:
        """Active holders with at least one share."""
        return [
            s
            for s in self.list_shareholders(company_id, ShareholderStatus.ACTIVE)
            if s.shares_held > 0
        ]

    def ownership_statistics(
        self, company_id: int, top: int = 5
    ) -> OwnershipStatistics:
        """Summarise the active register."""
        holders = self.active_holdings(company_id)
        by_type = {}
        for holder in holders:
            key = holder.shareholder_type.value
            entry = by_type.setdefault(key, {"count": 0, "shares": 0})
            entry["count"] += 1
            entry["shares"] += holder.shares_held
        return OwnershipStatistics(
            total_shares=sum(h.shares_held for h in holders),
            total_shareholders=len(holders),
            by_type=by_type,
            top_holders=holders[:top],
        )
