"""Board, beneficial ownership and share certificate database operations."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    BeneficialOwner,
    BeneficialOwnerCessation,
    BeneficialOwnerCreate,
    BeneficialOwnerStatus,
    BoardComposition,
    CertificateCancellation,
    CertificateStatus,
    Director,
    DirectorCreate,
    DirectorResignation,
    DirectorStatus,
    DirectorType,
    DirectorUpdate,
    OwnershipType,
    ShareCertificate,
    ShareCertificateCreate,
    ShareholderStatus,
)
from .base import column_values, company_person, paginate, person_name, to_model
from .schema import beneficial_owners, directors, share_certificates, shareholders

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
RATIO_QUANTUM = Decimal("0.01")

# A resigned or removed director cannot be reinstated by an update.
CLOSED_STATUSES = {DirectorStatus.RESIGNED.value, DirectorStatus.REMOVED.value}


class DirectorOperations:
    """Directors register, beneficial owners and share certificates."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.directors_table = directors
        self.owners_table = beneficial_owners
        self.certificates_table = share_certificates

    @staticmethod
    def _scoped(table, company_id: int, record_id: int):
        return and_(table.c.company_id == company_id, table.c.id == record_id)

    def _fetch(self, conn: Connection, table, company_id: int, record_id: int):
        return conn.execute(
            select(table).where(self._scoped(table, company_id, record_id))
        ).fetchone()

    def _check_seat(
        self,
        conn: Connection,
        company_id: int,
        person_id: int,
        director_type: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        """One active directorship per person and one active chairman."""
        t = self.directors_table
        active = and_(
            t.c.company_id == company_id,
            t.c.status == DirectorStatus.ACTIVE.value,
        )
        if exclude_id is not None:
            active = and_(active, t.c.id != exclude_id)

        seated = conn.execute(
            select(t.c.id).where(and_(active, t.c.person_id == person_id))
        ).first()
        if seated is not None:
            raise BusinessRuleError(
                f"Person {person_id} already holds an active directorship",
                "DIRECTOR_EXISTS",
            )
        if director_type == DirectorType.CHAIRMAN.value:
            chair = conn.execute(
                select(t.c.director_name).where(
                    and_(active, t.c.director_type == DirectorType.CHAIRMAN.value)
                )
            ).first()
            if chair is not None:
                raise BusinessRuleError(
                    f"{chair.director_name} is already chairman of the board",
                    "CHAIRMAN_EXISTS",
                )

    # Directors

    def list_directors(
        self,
        company_id: int,
        status: Optional[DirectorStatus] = None,
        director_type: Optional[DirectorType] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Director], int]:
        """List directors, most recent appointment first."""
        t = self.directors_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if director_type is not None:
                    stmt = stmt.where(t.c.director_type == director_type.value)
                stmt = stmt.order_by(t.c.appointment_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, Director, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing directors for company {company_id}: {e}")
            raise

    def get_director(self, company_id: int, director_id: int) -> Optional[Director]:
        """Get a director by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, directors, company_id, director_id)
                return to_model(Director, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting director {director_id}: {e}")
            raise

    def appoint_director(self, company_id: int, director: DirectorCreate) -> Director:
        """Appoint a person of the company to the board.

        Raises:
            BusinessRuleError: If the person is unknown, already sits on the
                board, or a second chairman would be seated.
        """
        try:
            with self.engine.connect() as conn:
                person = company_person(conn, company_id, director.person_id)
                self._check_seat(
                    conn, company_id, director.person_id, director.director_type.value
                )
                row = conn.execute(
                    insert(self.directors_table)
                    .values(
                        **column_values(
                            director,
                            company_id=company_id,
                            director_name=person_name(person),
                            status=DirectorStatus.ACTIVE.value,
                        )
                    )
                    .returning(self.directors_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Appointed {row.director_name} as {row.director_type} "
                    f"director of company {company_id}"
                )
                return to_model(Director, row)

        except IntegrityError as e:
            logger.error(f"Integrity error appointing director: {e}")
            raise ValueError(f"Invalid director: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error appointing director: {e}")
            raise

    def update_director(
        self, company_id: int, director_id: int, director_update: DirectorUpdate
    ) -> Optional[Director]:
        """Apply a partial update to a sitting or suspended director."""
        values = column_values(director_update, exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, directors, company_id, director_id)
                if current is None:
                    return None
                if current.status in CLOSED_STATUSES:
                    raise InvalidStatusError(
                        f"Director {director_id} is {current.status} and cannot change"
                    )
                if not values:
                    return to_model(Director, current)

                status = values.get("status", current.status)
                if status == DirectorStatus.ACTIVE.value:
                    self._check_seat(
                        conn,
                        company_id,
                        current.person_id,
                        values.get("director_type", current.director_type),
                        exclude_id=director_id,
                    )
                conn.execute(
                    update(self.directors_table)
                    .where(self._scoped(self.directors_table, company_id, director_id))
                    .values(**values, updated_at=func.now())
                )
                row = self._fetch(conn, directors, company_id, director_id)
                conn.commit()

                logger.info(f"Updated director {director_id}")
                return to_model(Director, row)

        except IntegrityError as e:
            logger.error(f"Integrity error updating director {director_id}: {e}")
            raise ValueError(f"Invalid director update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating director {director_id}: {e}")
            raise

    def resign_director(
        self, company_id: int, director_id: int, resignation: DirectorResignation
    ) -> Optional[Director]:
        """Record an active director's resignation, dated today by default."""
        resigned_on = resignation.resignation_date or date.today()
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, directors, company_id, director_id)
                if current is None:
                    return None
                if current.status != DirectorStatus.ACTIVE.value:
                    raise InvalidStatusError(
                        f"Director {director_id} is {current.status}, not active"
                    )
                if resigned_on < current.appointment_date:
                    raise ValueError("Resignation date cannot precede the appointment")

                values = {
                    "status": DirectorStatus.RESIGNED.value,
                    "resignation_date": resigned_on,
                    "updated_at": func.now(),
                }
                if resignation.notes is not None:
                    values["notes"] = resignation.notes
                conn.execute(
                    update(self.directors_table)
                    .where(self.directors_table.c.id == director_id)
                    .values(**values)
                )
                row = self._fetch(conn, directors, company_id, director_id)
                conn.commit()

                logger.info(f"Director {director_id} resigned on {resigned_on}")
                return to_model(Director, row)

        except SQLAlchemyError as e:
            logger.error(f"Error resigning director {director_id}: {e}")
            raise

    def board_composition(self, company_id: int) -> BoardComposition:
        """Summarise the board. Committees list their active members."""
        t = self.directors_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(t)
                    .where(t.c.company_id == company_id)
                    .order_by(t.c.appointment_date, t.c.id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error building board composition for {company_id}: {e}")
            raise

        by_status = {}
        for row in rows:
            by_status[row.status] = by_status.get(row.status, 0) + 1

        active = [r for r in rows if r.status == DirectorStatus.ACTIVE.value]
        by_type = {}
        committees = {}
        chairman = None
        for row in active:
            by_type[row.director_type] = by_type.get(row.director_type, 0) + 1
            if row.director_type == DirectorType.CHAIRMAN.value:
                chairman = row.director_name
            for committee in row.board_committees or []:
                committees.setdefault(committee, []).append(row.director_name)

        independent = by_type.get(DirectorType.INDEPENDENT.value, 0)
        ratio = Decimal("0")
        if active:
            ratio = (Decimal(independent) * HUNDRED / len(active)).quantize(
                RATIO_QUANTUM, rounding=ROUND_HALF_UP
            )
        return BoardComposition(
            total_directors=len(rows),
            active_directors=len(active),
            independent_ratio=ratio,
            chairman=chairman,
            by_type=by_type,
            by_status=by_status,
            committees=committees,
            total_remuneration=sum((r.remuneration for r in active), Decimal("0")),
        )

    # Beneficial owners

    def list_beneficial_owners(
        self,
        company_id: int,
        status: Optional[BeneficialOwnerStatus] = None,
        ownership_type: Optional[OwnershipType] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[BeneficialOwner], int]:
        """List owners by ownership percentage, largest first."""
        t = self.owners_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if ownership_type is not None:
                    stmt = stmt.where(t.c.ownership_type == ownership_type.value)
                stmt = stmt.order_by(t.c.ownership_percentage.desc(), t.c.id)
                return paginate(conn, stmt, BeneficialOwner, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing beneficial owners for {company_id}: {e}")
            raise

    def add_beneficial_owner(
        self, company_id: int, owner: BeneficialOwnerCreate
    ) -> BeneficialOwner:
        """Declare a beneficial owner.

        Raises:
            BusinessRuleError: If the person is unknown, or active ownership
                would pass 100%.
        """
        t = self.owners_table
        try:
            with self.engine.connect() as conn:
                person = company_person(conn, company_id, owner.person_id)
                declared = conn.execute(
                    select(func.coalesce(func.sum(t.c.ownership_percentage), 0)).where(
                        and_(
                            t.c.company_id == company_id,
                            t.c.status == BeneficialOwnerStatus.ACTIVE.value,
                        )
                    )
                ).scalar()
                if Decimal(declared) + owner.ownership_percentage > HUNDRED:
                    raise BusinessRuleError(
                        f"Active beneficial ownership would reach "
                        f"{Decimal(declared) + owner.ownership_percentage}%",
                        "OWNERSHIP_EXCEEDED",
                    )
                row = conn.execute(
                    insert(t)
                    .values(
                        **column_values(
                            owner,
                            company_id=company_id,
                            owner_name=person_name(person),
                            acquisition_date=owner.acquisition_date or date.today(),
                            status=BeneficialOwnerStatus.ACTIVE.value,
                        )
                    )
                    .returning(t)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Declared {row.owner_name} as beneficial owner of "
                    f"{row.ownership_percentage}% of company {company_id}"
                )
                return to_model(BeneficialOwner, row)

        except IntegrityError as e:
            logger.error(f"Integrity error adding beneficial owner: {e}")
            raise ValueError(f"Invalid beneficial owner: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding beneficial owner: {e}")
            raise

    def cease_beneficial_owner(
        self, company_id: int, owner_id: int, cessation: BeneficialOwnerCessation
    ) -> Optional[BeneficialOwner]:
        """End an active beneficial ownership."""
        t = self.owners_table
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, t, company_id, owner_id)
                if current is None:
                    return None
                if current.status != BeneficialOwnerStatus.ACTIVE.value:
                    raise InvalidStatusError(
                        f"Beneficial owner {owner_id} is already {current.status}"
                    )
                values = {
                    "status": cessation.status.value,
                    "cessation_date": cessation.cessation_date or date.today(),
                    "updated_at": func.now(),
                }
                if cessation.notes is not None:
                    values["notes"] = cessation.notes
                conn.execute(update(t).where(t.c.id == owner_id).values(**values))
                row = self._fetch(conn, t, company_id, owner_id)
                conn.commit()

                logger.info(f"Beneficial owner {owner_id} marked {row.status}")
                return to_model(BeneficialOwner, row)

        except SQLAlchemyError as e:
            logger.error(f"Error ceasing beneficial owner {owner_id}: {e}")
            raise

    # Share certificates

    def list_certificates(
        self,
        company_id: int,
        shareholder_id: Optional[int] = None,
        status: Optional[CertificateStatus] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[ShareCertificate], int]:
        """List certificates, most recently issued first."""
        t = self.certificates_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if shareholder_id is not None:
                    stmt = stmt.where(t.c.shareholder_id == shareholder_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                stmt = stmt.order_by(t.c.issue_date.desc(), t.c.id.desc())
                return paginate(conn, stmt, ShareCertificate, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing certificates for company {company_id}: {e}")
            raise

    def issue_certificate(
        self, company_id: int, certificate: ShareCertificateCreate
    ) -> ShareCertificate:
        """Issue a certificate against an active holding.

        Raises:
            BusinessRuleError: If the holder is unknown or inactive, or the
                holder's active certificates would exceed the shares held.
            ValueError: If the certificate number is already used.
        """
        t = self.certificates_table
        try:
            with self.engine.connect() as conn:
                holder = conn.execute(
                    select(shareholders).where(
                        self._scoped(
                            shareholders, company_id, certificate.shareholder_id
                        )
                    )
                ).fetchone()
                if holder is None:
                    raise BusinessRuleError(
                        f"Shareholder {certificate.shareholder_id} not found "
                        "for this company",
                        "SHAREHOLDER_NOT_FOUND",
                    )
                if holder.status != ShareholderStatus.ACTIVE.value:
                    raise InvalidStatusError(
                        f"Shareholder {holder.id} is {holder.status}"
                    )

                certified = conn.execute(
                    select(func.coalesce(func.sum(t.c.shares_represented), 0)).where(
                        and_(
                            t.c.shareholder_id == holder.id,
                            t.c.status == CertificateStatus.ACTIVE.value,
                        )
                    )
                ).scalar()
                if certified + certificate.shares_represented > holder.shares_held:
                    raise BusinessRuleError(
                        f"Certificates would represent "
                        f"{certified + certificate.shares_represented} shares but "
                        f"the holder has {holder.shares_held}",
                        "CERTIFICATE_EXCEEDS_HOLDING",
                    )

                row = conn.execute(
                    insert(t)
                    .values(
                        **column_values(
                            certificate,
                            company_id=company_id,
                            status=CertificateStatus.ACTIVE.value,
                        )
                    )
                    .returning(t)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Issued certificate {row.certificate_number} for "
                    f"{row.shares_represented} shares to shareholder {holder.id}"
                )
                return to_model(ShareCertificate, row)

        except IntegrityError as e:
            logger.error(f"Integrity error issuing certificate: {e}")
            raise ValueError(f"Invalid share certificate: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error issuing certificate: {e}")
            raise

    def cancel_certificate(
        self,
        company_id: int,
        certificate_id: int,
        cancellation: CertificateCancellation,
    ) -> Optional[ShareCertificate]:
        """Retire an active certificate."""
        t = self.certificates_table
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, t, company_id, certificate_id)
                if current is None:
                    return None
                if current.status != CertificateStatus.ACTIVE.value:
                    raise InvalidStatusError(
                        f"Certificate {current.certificate_number} is already "
                        f"{current.status}"
                    )
                conn.execute(
                    update(t)
                    .where(t.c.id == certificate_id)
                    .values(
                        status=cancellation.status.value,
                        cancellation_date=(
                            cancellation.cancellation_date or date.today()
                        ),
                        cancellation_reason=cancellation.cancellation_reason,
                        updated_at=func.now(),
                    )
                )
                row = self._fetch(conn, t, company_id, certificate_id)
                conn.commit()

                logger.info(f"Certificate {row.certificate_number} marked {row.status}")
                return to_model(ShareCertificate, row)

        except SQLAlchemyError as e:
            logger.error(f"Error cancelling certificate {certificate_id}: {e}")
            raise
