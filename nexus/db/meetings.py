"""Meeting minutes database operations."""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models import (
    Meeting,
    MeetingCreate,
    MeetingStatistics,
    MeetingStatus,
    MeetingType,
    MeetingUpdate,
)
from .base import column_values, paginate, to_model
from .schema import meetings

logger = logging.getLogger(__name__)


class MeetingOperations:
    """Meeting minutes database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.meetings_table = meetings

    def _scoped(self, company_id: int, meeting_id: int):
        return and_(
            self.meetings_table.c.company_id == company_id,
            self.meetings_table.c.id == meeting_id,
        )

    def list_meetings(
        self,
        company_id: int,
        meeting_type: Optional[MeetingType] = None,
        status: Optional[MeetingStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Meeting], int]:
        """List meetings, most recent date first."""
        t = self.meetings_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if meeting_type is not None:
                    stmt = stmt.where(t.c.type == meeting_type.value)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if date_from is not None:
                    stmt = stmt.where(t.c.date >= date_from)
                if date_to is not None:
                    stmt = stmt.where(t.c.date <= date_to)
                stmt = stmt.order_by(t.c.date.desc(), t.c.time.desc(), t.c.id.desc())
                return paginate(conn, stmt, Meeting, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing meetings for company {company_id}: {e}")
            raise

    def get_meeting(self, company_id: int, meeting_id: int) -> Optional[Meeting]:
        """Get a meeting by ID."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    select(self.meetings_table).where(
                        self._scoped(company_id, meeting_id)
                    )
                ).fetchone()
                return to_model(Meeting, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting meeting {meeting_id}: {e}")
            raise

    def create_meeting(self, company_id: int, meeting: MeetingCreate) -> Meeting:
        """Record a meeting."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    insert(self.meetings_table)
                    .values(**column_values(meeting, company_id=company_id))
                    .returning(self.meetings_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Created meeting {row.id}: {meeting.title}")
                return to_model(Meeting, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating meeting: {e}")
            raise ValueError(f"Invalid meeting: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating meeting: {e}")
            raise

    def update_meeting(
        self, company_id: int, meeting_id: int, meeting_update: MeetingUpdate
    ) -> Optional[Meeting]:
        """Apply a partial update to a meeting."""
        values = column_values(meeting_update, exclude_unset=True)
        if not values:
            return self.get_meeting(company_id, meeting_id)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    update(self.meetings_table)
                    .where(self._scoped(company_id, meeting_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.meetings_table)
                ).fetchone()
                conn.commit()

                if row:
                    logger.info(f"Updated meeting {meeting_id}")
                    return to_model(Meeting, row)
                return None

        except IntegrityError as e:
            logger.error(f"Integrity error updating meeting {meeting_id}: {e}")
            raise ValueError(f"Invalid meeting update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating meeting {meeting_id}: {e}")
            raise

    def delete_meeting(self, company_id: int, meeting_id: int) -> bool:
        """Delete a meeting. Returns False when it does not exist."""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    delete(self.meetings_table).where(
                        self._scoped(company_id, meeting_id)
                    )
                )
                conn.commit()

                if result.rowcount > 0:
                    logger.info(f"Deleted meeting {meeting_id}")
                    return True
                return False

        except SQLAlchemyError as e:
            logger.error(f"Error deleting meeting {meeting_id}: {e}")
            raise

    def statistics(
        self, company_id: int, today: Optional[date] = None
    ) -> MeetingStatistics:
        """Meeting counts by status, period and type."""
        today = today or date.today()
        t = self.meetings_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(t.c.type, t.c.status, t.c.date).where(
                        t.c.company_id == company_id
                    )
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing meeting statistics: {e}")
            raise

        by_type = {}
        for row in rows:
            by_type[row.type] = by_type.get(row.type, 0) + 1
        return MeetingStatistics(
            total=len(rows),
            completed=sum(
                1 for r in rows if r.status == MeetingStatus.COMPLETED.value
            ),
            scheduled=sum(
                1 for r in rows if r.status == MeetingStatus.SCHEDULED.value
            ),
            this_year=sum(1 for r in rows if r.date.year == today.year),
            this_month=sum(
                1
                for r in rows
                if r.date.year == today.year and r.date.month == today.month
            ),
            by_type=by_type,
        )
