"""Notification database operations."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models import Notification, NotificationCreate, NotificationFilter
from .base import column_values, paginate, to_model
from .schema import notifications

logger = logging.getLogger(__name__)


class NotificationOperations:
    """Notification database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.notifications_table = notifications

    def _filtered(self, company_id: int, filters: NotificationFilter):
        t = self.notifications_table
        conditions = [t.c.company_id == company_id]
        if filters.is_read is not None:
            conditions.append(t.c.is_read.is_(filters.is_read))
        if filters.type:
            conditions.append(t.c.type == filters.type)
        if filters.priority is not None:
            conditions.append(t.c.priority == filters.priority.value)
        if filters.user_id is not None:
            conditions.append(t.c.user_id == filters.user_id)
        return and_(*conditions)

    def list_notifications(
        self,
        company_id: int,
        filters: Optional[NotificationFilter] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Notification], int]:
        """List notifications, newest first."""
        t = self.notifications_table
        filters = filters or NotificationFilter()
        try:
            with self.engine.connect() as conn:
                stmt = (
                    select(t)
                    .where(self._filtered(company_id, filters))
                    .order_by(t.c.created_at.desc(), t.c.id.desc())
                )
                return paginate(conn, stmt, Notification, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing notifications: {e}")
            raise

    def unread_count(self, company_id: int, user_id: Optional[int] = None) -> int:
        """Number of unread notifications."""
        try:
            with self.engine.connect() as conn:
                stmt = select(func.count()).where(
                    self._filtered(
                        company_id, NotificationFilter(is_read=False, user_id=user_id)
                    )
                )
                return conn.execute(stmt).scalar() or 0

        except SQLAlchemyError as e:
            logger.error(f"Error counting unread notifications: {e}")
            raise

    def create_notification(
        self, company_id: int, notification: NotificationCreate
    ) -> Notification:
        """Create a notification."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    insert(self.notifications_table)
                    .values(**column_values(notification, company_id=company_id))
                    .returning(self.notifications_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Created notification {row.id}: {notification.title}")
                return to_model(Notification, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating notification: {e}")
            raise ValueError(f"Invalid notification: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating notification: {e}")
            raise

    def mark_read(self, company_id: int, notification_id: int) -> Optional[Notification]:
        """Mark one notification read."""
        t = self.notifications_table
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    update(t)
                    .where(and_(t.c.company_id == company_id, t.c.id == notification_id))
                    .values(is_read=True)
                    .returning(t)
                ).fetchone()
                conn.commit()
                return to_model(Notification, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error marking notification {notification_id} read: {e}")
            raise

    def mark_all_read(self, company_id: int, user_id: Optional[int] = None) -> int:
        """Mark every unread notification read; returns how many changed."""
        t = self.notifications_table
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    update(t)
                    .where(
                        self._filtered(
                            company_id,
                            NotificationFilter(is_read=False, user_id=user_id),
                        )
                    )
                    .values(is_read=True)
                )
                conn.commit()

                logger.info(
                    f"Marked {result.rowcount} notifications read for company "
                    f"{company_id}"
                )
                return result.rowcount

        except SQLAlchemyError as e:
            logger.error(f"Error marking notifications read: {e}")
            raise

    def delete_notification(self, company_id: int, notification_id: int) -> bool:
        """Delete a notification. Returns False when it does not exist."""
        t = self.notifications_table
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    delete(t).where(
                        and_(t.c.company_id == company_id, t.c.id == notification_id)
                    )
                )
                conn.commit()
                return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting notification {notification_id}: {e}")
            raise
