"""Tests for notification database operations."""

from nexus.models import NotificationCreate, NotificationFilter, NotificationPriority


def _notify(db, company_id, title, **kwargs):
    return db.notifications.create_notification(
        company_id, NotificationCreate(title=title, message=f"{title} details", **kwargs)
    )


class TestNotificationOperations:
    """Test notification database operations."""

    def test_create_defaults(self, db, company):
        notification = _notify(db, company.id, "Welcome")

        assert notification.is_read is False
        assert notification.type == "system_update"
        assert notification.priority == NotificationPriority.MEDIUM

    def test_unread_count_and_mark_read(self, db, company):
        first = _notify(db, company.id, "Capital unlocking soon")
        _notify(db, company.id, "Dividend declared")

        assert db.notifications.unread_count(company.id) == 2
        read = db.notifications.mark_read(company.id, first.id)
        assert read.is_read is True
        assert db.notifications.unread_count(company.id) == 1

    def test_mark_read_not_found(self, db, company):
        assert db.notifications.mark_read(company.id, 99999) is None

    def test_mark_all_read_for_user(self, db, company):
        _notify(db, company.id, "For user 1", user_id=1)
        _notify(db, company.id, "Also for user 1", user_id=1)
        _notify(db, company.id, "For user 2", user_id=2)

        assert db.notifications.mark_all_read(company.id, user_id=1) == 2
        assert db.notifications.unread_count(company.id) == 1
        assert db.notifications.mark_all_read(company.id) == 1
        assert db.notifications.mark_all_read(company.id) == 0

    def test_list_filters(self, db, company):
        _notify(db, company.id, "Low", priority=NotificationPriority.LOW)
        urgent = _notify(
            db, company.id, "Penalty applied", priority=NotificationPriority.HIGH
        )

        found, total = db.notifications.list_notifications(
            company.id, NotificationFilter(priority=NotificationPriority.HIGH)
        )
        assert total == 1
        assert found[0].id == urgent.id

    def test_delete_notification(self, db, company):
        notification = _notify(db, company.id, "Temporary")

        assert db.notifications.delete_notification(company.id, notification.id) is True
        assert db.notifications.delete_notification(company.id, notification.id) is False
