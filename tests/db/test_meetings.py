"""Tests for meeting minutes database operations."""

from datetime import date

import pytest
from pydantic import ValidationError

from nexus.models import MeetingCreate, MeetingStatus, MeetingType, MeetingUpdate


def _meeting(**overrides) -> MeetingCreate:
    values = {
        "title": "Quarterly board review",
        "type": "Board Meeting",
        "date": date(2026, 10, 5),
        "time": "09:30",
        "location": "Kigali Heights, Room 4",
        "chairperson": "Alice Uwase",
        "secretary": "Jean Mugisha",
        "attendees": [{"name": "Alice Uwase", "role": "Chair"}],
        "agenda": ["Opening", {"description": "Q3 results"}],
    }
    values.update(overrides)
    return MeetingCreate(**values)


class TestMeetingModels:
    """Test meeting input validation."""

    def test_type_label_is_normalized(self):
        assert _meeting().type == MeetingType.BOARD
        assert _meeting(type="Shareholders Meeting").type == MeetingType.AGM

    def test_blank_agenda_item_rejected(self):
        with pytest.raises(ValidationError):
            _meeting(agenda=["Opening", "  "])

    def test_decision_needs_text(self):
        with pytest.raises(ValidationError):
            _meeting(decisions=[{"owner": "Alice"}])


class TestMeetingOperations:
    """Test meeting database operations."""

    def test_create_and_get(self, db, company):
        meeting = db.meetings.create_meeting(company.id, _meeting())

        fetched = db.meetings.get_meeting(company.id, meeting.id)
        assert fetched.type == MeetingType.BOARD
        assert fetched.status == MeetingStatus.SCHEDULED
        assert fetched.attendees[0].name == "Alice Uwase"
        assert fetched.agenda == ["Opening", {"description": "Q3 results"}]

    def test_list_filters(self, db, company):
        db.meetings.create_meeting(company.id, _meeting())
        db.meetings.create_meeting(
            company.id, _meeting(type=MeetingType.AGM, date=date(2026, 6, 20))
        )

        meetings, total = db.meetings.list_meetings(company.id)
        assert total == 2
        assert [m.date for m in meetings] == [date(2026, 10, 5), date(2026, 6, 20)]

        meetings, total = db.meetings.list_meetings(
            company.id, meeting_type=MeetingType.AGM
        )
        assert total == 1

        meetings, total = db.meetings.list_meetings(
            company.id, date_from=date(2026, 7, 1)
        )
        assert [m.date for m in meetings] == [date(2026, 10, 5)]

    def test_update_meeting(self, db, company):
        meeting = db.meetings.create_meeting(company.id, _meeting())

        updated = db.meetings.update_meeting(
            company.id,
            meeting.id,
            MeetingUpdate(status=MeetingStatus.COMPLETED, decisions=["Approve budget"]),
        )

        assert updated.status == MeetingStatus.COMPLETED
        assert updated.decisions == ["Approve budget"]
        assert updated.title == meeting.title

    def test_delete_meeting(self, db, company):
        meeting = db.meetings.create_meeting(company.id, _meeting())

        assert db.meetings.delete_meeting(company.id, meeting.id) is True
        assert db.meetings.get_meeting(company.id, meeting.id) is None
        assert db.meetings.delete_meeting(company.id, meeting.id) is False

    def test_statistics(self, db, company):
        db.meetings.create_meeting(company.id, _meeting())
        db.meetings.create_meeting(
            company.id,
            _meeting(
                type=MeetingType.AGM,
                date=date(2025, 6, 20),
                status=MeetingStatus.COMPLETED,
            ),
        )

        stats = db.meetings.statistics(company.id, today=date(2026, 10, 18))

        assert stats.total == 2
        assert stats.completed == 1
        assert stats.scheduled == 1
        assert stats.this_year == 1
        assert stats.this_month == 1
        assert stats.by_type == {"Board": 1, "AGM": 1}
