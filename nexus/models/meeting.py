"""Meeting minutes pydantic models."""

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MeetingType(str, Enum):
    """Meeting type."""

    AGM = "AGM"
    EGM = "EGM"
    BOARD = "Board"
    COMMITTEE = "Committee"
    SPECIAL = "Special"


class MeetingStatus(str, Enum):
    """Meeting status."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Labels used by the web client mapped onto stored meeting types.
MEETING_TYPE_LABELS: Dict[str, MeetingType] = {
    "Board Meeting": MeetingType.BOARD,
    "Team Meeting": MeetingType.COMMITTEE,
    "Shareholders Meeting": MeetingType.AGM,
    "Emergency Meeting": MeetingType.EGM,
    "Special Meeting": MeetingType.SPECIAL,
    "Committee Meeting": MeetingType.COMMITTEE,
}


def normalize_meeting_type(value: Any) -> Any:
    """Map a client label such as "Board Meeting" to its meeting type."""
    if isinstance(value, str) and value in MEETING_TYPE_LABELS:
        return MEETING_TYPE_LABELS[value]
    return value


class Attendee(BaseModel):
    """Meeting attendee."""

    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    present: bool = True


def _check_items(items: List[Union[str, Dict[str, Any]]], key: str, label: str):
    for index, item in enumerate(items, start=1):
        if isinstance(item, str):
            if not item.strip():
                raise ValueError(f"{label} {index} must be a non-empty string")
        elif not str(item.get(key) or "").strip():
            raise ValueError(f"{label} {index} must have a non-empty {key}")
    return items


class MeetingBase(BaseModel):
    """Base meeting model."""

    title: str = Field(..., min_length=2, max_length=255)
    type: MeetingType = MeetingType.BOARD
    date: dt.date
    time: str = Field(..., pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    location: str = Field(..., min_length=2, max_length=255)
    chairperson: str = Field(..., min_length=2, max_length=255)
    secretary: str = Field(..., min_length=2, max_length=255)
    attendees: List[Attendee] = []
    agenda: List[Union[str, Dict[str, Any]]] = []
    discussions: Optional[str] = None
    decisions: List[Union[str, Dict[str, Any]]] = []
    action_items: List[Union[str, Dict[str, Any]]] = []
    next_meeting_date: Optional[dt.date] = None
    status: MeetingStatus = MeetingStatus.SCHEDULED

    @field_validator("type", mode="before")
    @classmethod
    def map_type_label(cls, v):
        return normalize_meeting_type(v)

    @field_validator("agenda")
    @classmethod
    def validate_agenda(cls, v):
        return _check_items(v, "description", "Agenda item")

    @field_validator("decisions")
    @classmethod
    def validate_decisions(cls, v):
        return _check_items(v, "decision", "Decision")

    @field_validator("action_items")
    @classmethod
    def validate_action_items(cls, v):
        return _check_items(v, "task", "Action item")


class MeetingCreate(MeetingBase):
    """Model for creating a meeting."""

    pass


class MeetingUpdate(BaseModel):
    """Model for updating a meeting."""

    title: Optional[str] = Field(None, min_length=2, max_length=255)
    type: Optional[MeetingType] = None
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    location: Optional[str] = Field(None, min_length=2, max_length=255)
    chairperson: Optional[str] = Field(None, min_length=2, max_length=255)
    secretary: Optional[str] = Field(None, min_length=2, max_length=255)
    attendees: Optional[List[Attendee]] = None
    agenda: Optional[List[Union[str, Dict[str, Any]]]] = None
    discussions: Optional[str] = None
    decisions: Optional[List[Union[str, Dict[str, Any]]]] = None
    action_items: Optional[List[Union[str, Dict[str, Any]]]] = None
    next_meeting_date: Optional[dt.date] = None
    status: Optional[MeetingStatus] = None

    @field_validator("type", mode="before")
    @classmethod
    def map_type_label(cls, v):
        return normalize_meeting_type(v)


class Meeting(MeetingBase):
    """Complete meeting model with ID."""

    id: int
    company_id: int
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class MeetingStatistics(BaseModel):
    """Meeting counts for a company."""

    total: int
    completed: int
    scheduled: int
    this_year: int
    this_month: int
    by_type: Dict[str, int]
