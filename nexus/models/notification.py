"""Notification pydantic models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationPriority(str, Enum):
    """Notification priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationCreate(BaseModel):
    """Model for creating a notification."""

    user_id: Optional[int] = None
    type: str = Field("system_update", max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM


class Notification(NotificationCreate):
    """Complete notification model."""

    id: int
    company_id: int
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationFilter(BaseModel):
    """Filters accepted by the notification listing."""

    is_read: Optional[bool] = None
    type: Optional[str] = None
    priority: Optional[NotificationPriority] = None
    user_id: Optional[int] = None
