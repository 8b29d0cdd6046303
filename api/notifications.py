"""Notification endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    Notification,
    NotificationCreate,
    NotificationFilter,
    NotificationPriority,
    Pagination,
)

from .dependencies import get_db, require_company
from .responses import (
    ApiResponse,
    bad_request,
    not_found,
    server_error,
    success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/notifications",
    tags=["notifications"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Notification]])
async def list_notifications(
    company_id: int,
    is_read: Optional[bool] = Query(None),
    type: Optional[str] = Query(None),
    priority: Optional[NotificationPriority] = Query(None),
    user_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List notifications, newest first."""
    filters = NotificationFilter(
        is_read=is_read, type=type, priority=priority, user_id=user_id
    )
    try:
        notifications, total = db.notifications.list_notifications(
            company_id, filters, page, limit
        )
        return success_response(
            notifications,
            "Notifications retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing notifications: {e}")
        raise server_error(e)


@router.get("/unread-count", response_model=ApiResponse[dict])
async def unread_count(
    company_id: int,
    user_id: Optional[int] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    try:
        count = db.notifications.unread_count(company_id, user_id)
        return success_response({"count": count}, "Unread count retrieved")
    except Exception as e:
        logger.error(f"Error counting unread notifications: {e}")
        raise server_error(e)


@router.put("/read-all", response_model=ApiResponse[dict])
async def mark_all_read(
    company_id: int,
    user_id: Optional[int] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    try:
        updated = db.notifications.mark_all_read(company_id, user_id)
        return success_response(
            {"updated": updated}, "All notifications marked as read"
        )
    except Exception as e:
        logger.error(f"Error marking notifications read: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Notification], status_code=201)
async def create_notification(
    company_id: int,
    notification: NotificationCreate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        created = db.notifications.create_notification(company_id, notification)
        return success_response(created, "Notification created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating notification: {e}")
        raise server_error(e)


@router.put("/{notification_id}/read", response_model=ApiResponse[Notification])
async def mark_read(
    company_id: int, notification_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        notification = db.notifications.mark_read(company_id, notification_id)
        if notification is None:
            raise not_found("Notification")
        return success_response(notification, "Notification marked as read")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error marking notification {notification_id} read: {e}")
        raise server_error(e)


@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    company_id: int, notification_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if not db.notifications.delete_notification(company_id, notification_id):
            raise not_found("Notification")
        return success_response(message="Notification deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting notification {notification_id}: {e}")
        raise server_error(e)
