"""Meeting minutes endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    Meeting,
    MeetingCreate,
    MeetingStatistics,
    MeetingStatus,
    MeetingType,
    MeetingUpdate,
    Pagination,
)
from nexus.models.meeting import normalize_meeting_type

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
    prefix="/companies/{company_id}/meetings",
    tags=["meetings"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Meeting]])
async def list_meetings(
    company_id: int,
    type: Optional[str] = Query(None, description="Meeting type or its label"),
    status: Optional[MeetingStatus] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List meetings, latest first."""
    try:
        meeting_type = MeetingType(normalize_meeting_type(type)) if type else None
    except ValueError as e:
        raise bad_request(e)

    try:
        meetings, total = db.meetings.list_meetings(
            company_id, meeting_type, status, date_from, date_to, page, limit
        )
        return success_response(
            meetings,
            "Meetings retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing meetings: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[MeetingStatistics])
async def meeting_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.meetings.statistics(company_id)
        return success_response(stats, "Meeting statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing meeting statistics: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Meeting], status_code=201)
async def create_meeting(
    company_id: int, meeting: MeetingCreate, db: NexusDatabase = Depends(get_db)
):
    try:
        created = db.meetings.create_meeting(company_id, meeting)
        return success_response(created, "Meeting created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating meeting: {e}")
        raise server_error(e)


@router.get("/{meeting_id}", response_model=ApiResponse[Meeting])
async def get_meeting(
    company_id: int, meeting_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        meeting = db.meetings.get_meeting(company_id, meeting_id)
        if meeting is None:
            raise not_found("Meeting")
        return success_response(meeting, "Meeting retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting meeting {meeting_id}: {e}")
        raise server_error(e)


@router.put("/{meeting_id}", response_model=ApiResponse[Meeting])
async def update_meeting(
    company_id: int,
    meeting_id: int,
    meeting_update: MeetingUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        meeting = db.meetings.update_meeting(company_id, meeting_id, meeting_update)
        if meeting is None:
            raise not_found("Meeting")
        return success_response(meeting, "Meeting updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating meeting {meeting_id}: {e}")
        raise server_error(e)


@router.delete("/{meeting_id}", response_model=ApiResponse[None])
async def delete_meeting(
    company_id: int, meeting_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if not db.meetings.delete_meeting(company_id, meeting_id):
            raise not_found("Meeting")
        return success_response(message="Meeting deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting meeting {meeting_id}: {e}")
        raise server_error(e)
