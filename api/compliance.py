"""Compliance alert endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from nexus.db import NexusDatabase
from nexus.models import (
    AlertSeverity,
    AlertType,
    ComplianceAlert,
    ComplianceOverview,
)

from .dependencies import get_db, require_company
from .responses import ApiResponse, server_error, success_response

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/compliance",
    tags=["compliance"],
    dependencies=[Depends(require_company)],
)


@router.get("/alerts", response_model=ApiResponse[List[ComplianceAlert]])
async def list_alerts(
    company_id: int,
    severity: Optional[AlertSeverity] = Query(None),
    alert_type: Optional[AlertType] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    """Open tax, payroll, document and capital obligations, earliest first."""
    try:
        alerts = db.compliance.alerts(
            company_id, severity=severity, alert_type=alert_type
        )
        return success_response(alerts, "Compliance alerts retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing compliance alerts: {e}")
        raise server_error(e)


@router.get("/status", response_model=ApiResponse[ComplianceOverview])
async def compliance_status(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        overview = db.compliance.overview(company_id)
        return success_response(overview, "Compliance status retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing compliance status: {e}")
        raise server_error(e)


@router.get("/deadlines", response_model=ApiResponse[List[ComplianceAlert]])
async def upcoming_deadlines(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        deadlines = db.compliance.deadlines(company_id)
        return success_response(deadlines, "Compliance deadlines retrieved")
    except Exception as e:
        logger.error(f"Error listing compliance deadlines: {e}")
        raise server_error(e)


@router.get("/overdue", response_model=ApiResponse[List[ComplianceAlert]])
async def overdue_items(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        overdue = db.compliance.overdue(company_id)
        return success_response(overdue, "Overdue compliance items retrieved")
    except Exception as e:
        logger.error(f"Error listing overdue compliance items: {e}")
        raise server_error(e)
