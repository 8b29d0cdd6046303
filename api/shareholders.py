"""Shareholder register endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    OwnershipStatistics,
    Shareholder,
    ShareholderCreate,
    ShareholderStatus,
    ShareholderUpdate,
    ShareTransfer,
    ShareTransferResult,
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
    prefix="/companies/{company_id}/shareholders",
    tags=["shareholders"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Shareholder]])
async def list_shareholders(
    company_id: int,
    status: Optional[ShareholderStatus] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    """List the register, largest holdings first."""
    try:
        holders = db.shareholders.list_shareholders(company_id, status)
        return success_response(holders, "Shareholders retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing shareholders for company {company_id}: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[OwnershipStatistics])
async def ownership_statistics(
    company_id: int,
    top: int = Query(5, ge=1, le=50, description="Number of top holders"),
    db: NexusDatabase = Depends(get_db),
):
    try:
        stats = db.shareholders.ownership_statistics(company_id, top)
        return success_response(stats, "Ownership statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing ownership statistics: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Shareholder], status_code=201)
async def create_shareholder(
    company_id: int,
    shareholder: ShareholderCreate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        created = db.shareholders.create_shareholder(company_id, shareholder)
        return success_response(created, "Shareholder created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating shareholder: {e}")
        raise server_error(e)


@router.get("/{shareholder_id}", response_model=ApiResponse[Shareholder])
async def get_shareholder(
    company_id: int, shareholder_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        holder = db.shareholders.get_shareholder(company_id, shareholder_id)
        if holder is None:
            raise not_found("Shareholder")
        return success_response(holder, "Shareholder retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting shareholder {shareholder_id}: {e}")
        raise server_error(e)


@router.put("/{shareholder_id}", response_model=ApiResponse[Shareholder])
async def update_shareholder(
    company_id: int,
    shareholder_id: int,
    shareholder_update: ShareholderUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        holder = db.shareholders.update_shareholder(
            company_id, shareholder_id, shareholder_update
        )
        if holder is None:
            raise not_found("Shareholder")
        return success_response(holder, "Shareholder updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating shareholder {shareholder_id}: {e}")
        raise server_error(e)


@router.post(
    "/{shareholder_id}/transfer", response_model=ApiResponse[ShareTransferResult]
)
async def transfer_shares(
    company_id: int,
    shareholder_id: int,
    transfer: ShareTransfer,
    db: NexusDatabase = Depends(get_db),
):
    """Transfer shares from a holder to another person."""
    try:
        result = db.shareholders.transfer_shares(company_id, shareholder_id, transfer)
        if result is None:
            raise not_found("Shareholder")
        return success_response(result, "Shares transferred successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error transferring shares from {shareholder_id}: {e}")
        raise server_error(e)
