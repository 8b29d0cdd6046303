"""Locked capital and early withdrawal endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from nexus.db import NexusDatabase
from nexus.models import (
    CapitalStatistics,
    EarlyWithdrawalCreate,
    EarlyWithdrawalRequest,
    EarlyWithdrawalReview,
    LockedCapital,
    LockedCapitalCreate,
    LockedCapitalStatus,
    LockedCapitalUpdate,
    Pagination,
    RoiProjection,
    WithdrawalRequestStatus,
)

from .dependencies import get_actor_id, get_db, require_company
from .responses import (
    ApiResponse,
    bad_request,
    not_found,
    server_error,
    success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/capital",
    tags=["capital"],
    dependencies=[Depends(require_company)],
)


class CapitalDetail(LockedCapital):
    """Locked capital with its withdrawal requests."""

    withdrawal_requests: List[EarlyWithdrawalRequest] = []


class WithdrawalReviewResponse(BaseModel):
    """Reviewed request and the capital it applies to."""

    request: EarlyWithdrawalRequest
    capital: LockedCapital


@router.get("", response_model=ApiResponse[List[LockedCapital]])
async def list_capital(
    company_id: int,
    status: Optional[LockedCapitalStatus] = Query(None),
    investor_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List locked capital records."""
    try:
        records, total = db.capital.list_capital(
            company_id, status, investor_id, page, limit
        )
        return success_response(
            records,
            "Locked capital retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing locked capital: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[CapitalStatistics])
async def capital_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.capital.statistics(company_id)
        return success_response(stats, "Capital statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing capital statistics: {e}")
        raise server_error(e)


@router.get(
    "/withdrawal-requests", response_model=ApiResponse[List[EarlyWithdrawalRequest]]
)
async def list_withdrawal_requests(
    company_id: int,
    status: Optional[WithdrawalRequestStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        requests, total = db.capital.list_withdrawal_requests(
            company_id, status, page=page, limit=limit
        )
        return success_response(
            requests,
            "Withdrawal requests retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing withdrawal requests: {e}")
        raise server_error(e)


@router.put(
    "/withdrawal-requests/{request_id}/review",
    response_model=ApiResponse[WithdrawalReviewResponse],
)
async def review_withdrawal_request(
    company_id: int,
    request_id: int,
    review: EarlyWithdrawalReview,
    actor_id: Optional[int] = Depends(get_actor_id),
    db: NexusDatabase = Depends(get_db),
):
    """Approve or reject a pending early withdrawal."""
    try:
        result = db.capital.review_withdrawal(company_id, request_id, review, actor_id)
        if result is None:
            raise not_found("Withdrawal request")
        request, capital = result
        return success_response(
            WithdrawalReviewResponse(request=request, capital=capital),
            f"Withdrawal request {review.status.value}",
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error reviewing withdrawal request {request_id}: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[LockedCapital], status_code=201)
async def create_capital(
    company_id: int,
    capital: LockedCapitalCreate,
    db: NexusDatabase = Depends(get_db),
):
    """Lock capital for an investor."""
    try:
        created = db.capital.create_capital(company_id, capital)
        return success_response(created, "Capital locked successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating locked capital: {e}")
        raise server_error(e)


@router.get("/{capital_id}", response_model=ApiResponse[CapitalDetail])
async def get_capital(
    company_id: int, capital_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        capital = db.capital.get_capital(company_id, capital_id)
        if capital is None:
            raise not_found("Locked capital")
        requests, _ = db.capital.list_withdrawal_requests(
            company_id, capital_id=capital_id, limit=100
        )
        detail = CapitalDetail(**capital.model_dump(), withdrawal_requests=requests)
        return success_response(detail, "Locked capital retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting locked capital {capital_id}: {e}")
        raise server_error(e)


@router.put("/{capital_id}", response_model=ApiResponse[LockedCapital])
async def update_capital(
    company_id: int,
    capital_id: int,
    capital_update: LockedCapitalUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        capital = db.capital.update_capital(company_id, capital_id, capital_update)
        if capital is None:
            raise not_found("Locked capital")
        return success_response(capital, "Locked capital updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating locked capital {capital_id}: {e}")
        raise server_error(e)


@router.post("/{capital_id}/unlock", response_model=ApiResponse[LockedCapital])
async def unlock_capital(
    company_id: int, capital_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        capital = db.capital.unlock_capital(company_id, capital_id)
        if capital is None:
            raise not_found("Locked capital")
        return success_response(capital, "Capital unlocked successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error unlocking capital {capital_id}: {e}")
        raise server_error(e)


@router.post(
    "/{capital_id}/early-withdrawal",
    response_model=ApiResponse[EarlyWithdrawalRequest],
    status_code=201,
)
async def request_early_withdrawal(
    company_id: int,
    capital_id: int,
    withdrawal: EarlyWithdrawalCreate,
    db: NexusDatabase = Depends(get_db),
):
    """Request an early withdrawal; the penalty is set on the capital."""
    try:
        request = db.capital.request_early_withdrawal(
            company_id, capital_id, withdrawal.reason
        )
        if request is None:
            raise not_found("Locked capital")
        return success_response(request, "Early withdrawal requested successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error requesting withdrawal on capital {capital_id}: {e}")
        raise server_error(e)


@router.post("/{capital_id}/accrue-interest", response_model=ApiResponse[LockedCapital])
async def accrue_interest(
    company_id: int,
    capital_id: int,
    as_of: Optional[date] = Query(None, description="Valuation date, default today"),
    db: NexusDatabase = Depends(get_db),
):
    try:
        capital = db.capital.accrue_interest(company_id, capital_id, as_of)
        if capital is None:
            raise not_found("Locked capital")
        return success_response(capital, "Interest accrued successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error accruing interest on capital {capital_id}: {e}")
        raise server_error(e)


@router.get("/{capital_id}/roi", response_model=ApiResponse[RoiProjection])
async def roi_projection(
    company_id: int, capital_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        projection = db.capital.roi_projection(company_id, capital_id)
        if projection is None:
            raise not_found("Locked capital")
        return success_response(projection, "ROI projection calculated successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error projecting ROI for capital {capital_id}: {e}")
        raise server_error(e)
