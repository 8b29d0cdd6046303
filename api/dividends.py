"""Dividend declaration and distribution endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from nexus.calculations import Holding
from nexus.db import NexusDatabase
from nexus.models import (
    DeclarationStatus,
    DistributionCalculationRequest,
    DistributionPayment,
    DividendDeclaration,
    DividendDeclarationCreate,
    DividendDistribution,
    DividendStatistics,
    DividendType,
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
    prefix="/companies/{company_id}/dividends",
    tags=["dividends"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[DividendDeclaration]])
async def list_declarations(
    company_id: int,
    status: Optional[DeclarationStatus] = Query(None),
    dividend_type: Optional[DividendType] = Query(None),
    financial_year: Optional[str] = Query(None, pattern=r"^\d{4}-\d{4}$"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List declarations, newest first."""
    try:
        declarations, total = db.dividends.list_declarations(
            company_id, status, dividend_type, financial_year, page, limit
        )
        return success_response(
            declarations,
            "Dividend declarations retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing dividend declarations: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[DividendStatistics])
async def dividend_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.dividends.statistics(company_id)
        return success_response(stats, "Dividend statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing dividend statistics: {e}")
        raise server_error(e)


@router.put(
    "/distributions/{distribution_id}/pay",
    response_model=ApiResponse[DividendDistribution],
)
async def mark_distribution_paid(
    company_id: int,
    distribution_id: int,
    payment: DistributionPayment = Body(default_factory=DistributionPayment),
    db: NexusDatabase = Depends(get_db),
):
    """Mark one distribution paid."""
    try:
        distribution = db.dividends.mark_distribution_paid(
            company_id, distribution_id, payment
        )
        if distribution is None:
            raise not_found("Distribution")
        return success_response(distribution, "Distribution marked as paid")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error marking distribution {distribution_id} paid: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[DividendDeclaration], status_code=201)
async def create_declaration(
    company_id: int,
    declaration: DividendDeclarationCreate,
    db: NexusDatabase = Depends(get_db),
):
    """Declare a dividend. The pool is derived from profit and percentage."""
    try:
        created = db.dividends.create_declaration(company_id, declaration)
        return success_response(created, "Dividend declared successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating dividend declaration: {e}")
        raise server_error(e)


@router.get("/{declaration_id}", response_model=ApiResponse[DividendDeclaration])
async def get_declaration(
    company_id: int, declaration_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        declaration = db.dividends.get_declaration(company_id, declaration_id)
        if declaration is None:
            raise not_found("Dividend declaration")
        return success_response(declaration, "Dividend declaration retrieved")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting dividend declaration {declaration_id}: {e}")
        raise server_error(e)


@router.post(
    "/{declaration_id}/confirm", response_model=ApiResponse[DividendDeclaration]
)
async def confirm_declaration(
    company_id: int, declaration_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        declaration = db.dividends.confirm_declaration(company_id, declaration_id)
        if declaration is None:
            raise not_found("Dividend declaration")
        return success_response(declaration, "Dividend declaration confirmed")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error confirming dividend declaration {declaration_id}: {e}")
        raise server_error(e)


@router.post(
    "/{declaration_id}/cancel", response_model=ApiResponse[DividendDeclaration]
)
async def cancel_declaration(
    company_id: int, declaration_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        declaration = db.dividends.cancel_declaration(company_id, declaration_id)
        if declaration is None:
            raise not_found("Dividend declaration")
        return success_response(declaration, "Dividend declaration cancelled")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error cancelling dividend declaration {declaration_id}: {e}")
        raise server_error(e)


@router.post(
    "/{declaration_id}/calculate",
    response_model=ApiResponse[List[DividendDistribution]],
)
async def calculate_distributions(
    company_id: int,
    declaration_id: int,
    request: DistributionCalculationRequest = Body(
        default_factory=DistributionCalculationRequest
    ),
    db: NexusDatabase = Depends(get_db),
):
    """Allocate the pool over the supplied holders or the active register."""
    try:
        if request.shareholders is not None:
            holdings = [
                Holding(h.shareholder_id, h.shareholder_name, h.shares_held_at_time)
                for h in request.shareholders
            ]
        else:
            holdings = [
                Holding(s.id, s.shareholder_name, s.shares_held)
                for s in db.shareholders.active_holdings(company_id)
            ]
        distributions = db.dividends.calculate_distributions(
            company_id, declaration_id, holdings
        )
        if distributions is None:
            raise not_found("Dividend declaration")
        return success_response(
            distributions, "Dividend distributions calculated successfully"
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error calculating distributions for {declaration_id}: {e}")
        raise server_error(e)


@router.get(
    "/{declaration_id}/distributions",
    response_model=ApiResponse[List[DividendDistribution]],
)
async def list_distributions(
    company_id: int,
    declaration_id: int,
    is_paid: Optional[bool] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    try:
        if db.dividends.get_declaration(company_id, declaration_id) is None:
            raise not_found("Dividend declaration")
        distributions = db.dividends.list_distributions(
            company_id, declaration_id, is_paid
        )
        return success_response(
            distributions, "Dividend distributions retrieved successfully"
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing distributions for {declaration_id}: {e}")
        raise server_error(e)
