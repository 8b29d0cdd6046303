"""Tax return, rate and calculator endpoints."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.calculations import flat_tax
from nexus.config import Settings, get_settings
from nexus.db import NexusDatabase
from nexus.errors import BusinessRuleError
from nexus.models import (
    Money,
    Pagination,
    TaxCalculation,
    TaxCalculationRequest,
    TaxPayment,
    TaxReturn,
    TaxReturnCreate,
    TaxReturnStatus,
    TaxReturnUpdate,
    TaxStatistics,
    TaxType,
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
    prefix="/companies/{company_id}/tax",
    tags=["tax"],
    dependencies=[Depends(require_company)],
)


@router.get("/returns", response_model=ApiResponse[List[TaxReturn]])
async def list_returns(
    company_id: int,
    tax_type: Optional[TaxType] = Query(None),
    status: Optional[TaxReturnStatus] = Query(None),
    period: Optional[str] = Query(None, pattern=r"^\d{4}(-[0-9Q]{2})?$"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List returns, latest due date first."""
    try:
        returns, total = db.tax_returns.list_returns(
            company_id, tax_type, status, period, page, limit
        )
        return success_response(
            returns,
            "Tax returns retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing tax returns: {e}")
        raise server_error(e)


@router.post("/returns", response_model=ApiResponse[TaxReturn], status_code=201)
async def create_return(
    company_id: int, tax_return: TaxReturnCreate, db: NexusDatabase = Depends(get_db)
):
    """Record a pending return, numbered TYPE-YEAR-NNN unless a reference is given."""
    try:
        created = db.tax_returns.create_return(company_id, tax_return)
        return success_response(created, "Tax return created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating tax return: {e}")
        raise server_error(e)


@router.get("/returns/{return_id}", response_model=ApiResponse[TaxReturn])
async def get_return(
    company_id: int, return_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        tax_return = db.tax_returns.get_return(company_id, return_id)
        if tax_return is None:
            raise not_found("Tax return")
        return success_response(tax_return, "Tax return retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting tax return {return_id}: {e}")
        raise server_error(e)


@router.put("/returns/{return_id}", response_model=ApiResponse[TaxReturn])
async def update_return(
    company_id: int,
    return_id: int,
    return_update: TaxReturnUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        tax_return = db.tax_returns.update_return(company_id, return_id, return_update)
        if tax_return is None:
            raise not_found("Tax return")
        return success_response(tax_return, "Tax return updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating tax return {return_id}: {e}")
        raise server_error(e)


@router.delete("/returns/{return_id}", response_model=ApiResponse[None])
async def delete_return(
    company_id: int, return_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if not db.tax_returns.delete_return(company_id, return_id):
            raise not_found("Tax return")
        return success_response(message="Tax return deleted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error deleting tax return {return_id}: {e}")
        raise server_error(e)


@router.post("/returns/{return_id}/submit", response_model=ApiResponse[TaxReturn])
async def submit_return(
    company_id: int, return_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        tax_return = db.tax_returns.submit_return(company_id, return_id)
        if tax_return is None:
            raise not_found("Tax return")
        return success_response(tax_return, "Tax return submitted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error submitting tax return {return_id}: {e}")
        raise server_error(e)


@router.post("/returns/{return_id}/payments", response_model=ApiResponse[TaxReturn])
async def record_payment(
    company_id: int,
    return_id: int,
    payment: TaxPayment,
    db: NexusDatabase = Depends(get_db),
):
    """Pay towards a submitted return."""
    try:
        tax_return = db.tax_returns.record_payment(company_id, return_id, payment)
        if tax_return is None:
            raise not_found("Tax return")
        return success_response(tax_return, "Tax payment recorded successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error recording payment on tax return {return_id}: {e}")
        raise server_error(e)


@router.get("/deadlines", response_model=ApiResponse[List[TaxReturn]])
async def tax_deadlines(
    company_id: int,
    limit: int = Query(10, ge=1, le=50),
    db: NexusDatabase = Depends(get_db),
):
    """Upcoming pending returns, soonest first."""
    try:
        deadlines = db.tax_returns.deadlines(company_id, limit=limit)
        return success_response(deadlines, "Tax deadlines retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing tax deadlines: {e}")
        raise server_error(e)


@router.get("/overdue", response_model=ApiResponse[List[TaxReturn]])
async def overdue_returns(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        overdue = db.tax_returns.overdue(company_id)
        return success_response(overdue, "Overdue tax returns retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing overdue tax returns: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[TaxStatistics])
async def tax_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.tax_returns.statistics(company_id)
        return success_response(stats, "Tax statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing tax statistics: {e}")
        raise server_error(e)


@router.get("/rates", response_model=ApiResponse[Dict[str, Money]])
async def tax_rates(company_id: int, settings: Settings = Depends(get_settings)):
    """Configured flat rates in percent."""
    return success_response(settings.tax_rates, "Tax rates retrieved successfully")


@router.post("/calculate", response_model=ApiResponse[TaxCalculation])
async def calculate_tax(
    company_id: int,
    request: TaxCalculationRequest,
    settings: Settings = Depends(get_settings),
):
    """Tax an amount at the configured rate. VAT is zero when not registered."""
    try:
        rate = settings.tax_rates.get(request.tax_type)
        if rate is None:
            raise BusinessRuleError(
                f"Unknown tax type {request.tax_type}", "INVALID_TAX_TYPE"
            )
        if request.tax_type == "VAT" and not request.is_vat_registered:
            rate = Decimal("0")
        result = flat_tax(request.amount, rate, request.currency)
        return success_response(
            TaxCalculation(
                tax_type=request.tax_type,
                currency=request.currency,
                **result._asdict(),
            ),
            "Tax calculation completed successfully",
        )
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error calculating tax: {e}")
        raise server_error(e)
