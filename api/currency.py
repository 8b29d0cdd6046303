"""Currency rate, conversion and transaction endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.config import get_settings
from nexus.db import NexusDatabase
from nexus.errors import RateNotFoundError
from nexus.models import (
    ConversionRequest,
    ConversionResult,
    CurrencyRate,
    CurrencyRateCreate,
    CurrencyRateUpdate,
    CurrencyStatistics,
    CurrencyTransaction,
    CurrencyTransactionCreate,
    CurrencyTransactionType,
    LatestRates,
    Pagination,
    SUPPORTED_CURRENCIES,
)

from .dependencies import get_db, require_company
from .responses import (
    ApiError,
    ApiResponse,
    bad_request,
    not_found,
    rate_not_found,
    server_error,
    success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/currency",
    tags=["currency"],
    dependencies=[Depends(require_company)],
)


@router.get("/supported", response_model=ApiResponse[List[str]])
async def supported_currencies(company_id: int, db: NexusDatabase = Depends(get_db)):
    return success_response(db.currency.supported_currencies(), "Supported currencies")


@router.get("/rates", response_model=ApiResponse[List[CurrencyRate]])
async def list_rates(
    company_id: int,
    from_currency: Optional[str] = Query(None, min_length=3, max_length=3),
    to_currency: Optional[str] = Query(None, min_length=3, max_length=3),
    active_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List exchange rates, most recent first."""
    try:
        rates, total = db.currency.list_rates(
            company_id, from_currency, to_currency, active_only, page, limit
        )
        return success_response(
            rates,
            "Currency rates retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing currency rates: {e}")
        raise server_error(e)


@router.post("/rates", response_model=ApiResponse[CurrencyRate], status_code=201)
async def create_rate(
    company_id: int, rate: CurrencyRateCreate, db: NexusDatabase = Depends(get_db)
):
    try:
        created = db.currency.create_rate(company_id, rate)
        return success_response(created, "Currency rate created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating currency rate: {e}")
        raise server_error(e)


@router.get("/rates/latest", response_model=ApiResponse[LatestRates])
async def latest_rates(
    company_id: int,
    base: Optional[str] = Query(None, min_length=3, max_length=3),
    db: NexusDatabase = Depends(get_db),
):
    """Latest known rate from ``base`` to every other supported currency."""
    base = base or get_settings().default_currency
    if base.upper() not in SUPPORTED_CURRENCIES:
        raise ApiError(400, f"Unsupported currency {base}", code="INVALID_CURRENCY")
    try:
        rates = db.currency.latest_rates(company_id, base)
        return success_response(rates, "Latest rates retrieved successfully")
    except Exception as e:
        logger.error(f"Error reading latest rates for {base}: {e}")
        raise server_error(e)


@router.put("/rates/{rate_id}", response_model=ApiResponse[CurrencyRate])
async def update_rate(
    company_id: int,
    rate_id: int,
    rate_update: CurrencyRateUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        rate = db.currency.update_rate(company_id, rate_id, rate_update)
        if rate is None:
            raise not_found("Currency rate")
        return success_response(rate, "Currency rate updated successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating currency rate {rate_id}: {e}")
        raise server_error(e)


@router.delete("/rates/{rate_id}", response_model=ApiResponse[CurrencyRate])
async def deactivate_rate(
    company_id: int, rate_id: int, db: NexusDatabase = Depends(get_db)
):
    """Deactivate a rate; it is kept for history."""
    try:
        rate = db.currency.deactivate_rate(company_id, rate_id)
        if rate is None:
            raise not_found("Currency rate")
        return success_response(rate, "Currency rate deactivated successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deactivating currency rate {rate_id}: {e}")
        raise server_error(e)


@router.post("/convert", response_model=ApiResponse[ConversionResult])
async def convert(
    company_id: int, request: ConversionRequest, db: NexusDatabase = Depends(get_db)
):
    try:
        result = db.currency.convert(company_id, request)
        return success_response(result, "Currency converted successfully")
    except RateNotFoundError as e:
        raise rate_not_found(e)
    except Exception as e:
        logger.error(f"Error converting currency: {e}")
        raise server_error(e)


@router.get("/transactions", response_model=ApiResponse[List[CurrencyTransaction]])
async def list_transactions(
    company_id: int,
    transaction_type: Optional[CurrencyTransactionType] = Query(None),
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        transactions, total = db.currency.list_transactions(
            company_id, transaction_type, currency, page, limit
        )
        return success_response(
            transactions,
            "Currency transactions retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing currency transactions: {e}")
        raise server_error(e)


@router.post(
    "/transactions", response_model=ApiResponse[CurrencyTransaction], status_code=201
)
async def create_transaction(
    company_id: int,
    transaction: CurrencyTransactionCreate,
    db: NexusDatabase = Depends(get_db),
):
    """Record a transaction; missing rate and amount come from stored rates."""
    try:
        created = db.currency.create_transaction(company_id, transaction)
        return success_response(created, "Currency transaction recorded successfully")
    except RateNotFoundError as e:
        raise rate_not_found(e)
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating currency transaction: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[CurrencyStatistics])
async def currency_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.currency.statistics(company_id)
        return success_response(stats, "Currency statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing currency statistics: {e}")
        raise server_error(e)
