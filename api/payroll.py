"""Payroll period and record endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from nexus.config import Settings, get_settings
from nexus.db import NexusDatabase
from nexus.models import (
    GeneratedPayroll,
    Pagination,
    PayrollGeneration,
    PayrollPayment,
    PayrollPaymentStatus,
    PayrollPeriod,
    PayrollPeriodCreate,
    PayrollPeriodStatus,
    PayrollPeriodUpdate,
    PayrollRecord,
    PayrollRecordUpdate,
    PayrollStatistics,
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
    prefix="/companies/{company_id}/payroll",
    tags=["payroll"],
    dependencies=[Depends(require_company)],
)


@router.get("/periods", response_model=ApiResponse[List[PayrollPeriod]])
async def list_periods(
    company_id: int,
    status: Optional[PayrollPeriodStatus] = Query(None),
    year: Optional[int] = Query(None, ge=1900, le=2100),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List payroll periods, latest first."""
    try:
        periods, total = db.payroll.list_periods(company_id, status, year, page, limit)
        return success_response(
            periods,
            "Payroll periods retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing payroll periods: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[PayrollStatistics])
async def payroll_statistics(
    company_id: int,
    year: Optional[int] = Query(None, ge=1900, le=2100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        stats = db.payroll.statistics(company_id, year)
        return success_response(stats, "Payroll statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing payroll statistics: {e}")
        raise server_error(e)


@router.post("/periods", response_model=ApiResponse[PayrollPeriod], status_code=201)
async def create_period(
    company_id: int, period: PayrollPeriodCreate, db: NexusDatabase = Depends(get_db)
):
    """Open a draft payroll period."""
    try:
        created = db.payroll.create_period(company_id, period)
        return success_response(created, "Payroll period created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating payroll period: {e}")
        raise server_error(e)


@router.get("/periods/{period_id}", response_model=ApiResponse[PayrollPeriod])
async def get_period(
    company_id: int, period_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        period = db.payroll.get_period(company_id, period_id)
        if period is None:
            raise not_found("Payroll period")
        return success_response(period, "Payroll period retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting payroll period {period_id}: {e}")
        raise server_error(e)


@router.put("/periods/{period_id}", response_model=ApiResponse[PayrollPeriod])
async def update_period(
    company_id: int,
    period_id: int,
    period_update: PayrollPeriodUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        period = db.payroll.update_period(company_id, period_id, period_update)
        if period is None:
            raise not_found("Payroll period")
        return success_response(period, "Payroll period updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating payroll period {period_id}: {e}")
        raise server_error(e)


@router.delete("/periods/{period_id}", response_model=ApiResponse[None])
async def delete_period(
    company_id: int, period_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if not db.payroll.delete_period(company_id, period_id):
            raise not_found("Payroll period")
        return success_response(message="Payroll period deleted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error deleting payroll period {period_id}: {e}")
        raise server_error(e)


@router.post(
    "/periods/{period_id}/generate", response_model=ApiResponse[GeneratedPayroll]
)
async def generate_records(
    company_id: int,
    period_id: int,
    generation: PayrollGeneration = Body(default_factory=PayrollGeneration),
    db: NexusDatabase = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Compute payslips for every active employee and start processing."""
    try:
        generated = db.payroll.generate_records(
            company_id, period_id, settings.payroll_rates, generation.overtime_hours
        )
        if generated is None:
            raise not_found("Payroll period")
        return success_response(generated, "Payroll generated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error generating payroll for period {period_id}: {e}")
        raise server_error(e)


@router.get(
    "/periods/{period_id}/records", response_model=ApiResponse[List[PayrollRecord]]
)
async def list_records(
    company_id: int,
    period_id: int,
    payment_status: Optional[PayrollPaymentStatus] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    try:
        records = db.payroll.list_records(company_id, period_id, payment_status)
        if records is None:
            raise not_found("Payroll period")
        return success_response(records, "Payroll records retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing payroll records for {period_id}: {e}")
        raise server_error(e)


@router.post(
    "/periods/{period_id}/complete", response_model=ApiResponse[PayrollPeriod]
)
async def complete_period(
    company_id: int, period_id: int, db: NexusDatabase = Depends(get_db)
):
    """Close a period whose records are all paid."""
    try:
        period = db.payroll.complete_period(company_id, period_id)
        if period is None:
            raise not_found("Payroll period")
        return success_response(period, "Payroll period completed successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error completing payroll period {period_id}: {e}")
        raise server_error(e)


@router.post("/periods/{period_id}/cancel", response_model=ApiResponse[PayrollPeriod])
async def cancel_period(
    company_id: int, period_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        period = db.payroll.cancel_period(company_id, period_id)
        if period is None:
            raise not_found("Payroll period")
        return success_response(period, "Payroll period cancelled successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error cancelling payroll period {period_id}: {e}")
        raise server_error(e)


@router.get("/records/{record_id}", response_model=ApiResponse[PayrollRecord])
async def get_record(
    company_id: int, record_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        record = db.payroll.get_record(company_id, record_id)
        if record is None:
            raise not_found("Payroll record")
        return success_response(record, "Payroll record retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting payroll record {record_id}: {e}")
        raise server_error(e)


@router.put("/records/{record_id}", response_model=ApiResponse[PayrollRecord])
async def update_record(
    company_id: int,
    record_id: int,
    record_update: PayrollRecordUpdate,
    db: NexusDatabase = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Adjust overtime or deductions; the payslip is recomputed."""
    try:
        record = db.payroll.update_record(
            company_id, record_id, record_update, settings.payroll_rates
        )
        if record is None:
            raise not_found("Payroll record")
        return success_response(record, "Payroll record updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating payroll record {record_id}: {e}")
        raise server_error(e)


@router.put("/records/{record_id}/payment", response_model=ApiResponse[PayrollRecord])
async def set_payment(
    company_id: int,
    record_id: int,
    payment: PayrollPayment,
    db: NexusDatabase = Depends(get_db),
):
    try:
        record = db.payroll.set_payment(company_id, record_id, payment)
        if record is None:
            raise not_found("Payroll record")
        return success_response(record, "Payroll payment recorded successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error recording payment for record {record_id}: {e}")
        raise server_error(e)
