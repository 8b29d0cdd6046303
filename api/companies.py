"""Company endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    Company,
    CompanyCreate,
    CompanyStatus,
    CompanyUpdate,
    Dashboard,
    Pagination,
)

from .dependencies import get_db
from .responses import (
    ApiResponse,
    bad_request,
    not_found,
    server_error,
    success_response,
)

logger = logging.getLogger(__name__)

# Create router for company endpoints
router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=ApiResponse[List[Company]])
async def list_companies(
    status: Optional[CompanyStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Company name prefix"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List companies."""
    try:
        companies, total = db.companies.list_companies(status, search, page, limit)
        return success_response(
            companies,
            "Companies retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing companies: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Company], status_code=201)
async def create_company(
    company: CompanyCreate, db: NexusDatabase = Depends(get_db)
):
    """Register a company."""
    try:
        created = db.companies.create_company(company)
        return success_response(created, "Company created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating company: {e}")
        raise server_error(e)


@router.get("/{company_id}", response_model=ApiResponse[Company])
async def get_company(company_id: int, db: NexusDatabase = Depends(get_db)):
    """Get a company by ID."""
    try:
        company = db.companies.get_company(company_id)
        if company is None:
            raise not_found("Company")
        return success_response(company, "Company retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting company {company_id}: {e}")
        raise server_error(e)


@router.put("/{company_id}", response_model=ApiResponse[Company])
async def update_company(
    company_id: int,
    company_update: CompanyUpdate,
    db: NexusDatabase = Depends(get_db),
):
    """Update a company."""
    try:
        company = db.companies.update_company(company_id, company_update)
        if company is None:
            raise not_found("Company")
        return success_response(company, "Company updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating company {company_id}: {e}")
        raise server_error(e)


@router.delete("/{company_id}", response_model=ApiResponse[Company])
async def deactivate_company(company_id: int, db: NexusDatabase = Depends(get_db)):
    """Deactivate a company. Records are kept."""
    try:
        company = db.companies.deactivate_company(company_id)
        if company is None:
            raise not_found("Company")
        return success_response(company, "Company deactivated successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deactivating company {company_id}: {e}")
        raise server_error(e)


@router.get("/{company_id}/dashboard", response_model=ApiResponse[Dashboard])
async def get_dashboard(company_id: int, db: NexusDatabase = Depends(get_db)):
    """Per-module counts and totals for a company."""
    try:
        dashboard = db.reports.dashboard(company_id)
        if dashboard is None:
            raise not_found("Company")
        return success_response(dashboard, "Dashboard retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building dashboard for company {company_id}: {e}")
        raise server_error(e)
