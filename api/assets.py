"""Fixed asset register endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    AssetCategory,
    AssetCategoryCreate,
    AssetCategoryUpdate,
    AssetDisposal,
    AssetStatus,
    AssetSummary,
    DepreciationResult,
    DepreciationSchedule,
    DisposalResult,
    FixedAsset,
    FixedAssetCreate,
    FixedAssetUpdate,
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
    prefix="/companies/{company_id}/assets",
    tags=["assets"],
    dependencies=[Depends(require_company)],
)


@router.get("/categories", response_model=ApiResponse[List[AssetCategory]])
async def list_categories(
    company_id: int,
    include_inactive: bool = Query(False),
    db: NexusDatabase = Depends(get_db),
):
    try:
        categories = db.assets.list_categories(company_id, include_inactive)
        return success_response(categories, "Asset categories retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing asset categories: {e}")
        raise server_error(e)


@router.post(
    "/categories", response_model=ApiResponse[AssetCategory], status_code=201
)
async def create_category(
    company_id: int,
    category: AssetCategoryCreate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        created = db.assets.create_category(company_id, category)
        return success_response(created, "Asset category created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating asset category: {e}")
        raise server_error(e)


@router.put("/categories/{category_id}", response_model=ApiResponse[AssetCategory])
async def update_category(
    company_id: int,
    category_id: int,
    category_update: AssetCategoryUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        category = db.assets.update_category(company_id, category_id, category_update)
        if category is None:
            raise not_found("Asset category")
        return success_response(category, "Asset category updated successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating asset category {category_id}: {e}")
        raise server_error(e)


@router.get("/summary", response_model=ApiResponse[AssetSummary])
async def asset_summary(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        summary = db.assets.summary(company_id)
        return success_response(summary, "Asset summary retrieved successfully")
    except Exception as e:
        logger.error(f"Error summarising assets: {e}")
        raise server_error(e)


@router.get("", response_model=ApiResponse[List[FixedAsset]])
async def list_assets(
    company_id: int,
    status: Optional[AssetStatus] = Query(None),
    category_id: Optional[int] = Query(None),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Name or asset tag"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List the fixed asset register."""
    try:
        assets, total = db.assets.list_assets(
            company_id, status, category_id, location, search, page, limit
        )
        return success_response(
            assets,
            "Assets retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing assets: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[FixedAsset], status_code=201)
async def create_asset(
    company_id: int, asset: FixedAssetCreate, db: NexusDatabase = Depends(get_db)
):
    try:
        created = db.assets.create_asset(company_id, asset)
        return success_response(created, "Asset registered successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating asset: {e}")
        raise server_error(e)


@router.get("/{asset_id}", response_model=ApiResponse[FixedAsset])
async def get_asset(
    company_id: int, asset_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        asset = db.assets.get_asset(company_id, asset_id)
        if asset is None:
            raise not_found("Asset")
        return success_response(asset, "Asset retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting asset {asset_id}: {e}")
        raise server_error(e)


@router.put("/{asset_id}", response_model=ApiResponse[FixedAsset])
async def update_asset(
    company_id: int,
    asset_id: int,
    asset_update: FixedAssetUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        asset = db.assets.update_asset(company_id, asset_id, asset_update)
        if asset is None:
            raise not_found("Asset")
        return success_response(asset, "Asset updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating asset {asset_id}: {e}")
        raise server_error(e)


@router.delete("/{asset_id}", response_model=ApiResponse[None])
async def delete_asset(
    company_id: int, asset_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if not db.assets.delete_asset(company_id, asset_id):
            raise not_found("Asset")
        return success_response(message="Asset deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting asset {asset_id}: {e}")
        raise server_error(e)


@router.post("/{asset_id}/depreciation", response_model=ApiResponse[DepreciationResult])
async def calculate_depreciation(
    company_id: int,
    asset_id: int,
    as_of: Optional[date] = Query(None, description="Valuation date, default today"),
    db: NexusDatabase = Depends(get_db),
):
    """Compute and store depreciation up to a date."""
    try:
        result = db.assets.calculate_depreciation(company_id, asset_id, as_of)
        if result is None:
            raise not_found("Asset")
        return success_response(result, "Depreciation calculated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error calculating depreciation for asset {asset_id}: {e}")
        raise server_error(e)


@router.get(
    "/{asset_id}/depreciation-schedule",
    response_model=ApiResponse[DepreciationSchedule],
)
async def depreciation_schedule(
    company_id: int, asset_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        schedule = db.assets.depreciation_schedule(company_id, asset_id)
        if schedule is None:
            raise not_found("Asset")
        return success_response(schedule, "Depreciation schedule generated")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error building schedule for asset {asset_id}: {e}")
        raise server_error(e)


@router.post("/{asset_id}/dispose", response_model=ApiResponse[DisposalResult])
async def dispose_asset(
    company_id: int,
    asset_id: int,
    disposal: AssetDisposal,
    db: NexusDatabase = Depends(get_db),
):
    """Dispose of an asset and report the gain or loss."""
    try:
        result = db.assets.dispose_asset(company_id, asset_id, disposal)
        if result is None:
            raise not_found("Asset")
        return success_response(result, "Asset disposed successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error disposing asset {asset_id}: {e}")
        raise server_error(e)
