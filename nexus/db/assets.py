"""Fixed asset register database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import depreciation_position, depreciation_schedule, round_amount
from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    AssetCategory,
    AssetCategoryCreate,
    AssetCategoryUpdate,
    AssetDisposal,
    AssetStatus,
    AssetSummary,
    DepreciationMethod,
    DepreciationResult,
    DepreciationSchedule,
    DisposalResult,
    FixedAsset,
    FixedAssetCreate,
    FixedAssetUpdate,
    ScheduleEntry,
)
from .base import LIKE_ESCAPE, column_values, escape_like, paginate, to_model
from .schema import asset_categories, fixed_assets

logger = logging.getLogger(__name__)


class AssetOperations:
    """Fixed asset register database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.categories_table = asset_categories
        self.assets_table = fixed_assets

    def _scoped(self, company_id: int, asset_id: int):
        return and_(
            self.assets_table.c.company_id == company_id,
            self.assets_table.c.id == asset_id,
        )

    def _fetch(self, conn: Connection, company_id: int, asset_id: int):
        return conn.execute(
            select(self.assets_table).where(self._scoped(company_id, asset_id))
        ).fetchone()

    def _check_category(
        self, conn: Connection, company_id: int, category_id: Optional[int]
    ) -> None:
        if category_id is None:
            return
        c = self.categories_table
        found = conn.execute(
            select(c.c.id).where(and_(c.c.company_id == company_id, c.c.id == category_id))
        ).fetchone()
        if found is None:
            raise BusinessRuleError(
                f"Asset category {category_id} not found", code="CATEGORY_NOT_FOUND"
            )

    # Categories

    def list_categories(
        self, company_id: int, include_inactive: bool = False
    ) -> List[AssetCategory]:
        """List asset categories by name."""
        c = self.categories_table
        try:
            with self.engine.connect() as conn:
                stmt = select(c).where(c.c.company_id == company_id)
                if not include_inactive:
                    stmt = stmt.where(c.c.is_active.is_(True))
                rows = conn.execute(stmt.order_by(c.c.name)).fetchall()
                return [to_model(AssetCategory, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing asset categories: {e}")
            raise

    def create_category(
        self, company_id: int, category: AssetCategoryCreate
    ) -> AssetCategory:
        """Create an asset category."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    insert(self.categories_table)
                    .values(**column_values(category, company_id=company_id))
                    .returning(self.categories_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Created asset category {row.id}: {category.name}")
                return to_model(AssetCategory, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating asset category: {e}")
            raise ValueError(f"Invalid asset category: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating asset category: {e}")
            raise

    def update_category(
        self, company_id: int, category_id: int, category_update: AssetCategoryUpdate
    ) -> Optional[AssetCategory]:
        """Apply a partial update to an asset category."""
        c = self.categories_table
        values = column_values(category_update, exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                stmt = update(c).where(
                    and_(c.c.company_id == company_id, c.c.id == category_id)
                )
                if values:
                    stmt = stmt.values(**values, updated_at=func.now())
                else:
                    stmt = stmt.values(updated_at=func.now())
                row = conn.execute(stmt.returning(c)).fetchone()
                conn.commit()
                return to_model(AssetCategory, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error updating asset category {category_id}: {e}")
            raise

    # Assets

    def list_assets(
        self,
        company_id: int,
        status: Optional[AssetStatus] = None,
        category_id: Optional[int] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[FixedAsset], int]:
        """List assets ordered by tag."""
        t = self.assets_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if category_id is not None:
                    stmt = stmt.where(t.c.category_id == category_id)
                if location:
                    stmt = stmt.where(
                        t.c.location.ilike(
                            f"%{escape_like(location)}%", escape=LIKE_ESCAPE
                        )
                    )
                if search:
                    pattern = f"%{escape_like(search)}%"
                    stmt = stmt.where(
                        t.c.name.ilike(pattern, escape=LIKE_ESCAPE)
                        | t.c.asset_tag.ilike(pattern, escape=LIKE_ESCAPE)
                    )
                stmt = stmt.order_by(t.c.asset_tag)
                return paginate(conn, stmt, FixedAsset, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing assets for company {company_id}: {e}")
            raise

    def get_asset(self, company_id: int, asset_id: int) -> Optional[FixedAsset]:
        """Get an asset by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, asset_id)
                return to_model(FixedAsset, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting asset {asset_id}: {e}")
            raise

    def create_asset(self, company_id: int, asset: FixedAssetCreate) -> FixedAsset:
        """Register an asset at full book value."""
        try:
            with self.engine.connect() as conn:
                self._check_category(conn, company_id, asset.category_id)
                row = conn.execute(
                    insert(self.assets_table)
                    .values(
                        **column_values(
                            asset,
                            company_id=company_id,
                            currency=asset.currency.upper(),
                            accumulated_depreciation=Decimal("0"),
                            book_value=asset.acquisition_cost,
                        )
                    )
                    .returning(self.assets_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Registered asset {asset.asset_tag} (ID: {row.id})")
                return to_model(FixedAsset, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating asset: {e}")
            raise ValueError(f"Asset tag {asset.asset_tag} already exists") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating asset: {e}")
            raise

    def update_asset(
        self, company_id: int, asset_id: int, asset_update: FixedAssetUpdate
    ) -> Optional[FixedAsset]:
        """Apply a partial update to an asset."""
        values = column_values(asset_update, exclude_unset=True)
        if not values:
            return self.get_asset(company_id, asset_id)

        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, asset_id)
                if current is None:
                    return None
                if "category_id" in values:
                    self._check_category(conn, company_id, values["category_id"])
                status = values.get("status", current.status)
                if status != current.status and AssetStatus.DISPOSED.value in (
                    status,
                    current.status,
                ):
                    raise InvalidStatusError(
                        "Disposal is recorded through the dispose operation "
                        f"(status: {current.status})"
                    )
                residual = values.get("residual_value", current.residual_value)
                if residual is not None and residual > current.acquisition_cost:
                    raise BusinessRuleError(
                        "residual_value cannot exceed acquisition_cost"
                    )
                row = conn.execute(
                    update(self.assets_table)
                    .where(self._scoped(company_id, asset_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.assets_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Updated asset {asset_id}")
                return to_model(FixedAsset, row)

        except IntegrityError as e:
            logger.error(f"Integrity error updating asset {asset_id}: {e}")
            raise ValueError(f"Invalid asset update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating asset {asset_id}: {e}")
            raise

    def delete_asset(self, company_id: int, asset_id: int) -> bool:
        """Remove an asset from the register."""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    delete(self.assets_table).where(self._scoped(company_id, asset_id))
                )
                conn.commit()

                if result.rowcount > 0:
                    logger.info(f"Deleted asset {asset_id}")
                    return True
                return False

        except SQLAlchemyError as e:
            logger.error(f"Error deleting asset {asset_id}: {e}")
            raise

    # Depreciation

    def calculate_depreciation(
        self, company_id: int, asset_id: int, as_of: Optional[date] = None
    ) -> Optional[DepreciationResult]:
        """Compute depreciation up to ``as_of`` and store it on the asset."""
        as_of = as_of or date.today()
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, asset_id)
                if current is None:
                    return None
                if current.status == AssetStatus.DISPOSED.value:
                    raise InvalidStatusError(
                        "Depreciation cannot be calculated for a disposed asset"
                    )
                position = depreciation_position(
                    current.acquisition_cost,
                    current.residual_value,
                    current.useful_life_years,
                    current.depreciation_method,
                    current.acquisition_date,
                    as_of,
                    current.currency,
                )
                conn.execute(
                    update(self.assets_table)
                    .where(self._scoped(company_id, asset_id))
                    .values(
                        accumulated_depreciation=position.accumulated_depreciation,
                        book_value=position.book_value,
                        updated_at=func.now(),
                    )
                )
                conn.commit()

                logger.info(
                    f"Asset {asset_id} depreciated to {position.book_value} "
                    f"as of {as_of}"
                )
                return DepreciationResult(
                    asset_id=asset_id,
                    as_of=as_of,
                    method=DepreciationMethod(current.depreciation_method),
                    **position._asdict(),
                )

        except SQLAlchemyError as e:
            logger.error(f"Error calculating depreciation for asset {asset_id}: {e}")
            raise

    def depreciation_schedule(
        self, company_id: int, asset_id: int
    ) -> Optional[DepreciationSchedule]:
        """Year-by-year depreciation over the asset's useful life."""
        asset = self.get_asset(company_id, asset_id)
        if asset is None:
            return None
        entries = depreciation_schedule(
            asset.acquisition_cost,
            asset.residual_value,
            asset.useful_life_years,
            asset.depreciation_method.value,
            asset.currency,
        )
        return DepreciationSchedule(
            asset_id=asset.id,
            method=asset.depreciation_method,
            acquisition_cost=asset.acquisition_cost,
            residual_value=asset.residual_value,
            useful_life_years=asset.useful_life_years,
            entries=[ScheduleEntry(**entry._asdict()) for entry in entries],
        )

    def dispose_asset(
        self, company_id: int, asset_id: int, disposal: AssetDisposal
    ) -> Optional[DisposalResult]:
        """Dispose of an asset and report the gain or loss against book value."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, asset_id)
                if current is None:
                    return None
                if current.status == AssetStatus.DISPOSED.value:
                    raise InvalidStatusError("Asset is already disposed")
                if disposal.disposal_date < current.acquisition_date:
                    raise BusinessRuleError(
                        "disposal_date cannot precede acquisition_date"
                    )
                position = depreciation_position(
                    current.acquisition_cost,
                    current.residual_value,
                    current.useful_life_years,
                    current.depreciation_method,
                    current.acquisition_date,
                    disposal.disposal_date,
                    current.currency,
                )
                notes = disposal.notes if disposal.notes is not None else current.notes
                row = conn.execute(
                    update(self.assets_table)
                    .where(self._scoped(company_id, asset_id))
                    .values(
                        status=AssetStatus.DISPOSED.value,
                        disposal_date=disposal.disposal_date,
                        disposal_value=disposal.disposal_value,
                        disposal_method=disposal.disposal_method.value,
                        accumulated_depreciation=position.accumulated_depreciation,
                        book_value=position.book_value,
                        notes=notes,
                        updated_at=func.now(),
                    )
                    .returning(self.assets_table)
                ).fetchone()
                conn.commit()

                gain_loss = round_amount(
                    Decimal(disposal.disposal_value) - position.book_value,
                    current.currency,
                )
                logger.info(f"Disposed asset {asset_id} with gain/loss {gain_loss}")
                return DisposalResult(
                    asset=to_model(FixedAsset, row),
                    book_value_at_disposal=position.book_value,
                    gain_loss=gain_loss,
                )

        except SQLAlchemyError as e:
            logger.error(f"Error disposing asset {asset_id}: {e}")
            raise

    def summary(self, company_id: int) -> AssetSummary:
        """Totals over the register."""
        t = self.assets_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        t.c.status,
                        t.c.depreciation_method,
                        t.c.acquisition_cost,
                        t.c.accumulated_depreciation,
                        t.c.book_value,
                    ).where(t.c.company_id == company_id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error summarising assets for company {company_id}: {e}")
            raise

        by_status = {}
        by_method = {}
        for row in rows:
            by_status[row.status] = by_status.get(row.status, 0) + 1
            by_method[row.depreciation_method] = (
                by_method.get(row.depreciation_method, 0) + 1
            )
        zero = Decimal("0")
        return AssetSummary(
            total_assets=len(rows),
            active_assets=by_status.get(AssetStatus.ACTIVE.value, 0),
            disposed_assets=by_status.get(AssetStatus.DISPOSED.value, 0),
            total_cost=sum((r.acquisition_cost for r in rows), zero),
            total_book_value=sum(
                (r.book_value for r in rows if r.status != AssetStatus.DISPOSED.value),
                zero,
            ),
            total_depreciation=sum((r.accumulated_depreciation for r in rows), zero),
            by_status=by_status,
            by_method=by_method,
        )
