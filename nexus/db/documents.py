"""Document vault database operations."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import String, and_, cast, func, insert, or_, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import BusinessRuleError
from ..models import (
    ActivityContext,
    ActivityType,
    Document,
    DocumentAccess,
    DocumentAccessCreate,
    DocumentActivity,
    DocumentCategory,
    DocumentCategoryCreate,
    DocumentCategoryUpdate,
    DocumentFilter,
    DocumentMetadata,
    DocumentStatistics,
    DocumentStatus,
    DocumentUpdate,
    StoredFile,
)
from .base import LIKE_ESCAPE, column_values, escape_like, to_model
from .schema import document_access, document_activities, document_categories, documents

logger = logging.getLogger(__name__)

EXPIRY_WINDOW_DAYS = 30


def _document(row) -> Document:
    values = dict(row._mapping)
    values["tags"] = values.get("tags") or []
    values["metadata"] = values.get("metadata") or {}
    return Document.model_validate(values)


def _activity(row) -> DocumentActivity:
    values = dict(row._mapping)
    values["metadata"] = values.get("metadata") or {}
    return DocumentActivity.model_validate(values)


class DocumentOperations:
    """Document vault database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.categories_table = document_categories
        self.documents_table = documents
        self.access_table = document_access
        self.activities_table = document_activities

    # Categories

    def _category_exists(
        self, conn: Connection, company_id: int, category_id: int
    ) -> None:
        c = self.categories_table
        row = conn.execute(
            select(c.c.id).where(and_(c.c.company_id == company_id, c.c.id == category_id))
        ).fetchone()
        if row is None:
            raise BusinessRuleError(
                f"Document category {category_id} not found", "CATEGORY_NOT_FOUND"
            )

    def _category_with_count(self, company_id: int):
        c = self.categories_table
        d = self.documents_table
        doc_count = (
            select(func.count(d.c.id))
            .where(
                and_(
                    d.c.category_id == c.c.id,
                    d.c.status != DocumentStatus.DELETED.value,
                    d.c.is_current_version.is_(True),
                )
            )
            .scalar_subquery()
        )
        return select(c, doc_count.label("document_count")).where(
            c.c.company_id == company_id
        )

    def list_categories(
        self, company_id: int, is_active: Optional[bool] = None
    ) -> List[DocumentCategory]:
        """List categories with their document counts."""
        c = self.categories_table
        try:
            with self.engine.connect() as conn:
                stmt = self._category_with_count(company_id)
                if is_active is not None:
                    stmt = stmt.where(c.c.is_active.is_(is_active))
                rows = conn.execute(stmt.order_by(c.c.name)).fetchall()
                return [to_model(DocumentCategory, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing document categories: {e}")
            raise

    def get_category(
        self, company_id: int, category_id: int
    ) -> Optional[DocumentCategory]:
        c = self.categories_table
        try:
            with self.engine.connect() as conn:
                stmt = self._category_with_count(company_id).where(
                    c.c.id == category_id
                )
                row = conn.execute(stmt).fetchone()
                return to_model(DocumentCategory, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting document category {category_id}: {e}")
            raise

    def create_category(
        self, company_id: int, category: DocumentCategoryCreate
    ) -> DocumentCategory:
        """Create a document category."""
        try:
            with self.engine.connect() as conn:
                if category.parent_id is not None:
                    self._category_exists(conn, company_id, category.parent_id)
                category_id = conn.execute(
                    insert(self.categories_table)
                    .values(**column_values(category, company_id=company_id))
                    .returning(self.categories_table.c.id)
                ).scalar()
                conn.commit()
                logger.info(f"Created document category {category.name} ({category_id})")

        except IntegrityError as e:
            logger.error(f"Integrity error creating document category: {e}")
            raise ValueError(f"Invalid document category: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating document category: {e}")
            raise

        return self.get_category(company_id, category_id)

    def update_category(
        self, company_id: int, category_id: int, category_update: DocumentCategoryUpdate
    ) -> Optional[DocumentCategory]:
        """Apply a partial update to a category."""
        c = self.categories_table
        values = column_values(category_update, exclude_unset=True)
        if values.get("parent_id") == category_id:
            raise BusinessRuleError("A category cannot be its own parent")
        try:
            with self.engine.connect() as conn:
                if values.get("parent_id") is not None:
                    self._category_exists(conn, company_id, values["parent_id"])
                if values:
                    result = conn.execute(
                        update(c)
                        .where(and_(c.c.company_id == company_id, c.c.id == category_id))
                        .values(**values, updated_at=func.now())
                    )
                    if result.rowcount == 0:
                        return None
                    conn.commit()
                    logger.info(f"Updated document category {category_id}")

        except IntegrityError as e:
            logger.error(f"Integrity error updating category {category_id}: {e}")
            raise ValueError(f"Invalid document category update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating document category {category_id}: {e}")
            raise

        return self.get_category(company_id, category_id)

    # Documents

    def _scoped(self, company_id: int, document_id: int):
        return and_(
            self.documents_table.c.company_id == company_id,
            self.documents_table.c.id == document_id,
            self.documents_table.c.status != DocumentStatus.DELETED.value,
        )

    def _fetch(self, conn: Connection, company_id: int, document_id: int):
        stmt = select(self.documents_table).where(self._scoped(company_id, document_id))
        return conn.execute(stmt).fetchone()

    def _log(
        self,
        conn: Connection,
        company_id: int,
        document_id: int,
        activity_type: ActivityType,
        context: Optional[ActivityContext],
        description: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        context = context or ActivityContext()
        conn.execute(
            insert(self.activities_table).values(
                company_id=company_id,
                document_id=document_id,
                user_id=context.user_id,
                activity_type=activity_type.value,
                description=description,
                metadata=metadata or {},
                ip_address=context.ip_address,
                user_agent=context.user_agent,
            )
        )

    def list_documents(
        self,
        company_id: int,
        filters: Optional[DocumentFilter] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Document], int]:
        """List documents matching ``filters``, newest first."""
        filters = filters or DocumentFilter()
        d = self.documents_table
        try:
            with self.engine.connect() as conn:
                stmt = select(d).where(d.c.company_id == company_id)
                if filters.status is not None:
                    stmt = stmt.where(d.c.status == filters.status.value)
                else:
                    stmt = stmt.where(d.c.status != DocumentStatus.DELETED.value)
                if filters.current_only:
                    stmt = stmt.where(d.c.is_current_version.is_(True))
                if filters.category_id is not None:
                    stmt = stmt.where(d.c.category_id == filters.category_id)
                if filters.document_type is not None:
                    stmt = stmt.where(d.c.document_type == filters.document_type.value)
                if filters.access_level is not None:
                    stmt = stmt.where(d.c.access_level == filters.access_level.value)
                if filters.uploaded_by is not None:
                    stmt = stmt.where(d.c.uploaded_by == filters.uploaded_by)
                if filters.search:
                    pattern = f"%{escape_like(filters.search)}%"
                    stmt = stmt.where(
                        or_(
                            d.c.title.ilike(pattern, escape=LIKE_ESCAPE),
                            d.c.description.ilike(pattern, escape=LIKE_ESCAPE),
                            d.c.original_file_name.ilike(
                                pattern, escape=LIKE_ESCAPE
                            ),
                        )
                    )
                if filters.tag:
                    stmt = stmt.where(
                        cast(d.c.tags, String).like(
                            f'%"{escape_like(filters.tag)}"%', escape=LIKE_ESCAPE
                        )
                    )
                stmt = stmt.order_by(d.c.created_at.desc(), d.c.id.desc())

                count_stmt = select(func.count()).select_from(
                    stmt.order_by(None).subquery()
                )
                total = conn.execute(count_stmt).scalar() or 0
                rows = conn.execute(
                    stmt.limit(limit).offset((page - 1) * limit)
                ).fetchall()
                return [_document(row) for row in rows], total

        except SQLAlchemyError as e:
            logger.error(f"Error listing documents for company {company_id}: {e}")
            raise

    def get_document(
        self,
        company_id: int,
        document_id: int,
        context: Optional[ActivityContext] = None,
    ) -> Optional[Document]:
        """Get a document; passing a context records a view."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, document_id)
                if row is None:
                    return None
                if context is not None:
                    self._log(conn, company_id, document_id, ActivityType.VIEWED, context)
                    row = conn.execute(
                        update(self.documents_table)
                        .where(self.documents_table.c.id == document_id)
                        .values(last_accessed_at=datetime.now(timezone.utc))
                        .returning(self.documents_table)
                    ).fetchone()
                    conn.commit()
                return _document(row)

        except SQLAlchemyError as e:
            logger.error(f"Error getting document {document_id}: {e}")
            raise

    def create_document(
        self,
        company_id: int,
        meta: DocumentMetadata,
        stored: StoredFile,
        context: Optional[ActivityContext] = None,
    ) -> Document:
        """Record an uploaded document."""
        context = context or ActivityContext()
        try:
            with self.engine.connect() as conn:
                self._category_exists(conn, company_id, meta.category_id)
                row = conn.execute(
                    insert(self.documents_table)
                    .values(
                        **column_values(meta),
                        **column_values(stored),
                        company_id=company_id,
                        uploaded_by=context.user_id,
                        status=DocumentStatus.ACTIVE.value,
                    )
                    .returning(self.documents_table)
                ).fetchone()
                self._log(
                    conn,
                    company_id,
                    row.id,
                    ActivityType.CREATED,
                    context,
                    f"Uploaded {stored.original_file_name}",
                )
                conn.commit()

                logger.info(f"Created document {row.id}: {meta.title}")
                return _document(row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating document: {e}")
            raise ValueError(f"Invalid document: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating document: {e}")
            raise

    def create_version(
        self,
        company_id: int,
        document_id: int,
        stored: StoredFile,
        context: Optional[ActivityContext] = None,
        notes: Optional[str] = None,
    ) -> Optional[Document]:
        """Store a new file version; the previous version stops being current."""
        d = self.documents_table
        context = context or ActivityContext()
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, document_id)
                if current is None:
                    return None
                if not current.is_current_version:
                    raise BusinessRuleError(
                        "New versions can only be added to the current version",
                        "NOT_CURRENT_VERSION",
                    )

                conn.execute(
                    update(d)
                    .where(d.c.id == current.id)
                    .values(is_current_version=False, updated_at=func.now())
                )
                row = conn.execute(
                    insert(d)
                    .values(
                        **column_values(stored),
                        company_id=company_id,
                        category_id=current.category_id,
                        title=current.title,
                        description=current.description,
                        version=current.version + 1,
                        is_current_version=True,
                        parent_document_id=current.parent_document_id or current.id,
                        document_type=current.document_type,
                        status=current.status,
                        tags=current.tags or [],
                        metadata=current._mapping["metadata"] or {},
                        access_level=current.access_level,
                        expiry_date=current.expiry_date,
                        reminder_date=current.reminder_date,
                        uploaded_by=context.user_id,
                        notes=notes if notes is not None else current.notes,
                    )
                    .returning(d)
                ).fetchone()
                self._log(
                    conn,
                    company_id,
                    row.id,
                    ActivityType.CREATED,
                    context,
                    f"Version {row.version} uploaded",
                    {"previous_version_id": current.id},
                )
                conn.commit()

                logger.info(
                    f"Document {current.id} superseded by version {row.version} "
                    f"({row.id})"
                )
                return _document(row)

        except SQLAlchemyError as e:
            logger.error(f"Error creating version of document {document_id}: {e}")
            raise

    def update_document(
        self,
        company_id: int,
        document_id: int,
        document_update: DocumentUpdate,
        context: Optional[ActivityContext] = None,
    ) -> Optional[Document]:
        """Update document metadata."""
        values = column_values(document_update, exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, document_id)
                if current is None:
                    return None
                if not values:
                    return _document(current)
                if values.get("category_id") is not None:
                    self._category_exists(conn, company_id, values["category_id"])

                row = conn.execute(
                    update(self.documents_table)
                    .where(self.documents_table.c.id == document_id)
                    .values(**values, updated_at=func.now())
                    .returning(self.documents_table)
                ).fetchone()
                activity = (
                    ActivityType.MOVED
                    if values.get("category_id") not in (None, current.category_id)
                    else ActivityType.UPDATED
                )
                self._log(
                    conn,
                    company_id,
                    document_id,
                    activity,
                    context,
                    "Document details updated",
                    {"fields": sorted(values)},
                )
                conn.commit()

                logger.info(f"Updated document {document_id}")
                return _document(row)

        except IntegrityError as e:
            logger.error(f"Integrity error updating document {document_id}: {e}")
            raise ValueError(f"Invalid document update: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating document {document_id}: {e}")
            raise

    def record_download(
        self,
        company_id: int,
        document_id: int,
        context: Optional[ActivityContext] = None,
    ) -> Optional[Document]:
        """Count a download and log it."""
        d = self.documents_table
        try:
            with self.engine.connect() as conn:
                if self._fetch(conn, company_id, document_id) is None:
                    return None
                row = conn.execute(
                    update(d)
                    .where(d.c.id == document_id)
                    .values(
                        download_count=d.c.download_count + 1,
                        last_accessed_at=datetime.now(timezone.utc),
                    )
                    .returning(d)
                ).fetchone()
                self._log(
                    conn, company_id, document_id, ActivityType.DOWNLOADED, context
                )
                conn.commit()
                return _document(row)

        except SQLAlchemyError as e:
            logger.error(f"Error recording download of document {document_id}: {e}")
            raise

    def delete_document(
        self,
        company_id: int,
        document_id: int,
        context: Optional[ActivityContext] = None,
    ) -> Optional[Document]:
        """Soft delete a document."""
        try:
            with self.engine.connect() as conn:
                if self._fetch(conn, company_id, document_id) is None:
                    return None
                row = conn.execute(
                    update(self.documents_table)
                    .where(self.documents_table.c.id == document_id)
                    .values(status=DocumentStatus.DELETED.value, updated_at=func.now())
                    .returning(self.documents_table)
                ).fetchone()
                self._log(conn, company_id, document_id, ActivityType.DELETED, context)
                conn.commit()

                logger.info(f"Deleted document {document_id}")
                return _document(row)

        except SQLAlchemyError as e:
            logger.error(f"Error deleting document {document_id}: {e}")
            raise

    # Access control

    def list_access(self, company_id: int, document_id: int) -> List[DocumentAccess]:
        a = self.access_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(a)
                    .where(
                        and_(
                            a.c.company_id == company_id,
                            a.c.document_id == document_id,
                            a.c.is_active.is_(True),
                        )
                    )
                    .order_by(a.c.granted_at.desc(), a.c.id.desc())
                ).fetchall()
                return [to_model(DocumentAccess, row) for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing access for document {document_id}: {e}")
            raise

    def grant_access(
        self,
        company_id: int,
        document_id: int,
        access: DocumentAccessCreate,
        context: Optional[ActivityContext] = None,
    ) -> Optional[DocumentAccess]:
        """Grant a user or role access to a document."""
        context = context or ActivityContext()
        try:
            with self.engine.connect() as conn:
                if self._fetch(conn, company_id, document_id) is None:
                    return None
                row = conn.execute(
                    insert(self.access_table)
                    .values(
                        **column_values(access),
                        company_id=company_id,
                        document_id=document_id,
                        granted_by=context.user_id,
                    )
                    .returning(self.access_table)
                ).fetchone()
                grantee = (
                    f"user {access.user_id}"
                    if access.user_id is not None
                    else f"role {access.role_id}"
                )
                self._log(
                    conn,
                    company_id,
                    document_id,
                    ActivityType.SHARED,
                    context,
                    f"{access.access_type.value} access granted to {grantee}",
                )
                conn.commit()

                logger.info(f"Granted {grantee} access to document {document_id}")
                return to_model(DocumentAccess, row)

        except SQLAlchemyError as e:
            logger.error(f"Error granting access to document {document_id}: {e}")
            raise

    def list_activities(
        self, company_id: int, document_id: int, page: int = 1, limit: int = 50
    ) -> Tuple[List[DocumentActivity], int]:
        """Audit trail of a document, newest first."""
        a = self.activities_table
        try:
            with self.engine.connect() as conn:
                stmt = (
                    select(a)
                    .where(
                        and_(a.c.company_id == company_id, a.c.document_id == document_id)
                    )
                    .order_by(a.c.created_at.desc(), a.c.id.desc())
                )
                total = conn.execute(
                    select(func.count()).select_from(stmt.order_by(None).subquery())
                ).scalar()
                rows = conn.execute(
                    stmt.limit(limit).offset((page - 1) * limit)
                ).fetchall()
                return [_activity(row) for row in rows], total or 0

        except SQLAlchemyError as e:
            logger.error(f"Error listing activities for document {document_id}: {e}")
            raise

    def statistics(
        self, company_id: int, today: Optional[date] = None
    ) -> DocumentStatistics:
        """Aggregate the current, non-deleted documents of a company."""
        today = today or date.today()
        d = self.documents_table
        c = self.categories_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        d.c.file_size,
                        d.c.document_type,
                        d.c.status,
                        d.c.expiry_date,
                        c.c.name.label("category_name"),
                    )
                    .select_from(d.join(c, d.c.category_id == c.c.id))
                    .where(
                        and_(
                            d.c.company_id == company_id,
                            d.c.status != DocumentStatus.DELETED.value,
                            d.c.is_current_version.is_(True),
                        )
                    )
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing document statistics: {e}")
            raise

        horizon = today + timedelta(days=EXPIRY_WINDOW_DAYS)
        by_type, by_status, by_category = {}, {}, {}
        expiring = 0
        for row in rows:
            by_type[row.document_type] = by_type.get(row.document_type, 0) + 1
            by_status[row.status] = by_status.get(row.status, 0) + 1
            by_category[row.category_name] = by_category.get(row.category_name, 0) + 1
            if row.expiry_date and today <= row.expiry_date <= horizon:
                expiring += 1

        return DocumentStatistics(
            total_documents=len(rows),
            total_size=sum(row.file_size for row in rows),
            by_type=by_type,
            by_status=by_status,
            by_category=by_category,
            expiring_soon=expiring,
        )
