"""Document vault endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
)
from fastapi.responses import FileResponse
from pydantic import ValidationError

from nexus.db import NexusDatabase
from nexus.models import (
    AccessLevel,
    ActivityContext,
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
    DocumentType,
    DocumentUpdate,
    Pagination,
)
from nexus.storage import DocumentStorage

from .dependencies import get_actor_id, get_db, get_storage, require_company
from .responses import (
    ApiResponse,
    bad_request,
    not_found,
    server_error,
    success_response,
    validation_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/documents",
    tags=["documents"],
    dependencies=[Depends(require_company)],
)


def activity_context(
    request: Request, actor_id: Optional[int] = Depends(get_actor_id)
) -> ActivityContext:
    """Who is acting, for the activity log."""
    return ActivityContext(
        user_id=actor_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def _split_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


# Categories


@router.get("/categories", response_model=ApiResponse[List[DocumentCategory]])
async def list_categories(
    company_id: int,
    is_active: Optional[bool] = Query(None),
    db: NexusDatabase = Depends(get_db),
):
    """List categories with their document counts."""
    try:
        categories = db.documents.list_categories(company_id, is_active)
        return success_response(categories, "Categories retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing document categories: {e}")
        raise server_error(e)


@router.post(
    "/categories", response_model=ApiResponse[DocumentCategory], status_code=201
)
async def create_category(
    company_id: int,
    category: DocumentCategoryCreate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        created = db.documents.create_category(company_id, category)
        return success_response(created, "Category created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating document category: {e}")
        raise server_error(e)


@router.put("/categories/{category_id}", response_model=ApiResponse[DocumentCategory])
async def update_category(
    company_id: int,
    category_id: int,
    category_update: DocumentCategoryUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        category = db.documents.update_category(
            company_id, category_id, category_update
        )
        if category is None:
            raise not_found("Category")
        return success_response(category, "Category updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating document category {category_id}: {e}")
        raise server_error(e)


@router.get(
    "/categories/{category_id}/documents",
    response_model=ApiResponse[List[Document]],
)
async def list_category_documents(
    company_id: int,
    category_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        if db.documents.get_category(company_id, category_id) is None:
            raise not_found("Category")
        documents, total = db.documents.list_documents(
            company_id, DocumentFilter(category_id=category_id), page, limit
        )
        return success_response(
            documents,
            "Documents retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing documents of category {category_id}: {e}")
        raise server_error(e)


# Documents


@router.get("", response_model=ApiResponse[List[Document]])
async def list_documents(
    company_id: int,
    category_id: Optional[int] = Query(None),
    document_type: Optional[DocumentType] = Query(None),
    status: Optional[DocumentStatus] = Query(None),
    access_level: Optional[AccessLevel] = Query(None),
    uploaded_by: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List current document versions."""
    filters = DocumentFilter(
        category_id=category_id,
        document_type=document_type,
        status=status,
        access_level=access_level,
        uploaded_by=uploaded_by,
        search=search,
        tag=tag,
    )
    try:
        documents, total = db.documents.list_documents(
            company_id, filters, page, limit
        )
        return success_response(
            documents,
            "Documents retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing documents: {e}")
        raise server_error(e)


@router.get("/search", response_model=ApiResponse[List[Document]])
async def search_documents(
    company_id: int,
    q: str = Query(..., min_length=1, description="Title, description or file name"),
    tag: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        documents, total = db.documents.list_documents(
            company_id, DocumentFilter(search=q, tag=tag), page, limit
        )
        return success_response(
            documents,
            f"Found {total} documents",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error searching documents for '{q}': {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[DocumentStatistics])
async def document_statistics(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        stats = db.documents.statistics(company_id)
        return success_response(stats, "Document statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing document statistics: {e}")
        raise server_error(e)


@router.post("/upload", response_model=ApiResponse[Document], status_code=201)
async def upload_document(
    company_id: int,
    file: UploadFile = File(...),
    title: str = Form(...),
    category_id: int = Form(...),
    document_type: DocumentType = Form(...),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated"),
    access_level: AccessLevel = Form(AccessLevel.INTERNAL),
    expiry_date: Optional[date] = Form(None),
    reminder_date: Optional[date] = Form(None),
    notes: Optional[str] = Form(None),
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
):
    """Upload a file into the vault."""
    try:
        meta = DocumentMetadata(
            title=title,
            category_id=category_id,
            document_type=document_type,
            description=description,
            tags=_split_tags(tags),
            access_level=access_level,
            expiry_date=expiry_date,
            reminder_date=reminder_date,
            notes=notes,
        )
    except ValidationError as e:
        raise validation_error(e)

    try:
        stored = storage.save(
            company_id, file.file, file.filename, file.content_type
        )
        try:
            document = db.documents.create_document(company_id, meta, stored, context)
        except Exception:
            storage.delete(stored.file_path)
            raise
        return success_response(document, "Document uploaded successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error uploading document {file.filename}: {e}")
        raise server_error(e)


@router.get("/{document_id}", response_model=ApiResponse[Document])
async def get_document(
    company_id: int,
    document_id: int,
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
):
    try:
        document = db.documents.get_document(company_id, document_id, context)
        if document is None:
            raise not_found("Document")
        return success_response(document, "Document retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting document {document_id}: {e}")
        raise server_error(e)


@router.post(
    "/{document_id}/versions", response_model=ApiResponse[Document], status_code=201
)
async def upload_version(
    company_id: int,
    document_id: int,
    file: UploadFile = File(...),
    notes: Optional[str] = Form(None),
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
):
    """Upload a new version; the previous one stops being current."""
    try:
        if db.documents.get_document(company_id, document_id) is None:
            raise not_found("Document")
        stored = storage.save(
            company_id, file.file, file.filename, file.content_type
        )
        try:
            document = db.documents.create_version(
                company_id, document_id, stored, context, notes
            )
        except Exception:
            storage.delete(stored.file_path)
            raise
        if document is None:
            storage.delete(stored.file_path)
            raise not_found("Document")
        return success_response(document, "New version uploaded successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error uploading version of document {document_id}: {e}")
        raise server_error(e)


@router.put("/{document_id}", response_model=ApiResponse[Document])
async def update_document(
    company_id: int,
    document_id: int,
    document_update: DocumentUpdate,
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
):
    try:
        document = db.documents.update_document(
            company_id, document_id, document_update, context
        )
        if document is None:
            raise not_found("Document")
        return success_response(document, "Document updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating document {document_id}: {e}")
        raise server_error(e)


@router.get("/{document_id}/download")
async def download_document(
    company_id: int,
    document_id: int,
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
) -> FileResponse:
    """Stream the stored file."""
    try:
        document = db.documents.get_document(company_id, document_id)
        if document is None or document.status == DocumentStatus.DELETED:
            raise not_found("Document")
        if not storage.exists(document.file_path):
            raise not_found("File")
        db.documents.record_download(company_id, document_id, context)
        return FileResponse(
            document.file_path,
            media_type=document.mime_type,
            filename=document.original_file_name,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error downloading document {document_id}: {e}")
        raise server_error(e)


@router.delete("/{document_id}", response_model=ApiResponse[Document])
async def delete_document(
    company_id: int,
    document_id: int,
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
):
    """Remove the stored file and mark the document deleted."""
    try:
        document = db.documents.delete_document(company_id, document_id, context)
        if document is None:
            raise not_found("Document")
        storage.delete(document.file_path)
        return success_response(document, "Document deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting document {document_id}: {e}")
        raise server_error(e)


@router.get("/{document_id}/access", response_model=ApiResponse[List[DocumentAccess]])
async def list_access(
    company_id: int, document_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        if db.documents.get_document(company_id, document_id) is None:
            raise not_found("Document")
        grants = db.documents.list_access(company_id, document_id)
        return success_response(grants, "Document access retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing access for document {document_id}: {e}")
        raise server_error(e)


@router.post(
    "/{document_id}/access",
    response_model=ApiResponse[DocumentAccess],
    status_code=201,
)
async def grant_access(
    company_id: int,
    document_id: int,
    access: DocumentAccessCreate,
    context: ActivityContext = Depends(activity_context),
    db: NexusDatabase = Depends(get_db),
):
    """Share a document with a user or role."""
    try:
        grant = db.documents.grant_access(company_id, document_id, access, context)
        if grant is None:
            raise not_found("Document")
        return success_response(grant, "Access granted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error granting access to document {document_id}: {e}")
        raise server_error(e)


@router.get(
    "/{document_id}/activities", response_model=ApiResponse[List[DocumentActivity]]
)
async def list_activities(
    company_id: int,
    document_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        if db.documents.get_document(company_id, document_id) is None:
            raise not_found("Document")
        activities, total = db.documents.list_activities(
            company_id, document_id, page, limit
        )
        return success_response(
            activities,
            "Document activities retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing activities for document {document_id}: {e}")
        raise server_error(e)
