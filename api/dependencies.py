"""Shared state and request dependencies for the routers."""

import logging
from typing import Optional

from fastapi import Header, Path

from nexus.db import NexusDatabase
from nexus.storage import DocumentStorage

from .responses import ApiError, not_found

logger = logging.getLogger(__name__)

# Global instances (set during app initialization)
nexus_db: Optional[NexusDatabase] = None
document_storage: Optional[DocumentStorage] = None


def set_nexus_db(db: Optional[NexusDatabase]) -> None:
    """Set the global database instance."""
    global nexus_db
    nexus_db = db


def set_document_storage(storage: Optional[DocumentStorage]) -> None:
    """Set the global document storage."""
    global document_storage
    document_storage = storage


def get_db() -> NexusDatabase:
    """Database facade, or a 500 when the app has not initialized it."""
    if not nexus_db:
        raise ApiError(500, "Database not initialized", code="DATABASE_UNAVAILABLE")
    return nexus_db


def get_storage() -> DocumentStorage:
    if not document_storage:
        raise ApiError(500, "Document storage not initialized")
    return document_storage


def get_actor_id(
    x_user_id: Optional[int] = Header(
        None, description="Acting user recorded in audit columns"
    ),
) -> Optional[int]:
    return x_user_id


def require_company(
    company_id: int = Path(..., ge=1, description="Company ID"),
) -> int:
    """Reject tenant routes for companies that do not exist."""
    db = get_db()
    try:
        company = db.companies.get_company(company_id)
    except Exception as e:
        logger.error(f"Error resolving company {company_id}: {e}")
        raise ApiError(500, str(e))
    if company is None:
        raise not_found("Company")
    return company_id
