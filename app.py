"""FastAPI application for the Office Nexus backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import dependencies
from api.assets import router as assets_router
from api.capital import router as capital_router
from api.companies import router as companies_router
from api.compliance import router as compliance_router
from api.currency import router as currency_router
from api.dependencies import set_document_storage, set_nexus_db
from api.directors import router as directors_router
from api.dividends import router as dividends_router
from api.documents import router as documents_router
from api.employees import router as employees_router
from api.invoices import router as invoices_router
from api.meetings import router as meetings_router
from api.notifications import router as notifications_router
from api.payroll import router as payroll_router
from api.persons import router as persons_router
from api.reports import router as reports_router
from api.responses import http_exception_handler, validation_exception_handler
from api.shareholders import router as shareholders_router
from api.tax import router as tax_router
from nexus import __version__
from nexus.config import get_settings
from nexus.db import NexusDatabase
from nexus.storage import DocumentStorage

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app."""
    nexus_db = None
    try:
        if not settings.database_url:
            raise ValueError("DATABASE_URL environment variable is required")

        nexus_db = NexusDatabase(settings.database_url)
        set_nexus_db(nexus_db)
        set_document_storage(
            DocumentStorage(settings.upload_dir, settings.max_upload_bytes)
        )
        logger.info("NexusDatabase and document storage initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize systems: {e}")
        set_nexus_db(None)
        set_document_storage(None)

    yield

    # Cleanup on shutdown
    if nexus_db:
        nexus_db.close()
        set_nexus_db(None)
        logger.info("NexusDatabase connection closed")


app = FastAPI(
    title="Office Nexus API",
    description=(
        "Business management for Rwandan companies: shareholders, directors, locked "
        "capital, dividends, documents, meetings, invoices, assets, currency, "
        "employees, payroll, tax returns and compliance alerts"
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

for router in (
    companies_router,
    persons_router,
    shareholders_router,
    directors_router,
    capital_router,
    dividends_router,
    documents_router,
    meetings_router,
    invoices_router,
    notifications_router,
    assets_router,
    currency_router,
    employees_router,
    payroll_router,
    tax_router,
    compliance_router,
    reports_router,
):
    app.include_router(router, prefix=API_PREFIX)


@app.get("/")
async def root() -> dict:
    """Health check endpoint."""
    return {"message": "Office Nexus API is running!", "version": __version__}


@app.get(f"{API_PREFIX}/health")
async def health_check() -> dict:
    """Health check endpoint reporting database availability."""
    return {
        "success": True,
        "message": "Office Nexus API is healthy",
        "database": dependencies.nexus_db is not None,
        "version": __version__,
    }
