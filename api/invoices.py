"""Invoice and receipt endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceType,
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
    prefix="/companies/{company_id}/invoices",
    tags=["invoices"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Invoice]])
async def list_invoices(
    company_id: int,
    type: Optional[InvoiceType] = Query(None),
    status: Optional[InvoiceStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List invoices and receipts, newest first."""
    try:
        records, total = db.invoices.list_invoices(
            company_id, type, status, page, limit
        )
        return success_response(
            records,
            "Invoices retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing invoices: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Invoice], status_code=201)
async def create_invoice(
    company_id: int, invoice: InvoiceCreate, db: NexusDatabase = Depends(get_db)
):
    """Create an invoice or receipt, numbering it when needed."""
    try:
        created = db.invoices.create_invoice(company_id, invoice)
        return success_response(
            created, f"{invoice.type.value.capitalize()} created successfully"
        )
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating invoice: {e}")
        raise server_error(e)


@router.get("/{invoice_id}", response_model=ApiResponse[Invoice])
async def get_invoice(
    company_id: int, invoice_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        invoice = db.invoices.get_invoice(company_id, invoice_id)
        if invoice is None:
            raise not_found("Invoice")
        return success_response(invoice, "Invoice retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting invoice {invoice_id}: {e}")
        raise server_error(e)


@router.put("/{invoice_id}/status", response_model=ApiResponse[Invoice])
async def update_invoice_status(
    company_id: int,
    invoice_id: int,
    status_update: InvoiceStatusUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        invoice = db.invoices.update_status(company_id, invoice_id, status_update)
        if invoice is None:
            raise not_found("Invoice")
        return success_response(invoice, "Invoice status updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating invoice {invoice_id} status: {e}")
        raise server_error(e)


@router.delete("/{invoice_id}", response_model=ApiResponse[None])
async def delete_invoice(
    company_id: int, invoice_id: int, db: NexusDatabase = Depends(get_db)
):
    """Delete a draft invoice or receipt."""
    try:
        if not db.invoices.delete_invoice(company_id, invoice_id):
            raise not_found("Invoice")
        return success_response(message="Invoice deleted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error deleting invoice {invoice_id}: {e}")
        raise server_error(e)
