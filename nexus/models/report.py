"""Dashboard and export pydantic models."""

from enum import Enum

from pydantic import BaseModel

from .common import Money


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"


class CapitalSummary(BaseModel):
    count: int
    total_amount: Money
    locked_amount: Money
    pending_withdrawals: int


class ShareholderSummary(BaseModel):
    count: int
    total_shares: int


class DividendSummary(BaseModel):
    declarations: int
    total_pool: Money
    outstanding: Money


class DocumentSummary(BaseModel):
    count: int
    total_size: int


class MeetingSummary(BaseModel):
    total: int
    upcoming: int


class InvoiceSummary(BaseModel):
    invoices: int
    receipts: int
    outstanding_total: Money
    paid_total: Money


class AssetRegisterSummary(BaseModel):
    count: int
    total_cost: Money
    total_book_value: Money


class Dashboard(BaseModel):
    """Per-module counts and totals for one company."""

    company_id: int
    company_name: str
    currency: str
    persons: int
    shareholders: ShareholderSummary
    capital: CapitalSummary
    dividends: DividendSummary
    documents: DocumentSummary
    meetings: MeetingSummary
    invoices: InvoiceSummary
    assets: AssetRegisterSummary
    unread_notifications: int
