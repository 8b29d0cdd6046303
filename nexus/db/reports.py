"""Dashboard aggregates and export queries."""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, case, func, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..models.report import (
    AssetRegisterSummary,
    CapitalSummary,
    Dashboard,
    DividendSummary,
    DocumentSummary,
    InvoiceSummary,
    MeetingSummary,
    ShareholderSummary,
)
from .schema import (
    companies,
    dividend_declarations,
    dividend_distributions,
    documents,
    early_withdrawal_requests,
    employees,
    fixed_assets,
    invoices,
    locked_capitals,
    meetings,
    notifications,
    persons,
    shareholders,
    tax_returns,
)

logger = logging.getLogger(__name__)

# Exports available per company.
EXPORTS = (
    "capital",
    "shareholders",
    "dividend_distributions",
    "assets",
    "invoices",
    "employees",
    "tax_returns",
)


def _count(conn: Connection, table, *conditions) -> int:
    return conn.execute(
        select(func.count()).select_from(table).where(and_(*conditions))
    ).scalar() or 0


def _total(conn: Connection, column, *conditions) -> Decimal:
    value = conn.execute(
        select(func.coalesce(func.sum(column), 0)).where(and_(*conditions))
    ).scalar()
    return Decimal(str(value or 0))


class ReportOperations:
    """Read-only reporting queries across modules."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine

    def dashboard(
        self, company_id: int, today: Optional[date] = None
    ) -> Optional[Dashboard]:
        """Counts and totals per module, or None for an unknown company."""
        today = today or date.today()
        try:
            with self.engine.connect() as conn:
                company = conn.execute(
                    select(companies.c.name, companies.c.currency).where(
                        companies.c.id == company_id
                    )
                ).fetchone()
                if company is None:
                    return None
                return Dashboard(
                    company_id=company_id,
                    company_name=company.name,
                    currency=company.currency,
                    persons=_count(conn, persons, persons.c.company_id == company_id),
                    shareholders=self._shareholders(conn, company_id),
                    capital=self._capital(conn, company_id),
                    dividends=self._dividends(conn, company_id),
                    documents=self._documents(conn, company_id),
                    meetings=MeetingSummary(
                        total=_count(
                            conn, meetings, meetings.c.company_id == company_id
                        ),
                        upcoming=_count(
                            conn,
                            meetings,
                            meetings.c.company_id == company_id,
                            meetings.c.date >= today,
                            meetings.c.status == "Scheduled",
                        ),
                    ),
                    invoices=self._invoices(conn, company_id),
                    assets=AssetRegisterSummary(
                        count=_count(
                            conn, fixed_assets, fixed_assets.c.company_id == company_id
                        ),
                        total_cost=_total(
                            conn,
                            fixed_assets.c.acquisition_cost,
                            fixed_assets.c.company_id == company_id,
                        ),
                        total_book_value=_total(
                            conn,
                            fixed_assets.c.book_value,
                            fixed_assets.c.company_id == company_id,
                            fixed_assets.c.status != "disposed",
                        ),
                    ),
                    unread_notifications=_count(
                        conn,
                        notifications,
                        notifications.c.company_id == company_id,
                        notifications.c.is_read.is_(False),
                    ),
                )

        except SQLAlchemyError as e:
            logger.error(f"Error building dashboard for company {company_id}: {e}")
            raise

    def _shareholders(self, conn: Connection, company_id: int) -> ShareholderSummary:
        active = and_(
            shareholders.c.company_id == company_id,
            shareholders.c.status == "active",
        )
        return ShareholderSummary(
            count=_count(conn, shareholders, active),
            total_shares=int(_total(conn, shareholders.c.shares_held, active)),
        )

    def _capital(self, conn: Connection, company_id: int) -> CapitalSummary:
        c = locked_capitals
        return CapitalSummary(
            count=_count(conn, c, c.c.company_id == company_id),
            total_amount=_total(conn, c.c.amount, c.c.company_id == company_id),
            locked_amount=_total(
                conn, c.c.amount, c.c.company_id == company_id, c.c.status == "locked"
            ),
            pending_withdrawals=_count(
                conn,
                early_withdrawal_requests,
                early_withdrawal_requests.c.company_id == company_id,
                early_withdrawal_requests.c.status == "pending",
            ),
        )

    def _dividends(self, conn: Connection, company_id: int) -> DividendSummary:
        t = dividend_declarations
        d = dividend_distributions
        live = and_(t.c.company_id == company_id, t.c.status != "cancelled")
        return DividendSummary(
            declarations=_count(conn, t, t.c.company_id == company_id),
            total_pool=_total(conn, t.c.dividend_pool, live),
            outstanding=_total(
                conn, d.c.net_amount, d.c.company_id == company_id, d.c.is_paid.is_(False)
            ),
        )

    def _documents(self, conn: Connection, company_id: int) -> DocumentSummary:
        visible = and_(
            documents.c.company_id == company_id,
            documents.c.status != "deleted",
            documents.c.is_current_version.is_(True),
        )
        return DocumentSummary(
            count=_count(conn, documents, visible),
            total_size=int(_total(conn, documents.c.file_size, visible)),
        )

    def _invoices(self, conn: Connection, company_id: int) -> InvoiceSummary:
        t = invoices
        row = conn.execute(
            select(
                func.coalesce(func.sum(case((t.c.type == "invoice", 1), else_=0)), 0),
                func.coalesce(func.sum(case((t.c.type == "receipt", 1), else_=0)), 0),
            ).where(t.c.company_id == company_id)
        ).fetchone()
        return InvoiceSummary(
            invoices=int(row[0]),
            receipts=int(row[1]),
            outstanding_total=_total(
                conn, t.c.total, t.c.company_id == company_id, t.c.status == "issued"
            ),
            paid_total=_total(
                conn, t.c.total, t.c.company_id == company_id, t.c.status == "paid"
            ),
        )

    # Exports

    def export_rows(
        self, company_id: int, export: str, declaration_id: Optional[int] = None
    ) -> Tuple[str, List[str], List[Dict]]:
        """Rows for one export as ``(title, columns, rows)``.

        ``columns`` comes from the query so empty registers keep their header.
        """
        if export not in EXPORTS:
            raise ValueError(f"Unknown export: {export}")
        if export == "dividend_distributions" and declaration_id is None:
            raise ValueError("declaration_id is required for dividend exports")

        builders = {
            "capital": ("Capital Register", self._capital_stmt),
            "shareholders": ("Shareholder Register", self._shareholders_stmt),
            "dividend_distributions": (
                "Dividend Distributions",
                self._distributions_stmt,
            ),
            "assets": ("Fixed Asset Register", self._assets_stmt),
            "invoices": ("Invoices and Receipts", self._invoices_stmt),
            "employees": ("Employee Register", self._employees_stmt),
            "tax_returns": ("Tax Returns", self._tax_returns_stmt),
        }
        title, builder = builders[export]
        try:
            with self.engine.connect() as conn:
                stmt = builder(company_id, declaration_id)
                columns = list(stmt.selected_columns.keys())
                rows = [dict(row._mapping) for row in conn.execute(stmt)]
                logger.info(f"Exporting {len(rows)} {export} rows for {company_id}")
                return title, columns, rows

        except SQLAlchemyError as e:
            logger.error(f"Error exporting {export} for company {company_id}: {e}")
            raise

    def _capital_stmt(self, company_id: int, _declaration_id):
        c = locked_capitals
        return (
            select(
                c.c.id,
                c.c.investor_name,
                c.c.amount,
                c.c.currency,
                c.c.lock_period_months,
                c.c.lock_date,
                c.c.unlock_date,
                c.c.total_roi_rate,
                c.c.accrued_interest,
                c.c.status,
            )
            .where(c.c.company_id == company_id)
            .order_by(c.c.lock_date, c.c.id)
        )

    def _shareholders_stmt(self, company_id: int, _declaration_id):
        s = shareholders
        return (
            select(
                s.c.id,
                s.c.shareholder_name,
                s.c.shareholder_type,
                s.c.shares_held,
                s.c.share_percentage,
                s.c.acquisition_date,
                s.c.status,
            )
            .where(s.c.company_id == company_id)
            .order_by(s.c.shares_held.desc(), s.c.id)
        )

    def _distributions_stmt(self, company_id: int, declaration_id: int):
        d = dividend_distributions
        return (
            select(
                d.c.shareholder_name,
                d.c.shares_held_at_time,
                d.c.gross_amount,
                d.c.tax_amount,
                d.c.net_amount,
                d.c.is_paid,
                d.c.paid_on,
                d.c.payment_method,
                d.c.payment_reference,
            )
            .where(
                and_(d.c.company_id == company_id, d.c.declaration_id == declaration_id)
            )
            .order_by(d.c.shares_held_at_time.desc(), d.c.id)
        )

    def _assets_stmt(self, company_id: int, _declaration_id):
        a = fixed_assets
        return (
            select(
                a.c.asset_tag,
                a.c.name,
                a.c.location,
                a.c.acquisition_date,
                a.c.acquisition_cost,
                a.c.currency,
                a.c.depreciation_method,
                a.c.useful_life_years,
                a.c.accumulated_depreciation,
                a.c.book_value,
                a.c.status,
            )
            .where(a.c.company_id == company_id)
            .order_by(a.c.asset_tag)
        )

    def _invoices_stmt(self, company_id: int, _declaration_id):
        t = invoices
        return (
            select(
                t.c.number,
                t.c.type,
                t.c.date,
                t.c.party_name,
                t.c.tin,
                t.c.amount,
                t.c.vat,
                t.c.total,
                t.c.status,
                t.c.payment_method,
            )
            .where(t.c.company_id == company_id)
            .order_by(t.c.date, t.c.id)
        )

    def _employees_stmt(self, company_id: int, _declaration_id):
        e = employees
        return (
            select(
                e.c.employee_number,
                e.c.employee_name,
                e.c.position,
                e.c.department,
                e.c.salary,
                e.c.currency,
                e.c.hire_date,
                e.c.termination_date,
                e.c.status,
            )
            .where(e.c.company_id == company_id)
            .order_by(e.c.employee_number)
        )

    def _tax_returns_stmt(self, company_id: int, _declaration_id):
        t = tax_returns
        return (
            select(
                t.c.reference,
                t.c.tax_type,
                t.c.period,
                t.c.amount,
                t.c.paid_amount,
                t.c.currency,
                t.c.due_date,
                t.c.submission_date,
                t.c.paid_date,
                t.c.status,
            )
            .where(t.c.company_id == company_id)
            .order_by(t.c.due_date, t.c.id)
        )
