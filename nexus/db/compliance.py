"""Compliance alerts assembled from the dated registers of a company."""

import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import and_, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..calculations import deadline_severity
from ..models import (
    AlertSeverity,
    AlertType,
    ComplianceAlert,
    ComplianceOverview,
    ComplianceStatus,
    DocumentStatus,
    LockedCapitalStatus,
    PayrollPeriodStatus,
    TaxReturnStatus,
)
from .schema import documents, locked_capitals, payroll_periods, tax_returns

logger = logging.getLogger(__name__)

# How far ahead obligations are reported. Overdue items are always reported.
ALERT_HORIZON_DAYS = 90


def _alert(
    alert_type: AlertType,
    reference_id: int,
    title: str,
    message: str,
    due_date: date,
    today: date,
) -> ComplianceAlert:
    return ComplianceAlert(
        alert_type=alert_type,
        reference_id=reference_id,
        title=title,
        message=message,
        severity=deadline_severity(due_date, today),
        due_date=due_date,
        days_left=(due_date - today).days,
    )


class ComplianceOperations:
    """Read-only view over tax, payroll, document and capital deadlines."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine

    def _tax_alerts(
        self, conn: Connection, company_id: int, today: date, horizon: date
    ):
        t = tax_returns
        rows = conn.execute(
            select(t).where(
                and_(
                    t.c.company_id == company_id,
                    t.c.status != TaxReturnStatus.PAID.value,
                    t.c.due_date <= horizon,
                )
            )
        ).fetchall()
        alerts = []
        for row in rows:
            if row.status == TaxReturnStatus.PENDING.value:
                message = f"{row.tax_type} return for {row.period} must be filed"
            else:
                outstanding = row.amount - row.paid_amount
                message = (
                    f"{row.tax_type} return for {row.period} has "
                    f"{outstanding} {row.currency} unpaid"
                )
            alerts.append(
                _alert(
                    AlertType.TAX_RETURN,
                    row.id,
                    f"{row.tax_type} return {row.reference}",
                    message,
                    row.due_date,
                    today,
                )
            )
        return alerts

    def _payroll_alerts(
        self, conn: Connection, company_id: int, today: date, horizon: date
    ):
        t = payroll_periods
        rows = conn.execute(
            select(t).where(
                and_(
                    t.c.company_id == company_id,
                    t.c.status.in_(
                        [
                            PayrollPeriodStatus.DRAFT.value,
                            PayrollPeriodStatus.PROCESSING.value,
                        ]
                    ),
                    t.c.pay_date <= horizon,
                )
            )
        ).fetchall()
        return [
            _alert(
                AlertType.PAYROLL,
                row.id,
                f"Payroll {row.period_name}",
                f"Payroll {row.period_name} is still {row.status}",
                row.pay_date,
                today,
            )
            for row in rows
        ]

    def _document_alerts(
        self, conn: Connection, company_id: int, today: date, horizon: date
    ):
        d = documents
        rows = conn.execute(
            select(d.c.id, d.c.title, d.c.expiry_date).where(
                and_(
                    d.c.company_id == company_id,
                    d.c.status != DocumentStatus.DELETED.value,
                    d.c.is_current_version.is_(True),
                    d.c.expiry_date.is_not(None),
                    d.c.expiry_date <= horizon,
                )
            )
        ).fetchall()
        return [
            _alert(
                AlertType.DOCUMENT_EXPIRY,
                row.id,
                row.title,
                f"{row.title} expires on {row.expiry_date}",
                row.expiry_date,
                today,
            )
            for row in rows
        ]

    def _capital_alerts(
        self, conn: Connection, company_id: int, today: date, horizon: date
    ):
        c = locked_capitals
        rows = conn.execute(
            select(c.c.id, c.c.investor_name, c.c.amount, c.c.currency, c.c.unlock_date)
            .where(
                and_(
                    c.c.company_id == company_id,
                    c.c.status == LockedCapitalStatus.LOCKED.value,
                    c.c.unlock_date <= horizon,
                )
            )
        ).fetchall()
        return [
            _alert(
                AlertType.CAPITAL_UNLOCK,
                row.id,
                f"Capital unlock for {row.investor_name}",
                f"{row.amount} {row.currency} locked by {row.investor_name} "
                f"unlocks on {row.unlock_date}",
                row.unlock_date,
                today,
            )
            for row in rows
        ]

    def alerts(
        self,
        company_id: int,
        today: Optional[date] = None,
        severity: Optional[AlertSeverity] = None,
        alert_type: Optional[AlertType] = None,
    ) -> List[ComplianceAlert]:
        """Every open obligation due within the horizon, earliest first."""
        today = today or date.today()
        horizon = today + timedelta(days=ALERT_HORIZON_DAYS)
        try:
            with self.engine.connect() as conn:
                found = (
                    self._tax_alerts(conn, company_id, today, horizon)
                    + self._payroll_alerts(conn, company_id, today, horizon)
                    + self._document_alerts(conn, company_id, today, horizon)
                    + self._capital_alerts(conn, company_id, today, horizon)
                )

        except SQLAlchemyError as e:
            logger.error(f"Error building compliance alerts for {company_id}: {e}")
            raise

        if severity is not None:
            found = [a for a in found if a.severity == severity]
        if alert_type is not None:
            found = [a for a in found if a.alert_type == alert_type]
        found.sort(key=lambda a: (a.due_date, a.alert_type.value, a.reference_id))
        return found

    def deadlines(
        self, company_id: int, today: Optional[date] = None
    ) -> List[ComplianceAlert]:
        """Obligations not yet due."""
        return [a for a in self.alerts(company_id, today) if not a.is_overdue]

    def overdue(
        self, company_id: int, today: Optional[date] = None
    ) -> List[ComplianceAlert]:
        """Obligations past their due date."""
        return [a for a in self.alerts(company_id, today) if a.is_overdue]

    def overview(
        self, company_id: int, today: Optional[date] = None
    ) -> ComplianceOverview:
        """Overall standing: any overdue item makes the company non-compliant."""
        found = self.alerts(company_id, today)
        overdue = sum(1 for a in found if a.is_overdue)
        due_soon = sum(
            1 for a in found if not a.is_overdue and a.severity == AlertSeverity.HIGH
        )
        by_type = {}
        for alert in found:
            key = alert.alert_type.value
            by_type[key] = by_type.get(key, 0) + 1

        if overdue:
            status = ComplianceStatus.NON_COMPLIANT
        elif due_soon:
            status = ComplianceStatus.ATTENTION
        else:
            status = ComplianceStatus.COMPLIANT
        return ComplianceOverview(
            status=status,
            overdue=overdue,
            due_soon=due_soon,
            by_type=by_type,
            alerts=found,
        )
