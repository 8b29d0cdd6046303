"""Payroll period and record database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import Payslip, PayrollRates, compute_payslip
from ..errors import BusinessRuleError, InvalidStatusError
from ..models import (
    EmployeePayrollEntry,
    EmployeeStatus,
    GeneratedPayroll,
    PayrollPayment,
    PayrollPaymentStatus,
    PayrollPeriod,
    PayrollPeriodCreate,
    PayrollPeriodStatus,
    PayrollPeriodUpdate,
    PayrollRecord,
    PayrollRecordUpdate,
    PayrollStatistics,
    PayrollYearTotals,
)
from .base import column_values, paginate, to_model
from .schema import employees, payroll_periods, payroll_records

logger = logging.getLogger(__name__)

OPEN_STATUSES = (
    PayrollPeriodStatus.DRAFT.value,
    PayrollPeriodStatus.PROCESSING.value,
)


def _json_amounts(amounts: Dict[str, Decimal]) -> Dict[str, str]:
    return {key: str(value) for key, value in amounts.items()}


def _decimal_amounts(amounts: Optional[dict]) -> Dict[str, Decimal]:
    return {key: Decimal(value) for key, value in (amounts or {}).items()}


def _payslip_values(slip: Payslip) -> dict:
    """Record columns for a computed payslip."""
    values = slip._asdict()
    values["allowances"] = _json_amounts(slip.allowances)
    values["other_deductions"] = _json_amounts(slip.other_deductions)
    return values


class PayrollOperations:
    """Payroll period and record database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.periods_table = payroll_periods
        self.records_table = payroll_records

    def _scoped(self, company_id: int, period_id: int):
        return and_(
            self.periods_table.c.company_id == company_id,
            self.periods_table.c.id == period_id,
        )

    def _fetch(self, conn: Connection, company_id: int, period_id: int):
        return conn.execute(
            select(self.periods_table).where(self._scoped(company_id, period_id))
        ).fetchone()

    def _fetch_record(self, conn: Connection, company_id: int, record_id: int):
        r = self.records_table
        return conn.execute(
            select(r).where(and_(r.c.company_id == company_id, r.c.id == record_id))
        ).fetchone()

    def _check_overlap(
        self,
        conn: Connection,
        company_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> None:
        p = self.periods_table
        stmt = select(p.c.period_name).where(
            and_(
                p.c.company_id == company_id,
                p.c.status != PayrollPeriodStatus.CANCELLED.value,
                p.c.start_date <= end_date,
                p.c.end_date >= start_date,
            )
        )
        if exclude_id is not None:
            stmt = stmt.where(p.c.id != exclude_id)
        clash = conn.execute(stmt).scalar()
        if clash is not None:
            raise BusinessRuleError(
                f"Payroll period overlaps with {clash}", "PERIOD_OVERLAP"
            )

    def _refresh_totals(self, conn: Connection, company_id: int, period_id: int):
        """Recompute a period's totals from its records."""
        r = self.records_table
        totals = conn.execute(
            select(
                func.coalesce(func.sum(r.c.gross_salary), 0),
                func.coalesce(func.sum(r.c.total_deductions), 0),
                func.coalesce(func.sum(r.c.net_salary), 0),
            ).where(r.c.payroll_period_id == period_id)
        ).fetchone()
        return conn.execute(
            update(self.periods_table)
            .where(self._scoped(company_id, period_id))
            .values(
                total_gross=totals[0],
                total_deductions=totals[1],
                total_net=totals[2],
                updated_at=func.now(),
            )
            .returning(self.periods_table)
        ).fetchone()

    def _set_status(self, conn: Connection, company_id: int, period_id: int, status):
        return conn.execute(
            update(self.periods_table)
            .where(self._scoped(company_id, period_id))
            .values(status=status.value, updated_at=func.now())
            .returning(self.periods_table)
        ).fetchone()

    # Periods

    def list_periods(
        self,
        company_id: int,
        status: Optional[PayrollPeriodStatus] = None,
        year: Optional[int] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[PayrollPeriod], int]:
        """List periods, latest first."""
        p = self.periods_table
        try:
            with self.engine.connect() as conn:
                stmt = select(p).where(p.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(p.c.status == status.value)
                if year is not None:
                    stmt = stmt.where(
                        p.c.start_date.between(date(year, 1, 1), date(year, 12, 31))
                    )
                stmt = stmt.order_by(p.c.start_date.desc(), p.c.id.desc())
                return paginate(conn, stmt, PayrollPeriod, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing payroll periods: {e}")
            raise

    def get_period(self, company_id: int, period_id: int) -> Optional[PayrollPeriod]:
        """Get a payroll period by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, period_id)
                return to_model(PayrollPeriod, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting payroll period {period_id}: {e}")
            raise

    def create_period(
        self, company_id: int, period: PayrollPeriodCreate
    ) -> PayrollPeriod:
        """Open a draft period.

        Raises:
            BusinessRuleError: If the dates overlap a period that is not cancelled.
        """
        try:
            with self.engine.connect() as conn:
                self._check_overlap(conn, company_id, period.start_date, period.end_date)
                row = conn.execute(
                    insert(self.periods_table)
                    .values(
                        **column_values(
                            period,
                            company_id=company_id,
                            status=PayrollPeriodStatus.DRAFT.value,
                        )
                    )
                    .returning(self.periods_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Opened payroll period {row.period_name} for company {company_id}"
                )
                return to_model(PayrollPeriod, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating payroll period: {e}")
            raise ValueError(f"Invalid payroll period: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating payroll period: {e}")
            raise

    def update_period(
        self, company_id: int, period_id: int, period_update: PayrollPeriodUpdate
    ) -> Optional[PayrollPeriod]:
        """Edit a draft period; the merged dates are checked again."""
        values = column_values(period_update, exclude_unset=True)
        if not values:
            return self.get_period(company_id, period_id)

        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, period_id)
                if current is None:
                    return None
                if current.status != PayrollPeriodStatus.DRAFT.value:
                    raise InvalidStatusError(
                        f"Only draft periods can be edited (status: {current.status})"
                    )
                start_date = values.get("start_date", current.start_date)
                end_date = values.get("end_date", current.end_date)
                pay_date = values.get("pay_date", current.pay_date)
                if end_date < start_date:
                    raise ValueError("end_date must not be before start_date")
                if pay_date < start_date:
                    raise ValueError("pay_date must not be before start_date")
                self._check_overlap(
                    conn, company_id, start_date, end_date, exclude_id=period_id
                )

                row = conn.execute(
                    update(self.periods_table)
                    .where(self._scoped(company_id, period_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.periods_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Updated payroll period {period_id}")
                return to_model(PayrollPeriod, row)

        except SQLAlchemyError as e:
            logger.error(f"Error updating payroll period {period_id}: {e}")
            raise

    def delete_period(self, company_id: int, period_id: int) -> bool:
        """Delete a draft period."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, period_id)
                if current is None:
                    return False
                if current.status != PayrollPeriodStatus.DRAFT.value:
                    raise InvalidStatusError("Only draft periods can be deleted")
                conn.execute(
                    delete(self.periods_table).where(self._scoped(company_id, period_id))
                )
                conn.commit()

                logger.info(f"Deleted payroll period {period_id}")
                return True

        except SQLAlchemyError as e:
            logger.error(f"Error deleting payroll period {period_id}: {e}")
            raise

    def generate_records(
        self,
        company_id: int,
        period_id: int,
        rates: PayrollRates,
        overtime_hours: Optional[Dict[int, Decimal]] = None,
    ) -> Optional[GeneratedPayroll]:
        """Compute a payslip for every active employee paid in the period currency.

        The period moves from draft to processing.

        Raises:
            InvalidStatusError: If the period is not a draft.
            BusinessRuleError: If nobody is on the payroll, or overtime names
                someone who is not.
        """
        overtime_hours = overtime_hours or {}
        e = employees
        try:
            with self.engine.connect() as conn:
                period = self._fetch(conn, company_id, period_id)
                if period is None:
                    return None
                if period.status != PayrollPeriodStatus.DRAFT.value:
                    raise InvalidStatusError(
                        "Records can only be generated for draft periods "
                        f"(status: {period.status})"
                    )

                staff = conn.execute(
                    select(e)
                    .where(
                        and_(
                            e.c.company_id == company_id,
                            e.c.status == EmployeeStatus.ACTIVE.value,
                            e.c.currency == period.currency,
                        )
                    )
                    .order_by(e.c.employee_number)
                ).fetchall()
                if not staff:
                    raise BusinessRuleError(
                        f"No active employees paid in {period.currency}",
                        "NO_ACTIVE_EMPLOYEES",
                    )
                unknown = sorted(set(overtime_hours) - {row.id for row in staff})
                if unknown:
                    raise BusinessRuleError(
                        f"Overtime given for employees not on this payroll: {unknown}",
                        "EMPLOYEE_NOT_FOUND",
                    )

                values = []
                for row in staff:
                    slip = compute_payslip(
                        row.salary,
                        rates,
                        period.currency,
                        allowances={
                            "housing": row.housing_allowance,
                            "transport": row.transport_allowance,
                            "meal": row.meal_allowance,
                        },
                        overtime_hours=overtime_hours.get(row.id, Decimal("0")),
                    )
                    values.append(
                        {
                            **_payslip_values(slip),
                            "company_id": company_id,
                            "payroll_period_id": period_id,
                            "employee_id": row.id,
                            "employee_name": row.employee_name,
                            "payment_method": row.payment_method,
                            "bank_account": row.bank_account,
                        }
                    )
                conn.execute(insert(self.records_table), values)
                self._set_status(
                    conn, company_id, period_id, PayrollPeriodStatus.PROCESSING
                )
                period = self._refresh_totals(conn, company_id, period_id)
                records = self._records(conn, period_id)
                conn.commit()

                logger.info(
                    f"Generated {len(records)} payroll records for period {period_id}"
                )
                return GeneratedPayroll(
                    period=to_model(PayrollPeriod, period), records=records
                )

        except IntegrityError as e:
            logger.error(f"Integrity error generating payroll records: {e}")
            raise ValueError(f"Invalid payroll record: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error generating payroll for period {period_id}: {e}")
            raise

    def _records(
        self,
        conn: Connection,
        period_id: int,
        payment_status: Optional[PayrollPaymentStatus] = None,
    ) -> List[PayrollRecord]:
        r = self.records_table
        stmt = select(r).where(r.c.payroll_period_id == period_id)
        if payment_status is not None:
            stmt = stmt.where(r.c.payment_status == payment_status.value)
        rows = conn.execute(stmt.order_by(r.c.employee_name, r.c.id)).fetchall()
        return [to_model(PayrollRecord, row) for row in rows]

    def list_records(
        self,
        company_id: int,
        period_id: int,
        payment_status: Optional[PayrollPaymentStatus] = None,
    ) -> Optional[List[PayrollRecord]]:
        """Records of a period by employee name; None if the period is missing."""
        try:
            with self.engine.connect() as conn:
                if self._fetch(conn, company_id, period_id) is None:
                    return None
                return self._records(conn, period_id, payment_status)

        except SQLAlchemyError as e:
            logger.error(f"Error listing payroll records for {period_id}: {e}")
            raise

    def get_record(self, company_id: int, record_id: int) -> Optional[PayrollRecord]:
        try:
            with self.engine.connect() as conn:
                row = self._fetch_record(conn, company_id, record_id)
                return to_model(PayrollRecord, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting payroll record {record_id}: {e}")
            raise

    def _open_record(self, conn: Connection, company_id: int, record_id: int):
        """The record and its period, if the period still takes changes."""
        record = self._fetch_record(conn, company_id, record_id)
        if record is None:
            return None, None
        period = self._fetch(conn, company_id, record.payroll_period_id)
        if period.status != PayrollPeriodStatus.PROCESSING.value:
            raise InvalidStatusError(
                f"Payroll period is {period.status}; records cannot change"
            )
        if record.payment_status == PayrollPaymentStatus.PAID.value:
            raise InvalidStatusError("Payroll record is already paid")
        return record, period

    def update_record(
        self,
        company_id: int,
        record_id: int,
        record_update: PayrollRecordUpdate,
        rates: PayrollRates,
    ) -> Optional[PayrollRecord]:
        """Adjust overtime or deductions and recompute the payslip and totals."""
        values = record_update.model_dump(exclude_unset=True)
        try:
            with self.engine.connect() as conn:
                record, period = self._open_record(conn, company_id, record_id)
                if record is None:
                    return None

                overtime = values.pop("overtime_hours", None)
                deductions = values.pop("other_deductions", None)
                slip = compute_payslip(
                    record.basic_salary,
                    rates,
                    period.currency,
                    allowances=_decimal_amounts(record.allowances),
                    overtime_hours=(
                        overtime if overtime is not None else record.overtime_hours
                    ),
                    other_deductions=(
                        deductions
                        if deductions is not None
                        else _decimal_amounts(record.other_deductions)
                    ),
                )
                r = self.records_table
                conn.execute(
                    update(r)
                    .where(r.c.id == record_id)
                    .values(**_payslip_values(slip), **values, updated_at=func.now())
                )
                self._refresh_totals(conn, company_id, period.id)
                row = self._fetch_record(conn, company_id, record_id)
                conn.commit()

                logger.info(f"Recomputed payroll record {record_id}")
                return to_model(PayrollRecord, row)

        except SQLAlchemyError as e:
            logger.error(f"Error updating payroll record {record_id}: {e}")
            raise

    def set_payment(
        self, company_id: int, record_id: int, payment: PayrollPayment
    ) -> Optional[PayrollRecord]:
        """Mark a record paid or failed; paid records default to today's date."""
        try:
            with self.engine.connect() as conn:
                record, _ = self._open_record(conn, company_id, record_id)
                if record is None:
                    return None

                payment_date = payment.payment_date
                if payment.payment_status == PayrollPaymentStatus.PAID:
                    payment_date = payment_date or date.today()
                r = self.records_table
                row = conn.execute(
                    update(r)
                    .where(r.c.id == record_id)
                    .values(
                        **column_values(payment, payment_date=payment_date),
                        updated_at=func.now(),
                    )
                    .returning(r)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Payroll record {record_id} marked {payment.payment_status.value}"
                )
                return to_model(PayrollRecord, row)

        except SQLAlchemyError as e:
            logger.error(f"Error recording payment for record {record_id}: {e}")
            raise

    def complete_period(
        self, company_id: int, period_id: int
    ) -> Optional[PayrollPeriod]:
        """Close a processing period once every record is paid."""
        r = self.records_table
        try:
            with self.engine.connect() as conn:
                period = self._fetch(conn, company_id, period_id)
                if period is None:
                    return None
                if period.status != PayrollPeriodStatus.PROCESSING.value:
                    raise InvalidStatusError(
                        "Only processing periods can be completed "
                        f"(status: {period.status})"
                    )
                unpaid = conn.execute(
                    select(func.count()).where(
                        and_(
                            r.c.payroll_period_id == period_id,
                            r.c.payment_status != PayrollPaymentStatus.PAID.value,
                        )
                    )
                ).scalar()
                if unpaid:
                    raise BusinessRuleError(
                        f"{unpaid} payroll records are not paid", "UNPAID_RECORDS"
                    )
                row = self._set_status(
                    conn, company_id, period_id, PayrollPeriodStatus.COMPLETED
                )
                conn.commit()

                logger.info(f"Completed payroll period {period_id}")
                return to_model(PayrollPeriod, row)

        except SQLAlchemyError as e:
            logger.error(f"Error completing payroll period {period_id}: {e}")
            raise

    def cancel_period(self, company_id: int, period_id: int) -> Optional[PayrollPeriod]:
        """Cancel an open period, dropping its unpaid records."""
        r = self.records_table
        try:
            with self.engine.connect() as conn:
                period = self._fetch(conn, company_id, period_id)
                if period is None:
                    return None
                if period.status not in OPEN_STATUSES:
                    raise InvalidStatusError(
                        f"Cannot cancel a payroll period in status {period.status}"
                    )
                paid = conn.execute(
                    select(func.count()).where(
                        and_(
                            r.c.payroll_period_id == period_id,
                            r.c.payment_status == PayrollPaymentStatus.PAID.value,
                        )
                    )
                ).scalar()
                if paid:
                    raise InvalidStatusError(
                        "Cannot cancel a payroll period with paid records"
                    )
                conn.execute(delete(r).where(r.c.payroll_period_id == period_id))
                self._set_status(
                    conn, company_id, period_id, PayrollPeriodStatus.CANCELLED
                )
                row = self._refresh_totals(conn, company_id, period_id)
                conn.commit()

                logger.info(f"Cancelled payroll period {period_id}")
                return to_model(PayrollPeriod, row)

        except SQLAlchemyError as e:
            logger.error(f"Error cancelling payroll period {period_id}: {e}")
            raise

    def statistics(
        self, company_id: int, year: Optional[int] = None
    ) -> PayrollStatistics:
        """Totals over periods that were not cancelled, with counts by status."""
        p = self.periods_table
        try:
            with self.engine.connect() as conn:
                stmt = select(
                    p.c.status,
                    p.c.start_date,
                    p.c.total_gross,
                    p.c.total_deductions,
                    p.c.total_net,
                ).where(p.c.company_id == company_id)
                if year is not None:
                    stmt = stmt.where(
                        p.c.start_date.between(date(year, 1, 1), date(year, 12, 31))
                    )
                rows = conn.execute(stmt).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing payroll statistics: {e}")
            raise

        by_status = {}
        by_year = {}
        gross = deductions = net = Decimal("0")
        for row in rows:
            by_status[row.status] = by_status.get(row.status, 0) + 1
            if row.status == PayrollPeriodStatus.CANCELLED.value:
                continue
            gross += row.total_gross
            deductions += row.total_deductions
            net += row.total_net
            key = str(row.start_date.year)
            year_gross, year_net = by_year.get(key, (Decimal("0"), Decimal("0")))
            by_year[key] = (year_gross + row.total_gross, year_net + row.total_net)

        return PayrollStatistics(
            total_periods=len(rows),
            total_gross=gross,
            total_deductions=deductions,
            total_net=net,
            by_status=by_status,
            by_year={
                key: PayrollYearTotals(total_gross=g, total_net=n)
                for key, (g, n) in by_year.items()
            },
        )

    def employee_history(
        self, company_id: int, employee_id: int, limit: int = 12
    ) -> Optional[List[EmployeePayrollEntry]]:
        """An employee's most recent payslips; None if the employee is missing."""
        r = self.records_table
        p = self.periods_table
        try:
            with self.engine.connect() as conn:
                found = conn.execute(
                    select(employees.c.id).where(
                        and_(
                            employees.c.company_id == company_id,
                            employees.c.id == employee_id,
                        )
                    )
                ).fetchone()
                if found is None:
                    return None
                rows = conn.execute(
                    select(
                        r,
                        p.c.period_name,
                        p.c.start_date,
                        p.c.end_date,
                        p.c.pay_date,
                        p.c.status.label("period_status"),
                    )
                    .select_from(r.join(p, r.c.payroll_period_id == p.c.id))
                    .where(r.c.employee_id == employee_id)
                    .order_by(p.c.start_date.desc())
                    .limit(limit)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error getting payroll history for {employee_id}: {e}")
            raise

        return [
            EmployeePayrollEntry(
                record=to_model(PayrollRecord, row),
                period_name=row.period_name,
                start_date=row.start_date,
                end_date=row.end_date,
                pay_date=row.pay_date,
                period_status=row.period_status,
            )
            for row in rows
        ]
