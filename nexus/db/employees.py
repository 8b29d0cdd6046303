"""Employee register database operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, insert, or_, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..calculations import round_amount
from ..errors import InvalidStatusError
from ..models import (
    Employee,
    EmployeeCreate,
    EmployeeStatistics,
    EmployeeStatus,
    EmployeeTermination,
    EmployeeUpdate,
)
from .base import (
    LIKE_ESCAPE,
    column_values,
    company_person,
    escape_like,
    paginate,
    person_name,
    to_model,
)
from .schema import employees

logger = logging.getLogger(__name__)


class EmployeeOperations:
    """Employee register database operations."""

    def __init__(self, engine: Engine):
        """Initialize with database engine."""
        self.engine = engine
        self.employees_table = employees

    def _scoped(self, company_id: int, employee_id: int):
        return and_(
            self.employees_table.c.company_id == company_id,
            self.employees_table.c.id == employee_id,
        )

    def _fetch(self, conn: Connection, company_id: int, employee_id: int):
        return conn.execute(
            select(self.employees_table).where(self._scoped(company_id, employee_id))
        ).fetchone()

    def list_employees(
        self,
        company_id: int,
        status: Optional[EmployeeStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Employee], int]:
        """List employees by employee number."""
        t = self.employees_table
        try:
            with self.engine.connect() as conn:
                stmt = select(t).where(t.c.company_id == company_id)
                if status is not None:
                    stmt = stmt.where(t.c.status == status.value)
                if department:
                    stmt = stmt.where(t.c.department == department)
                if search:
                    pattern = f"%{escape_like(search)}%"
                    stmt = stmt.where(
                        or_(
                            t.c.employee_name.ilike(pattern, escape=LIKE_ESCAPE),
                            t.c.employee_number.ilike(pattern, escape=LIKE_ESCAPE),
                            t.c.position.ilike(pattern, escape=LIKE_ESCAPE),
                        )
                    )
                stmt = stmt.order_by(t.c.employee_number)
                return paginate(conn, stmt, Employee, page, limit)

        except SQLAlchemyError as e:
            logger.error(f"Error listing employees for company {company_id}: {e}")
            raise

    def get_employee(self, company_id: int, employee_id: int) -> Optional[Employee]:
        """Get an employee by ID."""
        try:
            with self.engine.connect() as conn:
                row = self._fetch(conn, company_id, employee_id)
                return to_model(Employee, row) if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting employee {employee_id}: {e}")
            raise

    def create_employee(self, company_id: int, employee: EmployeeCreate) -> Employee:
        """Hire a person of the company.

        Raises:
            BusinessRuleError: If the person does not belong to the company.
            ValueError: If the employee number is already taken.
        """
        try:
            with self.engine.connect() as conn:
                person = company_person(conn, company_id, employee.person_id)
                row = conn.execute(
                    insert(self.employees_table)
                    .values(
                        **column_values(
                            employee,
                            company_id=company_id,
                            employee_name=person_name(person),
                            status=EmployeeStatus.ACTIVE.value,
                        )
                    )
                    .returning(self.employees_table)
                ).fetchone()
                conn.commit()

                logger.info(
                    f"Hired {row.employee_name} as {row.employee_number} "
                    f"for company {company_id}"
                )
                return to_model(Employee, row)

        except IntegrityError as e:
            logger.error(f"Integrity error creating employee: {e}")
            raise ValueError(f"Invalid employee: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating employee: {e}")
            raise

    def update_employee(
        self, company_id: int, employee_id: int, employee_update: EmployeeUpdate
    ) -> Optional[Employee]:
        """Apply a partial update to an employee who has not left."""
        values = column_values(employee_update, exclude_unset=True)
        if not values:
            return self.get_employee(company_id, employee_id)

        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, employee_id)
                if current is None:
                    return None
                if current.status == EmployeeStatus.TERMINATED.value:
                    raise InvalidStatusError("Terminated employees cannot be updated")

                row = conn.execute(
                    update(self.employees_table)
                    .where(self._scoped(company_id, employee_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.employees_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Updated employee {employee_id}")
                return to_model(Employee, row)

        except SQLAlchemyError as e:
            logger.error(f"Error updating employee {employee_id}: {e}")
            raise

    def terminate_employee(
        self, company_id: int, employee_id: int, termination: EmployeeTermination
    ) -> Optional[Employee]:
        """End employment; the termination date defaults to today."""
        try:
            with self.engine.connect() as conn:
                current = self._fetch(conn, company_id, employee_id)
                if current is None:
                    return None
                if current.status == EmployeeStatus.TERMINATED.value:
                    raise InvalidStatusError("Employee is already terminated")
                termination_date = termination.termination_date or date.today()
                if termination_date < current.hire_date:
                    raise ValueError("termination_date must not be before hire_date")

                values = {
                    "status": EmployeeStatus.TERMINATED.value,
                    "termination_date": termination_date,
                }
                if termination.notes:
                    values["notes"] = termination.notes
                row = conn.execute(
                    update(self.employees_table)
                    .where(self._scoped(company_id, employee_id))
                    .values(**values, updated_at=func.now())
                    .returning(self.employees_table)
                ).fetchone()
                conn.commit()

                logger.info(f"Terminated employee {employee_id} on {termination_date}")
                return to_model(Employee, row)

        except SQLAlchemyError as e:
            logger.error(f"Error terminating employee {employee_id}: {e}")
            raise

    def departments(self, company_id: int) -> List[str]:
        """Distinct department names in use."""
        t = self.employees_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(t.c.department)
                    .where(and_(t.c.company_id == company_id, t.c.department.isnot(None)))
                    .distinct()
                    .order_by(t.c.department)
                ).scalars()
                return list(rows)

        except SQLAlchemyError as e:
            logger.error(f"Error listing departments for company {company_id}: {e}")
            raise

    def statistics(self, company_id: int, currency: str = "RWF") -> EmployeeStatistics:
        """Headcount by status and department, and salary cost of current staff.

        Salary figures cover employees paid in ``currency`` who have not
        been terminated.
        """
        t = self.employees_table
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        t.c.status,
                        t.c.department,
                        t.c.salary,
                        t.c.currency,
                        t.c.housing_allowance,
                        t.c.transport_allowance,
                        t.c.meal_allowance,
                    ).where(t.c.company_id == company_id)
                ).fetchall()

        except SQLAlchemyError as e:
            logger.error(f"Error computing employee statistics: {e}")
            raise

        by_status = {}
        by_department = {}
        salaries = []
        cost = Decimal("0")
        for row in rows:
            by_status[row.status] = by_status.get(row.status, 0) + 1
            if row.status == EmployeeStatus.TERMINATED.value:
                continue
            department = row.department or "Unassigned"
            by_department[department] = by_department.get(department, 0) + 1
            if row.currency == currency:
                salaries.append(row.salary)
                cost += (
                    row.salary
                    + row.housing_allowance
                    + row.transport_allowance
                    + row.meal_allowance
                )

        average = (
            round_amount(sum(salaries, Decimal("0")) / len(salaries), currency)
            if salaries
            else Decimal("0")
        )
        return EmployeeStatistics(
            total=len(rows),
            active=by_status.get(EmployeeStatus.ACTIVE.value, 0),
            on_leave=by_status.get(EmployeeStatus.ON_LEAVE.value, 0),
            terminated=by_status.get(EmployeeStatus.TERMINATED.value, 0),
            by_department=by_department,
            by_status=by_status,
            average_salary=average,
            monthly_payroll_cost=cost,
        )
