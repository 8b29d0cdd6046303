"""Employee register endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    Employee,
    EmployeeCreate,
    EmployeePayrollEntry,
    EmployeeStatistics,
    EmployeeStatus,
    EmployeeTermination,
    EmployeeUpdate,
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
    prefix="/companies/{company_id}/employees",
    tags=["employees"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Employee]])
async def list_employees(
    company_id: int,
    status: Optional[EmployeeStatus] = Query(None),
    department: Optional[str] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List employees by employee number."""
    try:
        employees, total = db.employees.list_employees(
            company_id, status, department, search, page, limit
        )
        return success_response(
            employees,
            "Employees retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing employees: {e}")
        raise server_error(e)


@router.get("/statistics", response_model=ApiResponse[EmployeeStatistics])
async def employee_statistics(
    company_id: int,
    currency: str = Query("RWF", min_length=3, max_length=3),
    db: NexusDatabase = Depends(get_db),
):
    try:
        stats = db.employees.statistics(company_id, currency.upper())
        return success_response(stats, "Employee statistics retrieved successfully")
    except Exception as e:
        logger.error(f"Error computing employee statistics: {e}")
        raise server_error(e)


@router.get("/departments", response_model=ApiResponse[List[str]])
async def list_departments(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        departments = db.employees.departments(company_id)
        return success_response(departments, "Departments retrieved successfully")
    except Exception as e:
        logger.error(f"Error listing departments: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Employee], status_code=201)
async def create_employee(
    company_id: int, employee: EmployeeCreate, db: NexusDatabase = Depends(get_db)
):
    """Hire a person of the company."""
    try:
        created = db.employees.create_employee(company_id, employee)
        return success_response(created, "Employee created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating employee: {e}")
        raise server_error(e)


@router.get("/{employee_id}", response_model=ApiResponse[Employee])
async def get_employee(
    company_id: int, employee_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        employee = db.employees.get_employee(company_id, employee_id)
        if employee is None:
            raise not_found("Employee")
        return success_response(employee, "Employee retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting employee {employee_id}: {e}")
        raise server_error(e)


@router.put("/{employee_id}", response_model=ApiResponse[Employee])
async def update_employee(
    company_id: int,
    employee_id: int,
    employee_update: EmployeeUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        employee = db.employees.update_employee(
            company_id, employee_id, employee_update
        )
        if employee is None:
            raise not_found("Employee")
        return success_response(employee, "Employee updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating employee {employee_id}: {e}")
        raise server_error(e)


@router.post("/{employee_id}/terminate", response_model=ApiResponse[Employee])
async def terminate_employee(
    company_id: int,
    employee_id: int,
    termination: EmployeeTermination = Body(default_factory=EmployeeTermination),
    db: NexusDatabase = Depends(get_db),
):
    """End employment. The termination date defaults to today."""
    try:
        employee = db.employees.terminate_employee(
            company_id, employee_id, termination
        )
        if employee is None:
            raise not_found("Employee")
        return success_response(employee, "Employee terminated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error terminating employee {employee_id}: {e}")
        raise server_error(e)


@router.get(
    "/{employee_id}/payroll", response_model=ApiResponse[List[EmployeePayrollEntry]]
)
async def employee_payroll_history(
    company_id: int,
    employee_id: int,
    limit: int = Query(12, ge=1, le=60),
    db: NexusDatabase = Depends(get_db),
):
    """The employee's most recent payslips."""
    try:
        history = db.payroll.employee_history(company_id, employee_id, limit)
        if history is None:
            raise not_found("Employee")
        return success_response(history, "Payroll history retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting payroll history for {employee_id}: {e}")
        raise server_error(e)
