"""Payroll period and record pydantic models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Money, currency_code
from .employee import SalaryPaymentMethod


class PayrollPeriodStatus(str, Enum):
    """Payroll period lifecycle: draft, processing, then completed."""

    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PayrollPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PayrollPeriodCreate(BaseModel):
    """Model for opening a payroll period."""

    period_name: str = Field(..., min_length=2, max_length=50)
    start_date: date
    end_date: date
    pay_date: date
    currency: str = Field("RWF", min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return currency_code(v)

    @model_validator(mode="after")
    def check_dates(self):
        """The period must not end before it starts, nor pay before it starts."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.pay_date < self.start_date:
            raise ValueError("pay_date must not be before start_date")
        return self


class PayrollPeriodUpdate(BaseModel):
    period_name: Optional[str] = Field(None, min_length=2, max_length=50)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    pay_date: Optional[date] = None
    notes: Optional[str] = None


class PayrollPeriod(BaseModel):
    """Complete payroll period model."""

    id: int
    company_id: int
    period_name: str
    start_date: date
    end_date: date
    pay_date: date
    status: PayrollPeriodStatus
    total_gross: Money
    total_deductions: Money
    total_net: Money
    currency: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PayrollGeneration(BaseModel):
    """Optional inputs to record generation."""

    overtime_hours: Dict[int, Decimal] = Field(
        default_factory=dict, description="Overtime hours keyed by employee ID"
    )


class PayrollRecordUpdate(BaseModel):
    """Adjustments to a pending record; amounts are recomputed."""

    overtime_hours: Optional[Decimal] = Field(None, ge=0)
    other_deductions: Optional[Dict[str, Money]] = None
    bank_account: Optional[str] = None
    notes: Optional[str] = None


class PayrollPayment(BaseModel):
    payment_status: PayrollPaymentStatus
    payment_reference: Optional[str] = Field(None, max_length=255)
    payment_date: Optional[date] = None

    @model_validator(mode="after")
    def check_status(self):
        if self.payment_status == PayrollPaymentStatus.PENDING:
            raise ValueError("payment_status must be paid or failed")
        return self


class PayrollRecord(BaseModel):
    """Complete payroll record model."""

    id: int
    company_id: int
    payroll_period_id: int
    employee_id: int
    employee_name: str
    basic_salary: Money
    overtime_hours: Money
    overtime_rate: Money
    overtime_amount: Money
    allowances: Dict[str, Money]
    total_allowances: Money
    gross_salary: Money
    income_tax: Money
    social_security: Money
    health_insurance: Money
    other_deductions: Dict[str, Money]
    total_deductions: Money
    net_salary: Money
    payment_method: SalaryPaymentMethod
    bank_account: Optional[str] = None
    payment_status: PayrollPaymentStatus
    payment_date: Optional[date] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GeneratedPayroll(BaseModel):
    """Result of generating a period's records."""

    period: PayrollPeriod
    records: List[PayrollRecord]


class EmployeePayrollEntry(BaseModel):
    """One line of an employee's payroll history."""

    record: PayrollRecord
    period_name: str
    start_date: date
    end_date: date
    pay_date: date
    period_status: PayrollPeriodStatus


class PayrollYearTotals(BaseModel):
    total_gross: Money
    total_net: Money


class PayrollStatistics(BaseModel):
    """Aggregates over a company's payroll periods."""

    total_periods: int
    total_gross: Money
    total_deductions: Money
    total_net: Money
    by_status: Dict[str, int]
    by_year: Dict[str, PayrollYearTotals]
