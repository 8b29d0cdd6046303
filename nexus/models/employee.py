"""Employee register pydantic models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Money, currency_code


class EmployeeStatus(str, Enum):
    """Employment status."""

    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"


class SalaryPaymentMethod(str, Enum):
    """How salaries are paid out."""

    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"


class EmployeeBase(BaseModel):
    """Base employee model."""

    person_id: int
    employee_number: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=2, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    salary: Money = Field(..., ge=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    hire_date: date
    payment_method: SalaryPaymentMethod = SalaryPaymentMethod.BANK_TRANSFER
    bank_account: Optional[str] = Field(None, max_length=255)
    housing_allowance: Money = Field(Decimal("0"), ge=0)
    transport_allowance: Money = Field(Decimal("0"), ge=0)
    meal_allowance: Money = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return currency_code(v)


class EmployeeCreate(EmployeeBase):
    """Model for hiring an employee."""

    pass


class EmployeeUpdate(BaseModel):
    """Model for updating an employee. Termination has its own operation."""

    position: Optional[str] = Field(None, min_length=2, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    salary: Optional[Money] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[EmployeeStatus] = None
    payment_method: Optional[SalaryPaymentMethod] = None
    bank_account: Optional[str] = Field(None, max_length=255)
    housing_allowance: Optional[Money] = Field(None, ge=0)
    transport_allowance: Optional[Money] = Field(None, ge=0)
    meal_allowance: Optional[Money] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return currency_code(v) if v is not None else v

    @model_validator(mode="after")
    def check_status(self):
        if self.status == EmployeeStatus.TERMINATED:
            raise ValueError("use the terminate operation to end employment")
        return self


class EmployeeTermination(BaseModel):
    termination_date: Optional[date] = None
    notes: Optional[str] = None


class Employee(BaseModel):
    """Complete employee model."""

    id: int
    company_id: int
    person_id: int
    employee_name: str
    employee_number: str
    position: str
    department: Optional[str] = None
    salary: Money
    currency: str
    hire_date: date
    termination_date: Optional[date] = None
    status: EmployeeStatus
    payment_method: SalaryPaymentMethod
    bank_account: Optional[str] = None
    housing_allowance: Money
    transport_allowance: Money
    meal_allowance: Money
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def allowances(self) -> Dict[str, Decimal]:
        """Recurring allowances keyed by kind."""
        return {
            "housing": self.housing_allowance,
            "transport": self.transport_allowance,
            "meal": self.meal_allowance,
        }


class EmployeeStatistics(BaseModel):
    """Headcount and salary figures for a company."""

    total: int
    active: int
    on_leave: int
    terminated: int
    by_department: Dict[str, int]
    by_status: Dict[str, int]
    average_salary: Money
    monthly_payroll_cost: Money
