"""Payslip arithmetic for generated payroll records."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, NamedTuple, Optional

from ..errors import BusinessRuleError
from .currency import round_amount

HUNDRED = Decimal("100")
RATE_QUANTUM = Decimal("0.01")


class PayrollRates(NamedTuple):
    """Deduction rates in percent of gross salary."""

    income_tax: Decimal
    social_security: Decimal
    health_insurance: Decimal
    monthly_hours: int = 160


class Payslip(NamedTuple):
    basic_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    allowances: Dict[str, Decimal]
    total_allowances: Decimal
    gross_salary: Decimal
    income_tax: Decimal
    social_security: Decimal
    health_insurance: Decimal
    other_deductions: Dict[str, Decimal]
    total_deductions: Decimal
    net_salary: Decimal


def hourly_rate(basic_salary, monthly_hours: int) -> Decimal:
    """Overtime rate: the basic salary spread over the standard monthly hours."""
    if monthly_hours <= 0:
        raise ValueError("monthly_hours must be positive")
    return (Decimal(basic_salary) / Decimal(monthly_hours)).quantize(
        RATE_QUANTUM, rounding=ROUND_HALF_UP
    )


def compute_payslip(
    basic_salary,
    rates: PayrollRates,
    currency: str,
    allowances: Optional[Dict[str, Decimal]] = None,
    overtime_hours=Decimal("0"),
    other_deductions: Optional[Dict[str, Decimal]] = None,
) -> Payslip:
    """Gross, statutory deductions and net pay for one employee and period.

    Gross is basic salary plus overtime plus allowances. Income tax, social
    security and health insurance are flat percentages of gross, each
    rounded to the currency quantum. Other deductions are subtracted as
    given.

    Raises:
        BusinessRuleError: If the deductions exceed the gross salary.
    """
    basic_salary = round_amount(basic_salary, currency)
    overtime_hours = Decimal(overtime_hours)
    allowances = {k: round_amount(v, currency) for k, v in (allowances or {}).items()}
    other_deductions = {
        k: round_amount(v, currency) for k, v in (other_deductions or {}).items()
    }

    rate = hourly_rate(basic_salary, rates.monthly_hours)
    overtime_amount = round_amount(overtime_hours * rate, currency)
    total_allowances = sum(allowances.values(), Decimal("0"))
    gross = basic_salary + overtime_amount + total_allowances

    income_tax = round_amount(gross * Decimal(rates.income_tax) / HUNDRED, currency)
    social_security = round_amount(
        gross * Decimal(rates.social_security) / HUNDRED, currency
    )
    health_insurance = round_amount(
        gross * Decimal(rates.health_insurance) / HUNDRED, currency
    )
    total_deductions = (
        income_tax
        + social_security
        + health_insurance
        + sum(other_deductions.values(), Decimal("0"))
    )
    if total_deductions > gross:
        raise BusinessRuleError(
            f"Deductions of {total_deductions} exceed gross salary of {gross}",
            "NEGATIVE_NET_SALARY",
        )

    return Payslip(
        basic_salary=basic_salary,
        overtime_hours=overtime_hours,
        overtime_rate=rate,
        overtime_amount=overtime_amount,
        allowances=allowances,
        total_allowances=total_allowances,
        gross_salary=gross,
        income_tax=income_tax,
        social_security=social_security,
        health_insurance=health_insurance,
        other_deductions=other_deductions,
        total_deductions=total_deductions,
        net_salary=gross - total_deductions,
    )
