"""Side-effect free business calculations."""

from .capital import (
    accrued_interest,
    add_months,
    expected_interest,
    penalty_amount,
    total_roi_rate,
)
from .currency import convert_amount, currency_quantum, inverse_rate, round_amount
from .depreciation import depreciation_position, depreciation_schedule, months_between
from .dividends import Allocation, Holding, allocate_pool, dividend_pool, withholding
from .payroll import PayrollRates, Payslip, compute_payslip, hourly_rate
from .tax import TaxAmount, deadline_severity, flat_tax

__all__ = [
    "Allocation",
    "Holding",
    "PayrollRates",
    "Payslip",
    "TaxAmount",
    "accrued_interest",
    "add_months",
    "allocate_pool",
    "compute_payslip",
    "convert_amount",
    "currency_quantum",
    "deadline_severity",
    "depreciation_position",
    "depreciation_schedule",
    "dividend_pool",
    "expected_interest",
    "flat_tax",
    "hourly_rate",
    "inverse_rate",
    "months_between",
    "penalty_amount",
    "round_amount",
    "total_roi_rate",
    "withholding",
]
