"""Compliance alert pydantic models."""

from datetime import date
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel


class AlertType(str, Enum):
    """Register an alert was raised from."""

    TAX_RETURN = "tax_return"
    PAYROLL = "payroll"
    DOCUMENT_EXPIRY = "document_expiry"
    CAPITAL_UNLOCK = "capital_unlock"


class AlertSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    ATTENTION = "attention"
    NON_COMPLIANT = "non_compliant"


class ComplianceAlert(BaseModel):
    """One dated obligation drawn from a company register."""

    alert_type: AlertType
    reference_id: int
    title: str
    message: str
    severity: AlertSeverity
    due_date: date
    days_left: int

    @property
    def is_overdue(self) -> bool:
        return self.days_left < 0


class ComplianceOverview(BaseModel):
    """Overall standing plus the alerts behind it."""

    status: ComplianceStatus
    overdue: int
    due_soon: int
    by_type: Dict[str, int]
    alerts: List[ComplianceAlert]
