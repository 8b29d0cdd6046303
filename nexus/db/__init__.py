"""Database module with unified interface for all operations."""

from .assets import AssetOperations
from .base import DatabaseManager
from .capital import CapitalOperations
from .companies import CompanyOperations
from .compliance import ComplianceOperations
from .currency import CurrencyOperations
from .directors import DirectorOperations
from .dividends import DividendOperations
from .documents import DocumentOperations
from .employees import EmployeeOperations
from .invoices import InvoiceOperations
from .meetings import MeetingOperations
from .notifications import NotificationOperations
from .payroll import PayrollOperations
from .persons import PersonOperations
from .reports import ReportOperations
from .schema import metadata
from .shareholders import ShareholderOperations
from .tax_returns import TaxReturnOperations

__all__ = [
    "AssetOperations",
    "CapitalOperations",
    "CompanyOperations",
    "ComplianceOperations",
    "CurrencyOperations",
    "DatabaseManager",
    "DirectorOperations",
    "DividendOperations",
    "DocumentOperations",
    "EmployeeOperations",
    "InvoiceOperations",
    "MeetingOperations",
    "NexusDatabase",
    "NotificationOperations",
    "PayrollOperations",
    "PersonOperations",
    "ReportOperations",
    "ShareholderOperations",
    "TaxReturnOperations",
    "metadata",
]


class NexusDatabase:
    """Unified database interface combining all operations."""

    def __init__(self, database_url: str):
        """Initialize database with all operation classes."""
        self.manager = DatabaseManager(database_url)
        engine = self.manager.engine
        self.companies = CompanyOperations(engine)
        self.persons = PersonOperations(engine)
        self.shareholders = ShareholderOperations(engine)
        self.directors = DirectorOperations(engine)
        self.capital = CapitalOperations(engine)
        self.dividends = DividendOperations(engine)
        self.documents = DocumentOperations(engine)
        self.meetings = MeetingOperations(engine)
        self.invoices = InvoiceOperations(engine)
        self.notifications = NotificationOperations(engine)
        self.assets = AssetOperations(engine)
        self.currency = CurrencyOperations(engine)
        self.employees = EmployeeOperations(engine)
        self.payroll = PayrollOperations(engine)
        self.tax_returns = TaxReturnOperations(engine)
        self.compliance = ComplianceOperations(engine)
        self.reports = ReportOperations(engine)

    def close(self) -> None:
        """Close database connection."""
        self.manager.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
