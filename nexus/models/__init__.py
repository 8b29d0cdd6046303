"""Pydantic models package."""

from .asset import (
    AssetCategory,
    AssetCategoryCreate,
    AssetCategoryUpdate,
    AssetDisposal,
    AssetStatus,
    AssetSummary,
    DepreciationMethod,
    DepreciationResult,
    DepreciationSchedule,
    DisposalMethod,
    DisposalResult,
    FixedAsset,
    FixedAssetCreate,
    FixedAssetUpdate,
    ScheduleEntry,
)
from .capital import (
    CapitalStatistics,
    EarlyWithdrawalCreate,
    EarlyWithdrawalRequest,
    EarlyWithdrawalReview,
    LockedCapital,
    LockedCapitalCreate,
    LockedCapitalStatus,
    LockedCapitalUpdate,
    RoiProjection,
    WithdrawalRequestStatus,
)
from .common import CAPITAL_CURRENCIES, SUPPORTED_CURRENCIES, Money, Pagination
from .company import Company, CompanyBase, CompanyCreate, CompanyStatus, CompanyUpdate
from .compliance import (
    AlertSeverity,
    AlertType,
    ComplianceAlert,
    ComplianceOverview,
    ComplianceStatus,
)
from .currency import (
    ConversionRequest,
    ConversionResult,
    CurrencyRate,
    CurrencyRateCreate,
    CurrencyRateUpdate,
    CurrencyStatistics,
    CurrencyTransaction,
    CurrencyTransactionCreate,
    CurrencyTransactionType,
    LatestRates,
    RateSource,
)
from .director import (
    BeneficialOwner,
    BeneficialOwnerCessation,
    BeneficialOwnerCreate,
    BeneficialOwnerStatus,
    BoardComposition,
    CertificateCancellation,
    CertificateStatus,
    ControlType,
    Director,
    DirectorCreate,
    DirectorResignation,
    DirectorStatus,
    DirectorType,
    DirectorUpdate,
    OwnershipType,
    ShareCertificate,
    ShareCertificateCreate,
)
from .dividend import (
    DeclarationStatus,
    DistributionCalculationRequest,
    DistributionPayment,
    DividendDeclaration,
    DividendDeclarationCreate,
    DividendDistribution,
    DividendStatistics,
    DividendType,
    PaymentMethod,
    ShareholderHolding,
)
from .document import (
    AccessLevel,
    AccessType,
    ActivityContext,
    ActivityType,
    Document,
    DocumentAccess,
    DocumentAccessCreate,
    DocumentActivity,
    DocumentCategory,
    DocumentCategoryCreate,
    DocumentCategoryUpdate,
    DocumentFilter,
    DocumentMetadata,
    DocumentStatistics,
    DocumentStatus,
    DocumentType,
    DocumentUpdate,
    StoredFile,
)
from .employee import (
    Employee,
    EmployeeCreate,
    EmployeeStatistics,
    EmployeeStatus,
    EmployeeTermination,
    EmployeeUpdate,
    SalaryPaymentMethod,
)
from .invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceType,
)
from .meeting import (
    Attendee,
    Meeting,
    MeetingCreate,
    MeetingStatistics,
    MeetingStatus,
    MeetingType,
    MeetingUpdate,
)
from .notification import (
    Notification,
    NotificationCreate,
    NotificationFilter,
    NotificationPriority,
)
from .payroll import (
    EmployeePayrollEntry,
    GeneratedPayroll,
    PayrollGeneration,
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
from .person import (
    OwnershipStatistics,
    Person,
    PersonCreate,
    PersonUpdate,
    Shareholder,
    ShareholderCreate,
    ShareholderStatus,
    ShareholderType,
    ShareholderUpdate,
    ShareTransfer,
    ShareTransferResult,
)
from .report import Dashboard, ExportFormat
from .tax import (
    TaxCalculation,
    TaxCalculationRequest,
    TaxPayment,
    TaxReturn,
    TaxReturnCreate,
    TaxReturnStatus,
    TaxReturnUpdate,
    TaxStatistics,
    TaxType,
)

__all__ = [
    "AccessLevel",
    "AccessType",
    "ActivityContext",
    "ActivityType",
    "AlertSeverity",
    "AlertType",
    "AssetCategory",
    "AssetCategoryCreate",
    "AssetCategoryUpdate",
    "AssetDisposal",
    "AssetStatus",
    "AssetSummary",
    "Attendee",
    "BeneficialOwner",
    "BeneficialOwnerCessation",
    "BeneficialOwnerCreate",
    "BeneficialOwnerStatus",
    "BoardComposition",
    "CapitalStatistics",
    "CAPITAL_CURRENCIES",
    "CertificateCancellation",
    "CertificateStatus",
    "Company",
    "CompanyBase",
    "CompanyCreate",
    "CompanyStatus",
    "CompanyUpdate",
    "ComplianceAlert",
    "ComplianceOverview",
    "ComplianceStatus",
    "ControlType",
    "ConversionRequest",
    "ConversionResult",
    "CurrencyRate",
    "CurrencyRateCreate",
    "CurrencyRateUpdate",
    "CurrencyStatistics",
    "CurrencyTransaction",
    "CurrencyTransactionCreate",
    "CurrencyTransactionType",
    "Dashboard",
    "DeclarationStatus",
    "DepreciationMethod",
    "DepreciationResult",
    "DepreciationSchedule",
    "Director",
    "DirectorCreate",
    "DirectorResignation",
    "DirectorStatus",
    "DirectorType",
    "DirectorUpdate",
    "DisposalMethod",
    "DisposalResult",
    "DistributionCalculationRequest",
    "DistributionPayment",
    "DividendDeclaration",
    "DividendDeclarationCreate",
    "DividendDistribution",
    "DividendStatistics",
    "DividendType",
    "Document",
    "DocumentAccess",
    "DocumentAccessCreate",
    "DocumentActivity",
    "DocumentCategory",
    "DocumentCategoryCreate",
    "DocumentCategoryUpdate",
    "DocumentFilter",
    "DocumentMetadata",
    "DocumentStatistics",
    "DocumentStatus",
    "DocumentType",
    "DocumentUpdate",
    "EarlyWithdrawalCreate",
    "EarlyWithdrawalRequest",
    "EarlyWithdrawalReview",
    "Employee",
    "EmployeeCreate",
    "EmployeePayrollEntry",
    "EmployeeStatistics",
    "EmployeeStatus",
    "EmployeeTermination",
    "EmployeeUpdate",
    "ExportFormat",
    "FixedAsset",
    "FixedAssetCreate",
    "FixedAssetUpdate",
    "GeneratedPayroll",
    "Invoice",
    "InvoiceCreate",
    "InvoiceStatus",
    "InvoiceStatusUpdate",
    "InvoiceType",
    "LatestRates",
    "LockedCapital",
    "LockedCapitalCreate",
    "LockedCapitalStatus",
    "LockedCapitalUpdate",
    "Meeting",
    "MeetingCreate",
    "MeetingStatistics",
    "MeetingStatus",
    "MeetingType",
    "MeetingUpdate",
    "Money",
    "Notification",
    "NotificationCreate",
    "NotificationFilter",
    "NotificationPriority",
    "OwnershipStatistics",
    "OwnershipType",
    "Pagination",
    "PaymentMethod",
    "PayrollGeneration",
    "PayrollPayment",
    "PayrollPaymentStatus",
    "PayrollPeriod",
    "PayrollPeriodCreate",
    "PayrollPeriodStatus",
    "PayrollPeriodUpdate",
    "PayrollRecord",
    "PayrollRecordUpdate",
    "PayrollStatistics",
    "PayrollYearTotals",
    "Person",
    "PersonCreate",
    "PersonUpdate",
    "RateSource",
    "RoiProjection",
    "SalaryPaymentMethod",
    "ScheduleEntry",
    "ShareCertificate",
    "ShareCertificateCreate",
    "Shareholder",
    "ShareholderCreate",
    "ShareholderHolding",
    "ShareholderStatus",
    "ShareholderType",
    "ShareholderUpdate",
    "ShareTransfer",
    "ShareTransferResult",
    "StoredFile",
    "SUPPORTED_CURRENCIES",
    "TaxCalculation",
    "TaxCalculationRequest",
    "TaxPayment",
    "TaxReturn",
    "TaxReturnCreate",
    "TaxReturnStatus",
    "TaxReturnUpdate",
    "TaxStatistics",
    "TaxType",
    "WithdrawalRequestStatus",
]
