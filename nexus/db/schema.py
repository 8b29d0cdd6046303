"""Table definitions shared by the operations classes and Alembic."""

import sqlalchemy as sa

metadata = sa.MetaData()


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _company_fk():
    return sa.Column(
        "company_id",
        sa.Integer(),
        sa.ForeignKey("companies.id"),
        nullable=False,
        index=True,
    )


companies = sa.Table(
    "companies",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("tin", sa.String(20), nullable=True, unique=True),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("address", sa.Text(), nullable=True),
    sa.Column("city", sa.String(100), nullable=True),
    sa.Column("district", sa.String(100), nullable=True),
    sa.Column("sector", sa.String(100), nullable=True),
    sa.Column("cell", sa.String(100), nullable=True),
    sa.Column("country", sa.String(100), nullable=False, server_default="Rwanda"),
    sa.Column("phone", sa.String(30), nullable=True),
    sa.Column("email", sa.String(255), nullable=True),
    sa.Column("website", sa.String(255), nullable=True),
    sa.Column(
        "status",
        sa.Enum("active", "inactive", "suspended", name="company_status"),
        nullable=False,
        server_default="active",
    ),
    *_timestamps(),
)

persons = sa.Table(
    "persons",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("first_name", sa.String(100), nullable=False),
    sa.Column("last_name", sa.String(100), nullable=False),
    sa.Column("middle_name", sa.String(100), nullable=True),
    sa.Column("date_of_birth", sa.Date(), nullable=True),
    sa.Column("gender", sa.String(20), nullable=True),
    sa.Column("nationality", sa.String(100), nullable=True),
    sa.Column("national_id", sa.String(30), nullable=True),
    sa.Column("passport_number", sa.String(30), nullable=True),
    sa.Column("email", sa.String(255), nullable=True),
    sa.Column("phone", sa.String(30), nullable=True),
    sa.Column("address", sa.Text(), nullable=True),
    sa.Column("occupation", sa.String(100), nullable=True),
    sa.Column("tax_id", sa.String(30), nullable=True),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

shareholders = sa.Table(
    "shareholders",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("person_id", sa.Integer(), sa.ForeignKey("persons.id"), nullable=False),
    sa.Column("shareholder_name", sa.String(255), nullable=False),
    sa.Column(
        "shareholder_type",
        sa.Enum(
            "individual",
            "corporate",
            "institutional",
            "government",
            name="shareholder_type",
        ),
        nullable=False,
        server_default="individual",
    ),
    sa.Column("shares_held", sa.BigInteger(), nullable=False),
    sa.Column("share_percentage", sa.Numeric(7, 4), nullable=False, server_default="0"),
    sa.Column("acquisition_date", sa.Date(), nullable=False),
    sa.Column("acquisition_price_per_share", sa.Numeric(15, 2), nullable=True),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column(
        "status",
        sa.Enum("active", "inactive", "transferred", name="shareholder_status"),
        nullable=False,
        server_default="active",
    ),
    sa.Column("transfer_date", sa.Date(), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

locked_capitals = sa.Table(
    "locked_capitals",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "investor_id", sa.Integer(), sa.ForeignKey("persons.id"), nullable=False
    ),
    sa.Column("investor_name", sa.String(255), nullable=False),
    sa.Column("amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("lock_period_months", sa.Integer(), nullable=False),
    sa.Column("lock_date", sa.Date(), nullable=False),
    sa.Column("unlock_date", sa.Date(), nullable=False, index=True),
    sa.Column(
        "status",
        sa.Enum(
            "locked",
            "unlocked",
            "early_withdrawal_requested",
            "penalty_applied",
            name="locked_capital_status",
        ),
        nullable=False,
        server_default="locked",
    ),
    sa.Column("base_roi_rate", sa.Numeric(5, 2), nullable=False, server_default="8.00"),
    sa.Column("bonus_rate", sa.Numeric(5, 2), nullable=False, server_default="0.00"),
    sa.Column("total_roi_rate", sa.Numeric(5, 2), nullable=False),
    sa.Column(
        "accrued_interest", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column(
        "early_withdrawal_penalty_rate",
        sa.Numeric(5, 2),
        nullable=False,
        server_default="2.00",
    ),
    sa.Column(
        "penalty_amount", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

early_withdrawal_requests = sa.Table(
    "early_withdrawal_requests",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "locked_capital_id",
        sa.Integer(),
        sa.ForeignKey("locked_capitals.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("request_date", sa.Date(), nullable=False),
    sa.Column("reason", sa.Text(), nullable=False),
    sa.Column("penalty_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column(
        "status",
        sa.Enum("pending", "approved", "rejected", name="withdrawal_request_status"),
        nullable=False,
        server_default="pending",
    ),
    sa.Column("reviewed_by", sa.Integer(), nullable=True),
    sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
    sa.Column("review_notes", sa.Text(), nullable=True),
    *_timestamps(),
)

dividend_declarations = sa.Table(
    "dividend_declarations",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("declaration_date", sa.Date(), nullable=False),
    sa.Column("financial_year", sa.String(9), nullable=True),
    sa.Column(
        "dividend_type",
        sa.Enum("interim", "final", "special", name="dividend_type"),
        nullable=False,
        server_default="final",
    ),
    sa.Column("profit_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("dividend_percentage", sa.Numeric(5, 2), nullable=False),
    sa.Column("dividend_pool", sa.Numeric(15, 2), nullable=False),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False, server_default="5.00"),
    sa.Column("approved_by", sa.String(255), nullable=False),
    sa.Column("document_url", sa.Text(), nullable=True),
    sa.Column(
        "status",
        sa.Enum(
            "draft",
            "confirmed",
            "distributed",
            "paid",
            "cancelled",
            name="dividend_declaration_status",
        ),
        nullable=False,
        server_default="draft",
    ),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

dividend_distributions = sa.Table(
    "dividend_distributions",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "declaration_id",
        sa.Integer(),
        sa.ForeignKey("dividend_declarations.id"),
        nullable=False,
        index=True,
    ),
    sa.Column(
        "shareholder_id",
        sa.Integer(),
        sa.ForeignKey("shareholders.id"),
        nullable=True,
    ),
    sa.Column("shareholder_name", sa.String(255), nullable=False),
    sa.Column("shares_held_at_time", sa.BigInteger(), nullable=False),
    sa.Column("gross_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("tax_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("net_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("paid_on", sa.Date(), nullable=True),
    sa.Column(
        "payment_method",
        sa.Enum("bank_transfer", "check", "cash", "mobile_money", "other", name="payment_method"),
        nullable=True,
    ),
    sa.Column("payment_reference", sa.String(255), nullable=True),
    sa.Column("payment_proof_url", sa.Text(), nullable=True),
    *_timestamps(),
)

document_categories = sa.Table(
    "document_categories",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("name", sa.String(100), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column(
        "parent_id",
        sa.Integer(),
        sa.ForeignKey("document_categories.id"),
        nullable=True,
    ),
    sa.Column("color", sa.String(7), nullable=False, server_default="#3B82F6"),
    sa.Column("icon", sa.String(50), nullable=False, server_default="folder"),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    *_timestamps(),
)

documents = sa.Table(
    "documents",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "category_id",
        sa.Integer(),
        sa.ForeignKey("document_categories.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("file_name", sa.String(255), nullable=False),
    sa.Column("original_file_name", sa.String(255), nullable=False),
    sa.Column("file_path", sa.Text(), nullable=False),
    sa.Column("file_size", sa.BigInteger(), nullable=False),
    sa.Column("mime_type", sa.String(100), nullable=False),
    sa.Column("file_extension", sa.String(20), nullable=True),
    sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    sa.Column(
        "is_current_version", sa.Boolean(), nullable=False, server_default=sa.true()
    ),
    sa.Column(
        "parent_document_id",
        sa.Integer(),
        sa.ForeignKey("documents.id"),
        nullable=True,
    ),
    sa.Column(
        "document_type",
        sa.Enum(
            "contract",
            "agreement",
            "report",
            "invoice",
            "receipt",
            "certificate",
            "license",
            "permit",
            "other",
            name="document_type",
        ),
        nullable=False,
    ),
    sa.Column(
        "status",
        sa.Enum("draft", "active", "archived", "deleted", name="document_status"),
        nullable=False,
        server_default="active",
    ),
    sa.Column("tags", sa.JSON(), nullable=True),
    sa.Column("metadata", sa.JSON(), nullable=True),
    sa.Column(
        "access_level",
        sa.Enum(
            "public", "internal", "confidential", "restricted", name="access_level"
        ),
        nullable=False,
        server_default="internal",
    ),
    sa.Column("expiry_date", sa.Date(), nullable=True),
    sa.Column("reminder_date", sa.Date(), nullable=True),
    sa.Column("uploaded_by", sa.Integer(), nullable=True),
    sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
    sa.Column("last_accessed_at", sa.DateTime(timezone=True), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

document_access = sa.Table(
    "document_access",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "document_id",
        sa.Integer(),
        sa.ForeignKey("documents.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("user_id", sa.Integer(), nullable=True),
    sa.Column("role_id", sa.String(50), nullable=True),
    sa.Column(
        "access_type",
        sa.Enum("read", "write", "admin", name="document_access_type"),
        nullable=False,
    ),
    sa.Column("granted_by", sa.Integer(), nullable=True),
    sa.Column(
        "granted_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    ),
    sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    *_timestamps(),
)

document_activities = sa.Table(
    "document_activities",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "document_id",
        sa.Integer(),
        sa.ForeignKey("documents.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("user_id", sa.Integer(), nullable=True),
    sa.Column(
        "activity_type",
        sa.Enum(
            "created",
            "updated",
            "downloaded",
            "viewed",
            "shared",
            "deleted",
            "restored",
            "moved",
            name="document_activity_type",
        ),
        nullable=False,
    ),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("metadata", sa.JSON(), nullable=True),
    sa.Column("ip_address", sa.String(45), nullable=True),
    sa.Column("user_agent", sa.Text(), nullable=True),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    ),
)

meetings = sa.Table(
    "meetings",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column(
        "type",
        sa.Enum("AGM", "EGM", "Board", "Committee", "Special", name="meeting_type"),
        nullable=False,
        server_default="Board",
    ),
    sa.Column("date", sa.Date(), nullable=False, index=True),
    sa.Column("time", sa.String(10), nullable=False),
    sa.Column("location", sa.String(255), nullable=False),
    sa.Column("chairperson", sa.String(255), nullable=False),
    sa.Column("secretary", sa.String(255), nullable=False),
    sa.Column("attendees", sa.JSON(), nullable=True),
    sa.Column("agenda", sa.JSON(), nullable=True),
    sa.Column("discussions", sa.Text(), nullable=True),
    sa.Column("decisions", sa.JSON(), nullable=True),
    sa.Column("action_items", sa.JSON(), nullable=True),
    sa.Column("next_meeting_date", sa.Date(), nullable=True),
    sa.Column(
        "status",
        sa.Enum(
            "Scheduled", "In Progress", "Completed", "Cancelled", name="meeting_status"
        ),
        nullable=False,
        server_default="Scheduled",
    ),
    *_timestamps(),
)

invoices = sa.Table(
    "invoices",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("transaction_id", sa.String(100), nullable=True),
    sa.Column(
        "type", sa.Enum("invoice", "receipt", name="invoice_type"), nullable=False
    ),
    sa.Column("number", sa.String(50), nullable=False),
    sa.Column("party_name", sa.String(255), nullable=False),
    sa.Column("tin", sa.String(20), nullable=True),
    sa.Column("description", sa.Text(), nullable=False),
    sa.Column("amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("vat", sa.Numeric(15, 2), nullable=False),
    sa.Column("total", sa.Numeric(15, 2), nullable=False),
    sa.Column("attachment_url", sa.Text(), nullable=True),
    sa.Column("date", sa.Date(), nullable=False),
    sa.Column(
        "status",
        sa.Enum("draft", "issued", "paid", "cancelled", name="invoice_status"),
        nullable=False,
        server_default="draft",
    ),
    sa.Column("payment_method", sa.String(50), nullable=True),
    sa.Column("phone_number", sa.String(30), nullable=True),
    sa.Column("momo_reference", sa.String(100), nullable=True),
    sa.Column("tax_category", sa.String(100), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint("company_id", "number", name="uq_invoices_company_number"),
)

notifications = sa.Table(
    "notifications",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("user_id", sa.Integer(), nullable=True, index=True),
    sa.Column("type", sa.String(50), nullable=False, server_default="system_update"),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("message", sa.Text(), nullable=False),
    sa.Column(
        "priority",
        sa.Enum("low", "medium", "high", name="notification_priority"),
        nullable=False,
        server_default="medium",
    ),
    sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    ),
)

asset_categories = sa.Table(
    "asset_categories",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("name", sa.String(100), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column(
        "depreciation_method",
        sa.Enum(
            "straight_line",
            "declining_balance",
            "sum_of_years",
            name="asset_category_depreciation_method",
        ),
        nullable=False,
        server_default="straight_line",
    ),
    sa.Column(
        "default_useful_life_years", sa.Integer(), nullable=False, server_default="5"
    ),
    sa.Column(
        "default_residual_value_rate",
        sa.Numeric(5, 2),
        nullable=False,
        server_default="10.00",
    ),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    *_timestamps(),
)

fixed_assets = sa.Table(
    "fixed_assets",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "category_id",
        sa.Integer(),
        sa.ForeignKey("asset_categories.id"),
        nullable=True,
    ),
    sa.Column("asset_tag", sa.String(50), nullable=False),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("serial_number", sa.String(100), nullable=True),
    sa.Column("location", sa.String(255), nullable=False),
    sa.Column("department", sa.String(100), nullable=True),
    sa.Column("custodian", sa.String(255), nullable=True),
    sa.Column("acquisition_date", sa.Date(), nullable=False),
    sa.Column("acquisition_cost", sa.Numeric(15, 2), nullable=False),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("useful_life_years", sa.Integer(), nullable=False),
    sa.Column(
        "residual_value", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column(
        "depreciation_method",
        sa.Enum(
            "straight_line",
            "declining_balance",
            "sum_of_years",
            name="depreciation_method",
        ),
        nullable=False,
        server_default="straight_line",
    ),
    sa.Column(
        "accumulated_depreciation",
        sa.Numeric(15, 2),
        nullable=False,
        server_default="0.00",
    ),
    sa.Column("book_value", sa.Numeric(15, 2), nullable=False),
    sa.Column(
        "status",
        sa.Enum(
            "active",
            "disposed",
            "transferred",
            "under_maintenance",
            "lost",
            name="fixed_asset_status",
        ),
        nullable=False,
        server_default="active",
    ),
    sa.Column("disposal_date", sa.Date(), nullable=True),
    sa.Column("disposal_value", sa.Numeric(15, 2), nullable=True),
    sa.Column(
        "disposal_method",
        sa.Enum("sale", "scrap", "donation", "trade_in", name="disposal_method"),
        nullable=True,
    ),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint("company_id", "asset_tag", name="uq_fixed_assets_company_tag"),
)

currency_rates = sa.Table(
    "currency_rates",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("from_currency", sa.String(3), nullable=False),
    sa.Column("to_currency", sa.String(3), nullable=False),
    sa.Column("rate", sa.Numeric(18, 6), nullable=False),
    sa.Column("rate_date", sa.Date(), nullable=False),
    sa.Column(
        "source",
        sa.Enum("manual", "api", "bank", name="currency_rate_source"),
        nullable=False,
        server_default="manual",
    ),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    *_timestamps(),
    sa.UniqueConstraint(
        "company_id",
        "from_currency",
        "to_currency",
        "rate_date",
        name="uq_currency_rates_pair_date",
    ),
)

currency_transactions = sa.Table(
    "currency_transactions",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "transaction_type",
        sa.Enum(
            "exchange",
            "conversion",
            "hedge",
            "settlement",
            name="currency_transaction_type",
        ),
        nullable=False,
    ),
    sa.Column("from_currency", sa.String(3), nullable=False),
    sa.Column("to_currency", sa.String(3), nullable=False),
    sa.Column("from_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("to_amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("exchange_rate", sa.Numeric(18, 6), nullable=False),
    sa.Column("transaction_date", sa.Date(), nullable=False),
    sa.Column("reference_id", sa.String(100), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

employees = sa.Table(
    "employees",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("person_id", sa.Integer(), sa.ForeignKey("persons.id"), nullable=False),
    sa.Column("employee_name", sa.String(255), nullable=False),
    sa.Column("employee_number", sa.String(50), nullable=False),
    sa.Column("position", sa.String(100), nullable=False),
    sa.Column("department", sa.String(100), nullable=True),
    sa.Column("salary", sa.Numeric(15, 2), nullable=False),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("hire_date", sa.Date(), nullable=False),
    sa.Column("termination_date", sa.Date(), nullable=True),
    sa.Column(
        "status",
        sa.Enum(
            "active", "on_leave", "suspended", "terminated", name="employee_status"
        ),
        nullable=False,
        server_default="active",
    ),
    sa.Column(
        "payment_method",
        sa.Enum("bank_transfer", "check", "cash", name="salary_payment_method"),
        nullable=False,
        server_default="bank_transfer",
    ),
    sa.Column("bank_account", sa.String(255), nullable=True),
    sa.Column(
        "housing_allowance", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column(
        "transport_allowance", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column(
        "meal_allowance", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint(
        "company_id", "employee_number", name="uq_employees_company_number"
    ),
)

payroll_periods = sa.Table(
    "payroll_periods",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("period_name", sa.String(50), nullable=False),
    sa.Column("start_date", sa.Date(), nullable=False),
    sa.Column("end_date", sa.Date(), nullable=False),
    sa.Column("pay_date", sa.Date(), nullable=False),
    sa.Column(
        "status",
        sa.Enum(
            "draft", "processing", "completed", "cancelled", name="payroll_period_status"
        ),
        nullable=False,
        server_default="draft",
    ),
    sa.Column("total_gross", sa.Numeric(15, 2), nullable=False, server_default="0.00"),
    sa.Column(
        "total_deductions", sa.Numeric(15, 2), nullable=False, server_default="0.00"
    ),
    sa.Column("total_net", sa.Numeric(15, 2), nullable=False, server_default="0.00"),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

payroll_records = sa.Table(
    "payroll_records",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "payroll_period_id",
        sa.Integer(),
        sa.ForeignKey("payroll_periods.id"),
        nullable=False,
        index=True,
    ),
    sa.Column(
        "employee_id",
        sa.Integer(),
        sa.ForeignKey("employees.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("employee_name", sa.String(255), nullable=False),
    sa.Column("basic_salary", sa.Numeric(15, 2), nullable=False),
    sa.Column("overtime_hours", sa.Numeric(7, 2), nullable=False, server_default="0"),
    sa.Column("overtime_rate", sa.Numeric(15, 2), nullable=False, server_default="0"),
    sa.Column("overtime_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
    sa.Column("allowances", sa.JSON(), nullable=True),
    sa.Column("total_allowances", sa.Numeric(15, 2), nullable=False),
    sa.Column("gross_salary", sa.Numeric(15, 2), nullable=False),
    sa.Column("income_tax", sa.Numeric(15, 2), nullable=False),
    sa.Column("social_security", sa.Numeric(15, 2), nullable=False),
    sa.Column("health_insurance", sa.Numeric(15, 2), nullable=False),
    sa.Column("other_deductions", sa.JSON(), nullable=True),
    sa.Column("total_deductions", sa.Numeric(15, 2), nullable=False),
    sa.Column("net_salary", sa.Numeric(15, 2), nullable=False),
    sa.Column(
        "payment_method",
        sa.Enum("bank_transfer", "check", "cash", name="payroll_payment_method"),
        nullable=False,
        server_default="bank_transfer",
    ),
    sa.Column("bank_account", sa.String(255), nullable=True),
    sa.Column(
        "payment_status",
        sa.Enum("pending", "paid", "failed", name="payroll_payment_status"),
        nullable=False,
        server_default="pending",
    ),
    sa.Column("payment_date", sa.Date(), nullable=True),
    sa.Column("payment_reference", sa.String(255), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint(
        "payroll_period_id", "employee_id", name="uq_payroll_records_period_employee"
    ),
)

tax_returns = sa.Table(
    "tax_returns",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "tax_type",
        sa.Enum("VAT", "PAYE", "CIT", "QIT", "WITHHOLDING", "RSSB", name="tax_type"),
        nullable=False,
    ),
    sa.Column("period", sa.String(7), nullable=False),
    sa.Column("amount", sa.Numeric(15, 2), nullable=False),
    sa.Column("paid_amount", sa.Numeric(15, 2), nullable=False, server_default="0.00"),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("due_date", sa.Date(), nullable=False, index=True),
    sa.Column("submission_date", sa.Date(), nullable=True),
    sa.Column("paid_date", sa.Date(), nullable=True),
    sa.Column(
        "status",
        sa.Enum("pending", "submitted", "paid", name="tax_return_status"),
        nullable=False,
        server_default="pending",
    ),
    sa.Column("reference", sa.String(50), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint("company_id", "reference", name="uq_tax_returns_company_reference"),
)

directors = sa.Table(
    "directors",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("person_id", sa.Integer(), sa.ForeignKey("persons.id"), nullable=False),
    sa.Column("director_name", sa.String(255), nullable=False),
    sa.Column(
        "director_type",
        sa.Enum(
            "executive",
            "non_executive",
            "independent",
            "chairman",
            "vice_chairman",
            name="director_type",
        ),
        nullable=False,
    ),
    sa.Column("appointment_date", sa.Date(), nullable=False),
    sa.Column("resignation_date", sa.Date(), nullable=True),
    sa.Column(
        "status",
        sa.Enum("active", "resigned", "removed", "suspended", name="director_status"),
        nullable=False,
        server_default="active",
    ),
    sa.Column("board_committees", sa.JSON(), nullable=True),
    sa.Column("remuneration", sa.Numeric(15, 2), nullable=False, server_default="0.00"),
    sa.Column("currency", sa.String(3), nullable=False, server_default="RWF"),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

beneficial_owners = sa.Table(
    "beneficial_owners",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column("person_id", sa.Integer(), sa.ForeignKey("persons.id"), nullable=False),
    sa.Column("owner_name", sa.String(255), nullable=False),
    sa.Column("ownership_percentage", sa.Numeric(7, 4), nullable=False),
    sa.Column(
        "ownership_type",
        sa.Enum("direct", "indirect", "beneficial", name="ownership_type"),
        nullable=False,
        server_default="direct",
    ),
    sa.Column(
        "control_type",
        sa.Enum("voting", "economic", "both", name="control_type"),
        nullable=False,
        server_default="both",
    ),
    sa.Column("acquisition_date", sa.Date(), nullable=False),
    sa.Column(
        "status",
        sa.Enum("active", "ceased", "transferred", name="beneficial_owner_status"),
        nullable=False,
        server_default="active",
    ),
    sa.Column("cessation_date", sa.Date(), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
)

share_certificates = sa.Table(
    "share_certificates",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    _company_fk(),
    sa.Column(
        "shareholder_id",
        sa.Integer(),
        sa.ForeignKey("shareholders.id"),
        nullable=False,
        index=True,
    ),
    sa.Column("certificate_number", sa.String(50), nullable=False),
    sa.Column("shares_represented", sa.BigInteger(), nullable=False),
    sa.Column("issue_date", sa.Date(), nullable=False),
    sa.Column(
        "status",
        sa.Enum("active", "cancelled", "replaced", "lost", name="certificate_status"),
        nullable=False,
        server_default="active",
    ),
    sa.Column("cancellation_date", sa.Date(), nullable=True),
    sa.Column("cancellation_reason", sa.String(255), nullable=True),
    sa.Column("notes", sa.Text(), nullable=True),
    *_timestamps(),
    sa.UniqueConstraint(
        "company_id", "certificate_number", name="uq_share_certificates_company_number"
    ),
)
