"""Application settings loaded from the environment."""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .calculations import PayrollRates

load_dotenv()

# Flat rates offered by the tax calculator, in percent.
DEFAULT_TAX_RATES = "VAT=18,CIT=30,WITHHOLDING=15,RSSB=5"


def _parse_rates(raw: str) -> Dict[str, Decimal]:
    rates = {}
    for item in raw.split(","):
        if not item.strip():
            continue
        name, _, value = item.partition("=")
        rates[name.strip().upper()] = Decimal(value.strip())
    return rates


@dataclass(frozen=True)
class Settings:
    """Runtime configuration."""

    database_url: Optional[str]
    upload_dir: str = "uploads/documents"
    max_upload_mb: int = 50
    default_currency: str = "RWF"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    payroll_income_tax_rate: Decimal = Decimal("20")
    payroll_social_security_rate: Decimal = Decimal("5")
    payroll_health_insurance_rate: Decimal = Decimal("3")
    payroll_monthly_hours: int = 160
    tax_rates: Dict[str, Decimal] = field(
        default_factory=lambda: _parse_rates(DEFAULT_TAX_RATES)
    )

    @property
    def max_upload_bytes(self) -> int:
        """Upload cap in bytes."""
        return self.max_upload_mb * 1024 * 1024

    @property
    def payroll_rates(self) -> PayrollRates:
        """Deduction rates applied when payroll records are generated."""
        return PayrollRates(
            income_tax=self.payroll_income_tax_rate,
            social_security=self.payroll_social_security_rate,
            health_insurance=self.payroll_health_insurance_rate,
            monthly_hours=self.payroll_monthly_hours,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process."""
    origins = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        database_url=os.environ.get("DATABASE_URL"),
        upload_dir=os.environ.get("UPLOAD_DIR", "uploads/documents"),
        max_upload_mb=int(os.environ.get("MAX_UPLOAD_MB", "50")),
        default_currency=os.environ.get("DEFAULT_CURRENCY", "RWF"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        payroll_income_tax_rate=Decimal(
            os.environ.get("PAYROLL_INCOME_TAX_RATE", "20")
        ),
        payroll_social_security_rate=Decimal(
            os.environ.get("PAYROLL_SOCIAL_SECURITY_RATE", "5")
        ),
        payroll_health_insurance_rate=Decimal(
            os.environ.get("PAYROLL_HEALTH_INSURANCE_RATE", "3")
        ),
        payroll_monthly_hours=int(os.environ.get("PAYROLL_MONTHLY_HOURS", "160")),
        tax_rates=_parse_rates(os.environ.get("TAX_RATES", DEFAULT_TAX_RATES)),
    )
