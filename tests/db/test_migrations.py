"""Tests for the Alembic migrations."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def test_upgrade_and_downgrade(test_db_url, monkeypatch):
    """Migrations build the full schema and tear it down again."""
    monkeypatch.setenv("DATABASE_URL", test_db_url)
    config = Config(str(ALEMBIC_INI))

    command.upgrade(config, "head")

    engine = create_engine(test_db_url)
    tables = set(inspect(engine).get_table_names())
    assert {
        "companies",
        "persons",
        "shareholders",
        "locked_capitals",
        "early_withdrawal_requests",
        "dividend_declarations",
        "dividend_distributions",
        "documents",
        "meetings",
        "invoices",
        "notifications",
        "fixed_assets",
        "currency_rates",
        "currency_transactions",
        "employees",
        "payroll_periods",
        "payroll_records",
        "tax_returns",
        "directors",
        "beneficial_owners",
        "share_certificates",
    } <= tables

    command.downgrade(config, "base")

    remaining = set(inspect(engine).get_table_names()) - {"alembic_version"}
    assert remaining == set()
    engine.dispose()
