"""Pytest configuration shared by the database and endpoint tests."""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.dependencies import set_document_storage, set_nexus_db
from nexus.db import NexusDatabase, metadata
from nexus.models import CompanyCreate, EmployeeCreate, PersonCreate, ShareholderCreate
from nexus.storage import DocumentStorage


@pytest.fixture(scope="function")
def test_db_url(tmp_path) -> str:
    """SQLite database file private to one test."""
    return f"sqlite:///{tmp_path / 'nexus.db'}"


@pytest.fixture(scope="function")
def db(test_db_url: str) -> NexusDatabase:
    """Database facade over a freshly created schema."""
    database = NexusDatabase(test_db_url)
    metadata.create_all(database.manager.engine)
    yield database
    database.close()


@pytest.fixture(scope="function")
def storage(tmp_path) -> DocumentStorage:
    """Document storage capped at 1MB."""
    return DocumentStorage(str(tmp_path / "uploads"), 1024 * 1024)


@pytest.fixture(scope="function")
def client(db: NexusDatabase, storage: DocumentStorage) -> TestClient:
    """Test client wired to the temporary database and storage."""
    from app import app

    set_nexus_db(db)
    set_document_storage(storage)
    yield TestClient(app)
    set_nexus_db(None)
    set_document_storage(None)


@pytest.fixture(scope="function")
def company(db: NexusDatabase):
    """A registered company."""
    return db.companies.create_company(
        CompanyCreate(name="Kigali Traders Ltd", tin="123456789", city="Kigali")
    )


@pytest.fixture(scope="function")
def person(db: NexusDatabase, company):
    """A person belonging to the company."""
    return db.persons.create_person(
        company.id,
        PersonCreate(first_name="Alice", last_name="Uwase", national_id="1199080012345678"),
    )


@pytest.fixture(scope="function")
def second_person(db: NexusDatabase, company):
    return db.persons.create_person(
        company.id, PersonCreate(first_name="Jean", last_name="Mugisha")
    )


@pytest.fixture(scope="function")
def shareholders(db: NexusDatabase, company, person, second_person):
    """Two active holders with 600 and 400 shares."""
    return [
        db.shareholders.create_shareholder(
            company.id,
            ShareholderCreate(
                person_id=holder.id,
                shares_held=shares,
                acquisition_date=date(2024, 1, 1),
                acquisition_price_per_share=Decimal("1000"),
            ),
        )
        for holder, shares in ((person, 600), (second_person, 400))
    ]


@pytest.fixture(scope="function")
def employees(db: NexusDatabase, company, person, second_person):
    """Alice on 1,000,000 RWF with 150,000 in allowances; Jean on 500,000."""
    return [
        db.employees.create_employee(
            company.id,
            EmployeeCreate(
                person_id=person.id,
                employee_number="EMP-001",
                position="Finance Manager",
                department="Finance",
                salary=Decimal("1000000"),
                hire_date=date(2024, 1, 15),
                housing_allowance=Decimal("100000"),
                transport_allowance=Decimal("50000"),
            ),
        ),
        db.employees.create_employee(
            company.id,
            EmployeeCreate(
                person_id=second_person.id,
                employee_number="EMP-002",
                position="Sales Associate",
                department="Sales",
                salary=Decimal("500000"),
                hire_date=date(2025, 6, 1),
            ),
        ),
    ]
