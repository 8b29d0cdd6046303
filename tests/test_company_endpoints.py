"""Tests for company, person and shareholder endpoints."""

from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from nexus.models import Company, CompanyStatus

API = "/api/v1"


@pytest.fixture
def bare_client() -> TestClient:
    from app import app

    return TestClient(app)


@pytest.fixture
def mock_company() -> Company:
    return Company(
        id=1,
        name="Kigali Traders Ltd",
        status=CompanyStatus.ACTIVE,
        created_at=datetime(2026, 1, 1),
        updated_at=datetime(2026, 1, 1),
    )


class TestCompanyEndpointsMocked:
    """Company endpoints against a mocked database."""

    @patch("api.dependencies.nexus_db")
    def test_list_companies_envelope(self, mock_db, bare_client, mock_company):
        mock_db.companies.list_companies.return_value = ([mock_company], 1)

        response = bare_client.get(f"{API}/companies?limit=10")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"][0]["name"] == "Kigali Traders Ltd"
        assert data["pagination"] == {"total": 1, "page": 1, "limit": 10, "pages": 1}
        assert "timestamp" in data
        mock_db.companies.list_companies.assert_called_once_with(None, None, 1, 10)

    @patch("api.dependencies.nexus_db")
    def test_database_failure(self, mock_db, bare_client):
        mock_db.companies.list_companies.side_effect = Exception("connection lost")

        response = bare_client.get(f"{API}/companies")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["code"] == "INTERNAL_ERROR"
        assert data["path"] == "/api/v1/companies"
        assert data["method"] == "GET"

    @patch("api.dependencies.nexus_db")
    def test_unknown_company_on_tenant_route(self, mock_db, bare_client):
        mock_db.companies.get_company.return_value = None

        response = bare_client.get(f"{API}/companies/42/persons")

        assert response.status_code == 404
        assert response.json()["message"] == "Company not found"
        mock_db.persons.list_persons.assert_not_called()


class TestCompanyEndpoints:
    """Company endpoints against a SQLite database."""

    def test_create_company(self, client):
        response = client.post(
            f"{API}/companies", json={"name": "Huye Coffee Ltd", "tin": "111222333"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Company created successfully"
        assert data["data"]["currency"] == "RWF"

    def test_create_company_validation(self, client):
        response = client.post(f"{API}/companies", json={"name": "X", "tin": "abc"})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert {e["field"] for e in data["errors"]} == {"name", "tin"}

    def test_duplicate_tin(self, client, company):
        response = client.post(
            f"{API}/companies", json={"name": "Copy Traders", "tin": company.tin}
        )

        assert response.status_code == 400

    def test_get_and_update_company(self, client, company):
        response = client.put(
            f"{API}/companies/{company.id}", json={"district": "Gasabo"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["district"] == "Gasabo"

        response = client.get(f"{API}/companies/{company.id}")
        assert response.json()["data"]["district"] == "Gasabo"

    def test_get_missing_company(self, client):
        response = client.get(f"{API}/companies/99999")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_deactivate_company(self, client, company):
        response = client.delete(f"{API}/companies/{company.id}")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "inactive"

    def test_dashboard(self, client, company, shareholders):
        response = client.get(f"{API}/companies/{company.id}/dashboard")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["company_name"] == "Kigali Traders Ltd"
        assert data["shareholders"] == {"count": 2, "total_shares": 1000}


class TestPersonEndpoints:
    """Person endpoints."""

    def test_create_and_list(self, client, company):
        response = client.post(
            f"{API}/companies/{company.id}/persons",
            json={"first_name": "Grace", "last_name": "Ingabire"},
        )
        assert response.status_code == 201

        response = client.get(f"{API}/companies/{company.id}/persons?search=grace")
        data = response.json()
        assert data["pagination"]["total"] == 1
        assert data["data"][0]["first_name"] == "Grace"

    def test_person_of_other_company(self, client, db, person):
        other = client.post(f"{API}/companies", json={"name": "Other Ltd"}).json()

        response = client.get(
            f"{API}/companies/{other['data']['id']}/persons/{person.id}"
        )

        assert response.status_code == 404

    def test_tenant_must_exist(self, client):
        response = client.post(
            f"{API}/companies/99999/persons",
            json={"first_name": "Grace", "last_name": "Ingabire"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Company not found"

    def test_delete_shareholding_person(self, client, company, person, shareholders):
        response = client.delete(f"{API}/companies/{company.id}/persons/{person.id}")

        assert response.status_code == 400


class TestShareholderEndpoints:
    """Shareholder register endpoints."""

    def test_list_register(self, client, company, shareholders):
        response = client.get(f"{API}/companies/{company.id}/shareholders")

        data = response.json()["data"]
        assert [s["share_percentage"] for s in data] == [60.0, 40.0]

    def test_create_for_unknown_person(self, client, company):
        response = client.post(
            f"{API}/companies/{company.id}/shareholders",
            json={
                "person_id": 99999,
                "shares_held": 10,
                "acquisition_date": "2026-01-01",
            },
        )

        assert response.status_code == 400
        assert response.json()["code"] == "PERSON_NOT_FOUND"

    def test_transfer(self, client, company, second_person, shareholders):
        response = client.post(
            f"{API}/companies/{company.id}/shareholders/{shareholders[0].id}/transfer",
            json={"to_person_id": second_person.id, "shares_to_transfer": 100},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["from_shareholder"]["shares_held"] == 500
        assert data["to_shareholder"]["share_percentage"] == 50.0

    def test_transfer_too_many(self, client, company, second_person, shareholders):
        response = client.post(
            f"{API}/companies/{company.id}/shareholders/{shareholders[0].id}/transfer",
            json={"to_person_id": second_person.id, "shares_to_transfer": 700},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_SHARES"

    def test_statistics(self, client, company, shareholders):
        response = client.get(f"{API}/companies/{company.id}/shareholders/statistics")

        data = response.json()["data"]
        assert data["total_shares"] == 1000
        assert data["total_shareholders"] == 2
