"""Tests for tax endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def tax_url(company) -> str:
    return f"{API}/companies/{company.id}/tax"


@pytest.fixture
def vat_return(client, tax_url):
    response = client.post(
        f"{tax_url}/returns",
        json={
            "tax_type": "VAT",
            "period": "2026-09",
            "amount": 900000,
            "due_date": "2026-10-15",
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_return(vat_return):
    assert vat_return["reference"] == "VAT-2026-001"
    assert vat_return["status"] == "pending"
    assert vat_return["amount"] == 900000.0


def test_invalid_period(client, tax_url):
    response = client.post(
        f"{tax_url}/returns",
        json={
            "tax_type": "VAT",
            "period": "Sept 2026",
            "amount": 1000,
            "due_date": "2026-10-15",
        },
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "period"


def test_submit_and_pay(client, tax_url, vat_return):
    return_url = f"{tax_url}/returns/{vat_return['id']}"

    submitted = client.post(f"{return_url}/submit")
    assert submitted.status_code == 200
    assert submitted.json()["data"]["status"] == "submitted"

    again = client.post(f"{return_url}/submit")
    assert again.status_code == 400
    assert again.json()["code"] == "ALREADY_SUBMITTED"

    paid = client.post(f"{return_url}/payments", json={"amount": 900000})
    assert paid.status_code == 200
    assert paid.json()["data"]["status"] == "paid"


def test_overpayment(client, tax_url, vat_return):
    return_url = f"{tax_url}/returns/{vat_return['id']}"
    client.post(f"{return_url}/submit")

    response = client.post(f"{return_url}/payments", json={"amount": 900001})

    assert response.status_code == 400
    assert response.json()["code"] == "OVERPAYMENT"


def test_statistics(client, tax_url, vat_return):
    stats = client.get(f"{tax_url}/statistics").json()["data"]

    assert stats["total"] == 1
    assert stats["pending"] == 1
    assert stats["by_type"] == {"VAT": 900000.0}


def test_rates(client, tax_url):
    rates = client.get(f"{tax_url}/rates").json()["data"]

    assert rates["VAT"] == 18.0
    assert rates["CIT"] == 30.0


def test_calculate_vat(client, tax_url):
    response = client.post(
        f"{tax_url}/calculate", json={"tax_type": "vat", "amount": 100000}
    )

    assert response.status_code == 200
    calculation = response.json()["data"]
    assert calculation["rate"] == 18.0
    assert calculation["tax_amount"] == 18000.0
    assert calculation["total_amount"] == 118000.0


def test_calculate_vat_unregistered(client, tax_url):
    response = client.post(
        f"{tax_url}/calculate",
        json={"tax_type": "VAT", "amount": 100000, "is_vat_registered": False},
    )

    assert response.json()["data"]["tax_amount"] == 0.0


def test_calculate_unknown_type(client, tax_url):
    response = client.post(
        f"{tax_url}/calculate", json={"tax_type": "LUXURY", "amount": 100000}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_TAX_TYPE"


def test_delete_pending_return(client, tax_url, vat_return):
    response = client.delete(f"{tax_url}/returns/{vat_return['id']}")

    assert response.status_code == 200
    assert client.get(f"{tax_url}/returns/{vat_return['id']}").status_code == 404


def test_unknown_company(client):
    response = client.get(f"{API}/companies/999/tax/returns")

    assert response.status_code == 404
