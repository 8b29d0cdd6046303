"""Tests for dividend endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def dividends_url(company) -> str:
    return f"{API}/companies/{company.id}/dividends"


@pytest.fixture
def declaration(client, dividends_url):
    response = client.post(
        dividends_url,
        json={
            "profit_amount": 1000000,
            "dividend_percentage": 10,
            "approved_by": "Board of Directors",
            "declaration_date": "2026-03-31",
            "financial_year": "2025-2026",
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_declaration(declaration):
    assert declaration["dividend_pool"] == 100000.0
    assert declaration["status"] == "draft"
    assert declaration["dividend_type"] == "final"


def test_bad_financial_year(client, dividends_url):
    response = client.post(
        dividends_url,
        json={
            "profit_amount": 1000,
            "dividend_percentage": 10,
            "approved_by": "Board",
            "declaration_date": "2026-03-31",
            "financial_year": "2025/26",
        },
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "financial_year"


def test_calculate_requires_confirmation(client, dividends_url, declaration, shareholders):
    response = client.post(f"{dividends_url}/{declaration['id']}/calculate")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATUS"


def test_calculate_over_register(client, dividends_url, declaration, shareholders):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")

    response = client.post(f"{dividends_url}/{declaration['id']}/calculate")

    assert response.status_code == 200
    distributions = response.json()["data"]
    assert [d["gross_amount"] for d in distributions] == [60000.0, 40000.0]
    assert [d["net_amount"] for d in distributions] == [57000.0, 38000.0]

    declaration = client.get(f"{dividends_url}/{declaration['id']}").json()["data"]
    assert declaration["status"] == "distributed"


def test_calculate_with_supplied_holdings(client, dividends_url, declaration):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")

    response = client.post(
        f"{dividends_url}/{declaration['id']}/calculate",
        json={
            "shareholders": [
                {"shareholder_name": "Uwase Family Trust", "shares_held_at_time": 3},
                {"shareholder_name": "Mugisha Holdings", "shares_held_at_time": 1},
            ]
        },
    )

    distributions = response.json()["data"]
    assert [d["gross_amount"] for d in distributions] == [75000.0, 25000.0]
    assert distributions[0]["shareholder_id"] is None


def test_calculate_without_holders(client, dividends_url, declaration):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")

    response = client.post(f"{dividends_url}/{declaration['id']}/calculate")

    assert response.status_code == 400
    assert response.json()["code"] == "NO_SHAREHOLDERS"


def test_payment_flow(client, dividends_url, declaration, shareholders):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")
    client.post(f"{dividends_url}/{declaration['id']}/calculate")
    distributions = client.get(
        f"{dividends_url}/{declaration['id']}/distributions"
    ).json()["data"]

    for distribution in distributions:
        response = client.put(
            f"{dividends_url}/distributions/{distribution['id']}/pay",
            json={"payment_method": "mobile_money", "paid_on": "2026-04-15"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["is_paid"] is True

    declaration = client.get(f"{dividends_url}/{declaration['id']}").json()["data"]
    assert declaration["status"] == "paid"

    response = client.put(
        f"{dividends_url}/distributions/{distributions[0]['id']}/pay"
    )
    assert response.status_code == 400

    unpaid = client.get(
        f"{dividends_url}/{declaration['id']}/distributions",
        params={"is_paid": "false"},
    )
    assert unpaid.json()["data"] == []


def test_cancel_draft(client, dividends_url, declaration):
    response = client.post(f"{dividends_url}/{declaration['id']}/cancel")

    assert response.json()["data"]["status"] == "cancelled"


def test_list_and_statistics(client, dividends_url, declaration):
    response = client.get(dividends_url, params={"financial_year": "2025-2026"})
    assert response.json()["pagination"]["total"] == 1

    response = client.get(f"{dividends_url}/statistics")
    data = response.json()["data"]
    assert data["total_declarations"] == 1
    assert data["by_year"] == {"2025-2026": 100000.0}


def test_distributions_of_missing_declaration(client, dividends_url):
    response = client.get(f"{dividends_url}/99999/distributions")

    assert response.status_code == 404


def test_calculate_rejects_unknown_shareholder(client, dividends_url, declaration):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")

    response = client.post(
        f"{dividends_url}/{declaration['id']}/calculate",
        json={
            "shareholders": [
                {
                    "shareholder_id": 9999,
                    "shareholder_name": "Ghost Holder",
                    "shares_held_at_time": 10,
                }
            ]
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "SHAREHOLDER_NOT_FOUND"


def test_cancelled_distributions_cannot_be_paid(
    client, dividends_url, declaration, shareholders
):
    client.post(f"{dividends_url}/{declaration['id']}/confirm")
    distributions = client.post(
        f"{dividends_url}/{declaration['id']}/calculate"
    ).json()["data"]

    response = client.post(f"{dividends_url}/{declaration['id']}/cancel")
    assert response.json()["data"]["status"] == "cancelled"

    response = client.put(
        f"{dividends_url}/distributions/{distributions[0]['id']}/pay"
    )
    assert response.status_code == 404

    current = client.get(f"{dividends_url}/{declaration['id']}").json()["data"]
    assert current["status"] == "cancelled"
