"""Tests for exchange rate and currency transaction endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def currency_url(company) -> str:
    return f"{API}/companies/{company.id}/currency"


@pytest.fixture
def usd_rates(client, currency_url):
    created = []
    for rate, rate_date in ((1300, "2026-01-01"), (1350, "2026-06-01")):
        response = client.post(
            f"{currency_url}/rates",
            json={
                "from_currency": "usd",
                "to_currency": "RWF",
                "rate": rate,
                "rate_date": rate_date,
            },
        )
        assert response.status_code == 201
        created.append(response.json()["data"])
    return created


def test_supported(client, currency_url):
    data = client.get(f"{currency_url}/supported").json()["data"]

    assert "RWF" in data
    assert "KES" in data


def test_codes_uppercased(usd_rates):
    assert usd_rates[0]["from_currency"] == "USD"
    assert usd_rates[0]["source"] == "manual"


def test_duplicate_rate(client, currency_url, usd_rates):
    response = client.post(
        f"{currency_url}/rates",
        json={
            "from_currency": "USD",
            "to_currency": "RWF",
            "rate": 1301,
            "rate_date": "2026-01-01",
        },
    )

    assert response.status_code == 400


def test_convert(client, currency_url, usd_rates):
    response = client.post(
        f"{currency_url}/convert",
        json={"from_currency": "USD", "to_currency": "RWF", "amount": 100},
    )

    data = response.json()["data"]
    assert data["converted_amount"] == 135000.0
    assert data["rate_date"] == "2026-06-01"


def test_convert_inverse(client, currency_url, usd_rates):
    response = client.post(
        f"{currency_url}/convert",
        json={"from_currency": "RWF", "to_currency": "USD", "amount": 1000000},
    )

    data = response.json()["data"]
    assert data["inverse"] is True
    assert data["converted_amount"] == 740.74


def test_convert_without_rate(client, currency_url):
    response = client.post(
        f"{currency_url}/convert",
        json={"from_currency": "EUR", "to_currency": "KES", "amount": 10},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "RATE_NOT_FOUND"


def test_convert_unsupported_currency(client, currency_url):
    response = client.post(
        f"{currency_url}/convert",
        json={"from_currency": "XYZ", "to_currency": "RWF", "amount": 10},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_latest_rates(client, currency_url, usd_rates):
    response = client.get(f"{currency_url}/rates/latest", params={"base": "USD"})

    data = response.json()["data"]
    assert data["base_currency"] == "USD"
    assert data["rates"] == {"RWF": 1350.0}

    response = client.get(f"{currency_url}/rates/latest", params={"base": "ABC"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_CURRENCY"


def test_update_and_deactivate(client, currency_url, usd_rates):
    url = f"{currency_url}/rates/{usd_rates[1]['id']}"

    response = client.put(url, json={"rate": 1360})
    assert response.json()["data"]["rate"] == 1360.0

    response = client.delete(url)
    assert response.json()["data"]["is_active"] is False

    response = client.get(f"{currency_url}/rates", params={"active_only": True})
    assert [r["rate"] for r in response.json()["data"]] == [1300.0]


def test_transactions(client, currency_url, usd_rates):
    response = client.post(
        f"{currency_url}/transactions",
        json={
            "transaction_type": "exchange",
            "from_currency": "USD",
            "to_currency": "RWF",
            "from_amount": 200,
            "transaction_date": "2026-07-15",
        },
    )
    assert response.status_code == 201
    assert response.json()["data"]["to_amount"] == 270000.0

    response = client.get(f"{currency_url}/transactions", params={"currency": "USD"})
    assert response.json()["pagination"]["total"] == 1

    stats = client.get(f"{currency_url}/statistics").json()["data"]
    assert stats["currency_pairs"] == ["USD/RWF"]
    assert stats["by_type"] == {"exchange": 1}


def test_transaction_without_rate(client, currency_url):
    response = client.post(
        f"{currency_url}/transactions",
        json={
            "transaction_type": "exchange",
            "from_currency": "GBP",
            "to_currency": "RWF",
            "from_amount": 10,
            "transaction_date": "2026-07-15",
        },
    )

    assert response.status_code == 404
    assert response.json()["code"] == "RATE_NOT_FOUND"


def test_convert_inverse_large_amount(client, currency_url, usd_rates):
    response = client.post(
        f"{currency_url}/convert",
        json={
            "from_currency": "RWF",
            "to_currency": "USD",
            "amount": 1300000000,
            "rate_date": "2026-03-01",
        },
    )

    assert response.json()["data"]["converted_amount"] == 1000000.0
