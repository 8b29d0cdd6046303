"""Tests for compliance endpoints."""

from datetime import date, timedelta

import pytest

API = "/api/v1"


@pytest.fixture
def compliance_url(company) -> str:
    return f"{API}/companies/{company.id}/compliance"


@pytest.fixture
def returns(client, company):
    """An overdue VAT return and a PAYE return due in three days."""
    today = date.today()
    created = []
    for tax_type, due in (
        ("VAT", today - timedelta(days=5)),
        ("PAYE", today + timedelta(days=3)),
    ):
        response = client.post(
            f"{API}/companies/{company.id}/tax/returns",
            json={
                "tax_type": tax_type,
                "period": f"{today.year}",
                "amount": 100000,
                "due_date": due.isoformat(),
            },
        )
        assert response.status_code == 201
        created.append(response.json()["data"])
    return created


def test_alerts(client, compliance_url, returns):
    response = client.get(f"{compliance_url}/alerts")

    alerts = response.json()["data"]
    assert response.status_code == 200
    assert [a["reference_id"] for a in alerts] == [r["id"] for r in returns]
    assert [a["days_left"] for a in alerts] == [-5, 3]
    assert {a["severity"] for a in alerts} == {"high"}


def test_alert_type_filter(client, compliance_url, returns):
    response = client.get(f"{compliance_url}/alerts", params={"alert_type": "payroll"})

    assert response.json()["data"] == []


def test_deadlines_and_overdue(client, compliance_url, returns):
    deadlines = client.get(f"{compliance_url}/deadlines").json()["data"]
    overdue = client.get(f"{compliance_url}/overdue").json()["data"]

    assert [a["reference_id"] for a in deadlines] == [returns[1]["id"]]
    assert [a["reference_id"] for a in overdue] == [returns[0]["id"]]


def test_status(client, compliance_url, returns):
    overview = client.get(f"{compliance_url}/status").json()["data"]

    assert overview["status"] == "non_compliant"
    assert overview["overdue"] == 1
    assert overview["due_soon"] == 1
    assert overview["by_type"] == {"tax_return": 2}


def test_status_without_obligations(client, compliance_url):
    overview = client.get(f"{compliance_url}/status").json()["data"]

    assert overview["status"] == "compliant"


def test_unknown_company(client):
    assert client.get(f"{API}/companies/999/compliance/alerts").status_code == 404
