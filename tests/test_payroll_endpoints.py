"""Tests for payroll endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def payroll_url(company) -> str:
    return f"{API}/companies/{company.id}/payroll"


@pytest.fixture
def period(client, payroll_url):
    response = client.post(
        f"{payroll_url}/periods",
        json={
            "period_name": "September 2026",
            "start_date": "2026-09-01",
            "end_date": "2026-09-30",
            "pay_date": "2026-09-30",
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_period_dates_validated(client, payroll_url):
    response = client.post(
        f"{payroll_url}/periods",
        json={
            "period_name": "Backwards",
            "start_date": "2026-09-30",
            "end_date": "2026-09-01",
            "pay_date": "2026-09-30",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_overlapping_period(client, payroll_url, period):
    response = client.post(
        f"{payroll_url}/periods",
        json={
            "period_name": "Late September",
            "start_date": "2026-09-20",
            "end_date": "2026-10-19",
            "pay_date": "2026-10-19",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "PERIOD_OVERLAP"


def test_generate_without_employees(client, payroll_url, period):
    response = client.post(f"{payroll_url}/periods/{period['id']}/generate")

    assert response.status_code == 400
    assert response.json()["code"] == "NO_ACTIVE_EMPLOYEES"


def test_payroll_lifecycle(client, payroll_url, period, employees):
    period_url = f"{payroll_url}/periods/{period['id']}"

    generated = client.post(
        f"{period_url}/generate",
        json={"overtime_hours": {str(employees[1].id): 8}},
    )
    assert generated.status_code == 200
    data = generated.json()["data"]
    assert data["period"]["status"] == "processing"
    alice, jean = data["records"]
    assert alice["net_salary"] == 828000.0
    # 500,000 / 160 hours = 3125.00 per hour
    assert jean["overtime_amount"] == 25000.0
    assert jean["gross_salary"] == 525000.0

    early = client.post(f"{period_url}/complete")
    assert early.status_code == 400
    assert early.json()["code"] == "UNPAID_RECORDS"

    for record in (alice, jean):
        paid = client.put(
            f"{payroll_url}/records/{record['id']}/payment",
            json={"payment_status": "paid", "payment_reference": f"BK-{record['id']}"},
        )
        assert paid.status_code == 200

    completed = client.post(f"{period_url}/complete")
    assert completed.status_code == 200
    assert completed.json()["data"]["status"] == "completed"

    history = client.get(
        f"{API}/companies/{period['company_id']}/employees/{employees[0].id}/payroll"
    ).json()["data"]
    assert [h["period_name"] for h in history] == ["September 2026"]


def test_update_record(client, payroll_url, period, employees):
    generated = client.post(f"{payroll_url}/periods/{period['id']}/generate").json()
    jean = generated["data"]["records"][1]

    response = client.put(
        f"{payroll_url}/records/{jean['id']}",
        json={"other_deductions": {"loan": 20000}},
    )

    assert response.status_code == 200
    assert response.json()["data"]["net_salary"] == 340000.0
    totals = client.get(f"{payroll_url}/periods/{period['id']}").json()["data"]
    assert totals["total_net"] == 1168000.0


def test_pending_payment_status_rejected(client, payroll_url, period, employees):
    generated = client.post(f"{payroll_url}/periods/{period['id']}/generate").json()
    record = generated["data"]["records"][0]

    response = client.put(
        f"{payroll_url}/records/{record['id']}/payment",
        json={"payment_status": "pending"},
    )

    assert response.status_code == 400


def test_income_tax_rate_from_settings(client, payroll_url, period, employees, monkeypatch):
    from nexus.config import get_settings

    monkeypatch.setenv("PAYROLL_INCOME_TAX_RATE", "10")
    get_settings.cache_clear()
    try:
        generated = client.post(f"{payroll_url}/periods/{period['id']}/generate").json()
    finally:
        get_settings.cache_clear()

    jean = generated["data"]["records"][1]
    assert jean["income_tax"] == 50000.0
    assert jean["net_salary"] == 410000.0


def test_statistics(client, payroll_url, period):
    stats = client.get(f"{payroll_url}/statistics").json()["data"]

    assert stats["total_periods"] == 1
    assert stats["by_status"] == {"draft": 1}


def test_delete_draft_period(client, payroll_url, period):
    response = client.delete(f"{payroll_url}/periods/{period['id']}")

    assert response.status_code == 200
    assert client.get(f"{payroll_url}/periods/{period['id']}").status_code == 404
