"""Tests for employee endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def employees_url(company) -> str:
    return f"{API}/companies/{company.id}/employees"


@pytest.fixture
def employee(client, employees_url, person):
    response = client.post(
        employees_url,
        json={
            "person_id": person.id,
            "employee_number": "EMP-001",
            "position": "Finance Manager",
            "department": "Finance",
            "salary": 1000000,
            "hire_date": "2024-01-15",
            "housing_allowance": 100000,
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_employee(employee):
    assert employee["employee_name"] == "Alice Uwase"
    assert employee["salary"] == 1000000.0
    assert employee["status"] == "active"
    assert employee["payment_method"] == "bank_transfer"


def test_create_with_unknown_person(client, employees_url):
    response = client.post(
        employees_url,
        json={
            "person_id": 999,
            "employee_number": "EMP-009",
            "position": "Driver",
            "salary": 200000,
            "hire_date": "2026-01-01",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "PERSON_NOT_FOUND"


def test_unsupported_currency(client, employees_url, person):
    response = client.post(
        employees_url,
        json={
            "person_id": person.id,
            "employee_number": "EMP-002",
            "position": "Driver",
            "salary": 200000,
            "currency": "XYZ",
            "hire_date": "2026-01-01",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_list_employees(client, employees_url, employee):
    response = client.get(employees_url, params={"search": "finance"})

    body = response.json()
    assert response.status_code == 200
    assert [e["employee_number"] for e in body["data"]] == ["EMP-001"]
    assert body["pagination"]["total"] == 1


def test_update_cannot_terminate(client, employees_url, employee):
    response = client.put(
        f"{employees_url}/{employee['id']}", json={"status": "terminated"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_terminate_employee(client, employees_url, employee):
    response = client.post(
        f"{employees_url}/{employee['id']}/terminate",
        json={"termination_date": "2026-09-30"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "terminated"

    again = client.post(f"{employees_url}/{employee['id']}/terminate")
    assert again.status_code == 400
    assert again.json()["code"] == "INVALID_STATUS"


def test_statistics_and_departments(client, employees_url, employee):
    stats = client.get(f"{employees_url}/statistics").json()["data"]
    assert stats["active"] == 1
    assert stats["monthly_payroll_cost"] == 1100000.0

    departments = client.get(f"{employees_url}/departments").json()["data"]
    assert departments == ["Finance"]


def test_missing_employee(client, employees_url):
    assert client.get(f"{employees_url}/999").status_code == 404
    assert client.get(f"{employees_url}/999/payroll").status_code == 404
