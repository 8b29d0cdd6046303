"""Tests for register export endpoints."""

import io
from unittest.mock import patch

import pandas as pd
import pytest

API = "/api/v1"


@pytest.fixture
def reports_url(company) -> str:
    return f"{API}/companies/{company.id}/reports"


def test_shareholder_csv(client, reports_url, company, shareholders):
    response = client.get(f"{reports_url}/shareholders")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith(f'attachment; filename="shareholders_{company.id}_')
    assert disposition.endswith('.csv"')

    frame = pd.read_csv(io.BytesIO(response.content))
    assert list(frame["shareholder_name"]) == ["Alice Uwase", "Jean Mugisha"]


def test_shareholder_xlsx(client, reports_url, shareholders):
    response = client.get(f"{reports_url}/shareholders", params={"format": "xlsx"})

    assert response.status_code == 200
    frame = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
    assert list(frame["shares_held"]) == [600, 400]


def test_unknown_report(client, reports_url):
    response = client.get(f"{reports_url}/payroll")

    assert response.status_code == 404
    assert "shareholders" in response.json()["message"]


def test_bad_format(client, reports_url):
    response = client.get(f"{reports_url}/capital", params={"format": "docx"})

    assert response.status_code == 400


def test_distributions_need_declaration(client, reports_url):
    response = client.get(f"{reports_url}/dividend_distributions")

    assert response.status_code == 400


def test_pdf_renderer_unavailable(client, reports_url, shareholders):
    with patch(
        "api.reports.render_export",
        side_effect=RuntimeError("PDF export requires weasyprint"),
    ):
        response = client.get(f"{reports_url}/shareholders", params={"format": "pdf"})

    assert response.status_code == 501
    assert response.json()["code"] == "EXPORT_UNAVAILABLE"


def test_unknown_company(client):
    response = client.get(f"{API}/companies/99999/reports/capital")

    assert response.status_code == 404
    assert response.json()["message"] == "Company not found"


def test_empty_export_has_header(client, reports_url):
    response = client.get(f"{reports_url}/capital")

    assert response.status_code == 200
    frame = pd.read_csv(io.BytesIO(response.content))
    assert frame.empty
    assert "investor_name" in frame.columns
