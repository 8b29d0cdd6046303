"""Tests for director, beneficial owner and share certificate endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def company_url(company) -> str:
    return f"{API}/companies/{company.id}"


@pytest.fixture
def director(client, company_url, person):
    response = client.post(
        f"{company_url}/directors",
        json={
            "person_id": person.id,
            "director_type": "chairman",
            "appointment_date": "2024-01-15",
            "board_committees": ["audit"],
            "remuneration": 2000000,
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_appoint_director(director):
    assert director["director_name"] == "Alice Uwase"
    assert director["status"] == "active"
    assert director["remuneration"] == 2000000.0


def test_invalid_director_type(client, company_url, person):
    response = client.post(
        f"{company_url}/directors",
        json={
            "person_id": person.id,
            "director_type": "honorary",
            "appointment_date": "2024-01-15",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_second_chairman_rejected(client, company_url, director, second_person):
    response = client.post(
        f"{company_url}/directors",
        json={
            "person_id": second_person.id,
            "director_type": "chairman",
            "appointment_date": "2026-01-01",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "CHAIRMAN_EXISTS"


def test_resign_director(client, company_url, director):
    url = f"{company_url}/directors/{director['id']}/resign"

    response = client.post(url, json={"resignation_date": "2026-06-30"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "resigned"

    again = client.post(url)
    assert again.status_code == 400
    assert again.json()["code"] == "INVALID_STATUS"


def test_board_composition(client, company_url, director):
    response = client.get(f"{company_url}/directors/board-composition")

    composition = response.json()["data"]
    assert response.status_code == 200
    assert composition["chairman"] == "Alice Uwase"
    assert composition["committees"] == {"audit": ["Alice Uwase"]}


def test_list_directors(client, company_url, director):
    body = client.get(f"{company_url}/directors", params={"status": "active"}).json()

    assert [d["id"] for d in body["data"]] == [director["id"]]
    assert body["pagination"]["total"] == 1


def test_missing_director(client, company_url):
    assert client.get(f"{company_url}/directors/999").status_code == 404
    assert client.post(f"{company_url}/directors/999/resign").status_code == 404


def test_beneficial_owner_cap(client, company_url, person, second_person):
    first = client.post(
        f"{company_url}/beneficial-owners",
        json={"person_id": person.id, "ownership_percentage": 80},
    )
    assert first.status_code == 201
    assert first.json()["data"]["control_type"] == "both"

    over = client.post(
        f"{company_url}/beneficial-owners",
        json={"person_id": second_person.id, "ownership_percentage": 25},
    )
    assert over.status_code == 400
    assert over.json()["code"] == "OWNERSHIP_EXCEEDED"

    ceased = client.post(
        f"{company_url}/beneficial-owners/{first.json()['data']['id']}/cease"
    )
    assert ceased.json()["data"]["status"] == "ceased"


def test_share_certificates(client, company_url, shareholders):
    holder = shareholders[1]
    issued = client.post(
        f"{company_url}/share-certificates",
        json={
            "shareholder_id": holder.id,
            "certificate_number": "SC-001",
            "shares_represented": 400,
            "issue_date": "2024-01-01",
        },
    )
    assert issued.status_code == 201

    over = client.post(
        f"{company_url}/share-certificates",
        json={
            "shareholder_id": holder.id,
            "certificate_number": "SC-002",
            "shares_represented": 1,
            "issue_date": "2024-01-01",
        },
    )
    assert over.status_code == 400
    assert over.json()["code"] == "CERTIFICATE_EXCEEDS_HOLDING"

    cancelled = client.post(
        f"{company_url}/share-certificates/{issued.json()['data']['id']}/cancel",
        json={"status": "replaced", "cancellation_reason": "Split into two"},
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "replaced"

    listed = client.get(
        f"{company_url}/share-certificates", params={"status": "replaced"}
    ).json()
    assert [c["certificate_number"] for c in listed["data"]] == ["SC-001"]


def test_unknown_company(client):
    assert client.get(f"{API}/companies/999/directors").status_code == 404
