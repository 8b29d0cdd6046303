"""Tests for meeting minutes endpoints."""

import pytest

API = "/api/v1"


@pytest.fixture
def meetings_url(company) -> str:
    return f"{API}/companies/{company.id}/meetings"


def minutes(**overrides):
    body = {
        "title": "Quarterly board review",
        "type": "Board Meeting",
        "date": "2026-03-15",
        "time": "10:00",
        "location": "Kigali Heights",
        "chairperson": "Alice Uwase",
        "secretary": "Jean Mugisha",
        "attendees": [{"name": "Alice Uwase", "role": "Chair"}],
        "agenda": ["Financial results", {"description": "Dividend policy"}],
        "decisions": [{"decision": "Declare a final dividend"}],
        "status": "Completed",
    }
    body.update(overrides)
    return body


@pytest.fixture
def meeting(client, meetings_url):
    response = client.post(meetings_url, json=minutes())
    assert response.status_code == 201
    return response.json()["data"]


def test_create_normalizes_label(meeting):
    assert meeting["type"] == "Board"
    assert meeting["attendees"][0]["present"] is True
    assert meeting["agenda"][1] == {"description": "Dividend policy"}


def test_blank_agenda_item(client, meetings_url):
    response = client.post(meetings_url, json=minutes(agenda=["Results", "  "]))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_decision_needs_text(client, meetings_url):
    response = client.post(meetings_url, json=minutes(decisions=[{"owner": "CFO"}]))

    assert response.status_code == 400


def test_bad_time(client, meetings_url):
    response = client.post(meetings_url, json=minutes(time="10am"))

    assert response.status_code == 400


def test_list_by_label(client, meetings_url, meeting):
    client.post(meetings_url, json=minutes(type="Shareholders Meeting", date="2026-06-30"))

    response = client.get(meetings_url, params={"type": "Board Meeting"})
    assert [m["id"] for m in response.json()["data"]] == [meeting["id"]]

    response = client.get(meetings_url, params={"type": "AGM"})
    assert response.json()["pagination"]["total"] == 1


def test_list_unknown_type(client, meetings_url):
    response = client.get(meetings_url, params={"type": "Picnic"})

    assert response.status_code == 400


def test_update_and_delete(client, meetings_url, meeting):
    url = f"{meetings_url}/{meeting['id']}"

    response = client.put(url, json={"location": "Serena Hotel"})
    assert response.json()["data"]["location"] == "Serena Hotel"

    assert client.delete(url).status_code == 200
    assert client.get(url).status_code == 404


def test_statistics(client, meetings_url, meeting):
    client.post(meetings_url, json=minutes(status="Scheduled", date="2026-11-20"))

    data = client.get(f"{meetings_url}/statistics").json()["data"]

    assert data["total"] == 2
    assert data["completed"] == 1
    assert data["scheduled"] == 1
    assert data["by_type"] == {"Board": 2}
