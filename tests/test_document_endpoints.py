"""Tests for the document vault endpoints."""

import pytest

API = "/api/v1"

PDF = b"%PDF-1.4 registration certificate"


@pytest.fixture
def documents_url(company) -> str:
    return f"{API}/companies/{company.id}/documents"


@pytest.fixture
def category(client, documents_url):
    response = client.post(
        f"{documents_url}/categories", json={"name": "Legal", "color": "#10B981"}
    )
    assert response.status_code == 201
    return response.json()["data"]


def upload(client, documents_url, category, content=PDF, mime="application/pdf", **form):
    data = {
        "title": "RDB Certificate",
        "category_id": str(category["id"]),
        "document_type": "certificate",
        "tags": "rdb, legal ,",
    }
    data.update(form)
    return client.post(
        f"{documents_url}/upload",
        data=data,
        files={"file": ("certificate.pdf", content, mime)},
        headers={"X-User-Id": "3"},
    )


@pytest.fixture
def document(client, documents_url, category):
    response = upload(client, documents_url, category)
    assert response.status_code == 201
    return response.json()["data"]


class TestCategoryEndpoints:
    def test_bad_color(self, client, documents_url):
        response = client.post(
            f"{documents_url}/categories", json={"name": "Legal", "color": "green"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_document_count(self, client, documents_url, category, document):
        categories = client.get(f"{documents_url}/categories").json()["data"]

        assert categories[0]["document_count"] == 1

    def test_update_and_list_documents(self, client, documents_url, category, document):
        response = client.put(
            f"{documents_url}/categories/{category['id']}", json={"icon": "scale"}
        )
        assert response.json()["data"]["icon"] == "scale"

        response = client.get(f"{documents_url}/categories/{category['id']}/documents")
        assert response.json()["pagination"]["total"] == 1


class TestUploadEndpoints:
    def test_upload(self, document):
        assert document["version"] == 1
        assert document["is_current_version"] is True
        assert document["tags"] == ["rdb", "legal"]
        assert document["file_size"] == len(PDF)
        assert document["file_extension"] == "pdf"
        assert document["uploaded_by"] == 3

    def test_invalid_file_type(self, client, documents_url, category):
        response = upload(
            client, documents_url, category, content=b"MZ", mime="application/x-msdownload"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"

    def test_file_too_large(self, client, documents_url, category):
        response = upload(
            client, documents_url, category, content=b"x" * (1024 * 1024 + 1)
        )

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_unknown_category(self, client, documents_url, category):
        response = upload(
            client, documents_url, {"id": 99999}, content=PDF
        )

        assert response.status_code == 400

    def test_blank_title(self, client, documents_url, category):
        response = upload(client, documents_url, category, title="")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_new_version(self, client, documents_url, document):
        response = client.post(
            f"{documents_url}/{document['id']}/versions",
            files={"file": ("certificate-v2.pdf", PDF + b" amended", "application/pdf")},
            data={"notes": "Amended"},
        )

        assert response.status_code == 201
        version = response.json()["data"]
        assert version["version"] == 2
        assert version["parent_document_id"] == document["id"]

        previous = client.get(f"{documents_url}/{document['id']}").json()["data"]
        assert previous["is_current_version"] is False


class TestDocumentEndpoints:
    def test_download(self, client, documents_url, document):
        response = client.get(f"{documents_url}/{document['id']}/download")

        assert response.status_code == 200
        assert response.content == PDF
        assert "certificate.pdf" in response.headers["content-disposition"]

        current = client.get(f"{documents_url}/{document['id']}").json()["data"]
        assert current["download_count"] == 1

    def test_search(self, client, documents_url, document):
        response = client.get(f"{documents_url}/search", params={"q": "rdb"})

        assert [d["id"] for d in response.json()["data"]] == [document["id"]]

    def test_list_by_tag(self, client, documents_url, document):
        response = client.get(documents_url, params={"tag": "legal"})
        assert response.json()["pagination"]["total"] == 1

        response = client.get(documents_url, params={"tag": "tax"})
        assert response.json()["pagination"]["total"] == 0

    def test_update(self, client, documents_url, document):
        response = client.put(
            f"{documents_url}/{document['id']}",
            json={"title": "RDB Certificate 2026", "access_level": "confidential"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["access_level"] == "confidential"

    def test_delete(self, client, documents_url, document):
        response = client.delete(f"{documents_url}/{document['id']}")

        assert response.json()["data"]["status"] == "deleted"
        response = client.get(f"{documents_url}/{document['id']}/download")
        assert response.status_code == 404

    def test_access_grants(self, client, documents_url, document):
        response = client.post(
            f"{documents_url}/{document['id']}/access",
            json={"role_id": "accountant", "access_type": "read"},
            headers={"X-User-Id": "3"},
        )
        assert response.status_code == 201
        assert response.json()["data"]["granted_by"] == 3

        grants = client.get(f"{documents_url}/{document['id']}/access").json()["data"]
        assert [g["role_id"] for g in grants] == ["accountant"]

    def test_access_needs_grantee(self, client, documents_url, document):
        response = client.post(
            f"{documents_url}/{document['id']}/access", json={"access_type": "read"}
        )

        assert response.status_code == 400

    def test_activities(self, client, documents_url, document):
        client.get(f"{documents_url}/{document['id']}")

        response = client.get(f"{documents_url}/{document['id']}/activities")

        types = {a["activity_type"] for a in response.json()["data"]}
        assert {"created", "viewed"} <= types

    def test_statistics(self, client, documents_url, document):
        data = client.get(f"{documents_url}/statistics").json()["data"]

        assert data["total_documents"] == 1
        assert data["by_type"] == {"certificate": 1}
        assert data["by_category"] == {"Legal": 1}

    def test_missing_document(self, client, documents_url):
        response = client.get(f"{documents_url}/99999")

        assert response.status_code == 404
