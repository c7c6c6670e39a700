"""Integration tests for the templates API."""

import base64
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from template_ingest.main import create_app
from template_ingest.strategies.template_stores import FileSystemTemplateStore

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _payload(content: bytes, tokens=None, **extra) -> dict:
    payload = {
        "fileBase64": base64.b64encode(content).decode("ascii"),
        "fileName": "engagement_letter.docx",
    }
    if tokens is not None:
        payload["tokens"] = [{"tag": tag, "title": tag.title(), "type": "text"} for tag in tokens]
    payload.update(extra)
    return payload


@pytest.fixture(params=["filesystem", "database"])
def client(request, settings):
    """API client backed by each template store."""
    settings.template_store_type = request.param
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class TestUploadEndpoint:
    """Test suite for POST /api/templates/upload."""

    def test_upload_success(self, client, tagged_docx):
        response = client.post(
            "/api/templates/upload",
            json=_payload(
                tagged_docx("client_name", "date"),
                tokens=["client_name", "date"],
                metadata={"uploadedBy": "jdoe", "tenant": "acme"},
            ),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["templateId"]) == 32
        assert body["version"] == "1.0"
        assert body["workflowState"] == "Draft"
        assert body["validation"] == {"isValid": True, "tagsInDocument": ["client_name", "date"]}
        assert body["unknownTags"] == []

    def test_upload_unknown_tags(self, client, tagged_docx, settings):
        response = client.post(
            "/api/templates/upload",
            json=_payload(tagged_docx("client_name", "ssn"), tokens=["client_name"]),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert "ssn" in body["message"]
        assert body["unknownTags"] == ["ssn"]
        assert body["templateId"] is None
        assert body["validation"]["tagsInDocument"] == ["client_name", "ssn"]
        assert list(settings.template_storage_dir.glob("*.docx")) == []

    def test_upload_without_tokens(self, client, tagged_docx):
        response = client.post("/api/templates/upload", json=_payload(tagged_docx("anything")))

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_snake_case_payload_accepted(self, client, tagged_docx):
        content = tagged_docx("date")
        response = client.post(
            "/api/templates/upload",
            json={
                "file_base64": base64.b64encode(content).decode("ascii"),
                "tokens": [{"tag": "DATE"}],
                "metadata": {"uploaded_by": "jdoe"},
            },
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_missing_file(self, client):
        response = client.post("/api/templates/upload", json={"tokens": [{"tag": "date"}]})

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Invalid request: missing file"
        assert body["error_code"] == "INVALID_INPUT"

    def test_invalid_base64(self, client):
        response = client.post("/api/templates/upload", json={"fileBase64": "not*base64!"})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid base64")

    def test_malformed_document(self, client, settings):
        response = client.post(
            "/api/templates/upload",
            json=_payload(b"definitely not a docx", tokens=["date"]),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "MALFORMED_DOCUMENT"
        assert body["extra"]["stage"] == "extraction"
        assert list(settings.template_storage_dir.iterdir()) == []

    def test_storage_failure(self, client, tagged_docx, settings):
        """Storage faults answer 500 and are distinguishable from bad input."""
        with (
            patch(
                "template_ingest.strategies.template_stores.filesystem.atomic_write_bytes",
                side_effect=OSError("disk full"),
            ),
            patch(
                "template_ingest.strategies.template_stores.database.atomic_write_bytes",
                side_effect=OSError("disk full"),
            ),
        ):
            response = client.post(
                "/api/templates/upload",
                json=_payload(tagged_docx("date"), tokens=["date"]),
            )

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "PERSISTENCE_ERROR"
        assert body["extra"]["stage"] == "persistence"
        assert list(settings.template_storage_dir.glob("*.docx")) == []

    def test_metadata_commit_failure(self, client, tagged_docx, settings):
        """A failed metadata write answers 500 and leaves no body behind."""
        with (
            patch.object(
                FileSystemTemplateStore, "_write_metadata", side_effect=OSError("disk full")
            ),
            patch.object(AsyncSession, "commit", side_effect=SQLAlchemyError("db down")),
        ):
            response = client.post("/api/templates/upload", json=_payload(tagged_docx("date")))

        assert response.status_code == 500
        assert response.json()["error_code"] == "PERSISTENCE_ERROR"
        assert list(settings.template_storage_dir.glob("*.docx")) == []


class TestRetrievalEndpoints:
    """Test suite for template metadata and download endpoints."""

    def _upload(self, client, content: bytes) -> str:
        response = client.post(
            "/api/templates/upload",
            json=_payload(content, metadata={"uploadedBy": "jdoe"}),
        )
        return response.json()["templateId"]

    def test_get_metadata(self, client, tagged_docx):
        template_id = self._upload(client, tagged_docx("date"))

        response = client.get(f"/api/templates/{template_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["templateId"] == template_id
        assert body["version"] == "1.0"
        assert body["uploadedBy"] == "jdoe"
        assert body["tenant"] is None
        assert body["workflowState"] == "Draft"
        assert body["uploadedOn"]

    def test_get_metadata_by_version(self, client, tagged_docx):
        template_id = self._upload(client, tagged_docx("date"))

        assert client.get(f"/api/templates/{template_id}", params={"version": "1.0"}).status_code == 200
        assert client.get(f"/api/templates/{template_id}", params={"version": "2.0"}).status_code == 404

    def test_download(self, client, tagged_docx):
        content = tagged_docx("date")
        template_id = self._upload(client, content)

        response = client.get(f"/api/templates/{template_id}/download")

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MEDIA_TYPE
        assert f"{template_id}_v1.0.docx" in response.headers["content-disposition"]
        assert response.content == content

    def test_unknown_template(self, client):
        assert client.get(f"/api/templates/{'0' * 32}").status_code == 404
        assert client.get(f"/api/templates/{'0' * 32}/download").status_code == 404

    def test_invalid_template_id(self, client):
        assert client.get("/api/templates/NOT-A-VALID-ID").status_code == 422


def test_health(settings):
    with TestClient(create_app(settings)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
