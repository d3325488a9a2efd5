"""
End-to-end tests for the HTTP surface using FastAPI's TestClient.
"""

import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from ingestor.core.config import Settings
from ingestor.main import create_app


def _files(folder):
    return sorted(folder.iterdir()) if folder.exists() else []


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Running!"}


def test_healthcheck(client):
    response = client.get("/healthcheck")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    parsed = datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
    assert parsed.tzinfo is not None


def test_process_stores_payload(client, data_dir):
    payload = {"url": "https://example.com"}

    response = client.post("/process", json=payload)

    assert response.status_code == 200
    assert response.text == "Success"
    files = _files(data_dir)
    assert len(files) == 1, f"Expected one stored file, found {files}"
    assert files[0].name.startswith("data-") and files[0].suffix == ".json"
    assert json.loads(files[0].read_text(encoding="utf-8")) == payload


def test_process_uses_file_name_override(client, data_dir):
    payload = {"url": "https://example.com", "fileData": {"fileName": "custom.json"}}

    response = client.post("/process", json=payload)

    assert response.status_code == 200
    assert [f.name for f in _files(data_dir)] == ["custom.json"]


def test_process_rejects_empty_object(client, data_dir):
    response = client.post("/process", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid input data"}
    assert _files(data_dir) == []


def test_process_rejects_blank_url(client, data_dir):
    response = client.post("/process", json={"url": "   "})

    assert response.status_code == 400
    assert _files(data_dir) == []


def test_process_rejects_unparseable_body(client, data_dir):
    response = client.post("/process", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid input data"}
    assert _files(data_dir) == []


def test_process_storage_failure(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("", encoding="utf-8")
    app = create_app(Settings(DATA_LOCATION=str(blocker)))

    with TestClient(app) as client:
        response = client.post("/process", json={"url": "https://example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save the provided data"}


def test_unexpected_error_is_generic_500(settings):
    store = MagicMock()
    store.persist = AsyncMock(side_effect=RuntimeError("boom"))
    app = create_app(settings, store=store)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/process", json={"url": "https://example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


def test_unknown_route(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_wrong_method(client):
    response = client.get("/process")

    assert response.status_code == 405


def test_metrics_endpoint_counts_payloads(client):
    client.post("/process", json={"url": "https://example.com"})
    client.post("/process", json={})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'ingestor_payloads_total{outcome="stored"}' in response.text
    assert 'ingestor_payloads_total{outcome="invalid"}' in response.text
    assert "ingestor_http_requests_total" in response.text


def test_metrics_can_be_disabled(data_dir):
    app = create_app(Settings(DATA_LOCATION=str(data_dir), ENABLE_PROMETHEUS_METRICS=False))

    with TestClient(app) as client:
        assert client.get("/metrics").status_code == 404


def test_process_ignores_path_like_file_names(client, data_dir, tmp_path):
    """fileName values that point outside DATA_LOCATION fall back to the timestamp name."""
    outside = tmp_path / "outside.json"

    first = client.post("/process", json={"url": "https://example.com", "fileData": {"fileName": str(outside)}})
    second = client.post("/process", json={"url": "https://example.com", "fileData": {"fileName": "../escaped.json"}})

    assert first.status_code == 200
    assert second.status_code == 200
    assert not outside.exists()
    assert not (tmp_path / "escaped.json").exists()
    files = _files(data_dir)
    assert files, "Payloads should be stored inside DATA_LOCATION"
    assert all(f.name.startswith("data-") for f in files)


def test_unhandled_error_is_counted_in_metrics(settings):
    store = MagicMock()
    store.persist = AsyncMock(side_effect=RuntimeError("boom"))
    app = create_app(settings, store=store)

    with TestClient(app, raise_server_exceptions=False) as client:
        client.post("/process", json={"url": "https://example.com"})
        text = client.get("/metrics").text

    assert 'ingestor_http_requests_total{method="POST",endpoint="/process",status_code="500"}' in text
