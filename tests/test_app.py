"""Tests for the HTTP API and the command-line entry point."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from docpress.__main__ import main
from docpress.app import app

PAYLOAD = {
    "document": {
        "id": "c0ffee",
        "title": "Managed Security SLA",
        "document_type": "sla",
        "service_type": "cybersecurity",
        "created_at": "2025-05-01T09:00:00",
    },
    "sections": [
        {"key": "scope", "title": "Scope", "content": "## Coverage\n- Monitoring\n- Incident response"},
        {"key": "terms", "title": "Terms", "content": "| Tier | Response |\n|---|---|\n| P1 | 1h |"},
    ],
    "pricing_items": [{"name": "Monitoring", "quantity": 12, "unit_price": 250}],
    "company": {"company_name": "Northwind Digital"},
    "client": {"company_name": "Acme Corp"},
    "theme": "minimal",
}


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_render_returns_pdf(client):
    response = client.post("/render", json=PAYLOAD)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert 'filename="SLA-2025-FEE.pdf"' in response.headers["content-disposition"]
    # cover + toc + 2 sections + pricing + audit
    assert response.headers["x-page-count"] == "6"
    assert float(response.headers["x-render-time"]) >= 0


def test_render_base64(client):
    response = client.post("/render-base64", json=PAYLOAD)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["page_count"] == 6
    assert base64.b64decode(body["pdf_base64"]).startswith(b"%PDF")


def test_unknown_theme_is_a_client_error(client):
    response = client.post("/render", json={**PAYLOAD, "theme": "neon"})
    assert response.status_code == 400
    assert "neon" in response.json()["detail"]


def test_signature_invariant_is_a_client_error(client):
    payload = {**PAYLOAD, "signatures": [{"signer_name": "Ann", "signed_at": "2025-05-02T10:00:00"}]}
    response = client.post("/render-base64", json=payload)
    assert response.status_code == 400


def test_cli_writes_pdf(tmp_path):
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps(PAYLOAD))
    output = tmp_path / "out.pdf"

    assert main([str(request_path), "-o", str(output), "--theme", "branded"]) == 0
    assert output.read_bytes().startswith(b"%PDF")


def test_cli_default_output_path(tmp_path):
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps(PAYLOAD))
    assert main([str(request_path)]) == 0
    assert (tmp_path / "request.pdf").exists()


def test_cli_reports_bad_theme(tmp_path):
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps(PAYLOAD))
    assert main([str(request_path), "--theme", "neon"]) == 1
    assert not (tmp_path / "request.pdf").exists()
