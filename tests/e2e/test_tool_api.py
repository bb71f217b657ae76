"""
E2E: orchestrator -> FastAPI -> registry -> tool -> envelope.
Uses FastAPI TestClient; upstream HTTP and mail are mocked to avoid external services in CI.
"""
import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app
from tools.base import FetchResponse, NetworkError
from tools.registry import build_registry


class StubProvider:
    def send(self, recipient, subject, body, mime_type="text/html"):
        pass


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def registry():
    reg = build_registry(Settings(_env_file=None), mail_provider=StubProvider())
    with patch("app.main.get_registry", return_value=reg):
        yield reg


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_list_tools(client):
    r = client.get("/tools")
    assert r.status_code == 200
    names = {t["name"] for t in r.json()["tools"]}
    assert names == {"scrape_webpage", "search_web", "get_exchange_rates", "send_mail"}


@patch("tools.exchange_rates.fetch")
def test_exchange_rates_success(mock_fetch, client):
    body = {"base_code": "USD", "rates": {"EUR": 0.9}}
    mock_fetch.return_value = FetchResponse(status=200, body=json.dumps(body))
    r = client.post("/tools/get_exchange_rates", json={"parameters": {"base_currency": "usd"}})
    assert r.status_code == 200
    data = r.json()
    assert data == {"tool": "get_exchange_rates", "ok": True, "result": body}
    assert "x-request-id" in r.headers


@patch("tools.web_search.fetch")
def test_search_timeout_is_error_body(mock_fetch, client):
    mock_fetch.side_effect = NetworkError("timeout")
    r = client.post("/tools/search_web", json={"parameters": {"query": "python"}})
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is False
    assert data["error"]["kind"] == "NetworkError"


def test_send_mail(client):
    r = client.post(
        "/tools/send_mail",
        json={"parameters": {"recipient": "a@b.com", "subject": "Subj", "text": "<p>hi</p>"}},
        headers={"x-request-id": "req-1"},
    )
    assert r.status_code == 200
    assert "a@b.com" in r.json()["result"]
    assert r.headers["x-request-id"] == "req-1"


def test_bad_parameters_are_error_body(client):
    r = client.post("/tools/get_exchange_rates", json={"parameters": {}})
    assert r.status_code == 200
    assert r.json()["error"]["kind"] == "InvalidInput"


def test_unknown_tool_is_404(client):
    r = client.post("/tools/launch_rocket", json={"parameters": {}})
    assert r.status_code == 404
