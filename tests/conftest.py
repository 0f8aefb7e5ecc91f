"""
Pytest Configuration and Shared Fixtures

- Alert payloads
- A fake chat webhook built on httpx.MockTransport
- A TestClient wired to the fake webhook
"""

import json
import pytest
import httpx
from typing import Any, Dict, List
from fastapi.testclient import TestClient

from alert_relay.main import app, get_forwarder
from alert_relay.forwarder import WebhookForwarder

WEBHOOK_URL = "https://chat.example.com/webhook/secret-token"


class FakeWebhook:
    """Records posted messages and answers with a fixed status"""

    def __init__(self, status_code: int = 200, error: Exception = None):
        self.status_code = status_code
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text="ok" if self.status_code < 300 else "error")

    @property
    def texts(self) -> List[str]:
        return [json.loads(r.content)["text"] for r in self.requests]

    def forwarder(self, url: str = WEBHOOK_URL) -> WebhookForwarder:
        return WebhookForwarder(url, timeout=5.0, transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ALERT_WEBHOOK_URL", "ALERT_WEBHOOK_TIMEOUT", "FUNCTION_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def example_payload() -> Dict[str, Any]:
    return {
        "record": {
            "@timestamp": "2024-01-01T00:00:00Z",
            "msg": "test",
            "source": {"ip": "1.2.3.4", "port_num": 80},
            "rules": [{"id": 1, "message": "bad", "severity": "high"}],
        }
    }


@pytest.fixture
def full_payload() -> Dict[str, Any]:
    return {
        "record": {
            "@timestamp": "2024-03-15T08:30:45.123Z",
            "request_id": "req-42",
            "msg": "SQL injection attempt",
            "source": {"ip": "203.0.113.7", "port_num": 51515},
            "destination": {"ip": "10.0.0.5", "port_num": 443},
            "path": "/login",
            "rules": [
                {"id": 942100, "message": "SQLi detected", "severity": "critical"},
                {"id": 920350, "message": "Host header is numeric", "severity": "warning"},
            ],
        }
    }


@pytest.fixture
def webhook() -> FakeWebhook:
    return FakeWebhook()


@pytest.fixture
def client(webhook):
    app.dependency_overrides[get_forwarder] = lambda: webhook.forwarder()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
