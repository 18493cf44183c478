"""Tests for the synthesize router."""

import json
import os
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from ..main import app

ITEM = {
    "title": "Ask HN: how do you triage support?",
    "url": "https://news.ycombinator.com/item?id=1",
    "subreddit": "hackernews",
    "score": 42,
    "created_utc": 1_700_000_000,
    "signal_type": "request",
    "excerpt": "We use a shared inbox",
}

REPORT = {
    "opportunities": [{"title": "Support triage", "confidence": "high"}],
    "patterns": ["Shared inboxes do not scale"],
    "executive_summary": "Triage is the gap.",
}


class LlmStub:
    """httpx mock transport handler standing in for the completion API."""

    def __init__(self, status: int = 200, body=None, text: str | None = None):
        self.status = status
        self.body = body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)


def completion(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}]}


@pytest.fixture
def llm():
    return LlmStub(body=completion(json.dumps(REPORT)))


@pytest.fixture(autouse=True)
def fake_llm_client(llm):
    app.state.llm_client = httpx.AsyncClient(transport=httpx.MockTransport(llm))
    with patch.dict(os.environ, {"LLM_API_KEY": "test-key", "LLM_API_URL": "https://llm.test/v1/messages"}):
        yield
    try:
        delattr(app.state, "llm_client")
    except Exception:
        pass


@pytest.fixture
def client():
    return TestClient(app)


class TestValidation:
    def test_requires_json(self, client):
        resp = client.post("/synthesize", content="items")
        assert resp.status_code == 400

    def test_rejects_empty_items(self, client):
        resp = client.post("/synthesize", json={"items": []})
        assert resp.status_code == 400
        assert resp.json()["error"] == "items must contain at least one signal"

    def test_rejects_missing_items(self, client):
        resp = client.post("/synthesize", json={})
        assert resp.status_code == 400

    def test_rejects_malformed_item(self, client):
        resp = client.post("/synthesize", json={"items": [{"title": ""}]})
        assert resp.status_code == 400


class TestSynthesize:
    def test_success(self, client, llm):
        resp = client.post("/synthesize", json={"items": [ITEM, ITEM]})
        assert resp.status_code == 200

        synthesis = resp.json()["synthesis"]
        assert synthesis["item_count"] == 2
        assert synthesis["opportunities"] == REPORT["opportunities"]
        assert synthesis["patterns"] == REPORT["patterns"]
        assert synthesis["executive_summary"] == REPORT["executive_summary"]
        assert synthesis["generated_at"]

        [request] = llm.requests
        assert str(request.url) == "https://llm.test/v1/messages"
        assert request.headers["x-api-key"] == "test-key"
        assert "Ask HN: how do you triage support?" in json.loads(request.content)["messages"][0]["content"]

    def test_missing_credential_is_500(self, client, llm):
        with patch.dict(os.environ, {"LLM_API_KEY": "", "ANTHROPIC_API_KEY": ""}):
            resp = client.post("/synthesize", json={"items": [ITEM]})

        assert resp.status_code == 500
        assert llm.requests == []

    def test_upstream_error_is_502(self, client, llm):
        llm.status = 500
        llm.body = {"error": "overloaded"}

        resp = client.post("/synthesize", json={"items": [ITEM]})

        assert resp.status_code == 502
        details = resp.json()["details"]
        assert details["status"] == 500
        assert "overloaded" in details["body"]

    def test_unparseable_reply_is_502_with_raw(self, client, llm):
        llm.body = completion("Sorry, no JSON today.")

        resp = client.post("/synthesize", json={"items": [ITEM]})

        assert resp.status_code == 502
        assert resp.json()["details"]["raw"] == "Sorry, no JSON today."

    def test_non_json_upstream_body_is_502(self, client, llm):
        llm.text = "<html>gateway</html>"

        resp = client.post("/synthesize", json={"items": [ITEM]})

        assert resp.status_code == 502
