"""Tests for opportunity synthesis."""

import json
from datetime import datetime, timezone

import pytest

from ..models import SignalItem
from .fetch import FetchError
from .synthesis import (
    SynthesisError,
    build_prompt,
    completion_text,
    llm_headers,
    parse_report,
    synthesize,
)

NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

REPORT = {
    "opportunities": [
        {
            "title": "Support triage for tiny SaaS",
            "problem": "Support eats the roadmap",
            "evidence": [1],
            "target_customer": "2-person SaaS teams",
            "solution_idea": "Inbox that tags and ranks tickets",
            "confidence": "medium",
        }
    ],
    "patterns": ["Founders glue tools together by hand"],
    "executive_summary": "Small teams need lightweight triage.",
}


class FakeLlm:
    """Records posted payloads and replies with a canned response or error."""

    def __init__(self, response=None, error: Exception | None = None):
        self._response = response
        self._error = error
        self.posts: list[tuple[str, dict]] = []

    async def post_json(self, path, payload):
        self.posts.append((path, payload))
        if self._error is not None:
            raise self._error
        return self._response


def reply(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}], "stop_reason": "end_turn"}


@pytest.fixture
def items():
    return [
        SignalItem(
            title="Ask HN: how do you triage support?",
            url="https://news.ycombinator.com/item?id=1",
            subreddit="hackernews",
            score=42,
            created_utc=1_700_000_000,
            signal_type="request",
            excerpt="We use a shared inbox | It does not scale",
        ),
        SignalItem(
            title="I built a script for invoices",
            url="https://example.com/invoices",
            subreddit="hackernews",
            signal_type="workaround",
        ),
    ]


class TestParseReport:
    def test_bare_object(self):
        assert parse_report(json.dumps(REPORT)) == REPORT

    def test_fenced_block(self):
        text = "Here you go:\n```json\n" + json.dumps(REPORT) + "\n```\nThanks"
        assert parse_report(text) == REPORT

    def test_object_inside_prose(self):
        assert parse_report("Sure! " + json.dumps(REPORT) + " Hope that helps.") == REPORT

    @pytest.mark.parametrize("text", ["", "no json here", "{not json}", "[1, 2]"])
    def test_unparseable_raises(self, text):
        with pytest.raises(ValueError):
            parse_report(text)


class TestCompletionText:
    def test_joins_text_blocks(self):
        response = {"content": [{"type": "text", "text": "a"}, {"type": "tool_use"}, {"type": "text", "text": "b"}]}
        assert completion_text(response) == "ab"

    def test_unexpected_shapes(self):
        assert completion_text(None) == ""
        assert completion_text({"content": None}) == ""
        assert completion_text(["x"]) == ""


def test_prompt_lists_every_item(items):
    prompt = build_prompt(items)
    assert "[1] (request) Ask HN: how do you triage support?" in prompt
    assert "[2] (workaround) I built a script for invoices" in prompt
    assert "https://example.com/invoices" in prompt
    assert '"executive_summary"' in prompt


def test_llm_headers():
    headers = llm_headers("secret")
    assert headers["x-api-key"] == "secret"
    assert "anthropic-version" in headers


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_success(self, items, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "test-model")
        llm = FakeLlm(reply(json.dumps(REPORT)))

        synthesis = await synthesize(llm, items, now=NOW)

        assert synthesis.generated_at == "2026-01-02T03:04:05+00:00"
        assert synthesis.item_count == 2
        assert synthesis.opportunities == REPORT["opportunities"]
        assert synthesis.patterns == REPORT["patterns"]
        assert synthesis.executive_summary == REPORT["executive_summary"]

        [(path, payload)] = llm.posts
        assert path == ""
        assert payload["model"] == "test-model"
        assert payload["messages"][0]["role"] == "user"
        assert "Ask HN: how do you triage support?" in payload["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_missing_sections_default(self, items):
        llm = FakeLlm(reply('{"opportunities": "not a list"}'))
        synthesis = await synthesize(llm, items, now=NOW)

        assert synthesis.opportunities == []
        assert synthesis.patterns == []
        assert synthesis.executive_summary == ""

    @pytest.mark.asyncio
    async def test_upstream_failure(self, items):
        llm = FakeLlm(error=FetchError("https://llm.test", "upstream returned HTTP 529", 529, "overloaded"))

        with pytest.raises(SynthesisError) as info:
            await synthesize(llm, items, now=NOW)

        assert info.value.details["status"] == 529
        assert info.value.details["body"] == "overloaded"

    @pytest.mark.asyncio
    async def test_unparseable_reply_carries_raw_text(self, items):
        llm = FakeLlm(reply("I cannot help with that."))

        with pytest.raises(SynthesisError) as info:
            await synthesize(llm, items, now=NOW)

        assert info.value.details == {"raw": "I cannot help with that."}
