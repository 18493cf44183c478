"""Opportunity synthesis over a batch of signals.

Sends the signals to an LLM completion endpoint, asks for a JSON report
and parses it.  The completion API is reached through the same
:class:`JsonFetcher` used for the content source.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Sequence

from pydantic import BaseModel, Field

from ..config import LLM_API_VERSION, get_llm_max_tokens, get_llm_model
from ..models import SignalItem
from .fetch import FetchError, JsonFetcher

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a startup analyst. You read raw discussion signals from founders and "
    "developers and identify concrete, fundable business opportunities. "
    "You answer with JSON only."
)

FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class SynthesisError(Exception):
    """The completion call failed or its reply could not be parsed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class Synthesis(BaseModel):
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    item_count: int = Field(..., description="Number of signals sent to the model")
    opportunities: list[Any] = Field(default_factory=list)
    patterns: list[Any] = Field(default_factory=list)
    executive_summary: str = ""


def llm_headers(api_key: str) -> dict[str, str]:
    return {
        "x-api-key": api_key,
        "anthropic-version": LLM_API_VERSION,
        "content-type": "application/json",
    }


def build_prompt(items: Sequence[SignalItem]) -> str:
    lines = []
    for idx, item in enumerate(items, start=1):
        lines.append(
            f"[{idx}] ({item.signal_type}) {item.title}\n"
            f"    score: {item.score} | source: {item.subreddit} | url: {item.url}\n"
            f"    excerpt: {item.excerpt}"
        )
    signals = "\n".join(lines)
    return f"""Here are {len(items)} signals pulled from online discussions:

{signals}

Rank the strongest business opportunities these signals point to and the
recurring patterns behind them.

Return JSON only, in exactly this shape:
{{
  "opportunities": [
    {{
      "title": "short name",
      "problem": "the pain being described",
      "evidence": [1, 2],
      "target_customer": "who has the problem",
      "solution_idea": "what to build",
      "confidence": "high|medium|low"
    }}
  ],
  "patterns": ["recurring theme across signals"],
  "executive_summary": "2-3 sentence summary"
}}"""


def completion_text(response: Any) -> str:
    """Concatenate the text blocks of a completion response."""
    if not isinstance(response, dict):
        return ""
    blocks = response.get("content") or []
    return "".join(
        b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type", "text") == "text"
    )


def parse_report(text: str) -> dict:
    """Pull the JSON object out of a model reply.

    Accepts a bare object, a fenced ```json block, or an object surrounded
    by prose.  Raises ``ValueError`` if nothing parses to a JSON object.
    """
    candidate = text.strip()
    fenced = FENCE_RE.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    start, end = candidate.find("{"), candidate.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("no JSON object in model reply")

    report = json.loads(candidate[start:end + 1])
    if not isinstance(report, dict):
        raise ValueError("model reply is not a JSON object")
    return report


async def synthesize(
    fetcher: JsonFetcher,
    items: Sequence[SignalItem],
    now: datetime | None = None,
) -> Synthesis:
    """Ask the completion API for an opportunity report over *items*.

    Raises :class:`SynthesisError` on upstream failure or an unparseable
    reply.  The call is attempted once.
    """
    payload = {
        "model": get_llm_model(),
        "max_tokens": get_llm_max_tokens(),
        "system": SYSTEM_PROMPT,
        "messages": [{"role": "user", "content": build_prompt(items)}],
    }

    try:
        response = await fetcher.post_json("", payload)
    except FetchError as exc:
        logger.exception("Synthesis request failed")
        raise SynthesisError(
            "Synthesis API request failed",
            {"status": exc.status_code, "body": exc.body, "reason": str(exc)},
        ) from exc

    text = completion_text(response)
    try:
        report = parse_report(text)
    except ValueError as exc:
        logger.error("Could not parse synthesis reply: %s", exc)
        raise SynthesisError("Synthesis API returned an unparseable reply", {"raw": text}) from exc

    now = now or datetime.now(timezone.utc)
    summary = report.get("executive_summary")
    return Synthesis(
        generated_at=now.isoformat(),
        item_count=len(items),
        opportunities=_as_list(report.get("opportunities")),
        patterns=_as_list(report.get("patterns")),
        executive_summary=summary if isinstance(summary, str) else "",
    )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
