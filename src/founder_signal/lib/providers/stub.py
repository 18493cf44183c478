"""Deterministic offline provider.

Returns canned signals without touching the network, which is handy for
working on the UI or the synthesis step.  The requested subreddits and
keywords are woven into the titles so callers can see their input echoed.
"""

import time
from typing import Sequence

from ...models import ExtractionResult, SignalItem
from ..classifier import classify_signal
from .base import DEFAULT_LIMIT, SignalProvider

PROVIDER_NAME = "stub"

HOUR = 60 * 60

# (title template, url, fallback category, score, age in hours, excerpt)
_CANNED = [
    (
        "I'm drowning in customer support, need a lightweight triage workflow ({seed})",
        "https://example.com/reddit/mock/1",
        "startups",
        137,
        6,
        "We're a 2-person SaaS and support is consuming the roadmap. I need a simple way "
        "to tag and prioritize without building a full system.",
    ),
    (
        "Workaround: I pipe feedback into a spreadsheet + weekly clustering ({seed})",
        "https://example.com/reddit/mock/2",
        "Entrepreneur",
        88,
        18,
        "I copy/paste notable complaints into a sheet, then every Friday I group them into "
        "themes. It's ugly but it keeps me shipping.",
    ),
    (
        "Request: tool that summarizes founder pain points by niche ({seed})",
        "https://example.com/reddit/mock/3",
        "SaaS",
        54,
        30,
        "Is there anything that reads the forums so I don't have to? I want the top "
        "recurring problems and what people tried.",
    ),
]


def stub_signals(
    subreddits: Sequence[str],
    keywords: Sequence[str],
    limit: int,
    now: int | None = None,
) -> list[SignalItem]:
    """Return *limit* canned items, cycling over the three templates."""
    now = int(time.time()) if now is None else now
    seed = f"{','.join(subreddits)} | {','.join(keywords)}"

    base: list[SignalItem] = []
    for idx, (title, url, fallback, score, age_hours, excerpt) in enumerate(_CANNED):
        title = title.format(seed=seed)
        if idx < len(subreddits):
            category = subreddits[idx]
        elif subreddits:
            category = subreddits[0]
        else:
            category = fallback
        base.append(
            SignalItem(
                title=title,
                url=url,
                subreddit=category,
                score=score,
                created_utc=now - age_hours * HOUR,
                signal_type=classify_signal(f"{title} {excerpt}"),
                excerpt=excerpt,
            )
        )

    return [base[i % len(base)] for i in range(limit)]


class StubProvider(SignalProvider):
    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def extract(
        self,
        fetcher,
        keywords: Sequence[str],
        limit: int = DEFAULT_LIMIT,
        subreddits: Sequence[str] | None = None,
    ) -> ExtractionResult:
        return ExtractionResult(items=stub_signals(subreddits or [], keywords, limit))
