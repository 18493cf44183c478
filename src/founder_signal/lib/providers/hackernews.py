"""Hacker News signal provider.

Pipeline for one extraction call:

1. Fetch the ``topstories`` listing.  Failure here is the only path that
   produces an error string; the item list is then empty.
2. Fetch details for the first ``CANDIDATE_FANOUT`` stories concurrently.
   Any story that fails to load is dropped.
3. Keep stories whose title contains at least one keyword.
4. Truncate to the caller's limit, keeping listing order.
5. Resolve an excerpt for each kept story from its first replies, all
   stories concurrently.
6. Classify each title and assemble :class:`SignalItem` objects.
"""

import asyncio
import logging
from typing import Sequence

from pydantic import ValidationError

from ...config import get_hn_item_base
from ...models import ContentItem, ExtractionResult, SignalItem
from ..classifier import classify_signal
from ..comments import DEFAULT_COMMENT_CAP, aggregate_excerpt
from ..fetch import FetchError, JsonFetcher
from .base import DEFAULT_LIMIT, SignalProvider

logger = logging.getLogger(__name__)

PROVIDER_NAME = "hackernews"

TOP_STORIES_PATH = "topstories.json"

# Upper bound on story details fetched per call, independent of ``limit``.
CANDIDATE_FANOUT = 100


async def fetch_candidate_ids(fetcher: JsonFetcher) -> list[int]:
    """Return the story ids of the top-stories listing, in listing order.

    Raises :class:`FetchError` when the listing cannot be loaded.
    """
    data = await fetcher.get_json(TOP_STORIES_PATH)
    if not isinstance(data, list):
        raise FetchError(fetcher.url_for(TOP_STORIES_PATH), "top stories payload is not a list")
    return [i for i in data if isinstance(i, int) and not isinstance(i, bool)]


async def fetch_item(fetcher: JsonFetcher, item_id: int) -> ContentItem | None:
    """Fetch one story, returning ``None`` if it is missing or malformed."""
    try:
        data = await fetcher.get_json(f"item/{item_id}.json")
        if data is None:
            return None
        return ContentItem.model_validate(data)
    except (FetchError, ValidationError) as exc:
        logger.debug("Skipping item %s: %s", item_id, exc)
        return None


async def fetch_items(fetcher: JsonFetcher, item_ids: Sequence[int]) -> list[ContentItem]:
    """Fetch story details concurrently, dropping failures, keeping id order."""
    results = await asyncio.gather(*(fetch_item(fetcher, i) for i in item_ids))
    return [item for item in results if item is not None]


def matches_keywords(title: str | None, keywords: Sequence[str]) -> bool:
    if not title:
        return False
    t = title.casefold()
    return any(k.casefold() in t for k in keywords if k)


async def resolve_excerpt(fetcher: JsonFetcher, item: ContentItem) -> str:
    """Excerpt from the story's first replies, or ``"<n> comments"``."""
    reply_count = item.descendants or 0
    excerpt = f"{reply_count} comments"
    if reply_count > 0 and item.kids:
        comments = await aggregate_excerpt(fetcher, item.kids, cap=DEFAULT_COMMENT_CAP)
        if comments:
            excerpt = comments
    return excerpt


def to_signal_item(item: ContentItem, excerpt: str, item_base: str) -> SignalItem:
    return SignalItem(
        title=item.title,
        url=item.url or f"{item_base}/item?id={item.id}",
        subreddit=PROVIDER_NAME,
        score=item.score or 0,
        created_utc=item.time or 0,
        signal_type=classify_signal(item.title),
        excerpt=excerpt,
    )


async def extract_hn_signals(
    fetcher: JsonFetcher,
    keywords: Sequence[str],
    limit: int = DEFAULT_LIMIT,
    item_base: str | None = None,
) -> ExtractionResult:
    """Run the full extraction pipeline against the Hacker News API."""
    item_base = item_base or get_hn_item_base()

    try:
        candidate_ids = await fetch_candidate_ids(fetcher)
    except FetchError as exc:
        logger.exception("Failed to fetch Hacker News top stories")
        return ExtractionResult(items=[], error=f"Failed to fetch top stories: {exc}")

    stories = await fetch_items(fetcher, candidate_ids[:CANDIDATE_FANOUT])
    matched = [s for s in stories if matches_keywords(s.title, keywords)][:limit]

    excerpts = await asyncio.gather(*(resolve_excerpt(fetcher, s) for s in matched))
    items = [to_signal_item(s, e, item_base) for s, e in zip(matched, excerpts)]

    logger.info(
        "Hacker News extraction: %d candidates, %d loaded, %d returned",
        len(candidate_ids),
        len(stories),
        len(items),
    )
    return ExtractionResult(items=items)


class HackerNewsProvider(SignalProvider):
    """Keyword-filtered top stories from Hacker News.

    ``subreddits`` is accepted for interface consistency but is not used;
    every item is labelled ``hackernews``.
    """

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
        return await extract_hn_signals(fetcher, keywords, limit)
