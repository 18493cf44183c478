"""Comment excerpt aggregation.

Fetches the first few replies of a story concurrently, drops the ones
that cannot be used and joins the rest into one bounded excerpt.
"""

import asyncio
import logging
from typing import Sequence

from pydantic import ValidationError

from ..models import CommentRecord
from .fetch import FetchError, JsonFetcher
from .sanitize import sanitize_html

logger = logging.getLogger(__name__)

# Replies fetched per story, regardless of how many it has.
DEFAULT_COMMENT_CAP = 3

EXCERPT_MAX_CHARS = 200
ELLIPSIS = "..."
SEPARATOR = " | "


def truncate_excerpt(text: str, max_chars: int = EXCERPT_MAX_CHARS) -> str:
    """Clip *text* to *max_chars* code points, ending in ``...`` when clipped."""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - len(ELLIPSIS)] + ELLIPSIS


async def fetch_comment(fetcher: JsonFetcher, comment_id: int) -> CommentRecord | None:
    """Fetch one reply, returning ``None`` when it is unavailable or unusable."""
    try:
        data = await fetcher.get_json(f"item/{comment_id}.json")
        if data is None:
            return None
        comment = CommentRecord.model_validate(data)
    except (FetchError, ValidationError) as exc:
        logger.debug("Skipping comment %s: %s", comment_id, exc)
        return None
    return comment if comment.usable else None


async def aggregate_excerpt(
    fetcher: JsonFetcher,
    child_ids: Sequence[int],
    cap: int = DEFAULT_COMMENT_CAP,
) -> str:
    """Build an excerpt from the first *cap* replies in *child_ids*.

    Replies are fetched concurrently but joined in the order they were
    requested.  Failed, deleted, dead and empty replies are skipped; if
    none remain the result is ``""``.  Never raises for upstream failures.
    """
    if not child_ids:
        return ""

    comments = await asyncio.gather(
        *(fetch_comment(fetcher, cid) for cid in list(child_ids)[:cap])
    )
    texts = [sanitize_html(c.text) for c in comments if c is not None]
    joined = SEPARATOR.join(t for t in texts if t)
    return truncate_excerpt(joined)
