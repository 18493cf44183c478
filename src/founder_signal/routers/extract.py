"""Extract router: keyword-filtered, classified signals.

POST /extract
    ``{subreddits: string[], keywords: string[], limit?: number}``.
    Runs the configured provider and returns ``{items, meta}``.  A failed
    upstream listing is reported in ``meta.error`` with HTTP 200.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field, ValidationError

from ..config import get_provider_name
from ..errors import ApiError
from ..lib.providers import get_provider, list_providers, normalize_limit
from ..models import SignalItem
from ..web import read_json

router = APIRouter(tags=["extract"])

logger = logging.getLogger(__name__)

BODY_SHAPE = "Invalid body. Expected { subreddits: string[], keywords: string[], limit?: number }"


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class ExtractRequest(BaseModel):
    """Request body for the extract endpoint."""

    subreddits: list[str] = Field(
        ..., description="Source categories; accepted but ignored by the hackernews provider"
    )
    keywords: list[str] = Field(..., description="Title keywords, matched case-insensitively")
    limit: Any = Field(None, description="Maximum items; normalized into 1..100, default 25")


class ExtractMeta(BaseModel):
    subreddits: list[str]
    keywords: list[str]
    limit: int
    provider: str
    error: str | None = None


class ExtractResponse(BaseModel):
    items: list[SignalItem]
    meta: ExtractMeta


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clean(values: list[str]) -> list[str]:
    """Trim each value and drop the empty ones."""
    return [v.strip() for v in values if v.strip()]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/extract", response_model=ExtractResponse, response_model_exclude_none=True)
async def extract(request: Request) -> ExtractResponse:
    body = await read_json(request)
    try:
        payload = ExtractRequest.model_validate(body)
    except ValidationError as exc:
        raise ApiError(
            400, BODY_SHAPE, exc.errors(include_url=False, include_context=False, include_input=False)
        ) from exc

    subreddits = _clean(payload.subreddits)
    keywords = _clean(payload.keywords)
    if not subreddits:
        raise ApiError(400, "subreddits must contain at least one non-empty string")
    if not keywords:
        raise ApiError(400, "keywords must contain at least one non-empty string")

    limit = normalize_limit(payload.limit)

    provider_name = get_provider_name()
    provider = get_provider(provider_name)
    if provider is None:
        logger.error("Unknown signal provider configured: %s", provider_name)
        raise ApiError(
            500,
            f"Unknown signal provider: {provider_name}",
            {"available": list_providers()},
        )

    fetcher = getattr(request.app.state, "content_fetcher", None)
    result = await provider.extract(fetcher, keywords, limit, subreddits=subreddits)
    if result.error:
        logger.warning("Extraction via %s degraded: %s", provider.name, result.error)

    return ExtractResponse(
        items=result.items,
        meta=ExtractMeta(
            subreddits=subreddits,
            keywords=keywords,
            limit=limit,
            provider=provider.name,
            error=result.error,
        ),
    )
