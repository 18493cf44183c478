"""Synthesize router: LLM opportunity report over extracted signals.

POST /synthesize
    ``{items: SignalItem[]}`` -> ``{synthesis: {...}}``.
"""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field, ValidationError

from ..config import get_llm_api_key, get_llm_api_url
from ..errors import ApiError
from ..lib.fetch import JsonFetcher
from ..lib.synthesis import Synthesis, SynthesisError, llm_headers, synthesize
from ..models import SignalItem
from ..web import read_json

router = APIRouter(tags=["synthesize"])

logger = logging.getLogger(__name__)


class SynthesizeRequest(BaseModel):
    items: list[SignalItem] = Field(..., description="Signals returned by /extract")


class SynthesizeResponse(BaseModel):
    synthesis: Synthesis


@router.post("/synthesize", response_model=SynthesizeResponse)
async def synthesize_signals(request: Request) -> SynthesizeResponse:
    body = await read_json(request)
    try:
        payload = SynthesizeRequest.model_validate(body)
    except ValidationError as exc:
        raise ApiError(
            400,
            "Invalid body. Expected { items: SignalItem[] }",
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc
    if not payload.items:
        raise ApiError(400, "items must contain at least one signal")

    api_key = get_llm_api_key()
    if not api_key:
        logger.error("Synthesis requested but LLM_API_KEY is not set")
        raise ApiError(500, "LLM_API_KEY is not configured")

    fetcher = JsonFetcher(request.app.state.llm_client, get_llm_api_url(), llm_headers(api_key))
    try:
        synthesis = await synthesize(fetcher, payload.items)
    except SynthesisError as exc:
        raise ApiError(502, exc.message, exc.details) from exc

    logger.info(
        "Synthesized %d signals into %d opportunities",
        synthesis.item_count,
        len(synthesis.opportunities),
    )
    return SynthesizeResponse(synthesis=synthesis)
