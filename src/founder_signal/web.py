"""Response envelope and request-body helpers shared by the routers."""

import json
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from .errors import ApiError

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET,POST,OPTIONS",
    "access-control-allow-headers": "content-type",
}


class PrettyJSONResponse(JSONResponse):
    """JSON response rendered with two-space indentation."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


async def read_json(request: Request) -> Any:
    """Parse the request body as JSON, raising a 400 :class:`ApiError` otherwise."""
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        raise ApiError(400, "Content-Type must be application/json")
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ApiError(400, "Request body is not valid JSON") from exc
