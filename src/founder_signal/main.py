import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_fetch_timeout, get_hn_api_base, get_host, get_log_level, get_port
from .errors import ApiError
from .lib.fetch import JsonFetcher
from .routers import extract, health, synthesize, ui
from .web import CORS_HEADERS, PrettyJSONResponse

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

ROUTES = {
    "GET /": "web UI",
    "GET /health": "liveness check",
    "POST /extract": "keyword-filtered, classified Hacker News signals",
    "POST /synthesize": "LLM opportunity synthesis over extracted signals",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One client per upstream; tests preset app.state instead.
    timeout = get_fetch_timeout()
    async with httpx.AsyncClient(timeout=timeout) as content_client, \
            httpx.AsyncClient(timeout=timeout) as llm_client:
        app.state.content_fetcher = JsonFetcher(content_client, get_hn_api_base())
        app.state.llm_client = llm_client
        yield


app = FastAPI(
    title="Founder Signal",
    description="Extracts and classifies founder signals from Hacker News and synthesizes opportunities",
    version="0.1.0",
    default_response_class=PrettyJSONResponse,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(ui.router)
app.include_router(extract.router)
app.include_router(synthesize.router)


@app.middleware("http")
async def cors_envelope(request: Request, call_next):
    """Answer preflight requests and stamp CORS headers on every response."""
    if request.method == "OPTIONS":
        response = PrettyJSONResponse({"ok": True})
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return PrettyJSONResponse(exc.to_body(), status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and known paths with the wrong method both read as 404.
    if exc.status_code in (404, 405):
        return PrettyJSONResponse({"error": "Not Found", "routes": ROUTES}, status_code=404)
    return PrettyJSONResponse({"error": exc.detail}, status_code=exc.status_code)


def run() -> None:
    uvicorn.run("founder_signal.main:app", host=get_host(), port=get_port())
