from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["ui"])

INDEX_PATH = Path(__file__).resolve().parent.parent / "static" / "index.html"


@lru_cache(maxsize=1)
def index_html() -> str:
    return INDEX_PATH.read_text(encoding="utf-8")


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    return HTMLResponse(index_html())
