import time

from fastapi import APIRouter
from pydantic import BaseModel

from ..config import SERVICE_NAME

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    ok: bool
    name: str
    ts: int


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck():
    return {"ok": True, "name": SERVICE_NAME, "ts": int(time.time() * 1000)}
