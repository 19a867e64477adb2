"""
logrelay — Routes
POST /api   direct authenticated ingest
POST /ably  Ably webhook batches
Any other POST path is a plain-text 404; non-POST never reaches here.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool

from ..config import settings
from ..db.log_store import sql_log_store
from ..notifications import build_sender
from .context import RelayContext
from .direct import handle_direct_api
from .responses import not_found
from .webhook import handle_webhook

router = APIRouter()


def get_relay_context() -> RelayContext:
    """Build the collaborators for one request from the current settings."""
    return RelayContext(settings=settings, store=sql_log_store, notifier=build_sender(settings))


@router.post("/api", include_in_schema=False)
async def direct_api(request: Request, ctx: RelayContext = Depends(get_relay_context)) -> Response:
    raw = await request.body()
    return await run_in_threadpool(handle_direct_api, request.headers.get("authorization"), raw, ctx)


@router.post("/ably", include_in_schema=False)
async def ably_webhook(request: Request, ctx: RelayContext = Depends(get_relay_context)) -> Response:
    raw = await request.body()
    return await run_in_threadpool(handle_webhook, request.headers.get("x-ably-auth"), raw, ctx)


@router.post("/{path:path}", include_in_schema=False)
async def unknown_path(path: str) -> Response:
    return not_found()
