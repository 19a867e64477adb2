"""
logrelay runtime
================
Log-ingestion relay. Accepts structured log events on POST /api (bearer token)
and POST /ably (Ably webhook), appends them to ``log1`` and forwards
high-severity events to Telegram.
"""
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.responses import method_not_allowed
from .config import settings
from .utils.logging_utils import clear_request_context, configure_logging, set_request_context, structured_log

configure_logging(settings.log_level)
logger = logging.getLogger("logrelay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("logrelay v%s starting up...", settings.app_version)

    from .db.schema import init_db
    init_db()
    logger.info("Database ready: %s", settings.database_url)

    if not settings.da_writetoken:
        logger.warning("DA_WRITETOKEN is not set; every POST /api will be rejected")
    if not settings.ably_webhook_secret:
        logger.warning("ABLY_WEBHOOK_SECRET is not set; every POST /ably will be rejected")
    if not (settings.log_telegram_bot_token and settings.log_telegram_chat_id):
        logger.info("Telegram forwarding disabled (LOG_TELEGRAM_BOT_TOKEN / LOG_TELEGRAM_CHAT_ID unset)")

    logger.info("logrelay v%s ready.", settings.app_version)
    yield
    logger.info("logrelay shutdown complete.")


app = FastAPI(
    title="logrelay",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.middleware("http")
async def post_only_middleware(request: Request, call_next):
    if request.method != "POST":
        return method_not_allowed()
    return await call_next(request)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    start = time.monotonic()
    request.state.request_id = request_id
    tokens = set_request_context(request_id=request_id, route=request.url.path)
    try:
        response = await call_next(request)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        response.headers["x-request-id"] = request_id
        response.headers["x-elapsed-ms"] = str(elapsed_ms)
        structured_log(
            logger, logging.INFO, "http_request",
            method=request.method, path=request.url.path, status_code=response.status_code, elapsed_ms=elapsed_ms
        )
        return response
    finally:
        clear_request_context(tokens)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled request error: path=%s request_id=%s", request.url.path, getattr(request.state, "request_id", "-"))
    detail = {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "Unhandled server error",
        "request_id": getattr(request.state, "request_id", None),
    }
    if settings.is_dev_env or settings.expose_internal_error_details:
        detail["reason"] = str(exc)
    return JSONResponse(status_code=500, content={"detail": detail})


from .api.routes import router as relay_router
app.include_router(relay_router)
