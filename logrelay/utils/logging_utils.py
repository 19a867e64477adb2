from __future__ import annotations

import contextvars
import json
import logging
from typing import Any

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
_route_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("route", default=None)


def set_request_context(request_id: str | None = None, route: str | None = None):
    tokens = {}
    if request_id is not None:
        tokens["request_id"] = _request_id_var.set(str(request_id))
    if route is not None:
        tokens["route"] = _route_var.set(str(route))
    return tokens


def clear_request_context(tokens: dict[str, Any]) -> None:
    if not tokens:
        return
    if "request_id" in tokens:
        _request_id_var.reset(tokens["request_id"])
    if "route" in tokens:
        _route_var.reset(tokens["route"])


def get_request_context() -> dict[str, str | None]:
    return {
        "request_id": _request_id_var.get(),
        "route": _route_var.get(),
    }


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()
        record.request_id = ctx.get("request_id") or "-"
        record.route = ctx.get("route") or "-"
        return True


def configure_logging(level_name: str = "INFO") -> None:
    root = logging.getLogger()
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s [request_id=%(request_id)s route=%(route)s] %(message)s",
        )
    root.setLevel(level)
    for handler in root.handlers:
        exists = any(isinstance(f, RequestContextFilter) for f in handler.filters)
        if not exists:
            handler.addFilter(RequestContextFilter())


def structured_log(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str))
