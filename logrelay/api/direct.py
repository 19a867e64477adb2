"""
logrelay — Direct API handler (POST /api)

Every check short-circuits into a nack with HTTP 400, auth failures included.
"""
from __future__ import annotations

import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Response

from ..ingest.pipeline import ingest
from ..utils.errors import (
    MissingField,
    RelayError,
    invalid_field,
    invalid_json,
    invalid_token,
    unauthorized,
)
from ..utils.logging_utils import structured_log
from .context import RelayContext
from .responses import ack_response, nack_response

logger = logging.getLogger("logrelay.api.direct")

UNKNOWN_REQUEST_ID = "unknown"


def secrets_match(presented: str, expected: str) -> bool:
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def authenticate(authorization: Optional[str], write_token: str) -> None:
    if not authorization or not authorization.startswith("Bearer "):
        raise unauthorized()
    token = authorization.split(" ")[1]
    if not secrets_match(token, write_token):
        raise invalid_token()


@dataclass(frozen=True)
class RequestEnvelope:
    request_id: Any
    payload: Any

    @classmethod
    def parse(cls, raw: bytes) -> "RequestEnvelope":
        try:
            body = json.loads(raw)
        except (RecursionError, ValueError):
            raise invalid_json() from None
        if not isinstance(body, dict):
            return cls(UNKNOWN_REQUEST_ID, None)
        return cls(body.get("request_id") or UNKNOWN_REQUEST_ID, body.get("payload"))

    def require_message(self) -> None:
        if not isinstance(self.payload, dict) or not self.payload.get("message"):
            raise invalid_field()


def _reject(request_id: Any, exc: RelayError) -> Response:
    structured_log(logger, logging.WARNING, "nack", request_id=request_id, code=exc.code, reason=exc.message)
    return nack_response(request_id, exc.code, exc.message)


def handle_direct_api(authorization: Optional[str], raw_body: bytes, ctx: RelayContext) -> Response:
    request_id: Any = UNKNOWN_REQUEST_ID
    try:
        authenticate(authorization, ctx.settings.da_writetoken)
        envelope = RequestEnvelope.parse(raw_body)
        request_id = envelope.request_id
        envelope.require_message()
    except RelayError as exc:
        return _reject(request_id, exc)

    try:
        result = ingest(request_id, envelope.payload, ctx)
    except MissingField as exc:
        return _reject(request_id, exc)
    except Exception as exc:
        ctx.notifier.report_error(f"ingest failed: {exc}")
        structured_log(logger, logging.WARNING, "nack", request_id=request_id, code="DB_ERROR", reason=str(exc))
        return nack_response(request_id, "DB_ERROR", str(exc))

    return ack_response(result)
