from __future__ import annotations

import json
from typing import Any

from fastapi.responses import JSONResponse, PlainTextResponse


class IndentedJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def envelope_response(content: dict, status_code: int = 200) -> IndentedJSONResponse:
    return IndentedJSONResponse(content, status_code=status_code)


def ack_response(content: dict) -> IndentedJSONResponse:
    return envelope_response(content, 200)


def nack(request_id: Any, code: str, message: str) -> dict:
    return {
        "type": "nack",
        "request_id": request_id,
        "payload": {"status": "error", "code": code, "message": message},
    }


def nack_response(request_id: Any, code: str, message: str) -> IndentedJSONResponse:
    return envelope_response(nack(request_id, code, message), 400)


def text_response(body: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(body, status_code=status_code)


def method_not_allowed() -> PlainTextResponse:
    return text_response("Method Not Allowed", 405)


def not_found() -> PlainTextResponse:
    return text_response("Not Found", 404)
