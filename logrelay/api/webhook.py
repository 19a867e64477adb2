"""
logrelay — Ably webhook handler (POST /ably)

Ably delivers batches shaped like::

    {"items": [{"data": "{\"payload\": {...}}"}, ...]}

(older integrations send ``messages`` instead of ``items``). Each message is
fed through the pipeline on its own; one bad message never fails the batch,
and the webhook sender only ever sees a flat 200/4xx/5xx.
"""
from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import Response

from ..ingest.pipeline import ingest
from ..utils.errors import MissingField
from ..utils.logging_utils import structured_log
from .context import RelayContext
from .direct import secrets_match
from .responses import text_response

logger = logging.getLogger("logrelay.api.webhook")

# Request id for webhook-originated events, spelled as written to existing logs.
WEBHOOK_REQUEST_ID = "unknow"


def is_truthy(value: Any) -> bool:
    """Only None, False, 0 and "" are falsy; empty containers count as present."""
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


class MessageOutcome(str, Enum):
    PERSISTED = "persisted"
    SKIPPED_NO_DATA = "skipped_no_data"
    SKIPPED_BAD_PAYLOAD = "skipped_bad_payload"
    FAILED_PARSE = "failed_parse"
    REJECTED_FIELDS = "rejected_fields"
    FAILED_PERSIST = "failed_persist"


@dataclass
class BatchReport:
    outcomes: List[MessageOutcome] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return dict(Counter(o.value for o in self.outcomes))

    @property
    def persisted(self) -> int:
        return sum(1 for o in self.outcomes if o is MessageOutcome.PERSISTED)


def select_messages(body: Any) -> Optional[list]:
    """Return the batch array, preferring ``items`` over ``messages``."""
    if not isinstance(body, dict):
        return None
    messages = body.get("items")
    if not is_truthy(messages):
        messages = body.get("messages")
    if not isinstance(messages, list):
        return None
    return messages


def process_message(msg: Any, ctx: RelayContext) -> MessageOutcome:
    data = msg.get("data") if isinstance(msg, dict) else None
    if not is_truthy(data):
        return MessageOutcome.SKIPPED_NO_DATA

    try:
        if not isinstance(data, str):
            raise TypeError(f"expected a JSON string, got {type(data).__name__}")
        decoded = json.loads(data)
    except (RecursionError, TypeError, ValueError) as exc:
        ctx.notifier.report_error(f"❌ Could not parse message.data JSON: {exc}")
        return MessageOutcome.FAILED_PARSE

    payload = decoded.get("payload") if isinstance(decoded, dict) else None
    if not isinstance(payload, dict):
        return MessageOutcome.SKIPPED_BAD_PAYLOAD

    try:
        ingest(WEBHOOK_REQUEST_ID, payload, ctx)
    except Exception as exc:
        ctx.notifier.report_error(f"💥 ingest failed: {exc}")
        ctx.notifier.report_error(f"Ably webhook failed: {exc}")
        if isinstance(exc, MissingField):
            return MessageOutcome.REJECTED_FIELDS
        return MessageOutcome.FAILED_PERSIST
    return MessageOutcome.PERSISTED


def process_batch(messages: list, ctx: RelayContext) -> BatchReport:
    report = BatchReport()
    for msg in messages:
        report.outcomes.append(process_message(msg, ctx))
    return report


def handle_webhook(secret_header: Optional[str], raw_body: bytes, ctx: RelayContext) -> Response:
    try:
        if not secrets_match(secret_header or "", ctx.settings.ably_webhook_secret):
            structured_log(logger, logging.WARNING, "webhook_auth_failed", header_present=bool(secret_header))
            return text_response("Unauthorized", 401)

        try:
            body = json.loads(raw_body)
        except (RecursionError, ValueError) as exc:
            ctx.notifier.report_error(f"❌ JSON parse error:{exc}")
            return text_response("Invalid JSON", 400)

        messages = select_messages(body)
        if messages is None:
            ctx.notifier.report_error("❌ No messages in webhook payload")
            return text_response("Invalid webhook format", 400)

        report = process_batch(messages, ctx)
        structured_log(
            logger, logging.INFO, "webhook_batch",
            received=len(messages), persisted=report.persisted, outcomes=report.counts(),
        )
        return text_response("OK", 200)

    except Exception as exc:
        ctx.notifier.report_error(f"Webhook error: {exc}")
        return text_response("Internal Server Error", 500)
