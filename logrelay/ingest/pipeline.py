"""
logrelay — Ingestion Pipeline
Shared by both entry points: validate → persist → notify when severe.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..api.context import RelayContext
from ..utils.errors import MissingField
from ..utils.logging_utils import structured_log

logger = logging.getLogger("logrelay.ingest")


@dataclass(frozen=True)
class LogEvent:
    service: str
    instance: str
    level: Any
    message: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LogEvent":
        # level is checked for presence only, 0 and null are both accepted
        if (
            not payload.get("service")
            or not payload.get("instance")
            or "level" not in payload
            or not payload.get("message")
        ):
            raise MissingField()
        return cls(
            service=payload["service"],
            instance=payload["instance"],
            level=payload["level"],
            message=payload["message"],
        )


def is_severe(level: Any, threshold: int) -> bool:
    # numeric strings such as "5" compare by value
    if isinstance(level, str):
        try:
            level = float(level)
        except ValueError:
            return False
    if isinstance(level, bool) or not isinstance(level, (int, float)):
        return False
    return level >= threshold


def ack(request_id: Any) -> Dict[str, Any]:
    return {"type": "ack", "request_id": request_id}


def ingest(request_id: Any, payload: Mapping[str, Any], ctx: RelayContext) -> Dict[str, Any]:
    """
    Validate, append one row, and forward severe events.

    Raises ``MissingField`` for an incomplete payload and whatever the store
    raises on a failed insert. Notification outcome never affects the result.
    """
    event = LogEvent.from_payload(payload)

    ctx.store.append(event.service, event.instance, event.level, event.message)
    structured_log(
        logger, logging.INFO, "log_persisted",
        request_id=request_id, service=event.service, instance=event.instance, severity=event.level,
    )

    if is_severe(event.level, ctx.settings.notify_min_level):
        ctx.notifier.send_event(event)

    return ack(request_id)
