"""
logrelay — Notification Sender
==============================
Two entry points on top of a text transport (Telegram by default):

  send_event(event)   high-severity log event, multi-line template
  send_error(text)    operator error report, prefixed with the error marker

Neither raises. Transport failures come back as ``SendResult`` and are logged;
they never change whether an event counts as persisted.
"""
from __future__ import annotations

import logging
from typing import Any

from .base import NotifierBase, SendResult
from .telegram import TelegramNotifier

logger = logging.getLogger(__name__)

ERROR_PREFIX = "❌ *Error*\n"


def format_event(event: Any) -> str:
    return f"{event.message}\n\n🧩 {event.service}/{event.instance}\n🔢 Level: {event.level}"


def format_error(text: str) -> str:
    return f"{ERROR_PREFIX}{text}"


class NotificationSender:
    def __init__(self, notifier: NotifierBase):
        self.notifier = notifier

    def _deliver(self, text: str, kind: str) -> SendResult:
        try:
            result = self.notifier.send(text)
        except Exception as exc:
            # transport raised instead of returning a SendResult
            logger.error("%s notification via %s raised: %s", kind, self.notifier.name, exc)
            return SendResult(ok=False, error=str(exc))
        if not result.ok and not result.skipped:
            logger.warning("%s notification via %s failed: %s", kind, self.notifier.name, result.error)
        return result

    def send_event(self, event: Any) -> SendResult:
        return self._deliver(format_event(event), "event")

    def send_error(self, text: str) -> SendResult:
        return self._deliver(format_error(text), "error")

    def report_error(self, text: str) -> SendResult:
        """Log ``text`` as an error and forward it to the operator channel."""
        logger.error(text)
        return self.send_error(text)


def build_sender(settings: Any) -> NotificationSender:
    return NotificationSender(
        TelegramNotifier(
            settings.log_telegram_bot_token,
            settings.log_telegram_chat_id,
            api_base=settings.telegram_api_base,
            timeout=settings.telegram_timeout_s,
        )
    )


__all__ = [
    "ERROR_PREFIX",
    "NotificationSender",
    "NotifierBase",
    "SendResult",
    "TelegramNotifier",
    "build_sender",
    "format_error",
    "format_event",
]
