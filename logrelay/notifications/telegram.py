"""
logrelay — Telegram Bot Notifier
=================================
Credentials:
  bot_token   Telegram Bot API token   (LOG_TELEGRAM_BOT_TOKEN)
  chat_id     destination chat / group / channel id  (LOG_TELEGRAM_CHAT_ID)

Messages are sent as Markdown text. An unconfigured notifier is a no-op.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from .base import NotifierBase, SendResult

logger = logging.getLogger(__name__)

_DEFAULT_API_BASE = "https://api.telegram.org"
_TIMEOUT = 8.0


class TelegramNotifier(NotifierBase):
    """Sends text through the Telegram Bot API ``sendMessage`` method."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        *,
        api_base: str = _DEFAULT_API_BASE,
        timeout: float = _TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = client

    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    @property
    def url(self) -> str:
        return f"{self.api_base}/bot{self.bot_token}/sendMessage"

    def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, json=payload, timeout=self.timeout)
        return httpx.post(self.url, json=payload, timeout=self.timeout)

    def send(self, text: str) -> SendResult:
        if not self.is_configured():
            logger.debug("[TelegramNotifier] Not configured, skipping")
            return SendResult(ok=False, skipped=True)

        payload = {
            "chat_id":    self.chat_id,
            "text":       text,
            "parse_mode": "Markdown",
        }

        try:
            resp = self._post(payload)
        except httpx.TimeoutException:
            logger.warning("[TelegramNotifier] Request timed out")
            return SendResult(ok=False, error="timeout")
        except Exception as exc:
            logger.error(f"[TelegramNotifier] Send failed: {exc}")
            return SendResult(ok=False, error=str(exc))

        if resp.is_success:
            logger.info("[TelegramNotifier] Message sent")
            return SendResult(ok=True, status_code=resp.status_code)
        logger.warning(
            f"[TelegramNotifier] API returned {resp.status_code}: {resp.text[:200]}"
        )
        return SendResult(ok=False, status_code=resp.status_code, error=resp.text[:200])
