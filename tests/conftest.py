from __future__ import annotations

import os

os.environ.setdefault("DB_TYPE", "sqlite_memory")
os.environ.setdefault("APP_ENV", "test")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from logrelay.api.context import RelayContext
from logrelay.api.routes import get_relay_context
from logrelay.config import settings
from logrelay.main import app
from logrelay.notifications import NotificationSender
from logrelay.notifications.base import NotifierBase, SendResult

WRITE_TOKEN = "tok-test"
ABLY_SECRET = "ably-test"


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture(autouse=True)
def restore_settings():
    tracked = {
        'app_env': settings.app_env,
        'expose_internal_error_details': settings.expose_internal_error_details,
        'da_writetoken': settings.da_writetoken,
        'ably_webhook_secret': settings.ably_webhook_secret,
        'log_telegram_bot_token': settings.log_telegram_bot_token,
        'log_telegram_chat_id': settings.log_telegram_chat_id,
        'notify_min_level': settings.notify_min_level,
    }
    settings.da_writetoken = WRITE_TOKEN
    settings.ably_webhook_secret = ABLY_SECRET
    settings.log_telegram_bot_token = ''
    settings.log_telegram_chat_id = ''
    yield settings
    for key, value in tracked.items():
        setattr(settings, key, value)


class FakeStore:
    def __init__(self):
        self.rows: list[tuple] = []
        self.fail_with: Exception | None = None

    def append(self, service, instance, level, message):
        if self.fail_with is not None:
            raise self.fail_with
        self.rows.append((service, instance, level, message))


class FakeNotifier(NotifierBase):
    def __init__(self):
        self.sent: list[str] = []
        self.result = SendResult(ok=True, status_code=200)
        self.raise_with: Exception | None = None

    def is_configured(self) -> bool:
        return True

    def send(self, text: str) -> SendResult:
        self.sent.append(text)
        if self.raise_with is not None:
            raise self.raise_with
        return self.result


@pytest.fixture
def relay():
    store = FakeStore()
    notifier = FakeNotifier()
    ctx = RelayContext(settings=settings, store=store, notifier=NotificationSender(notifier))
    app.dependency_overrides[get_relay_context] = lambda: ctx
    yield SimpleNamespace(store=store, notifier=notifier, ctx=ctx)
    app.dependency_overrides.pop(get_relay_context, None)


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {'Authorization': f'Bearer {WRITE_TOKEN}'}


@pytest.fixture
def ably_headers() -> dict[str, str]:
    return {'X-Ably-Auth': ABLY_SECRET}


@pytest.fixture
def sample_payload() -> dict:
    return {'service': 'billing', 'instance': 'billing-1', 'level': 1, 'message': 'invoice created'}
