from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..db.log_store import LogSink
from ..notifications import NotificationSender


@dataclass(frozen=True)
class RelayContext:
    """Per-request collaborators handed from the router down to the pipeline."""

    settings: Any
    store: LogSink
    notifier: NotificationSender
