"""
logrelay — Notifier Base Interface
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SendResult:
    """Outcome of one send. Transports return this instead of raising."""

    ok: bool
    skipped: bool = False
    status_code: Optional[int] = None
    error: Optional[str] = None


class NotifierBase(ABC):
    """Base class for every outbound text channel."""

    @abstractmethod
    def send(self, text: str) -> SendResult:
        """
        Deliver ``text`` to the configured destination.
        Must never raise; failures are reported through ``SendResult``.
        """
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials and destination are both present."""
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__
