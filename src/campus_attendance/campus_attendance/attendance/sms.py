from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    def send(self, to: str, message: str) -> None:
        raise NotImplementedError


class LoggingSmsSender(SmsSender):
    """Sender used until an SMS gateway is configured: writes the message to the log."""

    def __init__(self, tag: str = "SFM"):
        self._tag = tag

    def send(self, to: str, message: str) -> None:
        logger.info("SMS to %s: %s: %s", to, self._tag, message)
