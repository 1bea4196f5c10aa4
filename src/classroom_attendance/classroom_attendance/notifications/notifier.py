from __future__ import annotations

import logging
from typing import Protocol

from .model import NotificationPayload

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, member_id: str, payload: NotificationPayload) -> None:
        """Deliver one message; raise NotificationError (or any error) on failure."""

        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Fallback notifier that only writes the alert to the log."""

    def notify(self, member_id: str, payload: NotificationPayload) -> None:
        logger.info(
            "notify member=%s priority=%s title=%r",
            member_id,
            payload.priority.value,
            payload.title,
        )
