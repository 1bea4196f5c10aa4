from __future__ import annotations

import json

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NotificationPayload
from .notifier import Notifier


class MySQLNotificationOutbox(Notifier):
    """Stores the alert and its recipient row; delivery workers read from here."""

    def __init__(self, conn_factory: DatabaseConnection, *, created_by: str = "system"):
        self._conn_factory = conn_factory
        self._created_by = created_by

    def notify(self, member_id: str, payload: NotificationPayload) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(kind, title, message, priority, entity_type, entity_id, payload, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    payload.kind,
                    payload.title,
                    payload.message,
                    payload.priority.value,
                    payload.entity_type,
                    payload.entity_id,
                    json.dumps(payload.data, default=str),
                    self._created_by,
                ),
            )
            notification_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO notification_recipients(notification_id, member_id, is_read)
                VALUES(%s,%s,0)
                """,
                (notification_id, member_id),
            )
