"""
Change notifications for the technician directory and the ticket store.

Events go to an EventBridge bus when ``EVENT_BUS_NAME`` is set, and to any
in-process subscribers registered for the table. Delivery is best effort:
a failed publish is logged and never breaks the write that triggered it.
"""

from __future__ import annotations

import json
import os
from collections import defaultdict
from enum import Enum
from typing import Callable, DefaultDict, List, Optional

import boto3

from utils.logging_config import get_logger

logger = get_logger(__name__)

EVENT_SOURCE = "facility.ops"
EVENT_DETAIL_TYPE = "TableChanged"

TECHNICIANS_TABLE = "technicians"
TICKETS_TABLE = "tickets"


class ChangeEvent(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


Subscriber = Callable[[str, ChangeEvent, Optional[str]], None]


class NotificationService:
    """Publish table change events; subscribers re-query on any event."""

    def __init__(self, event_bus_name: Optional[str] = None, client=None) -> None:
        self.event_bus_name = event_bus_name or os.environ.get("EVENT_BUS_NAME")
        self._client = client
        self._subscribers: DefaultDict[str, List[Subscriber]] = defaultdict(list)

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("events")
        return self._client

    def subscribe(self, table: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for one table; returns an unsubscribe function."""
        self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[table]:
                self._subscribers[table].remove(callback)

        return unsubscribe

    def publish(
        self, table: str, event: ChangeEvent, record_id: Optional[str] = None
    ) -> None:
        if self.event_bus_name:
            self._put_event(table, event, record_id)

        for callback in list(self._subscribers.get(table, [])):
            try:
                callback(table, event, record_id)
            except Exception as exc:
                logger.warning(
                    "Change subscriber failed",
                    extra={"table": table, "event": event.value, "error": str(exc)},
                )

    def _put_event(self, table: str, event: ChangeEvent, record_id: Optional[str]) -> None:
        try:
            resp = self.client.put_events(
                Entries=[
                    {
                        "Source": EVENT_SOURCE,
                        "DetailType": EVENT_DETAIL_TYPE,
                        "EventBusName": self.event_bus_name,
                        "Detail": json.dumps(
                            {"table": table, "event": event.value, "record_id": record_id}
                        ),
                    }
                ]
            )
            if resp.get("FailedEntryCount"):
                logger.warning(
                    "Change event rejected",
                    extra={"table": table, "entries": resp.get("Entries", [])},
                )
        except Exception as exc:
            logger.warning(
                "Change event publish failed", extra={"table": table, "error": str(exc)}
            )


_shared: Optional[NotificationService] = None


def get_notifier() -> NotificationService:
    """Process-wide notifier, so in-process subscribers see every publish."""
    global _shared
    if _shared is None:
        _shared = NotificationService()
    return _shared
