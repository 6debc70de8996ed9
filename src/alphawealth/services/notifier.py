"""In-process change feed keyed by (table, owner).

Subscribers register a callback for one table and one owner; every committed
insert/update/delete touching that pair triggers the callback once per commit.
Events carry no row payload beyond the table, owner and action names.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable

from ..logging_config import get_logger

logger = get_logger("notifier")

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Notification that something in ``table`` changed for ``owner_id``."""

    table: str
    owner_id: int
    action: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


ChangeHandler = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by :meth:`ChangeNotifier.subscribe`; call ``close`` on teardown."""

    def __init__(self, notifier: "ChangeNotifier", key: tuple[str, int], handler: ChangeHandler):
        self._notifier = notifier
        self.key = key
        self.handler = handler
        self.active = True

    def close(self) -> None:
        if self.active:
            self._notifier._remove(self)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ChangeNotifier:
    """Thread-safe publish/subscribe registry for table change events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[tuple[str, int], list[Subscription]] = {}

    def subscribe(self, table: str, owner_id: int, handler: ChangeHandler) -> Subscription:
        subscription = Subscription(self, (table, owner_id), handler)
        with self._lock:
            self._subscribers.setdefault(subscription.key, []).append(subscription)
        logger.debug("Subscribed to %s for owner %s", table, owner_id)
        return subscription

    def subscribe_many(
        self, tables: Iterable[str], owner_id: int, handler: ChangeHandler
    ) -> list[Subscription]:
        return [self.subscribe(table, owner_id, handler) for table in tables]

    def subscriber_count(self, table: str, owner_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get((table, owner_id), []))

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to current subscribers and return how many were called.

        A failing handler is logged and does not prevent delivery to the rest.
        """
        with self._lock:
            targets = list(self._subscribers.get((event.table, event.owner_id), []))

        delivered = 0
        for subscription in targets:
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                logger.exception(
                    "Change handler failed",
                    extra={"table": event.table, "owner_id": event.owner_id},
                )
                continue
            delivered += 1
        return delivered

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._subscribers.get(subscription.key)
            if not handlers:
                return
            try:
                handlers.remove(subscription)
            except ValueError:
                return
            if not handlers:
                del self._subscribers[subscription.key]
