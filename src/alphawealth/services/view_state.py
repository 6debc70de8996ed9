"""Explicit state containers for views that follow the change feed.

A :class:`ViewState` holds the latest snapshot a view renders. Each fetch is
tagged with a ticket from a monotonically increasing counter; a completed
fetch is applied only when its ticket is newer than the last one applied, so
a slow, stale fetch can never overwrite a fresher result.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Iterable, Optional, TypeVar

from ..logging_config import get_logger
from .notifier import ChangeEvent, ChangeNotifier, Subscription

logger = get_logger("view_state")

T = TypeVar("T")


class ViewState(Generic[T]):
    """Snapshot holder with last-completed-fetch-wins sequencing."""

    def __init__(self, initial: Optional[T] = None) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._snapshot: Optional[T] = initial

    @property
    def snapshot(self) -> Optional[T]:
        with self._lock:
            return self._snapshot

    @property
    def applied_ticket(self) -> int:
        with self._lock:
            return self._applied

    def begin_fetch(self) -> int:
        """Reserve the ticket for a fetch that is about to start."""
        with self._lock:
            self._issued += 1
            return self._issued

    def complete(self, ticket: int, value: T) -> bool:
        """Apply ``value`` unless a newer fetch already landed."""
        with self._lock:
            if ticket <= self._applied:
                logger.debug("Discarding stale fetch", extra={"ticket": ticket, "applied": self._applied})
                return False
            self._applied = ticket
            self._snapshot = value
            return True

    def refresh(self, loader: Callable[[], T]) -> bool:
        """Run ``loader`` under a fresh ticket and apply its result.

        A loader failure is logged and leaves the current snapshot in place.
        """
        ticket = self.begin_fetch()
        try:
            value = loader()
        except Exception:
            logger.exception("View refresh failed", extra={"ticket": ticket})
            return False
        return self.complete(ticket, value)


class LiveView(Generic[T]):
    """A :class:`ViewState` kept current by change events for one owner.

    ``on_update`` is called with the new snapshot whenever a refresh is applied.
    Call :meth:`close` when the view is torn down; it is the only cancellation.
    """

    def __init__(
        self,
        notifier: ChangeNotifier,
        *,
        owner_id: int,
        tables: Iterable[str],
        loader: Callable[[], T],
        on_update: Optional[Callable[[T], None]] = None,
    ) -> None:
        self.notifier = notifier
        self.owner_id = owner_id
        self.tables = tuple(tables)
        self.loader = loader
        self.on_update = on_update
        self.state: ViewState[T] = ViewState()
        self._subscriptions: list[Subscription] = []

    def start(self) -> "LiveView[T]":
        if not self._subscriptions:
            self._subscriptions = self.notifier.subscribe_many(
                self.tables, self.owner_id, self._handle_change
            )
        self.refresh()
        return self

    def refresh(self) -> bool:
        applied = self.state.refresh(self.loader)
        if applied and self.on_update is not None:
            self.on_update(self.state.snapshot)  # type: ignore[arg-type]
        return applied

    def _handle_change(self, event: ChangeEvent) -> None:
        logger.debug("Change received", extra={"table": event.table, "action": event.action})
        self.refresh()

    @property
    def active(self) -> bool:
        return any(sub.active for sub in self._subscriptions)

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions = []

    def __enter__(self) -> "LiveView[T]":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.close()
