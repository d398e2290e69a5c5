"""Thread-safe in-process event bus keyed by event type."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from collections.abc import Hashable
from typing import Any, Iterator

from typebus.domain.errors import HandlerTypeMismatch, NoHandlers, PublishError
from typebus.domain.handlers import as_handler, is_handler
from typebus.domain.models import BusSettings, Subscription, type_name
from typebus.repos.locks import ReadWriteLock
from typebus.repos.memory import SubscriptionTable, next_subscription_id
from typebus.services.dispatch import create_scheduler

logger = logging.getLogger(__name__)


class EventBus:
    """Publish/subscribe bus for application events.

    Handlers are registered against an exact event type and called in
    registration order. ``publish`` runs them in the caller's thread;
    ``publish_async`` hands each one to the async scheduler and returns
    without waiting.
    """

    def __init__(self, settings: BusSettings | None = None) -> None:
        self.settings = settings or BusSettings()
        self._table = SubscriptionTable()
        self._lock = ReadWriteLock()
        self._scheduler = create_scheduler(self.settings)

    def __enter__(self) -> EventBus:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, event_type: Hashable, handler: Any) -> int:
        """Register *handler* for *event_type* and return its subscription id.

        *handler* is either an object with an ``on_event`` method or a plain
        callable taking the event.
        """
        with self._lock.write_locked():
            subscription = Subscription(
                id=next_subscription_id(),
                event_type=event_type,
                handler=as_handler(handler),
            )
            self._table.add(subscription)
        logger.debug("subscribed %d to %s", subscription.id, type_name(event_type))
        return subscription.id

    def unsubscribe(self, event_type: Hashable, subscription_id: int) -> bool:
        """Remove a subscription; False if it is not registered for *event_type*."""
        with self._lock.write_locked():
            removed = self._table.remove(event_type, subscription_id)
        if removed:
            logger.debug(
                "unsubscribed %d from %s", subscription_id, type_name(event_type)
            )
        return removed

    def subscriptions(self, event_type: Hashable) -> list[Subscription]:
        with self._lock.read_locked():
            return self._table.snapshot(event_type)

    def reset(self) -> None:
        """Drop every subscription. Ids already issued are not reused."""
        with self._lock.write_locked():
            self._table.clear()
        logger.debug("subscription table cleared")

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self, event: Any, event_type: Hashable | None = None) -> None:
        """Call every handler for the event's type, in order, in this thread.

        The lookup key is *event_type* when given, else ``type(event)``.
        Raises NoHandlers when nothing is subscribed and HandlerTypeMismatch
        when an entry cannot consume the type; in the latter case handlers
        before the bad entry have already run. Handler exceptions propagate.
        """
        key = event_type if event_type is not None else type(event)
        with self._lookup(key, self.settings.hold_lock_during_dispatch) as entries:
            for entry in entries:
                _checked_handler(entry, key).on_event(event)

    def must_publish(self, event: Any, event_type: Hashable | None = None) -> None:
        """Like publish, but a PublishError becomes an AssertionError."""
        try:
            self.publish(event, event_type)
        except PublishError as err:
            raise AssertionError(str(err)) from err

    def publish_async(self, event: Any, event_type: Hashable | None = None) -> None:
        """Schedule every handler for the event's type and return immediately.

        Lookup failures match publish. A mismatched entry stops scheduling of
        the entries after it; invocations already scheduled still run.
        """
        key = event_type if event_type is not None else type(event)
        with self._lookup(key, hold=True) as entries:
            for entry in entries:
                _checked_handler(entry, key)
                self._scheduler.schedule(entry, event)
                logger.debug("scheduled handler %d for %s", entry.id, type_name(key))

    def must_publish_async(
        self, event: Any, event_type: Hashable | None = None
    ) -> None:
        """Like publish_async, but a PublishError becomes an AssertionError."""
        try:
            self.publish_async(event, event_type)
        except PublishError as err:
            raise AssertionError(str(err)) from err

    def shutdown(self, wait: bool = True) -> None:
        """Release the async worker pool, if one was started."""
        self._scheduler.shutdown(wait=wait)

    @contextmanager
    def _lookup(
        self, event_type: Hashable, hold: bool
    ) -> Iterator[list[Subscription]]:
        """Yield a snapshot of the entries for *event_type*.

        The read lock covers the lookup; with *hold* it also covers the body
        of the ``with`` block.
        """
        self._lock.acquire_read()
        held = True
        try:
            entries = self._table.get(event_type)
            if not entries:
                raise NoHandlers(event_type)
            snapshot = list(entries)
            if not hold:
                self._lock.release_read()
                held = False
            yield snapshot
        finally:
            if held:
                self._lock.release_read()


def _checked_handler(entry: Any, event_type: Hashable) -> Any:
    if getattr(entry, "event_type", None) != event_type:
        raise HandlerTypeMismatch(event_type)
    handler = getattr(entry, "handler", None)
    if not is_handler(handler):
        raise HandlerTypeMismatch(event_type)
    return handler
