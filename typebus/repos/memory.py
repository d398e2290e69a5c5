"""In-memory subscription table and process-wide id allocation."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Hashable

from typebus.domain.models import Subscription

# Shared by every table so ids stay unique for the whole process.
_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def next_subscription_id() -> int:
    with _id_lock:
        return next(_id_counter)


class SubscriptionTable:
    """Dict-backed store of Subscription entries, keyed by event type.

    Not synchronised; callers hold the bus lock around every access. Keys are
    created on first subscribe and never pruned, so an emptied type keeps an
    empty list.
    """

    def __init__(self) -> None:
        self._store: dict[Hashable, list[Subscription]] = {}

    def add(self, subscription: Subscription) -> None:
        self._store.setdefault(subscription.event_type, []).append(subscription)

    def remove(self, event_type: Hashable, subscription_id: int) -> bool:
        entries = self._store.get(event_type)
        if entries is None:
            return False
        for i, entry in enumerate(entries):
            if entry.id == subscription_id:
                del entries[i]
                return True
        return False

    def get(self, event_type: Hashable) -> list[Subscription] | None:
        """Return the live list for *event_type*, or None if never subscribed."""
        return self._store.get(event_type)

    def snapshot(self, event_type: Hashable) -> list[Subscription]:
        return list(self._store.get(event_type, ()))

    def clear(self) -> None:
        self._store.clear()
