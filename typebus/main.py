"""Process-wide default bus and module-level shortcuts to it."""

from __future__ import annotations

from typing import Any

from typebus.domain.bus import EventBus
from typebus.domain.models import Subscription

# ── Singleton (created at import time, shared by the whole process) ──
event_bus = EventBus()


def subscribe(event_type: type, handler: Any) -> int:
    return event_bus.subscribe(event_type, handler)


def unsubscribe(event_type: type, subscription_id: int) -> bool:
    return event_bus.unsubscribe(event_type, subscription_id)


def subscriptions(event_type: type) -> list[Subscription]:
    return event_bus.subscriptions(event_type)


def publish(event: Any, event_type: type | None = None) -> None:
    event_bus.publish(event, event_type)


def must_publish(event: Any, event_type: type | None = None) -> None:
    event_bus.must_publish(event, event_type)


def publish_async(event: Any, event_type: type | None = None) -> None:
    event_bus.publish_async(event, event_type)


def must_publish_async(event: Any, event_type: type | None = None) -> None:
    event_bus.must_publish_async(event, event_type)


def reset() -> None:
    """Empty the default bus. Meant for test harnesses."""
    event_bus.reset()
