"""Failures raised while publishing events."""

from __future__ import annotations

from typing import Any

from typebus.domain.models import type_name


class PublishError(Exception):
    """Base class for failures raised by publish and publish_async."""

    def __init__(self, event_type: Any, message: str) -> None:
        super().__init__(message)
        self.event_type = event_type


class NoHandlers(PublishError):
    """Nothing is subscribed to the published event's type."""

    def __init__(self, event_type: Any) -> None:
        super().__init__(event_type, f"no handler for event {type_name(event_type)}")


class HandlerTypeMismatch(PublishError):
    """A stored entry cannot consume the type it is filed under."""

    def __init__(self, event_type: Any) -> None:
        super().__init__(
            event_type, f"handler is not of type Handler[{type_name(event_type)}]"
        )
