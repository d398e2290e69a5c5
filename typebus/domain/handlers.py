"""Handler protocol and adapters for plain callables."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class Handler(Protocol):
    """Anything able to consume events of one type."""

    def on_event(self, event: Any) -> None: ...


class HandlerFunc:
    """Adapts a plain callable to the Handler protocol."""

    def __init__(self, func: Callable[[Any], None]) -> None:
        self.func = func

    def on_event(self, event: Any) -> None:
        self.func(event)

    def __repr__(self) -> str:
        return f"HandlerFunc({self.func!r})"


def as_handler(obj: Any) -> Any:
    """Return *obj* as a Handler when possible, otherwise unchanged.

    Objects that already expose ``on_event`` win over being callable, so a
    callable class implementing the protocol is not wrapped twice.
    """
    if isinstance(obj, Handler):
        return obj
    if callable(obj):
        return HandlerFunc(obj)
    return obj


def is_handler(obj: Any) -> bool:
    return callable(getattr(obj, "on_event", None))
