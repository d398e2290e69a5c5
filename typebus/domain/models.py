"""Domain models for the event bus."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def type_name(event_type: Any) -> str:
    return getattr(event_type, "__name__", repr(event_type))


class Subscription(BaseModel):
    """One entry of the subscription table.

    ``event_type`` is the type tag the entry was created for; dispatch checks
    it against the lookup key before invoking ``handler``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: int = Field(gt=0)
    event_type: Hashable
    handler: Any


class BusSettings(BaseModel):
    """Tunables for an EventBus instance."""

    model_config = ConfigDict(frozen=True)

    hold_lock_during_dispatch: bool = False
    max_async_workers: int | None = Field(default=None, gt=0)
    thread_name_prefix: str = Field(default="typebus", min_length=1)
    daemon_threads: bool = True
