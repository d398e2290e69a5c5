"""Tests for settings, subscription entries and handler adapters."""

from __future__ import annotations

from typing import NewType

import pytest
from pydantic import BaseModel, ValidationError

from typebus.domain.handlers import Handler, HandlerFunc, as_handler, is_handler
from typebus.domain.models import BusSettings, Subscription, type_name
from typebus.services.dispatch import PoolScheduler, ThreadScheduler, create_scheduler


class Ping(BaseModel):
    pass


def test_default_settings():
    settings = BusSettings()
    assert settings.hold_lock_during_dispatch is False
    assert settings.max_async_workers is None
    assert settings.thread_name_prefix == "typebus"
    assert settings.daemon_threads is True


@pytest.mark.parametrize(
    "overrides",
    [{"max_async_workers": 0}, {"max_async_workers": -2}, {"thread_name_prefix": ""}],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        BusSettings(**overrides)


def test_create_scheduler_follows_settings():
    assert isinstance(create_scheduler(BusSettings()), ThreadScheduler)
    pool = create_scheduler(BusSettings(max_async_workers=3))
    assert isinstance(pool, PoolScheduler)
    assert pool.max_workers == 3


def test_subscription_is_frozen():
    sub = Subscription(id=1, event_type=Ping, handler=print)
    with pytest.raises(ValidationError):
        sub.id = 2


def test_subscription_requires_positive_id():
    with pytest.raises(ValidationError):
        Subscription(id=0, event_type=Ping, handler=print)


def test_as_handler_wraps_callables():
    received = []
    handler = as_handler(received.append)

    assert isinstance(handler, HandlerFunc)
    assert isinstance(handler, Handler)
    handler.on_event("evt")
    assert received == ["evt"]


def test_as_handler_keeps_protocol_objects():
    class Callback:
        def on_event(self, event) -> None:
            pass

        def __call__(self, event) -> None:
            raise AssertionError("should dispatch through on_event")

    cb = Callback()
    assert as_handler(cb) is cb


def test_as_handler_leaves_non_handlers_alone():
    value = object()
    assert as_handler(value) is value
    assert not is_handler(value)


def test_subscription_accepts_non_class_type_keys():
    OrderId = NewType("OrderId", int)

    assert Subscription(id=1, event_type=OrderId, handler=print).event_type is OrderId
    alias = Subscription(id=2, event_type=list[int], handler=print)
    assert alias.event_type == list[int]


def test_type_name_falls_back_to_repr():
    OrderId = NewType("OrderId", int)

    assert type_name(Ping) == "Ping"
    assert type_name(OrderId) == "OrderId"
    assert type_name("custom-key") == repr("custom-key")
