"""Schedulers used by publish_async to run handler invocations concurrently."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from typebus.domain.models import BusSettings, Subscription, type_name

logger = logging.getLogger(__name__)


class ThreadScheduler:
    """Starts one thread per handler invocation.

    Nothing is joined or tracked. An exception raised by a handler ends its
    thread and is reported through ``threading.excepthook``.
    """

    def __init__(self, thread_name_prefix: str, daemon: bool = True) -> None:
        self.thread_name_prefix = thread_name_prefix
        self.daemon = daemon

    def schedule(self, subscription: Subscription, event: Any) -> None:
        thread = threading.Thread(
            target=subscription.handler.on_event,
            args=(event,),
            name=f"{self.thread_name_prefix}-{subscription.id}",
            daemon=self.daemon,
        )
        thread.start()

    def shutdown(self, wait: bool = True) -> None:
        pass


class PoolScheduler:
    """Submits handler invocations to a bounded thread pool.

    The pool is created on first use. Handler exceptions are logged from the
    future's done-callback since nobody waits on the future.
    """

    def __init__(self, max_workers: int, thread_name_prefix: str) -> None:
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=self.thread_name_prefix,
                )
            return self._executor

    def schedule(self, subscription: Subscription, event: Any) -> None:
        future = self._get_executor().submit(subscription.handler.on_event, event)
        future.add_done_callback(lambda f: _log_failure(f, subscription))

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)


def _log_failure(future: Future, subscription: Subscription) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "async handler %d for %s raised",
            subscription.id,
            type_name(subscription.event_type),
            exc_info=exc,
        )


def create_scheduler(settings: BusSettings) -> ThreadScheduler | PoolScheduler:
    if settings.max_async_workers is None:
        return ThreadScheduler(settings.thread_name_prefix, settings.daemon_threads)
    return PoolScheduler(settings.max_async_workers, settings.thread_name_prefix)
