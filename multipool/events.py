"""Notifications emitted by the pool manager."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from multipool.models.types import AssetId

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolInitialized:
    """A pool was created for (token0, token1), in canonical order."""

    token0: AssetId
    token1: AssetId
    pool_key: bytes


Listener = Callable[[PoolInitialized], None]


class EventLog:
    """Collects emitted notifications and fans them out to listeners.

    Listener failures are logged and do not affect the already-committed operation.
    """

    def __init__(self) -> None:
        self._events: list[PoolInitialized] = []
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, event: PoolInitialized) -> None:
        with self._lock:
            self._events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("event_listener_error", event=type(event).__name__)

    @property
    def events(self) -> list[PoolInitialized]:
        with self._lock:
            return list(self._events)
