"""
Fan-out of log store snapshots to any number of observers.

Each observer gets its own Subscription that can be paused, resumed and
cancelled independently. This is a state broadcast: a paused observer is not
replayed the changes it missed, it receives the latest snapshot once on resume.
"""

import threading
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from .log_entry import LogEntry
from .logging_config import get_logger

logger = get_logger("Broadcaster")

Snapshot = Tuple[LogEntry, ...]
Observer = Callable[[Snapshot], None]


class Subscription:
    """Handle returned by Broadcaster.subscribe."""

    def __init__(self, broadcaster: "Broadcaster", observer: Observer):
        self._broadcaster = broadcaster
        self.observer = observer
        self._paused = False
        self._cancelled = False
        self._missed: Optional[Snapshot] = None

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def pause(self):
        if not self._cancelled:
            self._paused = True

    def resume(self):
        """Resume delivery. Delivers the latest snapshot if anything changed while paused."""
        if self._cancelled or not self._paused:
            return
        self._paused = False
        missed, self._missed = self._missed, None
        if missed is not None:
            self._deliver(missed)

    def cancel(self):
        if self._cancelled:
            return
        self._cancelled = True
        self._missed = None
        self._broadcaster._remove(self)

    def _notify(self, snapshot: Snapshot):
        if self._cancelled:
            return
        if self._paused:
            self._missed = snapshot
            return
        self._deliver(snapshot)

    def _deliver(self, snapshot: Snapshot):
        try:
            self.observer(snapshot)
        except Exception:
            # Diagnostic loggers are never bridged back into a store
            logger.exception(f"Observer {self.observer!r} raised while handling a snapshot")


class Broadcaster:
    """
    Delivers snapshots synchronously to every active subscription.

    Snapshots emitted while a fan-out is in progress (an observer appending to
    the store, for instance) are queued and delivered after it, so every
    observer sees snapshots in mutation order.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._queue: Deque[Snapshot] = deque()
        self._emitting = False
        self._lock = threading.RLock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, observer: Observer) -> Subscription:
        if not callable(observer):
            raise TypeError(f"Observer must be callable, got {type(observer).__name__}")
        subscription = Subscription(self, observer)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def emit(self, snapshot: Snapshot):
        with self._lock:
            self._queue.append(snapshot)
            if self._emitting:
                return
            self._emitting = True
            try:
                while self._queue:
                    current = self._queue.popleft()
                    for subscription in list(self._subscriptions):
                        subscription._notify(current)
            finally:
                self._emitting = False
                self._queue.clear()

    def _remove(self, subscription: Subscription):
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass
