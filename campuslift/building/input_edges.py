"""
Input edges - Turn held-key levels into discrete edge events.

The elevator only reacts to edges: one event per key-down transition.
A signal that is pressed again while still held is a repeat and is dropped,
so holding a key never skips several floors.

Physical key bindings live outside this package; callers map their keys to
EdgeSignal values and report press/release.
"""

import logging
from collections import deque
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EdgeSignal(str, Enum):
    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    CONFIRM = "confirm"
    CANCEL = "cancel"


EdgeHandler = Callable[[EdgeSignal], None]


class Subscription:
    """
    Handle for a registered edge handler.

    close() is idempotent; the handle also works as a context manager.
    """

    def __init__(self, source: "InputEdgeSource", handler: EdgeHandler):
        self._source = source
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self):
        if not self._active:
            return
        self._active = False
        self._source._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class InputEdgeSource:
    """
    Edge-triggered dispatcher for the four elevator signals.

    Edges are delivered in the order they are observed. An edge raised from
    inside a handler is queued until the current dispatch finishes.
    """

    def __init__(self):
        self._held: set[EdgeSignal] = set()
        self._subscriptions: list[Subscription] = []
        self._pending: deque[EdgeSignal] = deque()
        self._dispatching = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def is_held(self, signal: EdgeSignal) -> bool:
        return signal in self._held

    def subscribe(self, handler: EdgeHandler) -> Subscription:
        """Register a handler; close the returned subscription to release it."""
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    # -------------------------------------------------------------------------
    # Levels -> edges
    # -------------------------------------------------------------------------

    def press(self, signal: EdgeSignal) -> bool:
        """
        Report a key-down level.

        Returns True if this was an edge (dispatched), False for a repeat.
        """
        if signal in self._held:
            return False
        self._held.add(signal)
        self.emit(signal)
        return True

    def release(self, signal: EdgeSignal):
        """Report a key-up level; the next press becomes an edge again."""
        self._held.discard(signal)

    def release_all(self):
        self._held.clear()

    def emit(self, signal: EdgeSignal):
        """Dispatch a ready-made edge (e.g. a button click)."""
        self._pending.append(signal)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                self._dispatch(self._pending.popleft())
        finally:
            self._dispatching = False
            self._pending.clear()

    def _dispatch(self, signal: EdgeSignal):
        # Snapshot: handlers subscribed during this dispatch see later edges only
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.handler(signal)
