"""Change notifications between browser tabs sharing one cart store."""
from __future__ import annotations

import inspect
import logging
import threading
import weakref
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscription:
    identity: str
    context_id: str
    _target: Callable[[], Callable[[str], None] | None] = field(repr=False)
    _channel: "ChangeChannel | None" = field(default=None, repr=False)

    @property
    def callback(self) -> Callable[[str], None] | None:
        return self._target()

    @property
    def alive(self) -> bool:
        return self._target() is not None

    def cancel(self) -> None:
        if self._channel is not None:
            self._channel.unsubscribe(self)
            self._channel = None


def _hold(callback):
    # Bound methods are held weakly: a tab that goes away takes its listener with it.
    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)
    return lambda: callback


class ChangeChannel:
    """Pub/sub keyed by store identity. The publishing context never hears itself."""

    def __init__(self):
        self._subs: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, identity: str, context_id: str, callback: Callable[[str], None]) -> Subscription:
        sub = Subscription(identity, context_id, _hold(callback), self)
        with self._lock:
            self._prune()
            self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            try:
                self._subs.remove(sub)
            except ValueError:
                pass

    def _prune(self) -> None:
        self._subs = [s for s in self._subs if s.alive]

    def publish(self, identity: str, origin: str | None) -> int:
        with self._lock:
            self._prune()
            targets = [s for s in self._subs if s.identity == identity and s.context_id != origin]
        delivered = 0
        for sub in targets:
            callback = sub.callback
            if callback is None:
                continue
            delivered += 1
            try:
                callback(identity)
            except Exception:
                logger.exception("Change listener in context %s failed for %s", sub.context_id, identity)
        return delivered

    def subscriber_count(self, identity: str) -> int:
        with self._lock:
            self._prune()
            return sum(1 for s in self._subs if s.identity == identity)
