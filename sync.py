"""Keeps a tab's cart views current when another tab rewrites the cart."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from cart import CartSnapshot, CartStore, RenderTargetMissing
from channel import ChangeChannel, Subscription

logger = logging.getLogger(__name__)


class SyncBridge:
    """Reloads the tab's store on change notices from other tabs.

    With ``deferred=True`` a notice only marks the bridge pending; the tab's own
    thread applies it through ``apply_pending()``. Hosts that run every tab on
    one thread can leave it off and have notices applied as they arrive.
    """

    def __init__(self, store: CartStore, channel: ChangeChannel, deferred: bool = False):
        self.store = store
        self.channel = channel
        self.deferred = deferred
        self.views: dict[str, Callable[[CartSnapshot], None]] = {}
        self.sync_count = 0
        self._pending = threading.Event()
        self._sub: Subscription | None = None

    @property
    def running(self) -> bool:
        return self._sub is not None

    @property
    def pending(self) -> bool:
        return self._pending.is_set()

    def start(self) -> None:
        if self._sub is None:
            self._sub = self.channel.subscribe(self.store.identity, self.store.context_id, self.on_change)

    def stop(self) -> None:
        if self._sub is not None:
            self._sub.cancel()
            self._sub = None
        self._pending.clear()

    def register_view(self, name: str, render: Callable[[CartSnapshot], None]) -> None:
        self.views[name] = render

    def on_change(self, identity: str) -> None:
        if identity != self.store.identity:
            return
        self._pending.set()
        if not self.deferred:
            self.apply_pending()

    def apply_pending(self) -> bool:
        if not self._pending.is_set():
            return False
        self._pending.clear()
        # Read only: a write here would bounce back to the other tab.
        snap = self.store.reload()
        self.sync_count += 1
        for name, render in list(self.views.items()):
            try:
                render(snap)
            except RenderTargetMissing as e:
                logger.warning("View '%s' not rendered after sync: %s", name, e)
        return True
