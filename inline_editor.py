"""Inline quantity picker shown in place of an "Add to cart" control."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from cart import CartStore, check_name, clamp_qty, coerce_price
from page_model import Page
from timers import TimerQueue
from trigger_heuristics import guess_trigger

logger = logging.getLogger(__name__)

TOAST_VISIBLE_SECONDS = 1.2
TOAST_FADE_SECONDS = 0.3


class EditorState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass
class EditorSession:
    trigger_id: str
    name: str
    image: str
    price: float
    quantity: int = 1
    state: EditorState = EditorState.ACTIVE

    @property
    def active(self) -> bool:
        return self.state == EditorState.ACTIVE


@dataclass
class Toast:
    text: str
    visible: bool = False


@dataclass
class ToastRack:
    timers: TimerQueue
    on_show: Callable[[str], None] | None = None
    toasts: list[Toast] = field(default_factory=list)

    def show(self, text: str) -> Toast:
        t = Toast(text)
        self.toasts.append(t)
        t.visible = True
        if self.on_show:
            self.on_show(text)
        self.timers.call_later(TOAST_VISIBLE_SECONDS, lambda: self._hide(t))
        return t

    def _hide(self, t: Toast) -> None:
        t.visible = False
        self.timers.call_later(TOAST_FADE_SECONDS, lambda: self._drop(t))

    def _drop(self, t: Toast) -> None:
        if t in self.toasts:
            self.toasts.remove(t)

    def clear(self) -> None:
        self.toasts.clear()


def added_text(qty: int, name: str) -> str:
    return f"{qty} × {name} added"


class InlineEditorController:
    def __init__(self, store: CartStore, page: Page, toasts: ToastRack):
        self.store = store
        self.page = page
        self.toasts = toasts
        self.sessions: dict[str, EditorSession] = {}
        self._bindings: dict[str, str] = {}

    def bind(self, trigger_id: str, product_name: str) -> None:
        self._bindings[trigger_id] = product_name

    def bound_trigger(self, product_name: str) -> str | None:
        for trigger_id, name in self._bindings.items():
            if name == product_name and self.page.control(trigger_id) is not None:
                return trigger_id
        return None

    def session(self, trigger_id: str) -> EditorSession | None:
        return self.sessions.get(trigger_id)

    def is_active(self, trigger_id: str) -> bool:
        s = self.sessions.get(trigger_id)
        return bool(s and s.active)

    def add_to_cart(self, name: str, image: str, price, trigger_id: str | None = None) -> EditorSession | None:
        """Open the inline editor for a product, or add one unit directly if no control fits."""
        if trigger_id is None or self.page.control(trigger_id) is None:
            trigger_id = self.bound_trigger(name)
        if trigger_id is None:
            guessed = guess_trigger(self.page, name)
            trigger_id = guessed.id if guessed else None
        if trigger_id is None:
            logger.warning("Add-to-cart control not found for %s - adding directly.", name)
            self.store.add(name, image, price, 1)
            self.toasts.show(added_text(1, name))
            return None
        return self.request(trigger_id, name, image, price)

    def request(self, trigger_id: str, name: str, image: str, price, initial_qty=1) -> EditorSession | None:
        if self.is_active(trigger_id):
            return None
        control = self.page.control(trigger_id)
        session = EditorSession(trigger_id, check_name(name), image, coerce_price(price), clamp_qty(initial_qty))
        self.sessions[trigger_id] = session
        if control is not None:
            control.hidden = True
            control.editor = session
        return session

    def increment(self, trigger_id: str) -> int | None:
        return self._step(trigger_id, 1)

    def decrement(self, trigger_id: str) -> int | None:
        return self._step(trigger_id, -1)

    def _step(self, trigger_id: str, delta: int) -> int | None:
        s = self.sessions.get(trigger_id)
        if not s or not s.active:
            return None
        s.quantity = clamp_qty(s.quantity + delta)
        return s.quantity

    def commit(self, trigger_id: str) -> bool:
        s = self.sessions.get(trigger_id)
        if not s or not s.active:
            return False
        qty = clamp_qty(s.quantity)
        self.store.add(s.name, s.image, s.price, qty)
        self.toasts.show(added_text(qty, s.name))
        s.state = EditorState.COMMITTED
        self._teardown(trigger_id)
        return True

    def cancel(self, trigger_id: str) -> bool:
        s = self.sessions.get(trigger_id)
        if not s or not s.active:
            return False
        s.state = EditorState.CANCELLED
        self._teardown(trigger_id)
        return True

    def _teardown(self, trigger_id: str) -> None:
        self.sessions.pop(trigger_id, None)
        control = self.page.control(trigger_id)
        if control is not None:
            control.hidden = False
            control.editor = None
