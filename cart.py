from __future__ import annotations

import json
import logging
import math
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable

logger = logging.getLogger(__name__)

MIN_QTY = 1
MAX_QTY = 999
FREE_SHIPPING_FROM = 50.0
FLAT_SHIPPING = 5.99


class RenderTargetMissing(Exception):
    """Raised by a render callback whose container is not on the page."""


def clamp_qty(qty) -> int:
    try:
        n = int(qty)
    except (TypeError, ValueError, OverflowError):
        return MIN_QTY
    return max(MIN_QTY, min(MAX_QTY, n))


def coerce_price(price) -> float:
    # Callers guarantee a non-negative price; anything else is rejected outright.
    try:
        p = float(price)
    except (TypeError, ValueError):
        raise ValueError(f"Price must be a number, got {price!r}") from None
    if not math.isfinite(p) or p < 0:
        raise ValueError(f"Price must be a finite non-negative number, got {price!r}")
    return p


def check_name(name) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError(f"Product name must be a non-empty string, got {name!r}")
    return name


@dataclass
class LineItem:
    name: str
    image: str
    price: float
    quantity: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "image": self.image, "price": float(self.price), "quantity": int(self.quantity)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        if not isinstance(data, dict):
            raise TypeError("line item must be an object")
        return cls(
            name=check_name(data["name"]),
            image=str(data.get("image") or ""),
            price=coerce_price(data["price"]),
            quantity=clamp_qty(data["quantity"]),
        )


@dataclass(frozen=True)
class Aggregates:
    item_count: int
    subtotal: float
    shipping: float
    total: float


@dataclass(frozen=True)
class CartSnapshot:
    items: tuple[LineItem, ...]
    aggregates: Aggregates


def compute_aggregates(items) -> Aggregates:
    count = sum(int(i.quantity) for i in items)
    subtotal = round(sum(i.price * i.quantity for i in items), 2)
    if subtotal == 0 or subtotal >= FREE_SHIPPING_FROM:
        shipping = 0.0
    else:
        shipping = FLAT_SHIPPING
    return Aggregates(count, subtotal, shipping, round(subtotal + shipping, 2))


def parse_snapshot(raw: str | None) -> list[LineItem]:
    """Decode a persisted snapshot; anything unexpected gives an empty cart."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            return []
        items: list[LineItem] = []
        by_name: dict[str, LineItem] = {}
        for entry in data:
            item = LineItem.from_dict(entry)
            existing = by_name.get(item.name)
            if existing:
                existing.quantity = clamp_qty(existing.quantity + item.quantity)
                continue
            by_name[item.name] = item
            items.append(item)
        return items
    except (ValueError, TypeError, KeyError, OverflowError):
        return []


class CartStore:
    """The cart of one browser tab, persisted after every change."""

    def __init__(self, storage, channel=None, key: str = "cart", context_id: str | None = None):
        self.storage = storage
        self.channel = channel
        self.key = key
        self.context_id = context_id or uuid.uuid4().hex
        self._items: list[LineItem] = []
        self._callbacks: list[Callable[[CartSnapshot], None]] = []

    @property
    def identity(self) -> str:
        return f"{getattr(self.storage, 'name', type(self.storage).__name__)}:{self.key}"

    @property
    def items(self) -> list[LineItem]:
        return [replace(i) for i in self._items]

    def __len__(self):
        return len(self._items)

    def load(self) -> CartSnapshot:
        try:
            raw = self.storage.get(self.key)
        except Exception as e:
            logger.warning("Could not read cart '%s', starting empty: %s", self.key, e)
            raw = None
        self._items = parse_snapshot(raw)
        return self.snapshot()

    def reload(self) -> CartSnapshot:
        snap = self.load()
        self._notify(snap)
        return snap

    def add(self, name: str, image: str, price, quantity=1) -> None:
        # Same rules the loader applies, so a write always reads back.
        name = check_name(name)
        p = coerce_price(price)
        qty = clamp_qty(quantity)
        for item in self._items:
            if item.name == name:
                item.quantity = clamp_qty(item.quantity + qty)
                break
        else:
            self._items.append(LineItem(name=name, image=image or "", price=p, quantity=qty))
        self._save_and_render()

    def set_quantity(self, index: int, delta: int) -> None:
        if not 0 <= index < len(self._items):
            return
        item = self._items[index]
        item.quantity = clamp_qty(item.quantity + int(delta))
        self._save_and_render()

    def remove(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            return
        del self._items[index]
        self._save_and_render()

    def clear(self) -> None:
        self._items = []
        self._save_and_render()

    def discard(self) -> None:
        """Erase the persisted key altogether (after an order is placed)."""
        self._items = []
        try:
            self.storage.remove(self.key)
        except Exception as e:
            logger.warning("Could not erase cart '%s': %s", self.key, e)
        else:
            self._publish()
        self._notify(self.snapshot())

    def aggregates(self) -> Aggregates:
        return compute_aggregates(self._items)

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(tuple(replace(i) for i in self._items), self.aggregates())

    def subscribe(self, callback: Callable[[CartSnapshot], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def _unsubscribe():
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    def _save_and_render(self) -> None:
        payload = json.dumps([i.to_dict() for i in self._items])
        try:
            self.storage.set(self.key, payload)
        except Exception as e:
            # Memory keeps the change for the rest of this session.
            logger.warning("Could not persist cart '%s': %s", self.key, e)
        else:
            self._publish()
        self._notify(self.snapshot())

    def _publish(self) -> None:
        if self.channel is not None:
            self.channel.publish(self.identity, origin=self.context_id)

    def _notify(self, snap: CartSnapshot) -> None:
        for cb in list(self._callbacks):
            try:
                cb(snap)
            except RenderTargetMissing as e:
                logger.warning("Skipping cart view: %s", e)
