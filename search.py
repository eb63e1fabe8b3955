"""Type-ahead product search over the cards rendered in the shop section."""
from __future__ import annotations

import logging
import re
import weakref
from dataclasses import dataclass, field

from page_model import Page, ProductCard
from timers import TimerQueue
from views import format_price

logger = logging.getLogger(__name__)

DISPLAY_CAP = 50
EMPTY_TEXT = "No products found"
PRODUCTS_LANDMARK = "products"
CARD_SCROLL_DELAY = 0.6
HIGHLIGHT_SECONDS = 1.0
FOCUS_DELAY = 0.05

_URL_RE = re.compile(r"url\([\"']?(.+?)[\"']?\)")


@dataclass
class ProductDescriptor:
    title: str
    image: str = ""
    price: float | None = None
    source: weakref.ref | None = field(default=None, repr=False, compare=False)

    @property
    def card(self) -> ProductCard | None:
        return self.source() if self.source is not None else None


@dataclass
class SuggestionState:
    query: str = ""
    results: list[ProductDescriptor] = field(default_factory=list)
    highlight: int = -1
    open: bool = False
    expanded: bool = False


@dataclass(frozen=True)
class SuggestionRow:
    title: str
    image: str = ""
    price_text: str | None = None
    selected: bool = False
    empty: bool = False


def parse_image(style: str | None) -> str:
    m = _URL_RE.search(style or "")
    return m.group(1) if m else ""


def parse_price(attr: str | None) -> float | None:
    if not attr:
        return None
    try:
        return float(attr)
    except ValueError:
        return None


class SuggestionIndex:
    def __init__(self, page: Page, timers: TimerQueue):
        self.page = page
        self.timers = timers
        self.products: list[ProductDescriptor] = []
        self.widgets: dict[str, SuggestionState] = {}

    def build_index(self) -> list[ProductDescriptor]:
        self.products = [
            ProductDescriptor(
                title=(card.title or "").strip() or "Product",
                image=parse_image(card.image_style),
                price=parse_price(card.price_attr),
                source=weakref.ref(card),
            )
            for card in self.page.shop_cards()
        ]
        return self.products

    def filter(self, query: str | None) -> list[ProductDescriptor]:
        q = (query or "").strip().lower()
        if not q:
            return self.products[:DISPLAY_CAP]
        return [p for p in self.products if q in p.title.lower()]

    def state(self, widget_id: str) -> SuggestionState:
        return self.widgets.setdefault(widget_id, SuggestionState())

    # open / close

    def open(self, widget_id: str) -> None:
        st = self.state(widget_id)
        st.open = True
        st.results = self.filter(st.query)

    def close(self, widget_id: str) -> None:
        self.state(widget_id).open = False

    def close_all(self) -> None:
        for st in self.widgets.values():
            st.open = False

    def outside_click(self) -> None:
        self.close_all()

    def toggle(self, widget_id: str) -> None:
        """The search button: expand the bar and focus its input, or collapse it."""
        st = self.state(widget_id)
        if st.expanded:
            st.expanded = False
            self.page.blur(widget_id)
        else:
            st.expanded = True
            self.timers.call_later(FOCUS_DELAY, lambda: self.focus(widget_id))

    def focus(self, widget_id: str) -> None:
        self.page.focus(widget_id)
        self.open(widget_id)
        self.state(widget_id).highlight = -1

    def set_query(self, widget_id: str, query: str) -> list[ProductDescriptor]:
        st = self.state(widget_id)
        st.query = query or ""
        st.results = self.filter(st.query)
        st.highlight = -1
        return st.results

    # keyboard

    def key(self, widget_id: str, key: str) -> None:
        st = self.state(widget_id)
        if key == "Escape":
            self.close(widget_id)
            self.page.blur(widget_id)
            return
        if not st.results:
            return
        last = len(st.results) - 1
        if key in ("ArrowDown", "Down"):
            st.highlight = min(st.highlight + 1, last)
        elif key in ("ArrowUp", "Up"):
            # Floors at 0: once moving, the keyboard never returns to "nothing selected".
            st.highlight = max(st.highlight - 1, 0)
        elif key == "Enter":
            self.activate(widget_id, st.highlight if st.highlight >= 0 else 0)

    def rows(self, widget_id: str) -> list[SuggestionRow]:
        st = self.state(widget_id)
        if not st.results:
            return [SuggestionRow(title=EMPTY_TEXT, empty=True)]
        return [
            SuggestionRow(
                title=p.title,
                image=p.image,
                price_text=format_price(p.price) if p.price else None,
                selected=i == st.highlight,
            )
            for i, p in enumerate(st.results)
        ]

    # activation

    def activate(self, widget_id: str, index: int) -> ProductDescriptor | None:
        st = self.state(widget_id)
        if not 0 <= index < len(st.results):
            return None
        product = st.results[index]
        self.close_all()
        self.page.scroll_to(PRODUCTS_LANDMARK, smooth=True, block="start")
        if product.source is not None:
            self.timers.call_later(CARD_SCROLL_DELAY, lambda: self._reveal(product))
        self.page.blur(widget_id)
        return product

    def _reveal(self, product: ProductDescriptor) -> None:
        card = product.card
        if card is None:
            logger.debug("Card for %s is gone, skipping highlight", product.title)
            return
        self.page.scroll_to(card, smooth=True, block="center")
        card.highlighted = True
        self.timers.call_later(HIGHLIGHT_SECONDS, lambda: setattr(card, "highlighted", False))
