"""What the cart logic needs to know about the page it runs on.

The Streamlit pages build one of these per tab; tests build them by hand.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Control:
    id: str
    label: str = ""
    # Declared action of the control, e.g. "addToCart('Latte', 'p1.png', 4)".
    action: str = ""
    # Heading text of the nearest enclosing product box.
    container_heading: str | None = None
    hidden: bool = False
    editor: object | None = None


@dataclass(eq=False)
class ProductCard:
    title: str | None
    image_style: str = ""
    price_attr: str | None = None
    section: str = "shop"
    highlighted: bool = False


@dataclass(eq=False)
class ScrollRequest:
    target: object
    smooth: bool = True
    block: str = "start"


@dataclass
class Page:
    controls: list[Control] = field(default_factory=list)
    cards: list[ProductCard] = field(default_factory=list)
    landmarks: set[str] = field(default_factory=set)
    focused: str | None = None
    scrolls: list[ScrollRequest] = field(default_factory=list)

    def add_control(self, control: Control) -> Control:
        self.controls.append(control)
        return control

    def control(self, control_id: str) -> Control | None:
        for c in self.controls:
            if c.id == control_id:
                return c
        return None

    def shop_cards(self) -> list[ProductCard]:
        return [c for c in self.cards if c.section == "shop"]

    def focus(self, input_id: str) -> None:
        self.focused = input_id

    def blur(self, input_id: str) -> None:
        if self.focused == input_id:
            self.focused = None

    def scroll_to(self, target, smooth: bool = True, block: str = "start") -> bool:
        if isinstance(target, str) and target not in self.landmarks:
            logger.warning("No landmark '%s' on page, not scrolling", target)
            return False
        self.scrolls.append(ScrollRequest(target, smooth, block))
        return True

    @property
    def scroll_target(self):
        return self.scrolls[-1].target if self.scrolls else None
