"""Guessing which control adds a product when nobody said so.

Only used after explicit bindings fail. Order matters: action text, then the
heading of the surrounding box, then any generic "Add to cart" button.
"""
from __future__ import annotations

import re

from page_model import Control, Page

GENERIC_ADD_LABEL = "ADD TO CART"


def _norm(s) -> str:
    return re.sub(r"\s+", " ", s or "").strip().lower()


def find_by_action_metadata(page: Page, name: str) -> Control | None:
    target = re.sub(r"['\"]+", "", _norm(name))
    if not target:
        return None
    for c in page.controls:
        action = (c.action or "").lower()
        if not action:
            continue
        if target in re.sub(r"['\"]", "", action):
            return c
    return None


def find_by_nearby_heading(page: Page, name: str) -> Control | None:
    target = _norm(name)
    for c in page.controls:
        if c.container_heading is not None and _norm(c.container_heading) == target:
            return c
    return None


def find_generic_add(page: Page) -> Control | None:
    for c in page.controls:
        if (c.label or "").strip().upper() == GENERIC_ADD_LABEL:
            return c
    return None


def guess_trigger(page: Page, name: str) -> Control | None:
    return find_by_action_metadata(page, name) or find_by_nearby_heading(page, name) or find_generic_add(page)
