from __future__ import annotations

import gc

from cart_page import add_recommendation, view_recommendation
from catalog import PRODUCTS, RECOMMENDATIONS, build_shop_page, trigger_id
from channel import ChangeChannel
from home import SEARCH_KEYS, SEARCH_WIDGET, toggle_search
from state import build_session
from storage import MemoryStorage


def test_shop_page_has_a_bound_control_per_product() -> None:
    page = build_shop_page()
    assert len(page.cards) == len(PRODUCTS)
    assert page.control(trigger_id(PRODUCTS[0])).label == "Add to cart"


def test_session_wires_editor_search_and_sync(timers) -> None:
    storage, channel = MemoryStorage(), ChangeChannel()
    tab_a = build_session(storage, channel, context_id="a", timers=timers)
    tab_b = build_session(storage, channel, context_id="b", timers=timers)

    product = PRODUCTS[1]
    session = tab_a.editor.add_to_cart(product["name"], product["image"], product["price"])
    assert session.trigger_id == trigger_id(product)
    tab_a.editor.commit(session.trigger_id)

    # B only picks the change up on its own tick.
    assert tab_b.bridge.pending
    assert not tab_a.bridge.pending
    assert tab_b.store.aggregates().item_count == 0
    assert tab_b.pump()
    assert tab_b.store.aggregates().item_count == 1
    assert len(tab_a.search.products) == len(PRODUCTS)


def test_closed_sessions_leave_no_listeners() -> None:
    storage, channel = MemoryStorage(), ChangeChannel()
    for i in range(50):
        build_session(storage, channel, context_id=f"closed-{i}")
    gc.collect()

    live = build_session(storage, channel, context_id="live")
    live.store.add("Latte", "l.png", 4)
    assert channel.subscriber_count("memory:cart") == 1


def test_leaving_a_page_drops_its_toasts_and_timers(timers) -> None:
    shop = build_session(MemoryStorage(), ChangeChannel(), context_id="a", timers=timers)
    assert shop.show_page("Shop")
    assert not shop.show_page("Shop")

    product = PRODUCTS[0]
    tid = trigger_id(product)
    shop.editor.request(tid, product["name"], product["image"], product["price"])
    shop.editor.commit(tid)
    assert shop.toasts.toasts and timers.pending() > 0

    assert shop.show_page("Cart")
    assert shop.toasts.toasts == []
    assert timers.pending() == 0


def test_search_buttons_drive_the_keyboard(timers) -> None:
    shop = build_session(MemoryStorage(), ChangeChannel(), context_id="a", timers=timers)
    search = shop.search
    keys = {key: pressed for key, _, pressed in SEARCH_KEYS}

    toggle_search(search)
    timers.advance(0.05)
    assert search.state(SEARCH_WIDGET).open

    search.key(SEARCH_WIDGET, keys["search_next"])
    search.key(SEARCH_WIDGET, keys["search_next"])
    search.key(SEARCH_WIDGET, keys["search_prev"])
    assert search.state(SEARCH_WIDGET).highlight == 0

    search.key(SEARCH_WIDGET, keys["search_go"])
    assert not search.state(SEARCH_WIDGET).open
    assert shop.page.scroll_target == "products"

    search.focus(SEARCH_WIDGET)
    search.key(SEARCH_WIDGET, keys["suggestions_close"])
    assert not search.state(SEARCH_WIDGET).open

    # Collapsing the bar closes its list too.
    search.focus(SEARCH_WIDGET)
    toggle_search(search)
    assert not search.state(SEARCH_WIDGET).expanded
    assert not search.state(SEARCH_WIDGET).open


def test_recommendations_add_and_view(store) -> None:
    assert add_recommendation(store, 0)
    assert add_recommendation(store, 0)
    assert not add_recommendation(store, 99)
    assert store.items[0].name == RECOMMENDATIONS[0]["name"]
    assert store.items[0].quantity == 2
    assert view_recommendation(1) == "German Coffee Beans: $20.00"
    assert view_recommendation(-1) is None
