import streamlit as st

from catalog import PRODUCTS, trigger_id
from views import format_price

SEARCH_WIDGET = "header-search"

# Buttons standing in for the suggestion list's keyboard.
SEARCH_KEYS = [
    ("search_prev", "↑ Previous", "ArrowUp"),
    ("search_next", "↓ Next", "ArrowDown"),
    ("search_go", "Go", "Enter"),
    ("suggestions_close", "Close", "Escape"),
]


def toggle_search(search):
    """Browse all / Hide: expanding focuses the box on the next tick, collapsing closes every list."""
    search.toggle(SEARCH_WIDGET)
    if not search.state(SEARCH_WIDGET).expanded:
        search.outside_click()


def _search_box(shop):
    search = shop.search
    state = search.state(SEARCH_WIDGET)

    def _on_query():
        search.focus(SEARCH_WIDGET)
        search.set_query(SEARCH_WIDGET, st.session_state.search_query)

    c1, c2 = st.columns([4, 1])
    c1.text_input("Search", placeholder="e.g. espresso, decaf", key="search_query", on_change=_on_query)
    if c2.button("Hide" if state.expanded else "Browse all", key="search_browse"):
        toggle_search(search)
        st.rerun()
    if not state.open:
        return

    with st.container(border=True):
        for i, row in enumerate(search.rows(SEARCH_WIDGET)):
            if row.empty:
                st.caption(row.title)
                break
            label = row.title + (f" · {row.price_text}" if row.price_text else "")
            if st.button(label, key=f"suggestion_{i}", type="primary" if row.selected else "secondary"):
                search.activate(SEARCH_WIDGET, i)
                st.rerun()
        for col, (key, label, pressed) in zip(st.columns(len(SEARCH_KEYS)), SEARCH_KEYS):
            if col.button(label, key=key):
                search.key(SEARCH_WIDGET, pressed)
                st.rerun()


def _product_card(shop, product, card):
    editor = shop.editor
    tid = trigger_id(product)
    with st.container(border=True):
        title = product["name"]
        st.subheader(f"⭐ {title}" if card.highlighted else title)
        st.caption(product["image"])
        st.metric("Price", format_price(product["price"]))

        session = editor.session(tid)
        if session is None:
            if st.button("Add to cart", key=tid):
                editor.add_to_cart(product["name"], product["image"], product["price"], trigger_id=tid)
                st.rerun()
            return

        c1, c2, c3 = st.columns([1, 1, 1])
        if c1.button("−", key=f"{tid}_minus"):
            editor.decrement(tid)
            st.rerun()
        c2.markdown(f"**{session.quantity}**")
        if c3.button("+", key=f"{tid}_plus"):
            editor.increment(tid)
            st.rerun()
        a1, a2 = st.columns(2)
        if a1.button("Add", key=f"{tid}_commit", type="primary"):
            editor.commit(tid)
            st.rerun()
        if a2.button("Cancel", key=f"{tid}_cancel"):
            editor.cancel(tid)
            st.rerun()


def page_home(shop):
    st.header("☕ The Coffee Corner – Shop")
    _search_box(shop)

    st.subheader("Products")
    cards = shop.page.shop_cards()
    cols = st.columns(3)
    for i, (product, card) in enumerate(zip(PRODUCTS, cards)):
        with cols[i % 3]:
            _product_card(shop, product, card)
    st.sidebar.caption("Open the Cart to review your items.")
