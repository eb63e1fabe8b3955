import streamlit as st

from catalog import RECOMMENDATIONS, recommendation
from ui_text import CLEAR_CART_CONFIRM, EMPTY_CART_HINT, EMPTY_CART_TITLE
from views import cart_lines, cart_summary, format_price


def add_recommendation(store, i: int) -> bool:
    p = recommendation(i)
    if not p:
        return False
    store.add(p["name"], p["image"], p["price"], 1)
    return True


def view_recommendation(i: int) -> str | None:
    p = recommendation(i)
    if not p:
        return None
    return f"{p['name']}: {format_price(p['price'])}"


def _lines(shop):
    snap = shop.store.snapshot()
    if not snap.items:
        st.subheader(EMPTY_CART_TITLE)
        st.write(EMPTY_CART_HINT)
        return snap

    for line in cart_lines(snap):
        idx = line["index"]
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([3, 2, 1, 1])
            with c1:
                st.markdown(f"**{line['name']}**")
                st.caption(f"Unit price: {line['unit_price']}")
            with c2:
                m, q, p = st.columns(3)
                if m.button("−", key=f"dec_{idx}"):
                    shop.store.set_quantity(idx, -1)
                    st.rerun()
                q.markdown(f"**{line['quantity']}**")
                if p.button("+", key=f"inc_{idx}"):
                    shop.store.set_quantity(idx, 1)
                    st.rerun()
            with c3:
                st.write(line["line_total"])
            with c4:
                if st.button("Remove", key=f"remove_{idx}"):
                    shop.store.remove(idx)
                    st.rerun()
    return snap


def _summary(shop, snap):
    summary = cart_summary(snap)
    st.subheader("Summary")
    st.write(f"Items: {summary['items']}")
    st.write(f"Subtotal: {summary['subtotal']}")
    st.markdown(f"**Total: {summary['total']}**")

    if st.session_state.confirm_clear:
        st.warning(CLEAR_CART_CONFIRM)
        y, n = st.columns(2)
        if y.button("Yes, clear", key="clear_yes"):
            shop.store.clear()
            st.session_state.confirm_clear = False
            st.rerun()
        if n.button("Keep items", key="clear_no"):
            st.session_state.confirm_clear = False
            st.rerun()
    elif st.button("Clear cart"):
        st.session_state.confirm_clear = True
        st.rerun()

    if st.button("Checkout", type="primary"):
        st.session_state.nav_to = "Checkout"
        st.rerun()


def _recommendations(shop):
    st.subheader("You may also like")
    cols = st.columns(len(RECOMMENDATIONS))
    for i, p in enumerate(RECOMMENDATIONS):
        with cols[i]:
            st.markdown(f"**{p['name']}**")
            st.write(format_price(p["price"]))
            if st.button("Add", key=f"rec_add_{i}", type="primary"):
                add_recommendation(shop.store, i)
                st.rerun()
            if st.button("View", key=f"rec_view_{i}"):
                st.info(view_recommendation(i))


def page_cart(shop):
    st.header("🛒 Your cart")
    left, right = st.columns([3, 1])
    with left:
        snap = _lines(shop)
    with right:
        _summary(shop, snap)
    _recommendations(shop)
