import streamlit as st

from state import init_state
from home import page_home
from cart_page import page_cart
from checkout import page_checkout
from ui_text import SHOP_NAME
from views import badge

PAGES = ["Shop", "Cart", "Checkout"]


@st.fragment(run_every="1s")
def _cart_badge(shop):
    # Pumps toast/scroll timers and applies writes made from other tabs.
    if shop.pump():
        st.rerun(scope="app")
    b = badge(shop.store.snapshot())
    if b.visible:
        st.markdown(f"🛒 **{b.text}** in cart")
    else:
        st.caption("🛒 Cart is empty")


def _order_banner():
    last = st.session_state.get("last_order")
    if not last:
        return
    st.success(last["message"])
    st.caption(f"Placed {last['placed_at']}")
    st.session_state.last_order = None


def run_app():
    shop = init_state()

    if "nav_to" in st.session_state:
        st.session_state.page = st.session_state.pop("nav_to")

    st.sidebar.title(SHOP_NAME)
    with st.sidebar:
        _cart_badge(shop)
    page = st.sidebar.radio("Menu", PAGES, key="page")
    shop.show_page(page)

    _order_banner()
    if page == "Shop":
        page_home(shop)
    elif page == "Cart":
        page_cart(shop)
    else:
        page_checkout(shop)
