from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

import streamlit as st

from cart import CartStore
from ui_text import MISSING_CARD_DETAILS, MISSING_FIELDS, ORDER_PLACED, PAYMENT_OPTIONS
from utils import format_local_time, get_local_now
from views import checkout_summary

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("full_name", "email", "phone", "address", "city", "zip")
CARD_FIELDS = ("card_number", "card_expiry", "card_cvv")


@dataclass
class CheckoutForm:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip: str = ""
    payment: str = "card"
    card_number: str = ""
    card_expiry: str = ""
    card_cvv: str = ""


@dataclass
class OrderResult:
    ok: bool
    message: str
    placed_at: datetime | None = None


def validate_checkout(form: CheckoutForm) -> str | None:
    """One blocking message, or None when the form can be submitted."""
    if any(not (getattr(form, f) or "").strip() for f in REQUIRED_FIELDS):
        return MISSING_FIELDS
    if form.payment == "card" and any(not (getattr(form, f) or "").strip() for f in CARD_FIELDS):
        return MISSING_CARD_DETAILS
    return None


def place_order(store: CartStore, form: CheckoutForm) -> OrderResult:
    error = validate_checkout(form)
    if error:
        return OrderResult(False, error)
    store.discard()
    placed_at = get_local_now()
    logger.info("Order placed at %s", placed_at.isoformat())
    return OrderResult(True, ORDER_PLACED, placed_at)


def page_checkout(shop):
    st.header("🧾 Checkout")

    snap = shop.store.snapshot()
    summary = checkout_summary(snap)

    st.subheader("Order summary")
    if not snap.items:
        st.info("Your cart is empty. Go back to Shop to add items.")
    for label, amount in summary["rows"]:
        c1, c2 = st.columns([3, 1])
        c1.write(label)
        c2.write(amount)
    st.divider()
    c1, c2, c3 = st.columns(3)
    c1.metric("Subtotal", summary["subtotal"])
    c2.metric("Shipping", summary["shipping"])
    c3.metric("Total", summary["total"])

    st.subheader("Shipping details")
    form = CheckoutForm(
        full_name=st.text_input("Full name"),
        email=st.text_input("Email"),
        phone=st.text_input("Phone"),
        address=st.text_area("Address", height=80),
        city=st.text_input("City"),
        zip=st.text_input("ZIP / Postcode"),
    )

    form.payment = st.radio(
        "Payment", list(PAYMENT_OPTIONS), format_func=PAYMENT_OPTIONS.get, horizontal=True
    )
    if form.payment == "card":
        c1, c2, c3 = st.columns([2, 1, 1])
        with c1:
            form.card_number = st.text_input("Card number")
        with c2:
            form.card_expiry = st.text_input("Expiry", placeholder="MM/YY")
        with c3:
            form.card_cvv = st.text_input("CVV", type="password")

    if st.button("Place order", type="primary"):
        result = place_order(shop.store, form)
        if not result.ok:
            st.error(result.message)
            return
        st.session_state.last_order = {
            "message": result.message,
            "placed_at": format_local_time(result.placed_at),
        }
        st.session_state.nav_to = "Shop"
        st.rerun()
