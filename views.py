from __future__ import annotations

from dataclasses import dataclass

from cart import CartSnapshot

BADGE_CAP = 99


def format_price(n) -> str:
    return "$" + f"{float(n):.2f}"


@dataclass(frozen=True)
class Badge:
    text: str
    visible: bool


def badge(snapshot: CartSnapshot) -> Badge:
    count = snapshot.aggregates.item_count
    text = f"{BADGE_CAP}+" if count > BADGE_CAP else str(count)
    return Badge(text, count > 0)


def cart_lines(snapshot: CartSnapshot) -> list[dict]:
    return [
        {
            "index": idx,
            "name": item.name,
            "image": item.image,
            "quantity": item.quantity,
            "unit_price": format_price(item.price),
            "line_total": format_price(item.price * item.quantity),
        }
        for idx, item in enumerate(snapshot.items)
    ]


def cart_summary(snapshot: CartSnapshot) -> dict:
    agg = snapshot.aggregates
    return {
        "items": agg.item_count,
        "subtotal": format_price(agg.subtotal),
        "total": format_price(agg.total),
    }


def checkout_summary(snapshot: CartSnapshot) -> dict:
    agg = snapshot.aggregates
    return {
        "rows": [(f"{i.quantity} × {i.name}", format_price(i.price * i.quantity)) for i in snapshot.items],
        "subtotal": format_price(agg.subtotal),
        "shipping": "Free" if agg.shipping == 0 else format_price(agg.shipping),
        "total": format_price(agg.total),
    }
