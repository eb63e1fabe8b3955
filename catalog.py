from page_model import Control, Page, ProductCard

PRODUCTS = [
    {"id": "espresso-blend", "name": "Espresso Blend", "image": "p1.png", "price": 14.0},
    {"id": "house-roast", "name": "House Roast", "image": "p2.png", "price": 12.5},
    {"id": "colombian-supremo", "name": "Colombian Supremo", "image": "p3.png", "price": 18.0},
    {"id": "ethiopian-yirgacheffe", "name": "Ethiopian Yirgacheffe", "image": "p4.png", "price": 21.0},
    {"id": "decaf-swiss-water", "name": "Decaf Swiss Water", "image": "p5.png", "price": 16.0},
    {"id": "cold-brew-pack", "name": "Cold Brew Pack", "image": "p6.png", "price": 9.5},
]

RECOMMENDATIONS = [
    {"name": "Arabian Coffee Beans", "image": "p1.png", "price": 15},
    {"name": "German Coffee Beans", "image": "p3.png", "price": 20},
    {"name": "French Coffee Beans", "image": "p4.png", "price": 22},
    {"name": "English Coffee Beans", "image": "p5.png", "price": 17},
]


def trigger_id(product: dict) -> str:
    return f"add_{product['id']}"


def product_by_name(name: str, products=PRODUCTS) -> dict | None:
    for p in products:
        if p["name"] == name:
            return p
    return None


def build_shop_page(products=PRODUCTS) -> Page:
    page = Page(landmarks={"products"})
    for p in products:
        page.cards.append(ProductCard(
            title=p["name"],
            image_style=f"background-image: url('{p['image']}')",
            price_attr=str(p["price"]) if p.get("price") is not None else None,
        ))
        page.add_control(Control(
            id=trigger_id(p),
            label="Add to cart",
            action=f"add_to_cart('{p['name']}')",
            container_heading=p["name"],
        ))
    return page


def recommendation(i: int) -> dict | None:
    if 0 <= i < len(RECOMMENDATIONS):
        return RECOMMENDATIONS[i]
    return None
