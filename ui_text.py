SHOP_NAME = "The Coffee Corner"

EMPTY_CART_TITLE = "Your cart is empty ☕"
EMPTY_CART_HINT = "Add something from our recommendations."

CLEAR_CART_CONFIRM = "Clear all items?"

MISSING_FIELDS = "Please fill in all required fields."
MISSING_CARD_DETAILS = "Please fill complete card details."

ORDER_PLACED = """🎉 Order placed successfully!

Thank you for shopping at The Coffee Corner!"""

PAYMENT_OPTIONS = {
    "card": "Credit / debit card",
    "cod": "Cash on delivery",
}
