"""Record Store collection names owned by the store."""

PRODUCTS = "products"
ORDERS = "orders"
ORDER_ITEMS = "order_items"
CARTS = "carts"
