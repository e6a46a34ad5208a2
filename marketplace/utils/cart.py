from typing import Dict, List, Mapping

from pydantic import BaseModel

from marketplace.config.constants import DEFAULT_CART_QTY
from marketplace.models.product import Product
from marketplace.utils.guards import parse_int_id

Cart = Dict[str, int]


class CartRow(BaseModel):
    product: Product
    qty: int
    subtotal_cents: int


class CartView(BaseModel):
    rows: List[CartRow] = []
    total_cents: int = 0


def add_item(cart: Cart, product_id: str, qty: int = DEFAULT_CART_QTY) -> Cart:
    cart[product_id] = cart.get(product_id, 0) + qty
    if cart[product_id] < 1:
        cart[product_id] = 1
    return cart


def update_item(cart: Cart, product_id: str, qty: int) -> Cart:
    if qty <= 0:
        cart.pop(product_id, None)
    else:
        cart[product_id] = qty
    return cart


def remove_item(cart: Cart, product_id: str) -> Cart:
    cart.pop(product_id, None)
    return cart


def cart_product_ids(cart: Mapping[str, int]) -> List[int]:
    ids = (parse_int_id(pid) for pid in cart)
    return [pid for pid in ids if pid is not None]


def build_view(cart: Mapping[str, int], products: Mapping[int, Product]) -> CartView:
    """
    Price every cart entry against current product data.
    Entries whose product is gone are skipped; the cart itself is not touched.
    """
    view = CartView()
    for pid, qty in cart.items():
        product = products.get(parse_int_id(pid))
        if product is None:
            continue

        subtotal = product.price_cents * qty
        view.rows.append(CartRow(product=product, qty=qty, subtotal_cents=subtotal))
        view.total_cents += subtotal

    return view
