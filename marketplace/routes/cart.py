from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from marketplace.config.constants import DEFAULT_CART_QTY
from marketplace.database import get_db
from marketplace.models.session import SessionData
from marketplace.utils.cart import add_item, build_view, cart_product_ids, remove_item, update_item
from marketplace.utils.guards import parse_int_id
from marketplace.utils.products import get_product, get_products_by_ids
from marketplace.utils.session import get_session
from marketplace.utils.templates import render
from marketplace.utils.validators import parse_int

router = APIRouter(prefix="/cart", tags=["Cart"])


def _redirect_cart():
    return RedirectResponse("/cart", status_code=status.HTTP_303_SEE_OTHER)


def _cart_key(product_id: str) -> str:
    # "010" and "10" name the same cart entry
    pid = parse_int_id(product_id)
    return str(pid) if pid is not None else product_id


@router.get("")
async def view_cart(
    request: Request,
    session: SessionData = Depends(get_session),
    db=Depends(get_db),
):
    products = await get_products_by_ids(db, cart_product_ids(session.cart))
    view = build_view(session.cart, products)
    return render(request, "cart.html", {"rows": view.rows, "total_cents": view.total_cents})


@router.post("/add")
async def add_to_cart(
    product_id: str = Form(""),
    qty: str = Form(""),
    session: SessionData = Depends(get_session),
    db=Depends(get_db),
):
    product_id = product_id.strip()
    if not product_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="no product")

    quantity = parse_int(qty.strip() or str(DEFAULT_CART_QTY))
    if quantity <= 0:
        quantity = DEFAULT_CART_QTY

    pid = parse_int_id(product_id)
    product = await get_product(db, pid) if pid is not None else None
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")

    # only an out-of-stock gate; cart quantity is not checked against stock
    if product.stock <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="out of stock")

    add_item(session.cart, str(product.id), quantity)
    return _redirect_cart()


@router.post("/update")
async def update_cart_item(
    product_id: str = Form(""),
    qty: str = Form(""),
    session: SessionData = Depends(get_session),
):
    product_id = product_id.strip()
    if product_id:
        update_item(session.cart, _cart_key(product_id), parse_int(qty.strip()))
    return _redirect_cart()


@router.post("/remove")
async def remove_cart_item(
    product_id: str = Form(""),
    session: SessionData = Depends(get_session),
):
    product_id = product_id.strip()
    if product_id:
        remove_item(session.cart, _cart_key(product_id))
    return _redirect_cart()
