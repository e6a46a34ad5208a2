import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import RedirectResponse
from pymongo.errors import PyMongoError

from marketplace.database import get_db
from marketplace.models.product import Product
from marketplace.models.user import User
from marketplace.utils.audit import log_role_change
from marketplace.utils.guards import Capability, can, parse_int_id
from marketplace.utils.images import UnsupportedImage, save_uploaded_image
from marketplace.utils.products import (
    create_product,
    delete_product,
    get_product,
    list_products,
    save_product,
)
from marketplace.utils.security import get_current_seller, get_current_user
from marketplace.utils.templates import render
from marketplace.utils.users import set_user_role
from marketplace.utils.validators import format_price, parse_price_cents, parse_stock

router = APIRouter(prefix="/seller", tags=["Seller"])
logger = logging.getLogger(__name__)

MISSING_FIELDS = "Fill title, price, stock"


def _redirect_dashboard():
    return RedirectResponse("/seller/products", status_code=status.HTTP_303_SEE_OTHER)


def _form_error(request: Request, mode: str, message: str, form: dict, item: Optional[Product] = None,
                code: int = status.HTTP_400_BAD_REQUEST):
    return render(
        request,
        "seller_form.html",
        {"mode": mode, "error": message, "form": form, "item": item},
        status_code=code,
    )


async def _owned_product(db, product_id: str, user: User, capability: Capability) -> Product:
    pid = parse_int_id(product_id)
    product = await get_product(db, pid) if pid is not None else None
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not can(user, capability, product):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return product


# ======================================================
# ROLE UPGRADE
# ======================================================

@router.get("/upgrade")
async def upgrade(user: User = Depends(get_current_user), db=Depends(get_db)):
    if user.role.can_sell:
        return _redirect_dashboard()

    new_role = user.role.upgrade_to_seller()
    try:
        await set_user_role(db, user.id, new_role)
        await log_role_change(db, user, user.role, new_role, action="SELLER_UPGRADED")
    except PyMongoError as e:
        logger.exception("SELLER_UPGRADE_ERROR")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return _redirect_dashboard()


# ======================================================
# MY PRODUCTS
# ======================================================

@router.get("/products")
async def my_products(request: Request, seller: User = Depends(get_current_seller), db=Depends(get_db)):
    try:
        items = await list_products(db, seller_id=seller.id)
    except PyMongoError as e:
        logger.exception("SELLER_LISTING_ERROR")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return render(request, "seller_products.html", {"items": items})


@router.get("/products/new")
async def new_product_form(request: Request, seller: User = Depends(get_current_seller)):
    return render(request, "seller_form.html", {"mode": "create", "form": {}})


@router.post("/products")
async def create_product_submit(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    image: Optional[UploadFile] = File(None),
    seller: User = Depends(get_current_seller),
    db=Depends(get_db),
):
    title, description, price, stock = title.strip(), description.strip(), price.strip(), stock.strip()
    form = {"title": title, "description": description, "price": price, "stock": stock}

    if not title or not price or not stock:
        return _form_error(request, "create", MISSING_FIELDS, form)

    try:
        image_path = await save_uploaded_image(image, seller.id)
    except UnsupportedImage as e:
        return _form_error(request, "create", str(e), form)
    except (OSError, RuntimeError) as e:
        logger.exception("IMAGE_STORE_ERROR")
        return _form_error(request, "create", str(e), form, code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        await create_product(
            db,
            seller_id=seller.id,
            title=title,
            description=description,
            price_cents=parse_price_cents(price),
            stock=parse_stock(stock),
            image_path=image_path,
        )
    except PyMongoError as e:
        logger.exception("PRODUCT_CREATE_ERROR")
        return _form_error(request, "create", str(e), form, code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _redirect_dashboard()


# ======================================================
# EDIT / UPDATE
# ======================================================

@router.get("/products/{product_id}/edit")
async def edit_product_form(
    request: Request,
    product_id: str,
    seller: User = Depends(get_current_seller),
    db=Depends(get_db),
):
    item = await _owned_product(db, product_id, seller, Capability.EDIT_PRODUCT)
    form = {
        "title": item.title,
        "description": item.description,
        "price": format_price(item.price_cents),
        "stock": item.stock,
    }
    return render(request, "seller_form.html", {"mode": "edit", "item": item, "form": form})


@router.post("/products/{product_id}")
async def update_product_submit(
    request: Request,
    product_id: str,
    title: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    image: Optional[UploadFile] = File(None),
    seller: User = Depends(get_current_seller),
    db=Depends(get_db),
):
    item = await _owned_product(db, product_id, seller, Capability.EDIT_PRODUCT)

    title, description, price, stock = title.strip(), description.strip(), price.strip(), stock.strip()
    form = {"title": title, "description": description, "price": price, "stock": stock}

    if not title or not price or not stock:
        return _form_error(request, "edit", MISSING_FIELDS, form, item)

    try:
        image_path = await save_uploaded_image(image, seller.id)
    except UnsupportedImage as e:
        return _form_error(request, "edit", str(e), form, item)
    except (OSError, RuntimeError) as e:
        logger.exception("IMAGE_STORE_ERROR")
        return _form_error(request, "edit", str(e), form, item, code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # the old image stays unless a new one was uploaded
    if image_path:
        item.image_path = image_path

    item.title = title
    item.description = description
    item.price_cents = parse_price_cents(price)
    item.stock = parse_stock(stock)

    try:
        await save_product(db, item)
    except PyMongoError as e:
        logger.exception("PRODUCT_UPDATE_ERROR")
        return _form_error(request, "edit", str(e), form, item, code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _redirect_dashboard()


# ======================================================
# DELETE
# ======================================================

@router.post("/products/{product_id}/delete")
async def delete_product_submit(
    product_id: str,
    seller: User = Depends(get_current_seller),
    db=Depends(get_db),
):
    item = await _owned_product(db, product_id, seller, Capability.DELETE_PRODUCT)

    try:
        deleted = await delete_product(db, item.id, seller.id)
    except PyMongoError as e:
        logger.exception("PRODUCT_DELETE_ERROR")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    # removed by someone else between the lookup and the delete
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    return _redirect_dashboard()
