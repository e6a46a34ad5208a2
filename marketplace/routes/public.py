import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from marketplace.database import get_db
from marketplace.utils.products import list_products, serialize_product
from marketplace.utils.templates import render

router = APIRouter(tags=["Public"])
logger = logging.getLogger(__name__)


# ============================================================
# HOME PAGE
# ============================================================

@router.get("/")
async def home(request: Request, db=Depends(get_db)):
    try:
        items = await list_products(db)
    except PyMongoError:
        logger.exception("HOME_LISTING_ERROR")
        items = []

    return render(request, "list.html", {"items": items})


# ============================================================
# JSON LISTING
# ============================================================

@router.get("/products")
async def products_json(db=Depends(get_db)):
    try:
        items = await list_products(db)
    except PyMongoError as e:
        logger.exception("PRODUCTS_JSON_ERROR")
        return JSONResponse({"error": str(e)}, status_code=500)

    return [serialize_product(p) for p in items]
