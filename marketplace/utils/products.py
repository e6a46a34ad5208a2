import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pymongo import DESCENDING

from marketplace.models.product import Product
from marketplace.utils.mongo import next_sequence, serialize_doc

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("_id", DESCENDING)]


def serialize_product(product: Product) -> dict:
    return serialize_doc({
        "id": product.id,
        "seller_id": product.seller_id,
        "title": product.title,
        "description": product.description,
        "price_cents": product.price_cents,
        "stock": product.stock,
        "image_path": product.image_path,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    })


async def list_products(db, seller_id: Optional[int] = None) -> List[Product]:
    query = {}
    if seller_id is not None:
        query["seller_id"] = seller_id

    docs = await db.products.find(query, sort=NEWEST_FIRST).to_list(length=None)
    return [Product.from_doc(d) for d in docs]


async def get_product(db, product_id: int) -> Optional[Product]:
    doc = await db.products.find_one({"_id": product_id})
    return Product.from_doc(doc) if doc else None


async def get_products_by_ids(db, product_ids: Iterable[int]) -> Dict[int, Product]:
    ids = list(product_ids)
    if not ids:
        return {}

    docs = await db.products.find({"_id": {"$in": ids}}).to_list(length=None)
    return {d["_id"]: Product.from_doc(d) for d in docs}


async def create_product(
    db,
    *,
    seller_id: int,
    title: str,
    description: str,
    price_cents: int,
    stock: int,
    image_path: str = "",
) -> Product:
    product_id = await next_sequence(db, "products")
    now = datetime.utcnow()

    doc = {
        "_id": product_id,
        "seller_id": seller_id,
        "title": title,
        "description": description,
        "price_cents": price_cents,
        "stock": stock,
        "image_path": image_path,
        "created_at": now,
        "updated_at": now,
    }
    await db.products.insert_one(doc)

    logger.info("Product %s created by seller %s", product_id, seller_id)
    return Product.from_doc(doc)


async def save_product(db, product: Product) -> Product:
    product.updated_at = datetime.utcnow()
    await db.products.update_one(
        {"_id": product.id},
        {"$set": {
            "title": product.title,
            "description": product.description,
            "price_cents": product.price_cents,
            "stock": product.stock,
            "image_path": product.image_path,
            "updated_at": product.updated_at,
        }},
    )
    logger.info("Product %s updated", product.id)
    return product


async def delete_product(db, product_id: int, seller_id: int) -> bool:
    # seller_id in the filter keeps the delete scoped to the owner
    res = await db.products.delete_one({"_id": product_id, "seller_id": seller_id})
    if res.deleted_count:
        logger.info("Product %s deleted by seller %s", product_id, seller_id)
    return res.deleted_count == 1
