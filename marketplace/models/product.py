from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Product(BaseModel):
    id: int
    seller_id: int
    title: str
    description: str = ""

    price_cents: int
    stock: int = Field(0, ge=0)

    image_path: str = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Product":
        return cls(
            id=doc["_id"],
            seller_id=doc["seller_id"],
            title=doc.get("title", ""),
            description=doc.get("description") or "",
            price_cents=int(doc.get("price_cents", 0)),
            stock=max(int(doc.get("stock", 0)), 0),
            image_path=doc.get("image_path") or "",
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
