from pydantic import BaseModel
from typing import Optional
from enum import Enum


class InvalidRoleTransition(ValueError):
    pass


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value) -> "Role":
        # unknown stored roles get the least privileged one
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.BUYER

    @property
    def can_sell(self) -> bool:
        return self in (Role.SELLER, Role.ADMIN)

    def upgrade_to_seller(self) -> "Role":
        """
        The only role transition users can trigger themselves.
        There is no way back to buyer and no way into admin.
        """
        if self is not Role.BUYER:
            raise InvalidRoleTransition(f"Cannot upgrade {self.value} to seller")
        return Role.SELLER


class User(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    phone: Optional[str] = None
    password_hash: str
    role: Role = Role.BUYER

    @classmethod
    def from_doc(cls, doc: dict) -> "User":
        return cls(
            id=doc["_id"],
            username=doc["username"],
            email=doc.get("email") or None,
            phone=doc.get("phone") or None,
            password_hash=doc.get("password_hash", ""),
            role=Role.parse(doc.get("role")),
        )
