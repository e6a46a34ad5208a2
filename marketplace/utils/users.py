import logging
from datetime import datetime
from typing import Optional

from marketplace.models.session import SessionData
from marketplace.models.user import Role, User
from marketplace.utils.mongo import next_sequence

logger = logging.getLogger(__name__)

LOOKUP_FIELDS = {"email", "phone", "username"}


async def find_user_by(db, field: str, value: str) -> Optional[User]:
    if field not in LOOKUP_FIELDS:
        raise ValueError(f"Users cannot be looked up by {field}")
    if not value:
        return None

    doc = await db.users.find_one({field: value})
    return User.from_doc(doc) if doc else None


async def user_exists(db, field: str, value: str) -> bool:
    return await find_user_by(db, field, value) is not None


async def resolve_user(db, session: SessionData) -> Optional[User]:
    """
    Map the session's identity claims back to a user record.
    Email wins when both claims are present. None means the session
    points at nobody and must be treated as logged out.
    """
    if session.user_email:
        return await find_user_by(db, "email", session.user_email)
    if session.user_username:
        return await find_user_by(db, "username", session.user_username)
    return None


async def create_user(
    db,
    *,
    username: str,
    password_hash: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    user_id = await next_sequence(db, "users")
    now = datetime.utcnow()

    doc = {
        "_id": user_id,
        "username": username,
        "password_hash": password_hash,
        "role": Role.BUYER.value,
        "created_at": now,
        "updated_at": now,
    }
    # absent contacts stay absent so the sparse unique indexes ignore them
    if email:
        doc["email"] = email
    if phone:
        doc["phone"] = phone

    await db.users.insert_one(doc)
    logger.info("User %s registered (id=%s)", username, user_id)
    return User.from_doc(doc)


async def set_user_role(db, user_id: int, role: Role) -> None:
    await db.users.update_one(
        {"_id": user_id},
        {"$set": {"role": role.value, "updated_at": datetime.utcnow()}},
    )
