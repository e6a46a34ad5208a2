import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure

logger = logging.getLogger(__name__)

# IndexOptionsConflict, IndexKeySpecsConflict
_CONFLICT_CODES = {85, 86}

INDEXES = {
    "users": [
        ([("username", ASCENDING)], {"name": "users_username_unique_idx", "unique": True}),
        # email/phone are omitted from the document when not given
        ([("email", ASCENDING)], {"name": "users_email_unique_idx", "unique": True, "sparse": True}),
        ([("phone", ASCENDING)], {"name": "users_phone_unique_idx", "unique": True, "sparse": True}),
    ],
    "products": [
        ([("seller_id", ASCENDING), ("_id", DESCENDING)], {"name": "products_seller_newest_idx"}),
    ],
    "audit_logs": [
        ([("actor_id", ASCENDING), ("created_at", DESCENDING)], {"name": "audit_logs_actor_created_at_idx"}),
    ],
}


async def _create_index_safe(collection, keys, **kwargs):
    """
    Create an index, replacing an existing one on the same keys whose
    name or options differ.
    """
    try:
        await collection.create_index(keys, **kwargs)
        return
    except OperationFailure as e:
        if e.code not in _CONFLICT_CODES:
            raise

    wanted = list(keys)
    async for idx in collection.list_indexes():
        name = idx.get("name")
        if list(idx.get("key", {}).items()) == wanted and name != kwargs.get("name"):
            logger.warning("Dropping conflicting index %s on %s", name, collection.name)
            await collection.drop_index(name)

    await collection.create_index(keys, **kwargs)


async def ensure_indexes(db):
    for collection_name, specs in INDEXES.items():
        for keys, options in specs:
            await _create_index_safe(db[collection_name], keys, **options)
    logger.info("Indexes ensured")
