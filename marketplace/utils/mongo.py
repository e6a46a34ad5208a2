from datetime import datetime

from pymongo import ReturnDocument


async def next_sequence(db, name: str) -> int:
    """
    Allocates the next integer id for a collection.
    A single atomic $inc on the counters collection, so ids never repeat.
    """
    counter = await db.counters.find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(counter["seq"])


def serialize_value(value):
    return value.isoformat() if isinstance(value, datetime) else value


def serialize_doc(doc: dict) -> dict:
    if not doc:
        return doc

    return {k: serialize_value(v) for k, v in doc.items()}
