from motor.motor_asyncio import AsyncIOMotorClient

from marketplace.config.env import MONGODB_URI, MONGODB_DEFAULT_DB

if not MONGODB_URI:
    raise RuntimeError("MONGODB_URI not set")

client = AsyncIOMotorClient(MONGODB_URI)
db = client.get_default_database(MONGODB_DEFAULT_DB)

def get_db():
    return db
