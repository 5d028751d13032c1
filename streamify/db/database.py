import logging

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING

from streamify.core.config import settings

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient = None
db = None


async def connect_db():
    global client, db
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.DB_NAME]
    await ensure_indexes(db)
    logger.info(f"Connected to MongoDB database '{settings.DB_NAME}'")


async def ensure_indexes(database):
    await database["users"].create_index("email", unique=True)
    await database["users"].create_index("isOnboarded")
    await database["friend_requests"].create_index(
        [("sender", ASCENDING), ("recipient", ASCENDING)]
    )
    await database["friend_requests"].create_index(
        [("recipient", ASCENDING), ("status", ASCENDING)]
    )


async def close_db():
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")


def get_db():
    return db
