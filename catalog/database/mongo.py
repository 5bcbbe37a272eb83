from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from catalog.config import Settings


def create_client(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
    )


def products_collection(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorCollection:
    return client[settings.MONGO_DB][settings.PRODUCTS_COLLECTION]
