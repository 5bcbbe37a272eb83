import logging
from typing import Any, List, Optional, Protocol

from bson import ObjectId
from bson.errors import BSONError, InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from catalog.products.models import SortOrder

logger = logging.getLogger(__name__)

SORT_FIELD = "price"

# encoding failures (bad keys, ints over 8 bytes) surface from the driver calls too
DRIVER_ERRORS = (PyMongoError, BSONError, OverflowError)


class StoreError(Exception):
    pass


class ProductNotFoundError(StoreError):
    pass


class ProductStore(Protocol):
    async def ping(self) -> bool: ...
    async def get_products(self, limit: int, page: int, sort: Optional[SortOrder] = None) -> List[dict]: ...
    async def get_product_count(self) -> int: ...
    async def get_product_by_id(self, product_id: str) -> Optional[dict]: ...
    async def add_product(self, data: dict[str, Any]) -> dict: ...
    async def update_product(self, product_id: str, data: dict[str, Any]) -> dict: ...
    async def delete_product(self, product_id: str) -> bool: ...


def to_object_id(product_id: str) -> Optional[ObjectId]:
    # ObjectId(None) would mint a fresh id
    if not isinstance(product_id, str):
        return None
    try:
        return ObjectId(product_id)
    except InvalidId:
        return None


def serialize(doc: dict) -> dict:
    """Mongo document -> API dict (``_id`` becomes the string ``id``)."""
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    return out


class MongoProductStore:
    """
    Products collection accessed through motor.
    Driver failures surface as StoreError.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._col = collection

    async def ping(self) -> bool:
        try:
            await self._col.database.client.admin.command("ping")
            return True
        except DRIVER_ERRORS as e:
            logger.warning("Mongo ping failed: %s", e)
            return False

    async def get_products(self, limit: int, page: int, sort: Optional[SortOrder] = None) -> List[dict]:
        cursor = self._col.find().skip((page - 1) * limit).limit(limit)
        if sort is not None:
            cursor = cursor.sort(SORT_FIELD, ASCENDING if sort == SortOrder.asc else DESCENDING)
        try:
            docs = await cursor.to_list(length=limit)
        except DRIVER_ERRORS as e:
            raise StoreError("get_products failed") from e
        return [serialize(d) for d in docs]

    async def get_product_count(self) -> int:
        try:
            return await self._col.count_documents({})
        except DRIVER_ERRORS as e:
            raise StoreError("get_product_count failed") from e

    async def get_product_by_id(self, product_id: str) -> Optional[dict]:
        oid = to_object_id(product_id)
        if oid is None:
            return None
        try:
            doc = await self._col.find_one({"_id": oid})
        except DRIVER_ERRORS as e:
            raise StoreError("get_product_by_id failed") from e
        return serialize(doc) if doc else None

    async def add_product(self, data: dict[str, Any]) -> dict:
        doc = dict(data)
        try:
            result = await self._col.insert_one(doc)
        except DRIVER_ERRORS as e:
            raise StoreError("add_product failed") from e
        doc["_id"] = result.inserted_id
        return serialize(doc)

    async def update_product(self, product_id: str, data: dict[str, Any]) -> dict:
        oid = to_object_id(product_id)
        if oid is None:
            raise ProductNotFoundError(product_id)
        try:
            doc = await self._col.find_one_and_update(
                {"_id": oid},
                {"$set": data},
                return_document=ReturnDocument.AFTER,
            )
        except DRIVER_ERRORS as e:
            raise StoreError("update_product failed") from e
        if doc is None:
            raise ProductNotFoundError(product_id)
        return serialize(doc)

    async def delete_product(self, product_id: str) -> bool:
        oid = to_object_id(product_id)
        if oid is None:
            return False
        try:
            result = await self._col.delete_one({"_id": oid})
        except DRIVER_ERRORS as e:
            raise StoreError("delete_product failed") from e
        return result.deleted_count > 0
