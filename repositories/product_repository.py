"""Async repository for the read-mostly `products` collection."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.base import parse_object_id
from schemas.models.product import ProductDoc


class ProductRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("category", ASCENDING)])

    async def find_by_id(self, product_id: Any) -> Optional[ProductDoc]:
        oid = parse_object_id(product_id)
        if oid is None:
            return None
        return ProductDoc.from_mongo(await self._col.find_one({"_id": oid}))

    async def find_by_ids(self, product_ids: Iterable[ObjectId]) -> dict[ObjectId, ProductDoc]:
        ids = list({oid for oid in product_ids})
        if not ids:
            return {}
        cursor = self._col.find({"_id": {"$in": ids}})
        products = {}
        async for doc in cursor:
            product = ProductDoc.from_mongo(doc)
            products[product.id] = product
        return products

    async def list_page(self, skip: int, limit: int) -> tuple[list[ProductDoc], int]:
        total = await self._col.count_documents({})
        cursor = self._col.find({}).sort("_id", ASCENDING).skip(skip).limit(limit)
        items = [ProductDoc.from_mongo(doc) async for doc in cursor]
        return items, total
