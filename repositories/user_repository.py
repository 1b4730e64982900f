"""
Async repository for the `users` collection.

All reads return UserDoc instances (or None); callers never see raw dicts.
Token consumption (email confirmation, password reset) is done with a single
find_one_and_update whose filter includes the token hash and expiry, so a
token cannot be consumed twice even by concurrent requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.base import parse_object_id
from schemas.models.user import CartItem, UserDoc, Wishlist
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class UserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("email", ASCENDING)], unique=True)
        await self._col.create_index([("username", ASCENDING)], unique=True)
        await self._col.create_index(
            [("email_confirmation_token_hash", ASCENDING)], sparse=True
        )
        await self._col.create_index(
            [("reset_password_token_hash", ASCENDING)], sparse=True
        )

    async def find_by_id(self, user_id: Any) -> Optional[UserDoc]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        return UserDoc.from_mongo(await self._col.find_one({"_id": oid}))

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"email": email}))

    async def exists_with_email_or_username(
        self,
        email: Optional[str],
        username: Optional[str],
        exclude_id: Optional[ObjectId] = None,
    ) -> bool:
        clauses = []
        if email:
            clauses.append({"email": email})
        if username:
            clauses.append({"username": username})
        if not clauses:
            return False
        query: dict = {"$or": clauses}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return await self._col.find_one(query, {"_id": 1}) is not None

    async def insert(self, user: UserDoc) -> ObjectId:
        """Insert *user*; pymongo's DuplicateKeyError propagates to the caller."""
        result = await self._col.insert_one(user.to_mongo())
        return result.inserted_id

    async def update_fields(
        self,
        user_id: ObjectId,
        set_fields: Optional[dict] = None,
        unset_fields: Optional[list[str]] = None,
    ) -> None:
        update: dict = {"$set": {**(set_fields or {}), "updated_at": utcnow()}}
        if unset_fields:
            update["$unset"] = {name: "" for name in unset_fields}
        await self._col.update_one({"_id": user_id}, update)

    async def consume_confirmation_token(
        self, token_hash: str, now: datetime
    ) -> Optional[UserDoc]:
        doc = await self._col.find_one_and_update(
            {
                "email_confirmation_token_hash": token_hash,
                "email_confirmation_expires_at": {"$gt": now},
            },
            {
                "$set": {"is_email_confirmed": True, "updated_at": now},
                "$unset": {
                    "email_confirmation_token_hash": "",
                    "email_confirmation_expires_at": "",
                },
            },
            return_document=ReturnDocument.AFTER,
        )
        return UserDoc.from_mongo(doc)

    async def consume_reset_token(
        self, token_hash: str, now: datetime, new_password_hash: str
    ) -> Optional[UserDoc]:
        doc = await self._col.find_one_and_update(
            {
                "reset_password_token_hash": token_hash,
                "reset_password_expires_at": {"$gt": now},
            },
            {
                "$set": {"password_hash": new_password_hash, "updated_at": now},
                "$unset": {
                    "reset_password_token_hash": "",
                    "reset_password_expires_at": "",
                },
            },
            return_document=ReturnDocument.AFTER,
        )
        return UserDoc.from_mongo(doc)

    async def add_session(self, user_id: ObjectId, token_hash: str) -> None:
        await self._col.update_one(
            {"_id": user_id}, {"$push": {"tokens": {"token_hash": token_hash}}}
        )

    async def remove_session(self, user_id: ObjectId, token_hash: str) -> None:
        await self._col.update_one(
            {"_id": user_id}, {"$pull": {"tokens": {"token_hash": token_hash}}}
        )

    async def save_cart(self, user_id: ObjectId, cart: list[CartItem]) -> None:
        await self.update_fields(
            user_id, {"cart": [item.model_dump() for item in cart]}
        )

    async def save_wishlists(
        self, user_id: ObjectId, wishlists: list[Wishlist]
    ) -> None:
        await self.update_fields(
            user_id, {"wishlists": [wishlist.model_dump() for wishlist in wishlists]}
        )

    async def delete(self, user_id: ObjectId) -> bool:
        result = await self._col.delete_one({"_id": user_id})
        return result.deleted_count == 1
