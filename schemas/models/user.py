"""
User (account) document model.

Maps to the `users` MongoDB collection.

Secrets live on the document only in hashed form:
- password_hash: argon2
- email_confirmation_token_hash / reset_password_token_hash: SHA-256 of the
  plaintext token that was emailed to the user
- tokens[].token_hash: SHA-256 of each issued session token

None of these are ever returned to clients; see UserProfileResponse.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.models.base import MongoBaseModel, PyObjectId


class SessionEntry(BaseModel):
    """One live login session, identified by the hash of its token."""

    token_hash: str


class CartItem(BaseModel):
    product_id: PyObjectId
    quantity: int = Field(default=1, ge=1)


class WishlistItem(BaseModel):
    product_id: PyObjectId


class Wishlist(BaseModel):
    name: str
    products: list[WishlistItem] = []


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    email: str
    username: str
    password_hash: str

    is_email_confirmed: bool = False
    email_confirmation_token_hash: Optional[str] = None
    email_confirmation_expires_at: Optional[datetime] = None

    reset_password_token_hash: Optional[str] = None
    reset_password_expires_at: Optional[datetime] = None

    tokens: list[SessionEntry] = []
    cart: list[CartItem] = []
    wishlists: list[Wishlist] = []

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_session(self, token_hash: str) -> bool:
        return any(entry.token_hash == token_hash for entry in self.tokens)

    def find_wishlist(self, name: str) -> Optional[Wishlist]:
        for wishlist in self.wishlists:
            if wishlist.name == name:
                return wishlist
        return None
