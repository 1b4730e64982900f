"""
Response DTOs for the /api/user endpoints.

UserProfileResponse    — public view of an account (never carries secrets)
LoginResponse          — POST  /api/user/login  (200)
ForgotPasswordResponse — POST  /api/user/forgotpassword  (200)
ProfileResponse        — GET   /api/user/me  (200)
UpdateProfileResponse  — PATCH /api/user/update-user  (200)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.user import UserDoc


class CartEntryInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str
    quantity: int


class WishlistInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    product_ids: list[str]


class UserProfileResponse(BaseModel):
    """Account shape returned to clients.

    Built field by field from UserDoc so that the password hash, session
    hashes and confirmation/reset hashes cannot leak through.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    username: str
    is_email_confirmed: bool
    cart: list[CartEntryInfo] = []
    wishlists: list[WishlistInfo] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: UserDoc) -> "UserProfileResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            username=user.username,
            is_email_confirmed=user.is_email_confirmed,
            cart=[
                CartEntryInfo(product_id=str(item.product_id), quantity=item.quantity)
                for item in user.cart
            ],
            wishlists=[
                WishlistInfo(
                    name=wishlist.name,
                    product_ids=[str(item.product_id) for item in wishlist.products],
                )
                for wishlist in user.wishlists
            ],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    """Response body for POST /api/user/login (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    token: str


class ForgotPasswordResponse(BaseModel):
    """Response body for POST /api/user/forgotpassword (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: str = "Email sent"


class ProfileResponse(BaseModel):
    """Response body for GET /api/user/me (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: UserProfileResponse


class UpdateProfileResponse(BaseModel):
    """Response body for PATCH /api/user/update-user (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    data: UserProfileResponse
