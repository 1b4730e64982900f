"""
Request DTOs for product, cart and wishlist endpoints.

ListProductsQuery   — GET   /api/products
CartQuantityRequest — POST/PATCH /api/cart/{product_id}
WishlistNameRequest — POST  /api/wishlist, PATCH /api/wishlist/{name}
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ListProductsQuery(BaseModel):
    """Query parameters for GET /api/products."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class CartQuantityRequest(BaseModel):
    """Body for adding to or updating a cart line.

    A missing quantity means 1. Zero or negative on update removes the line.
    """

    model_config = ConfigDict(populate_by_name=True)

    quantity: Optional[int] = None


class WishlistNameRequest(BaseModel):
    """Body carrying a wishlist name (create or rename)."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
