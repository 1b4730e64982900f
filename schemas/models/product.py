"""
Product document model.

Maps to the `products` MongoDB collection. Products are read-mostly; carts
and wishlists reference them by `_id`.
"""

from __future__ import annotations

from pydantic import Field

from schemas.models.base import MongoBaseModel


class ProductDoc(MongoBaseModel):
    """Document model for the `products` collection."""

    name: str
    price: float = Field(ge=0)
    image: str
    brand: str
    category: str
    count_in_stock: int = Field(default=0, ge=0)
    description: str
    rating: float = 0
    num_reviews: int = 0
