"""
Response DTOs for product, cart and wishlist endpoints.

ProductResponse          — one product (GET /api/products/{id}, nested below)
ProductListResponse      — GET /api/products
ProductDetailResponse    — GET /api/products/{id}
CartLineResponse         — one hydrated cart line
CartResponse             — GET /api/cart
WishlistResponse         — one hydrated wishlist
WishlistListResponse     — GET /api/wishlist
WishlistCreatedResponse  — POST /api/wishlist (201)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.dto.responses.common import PaginationMeta
from schemas.models.product import ProductDoc


class ProductResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: float
    image: str
    brand: str
    category: str
    count_in_stock: int
    description: str
    rating: float
    num_reviews: int

    @classmethod
    def from_doc(cls, doc: ProductDoc) -> "ProductResponse":
        data = doc.model_dump(exclude={"id"})
        return cls(id=str(doc.id), **data)


class ProductListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: list[ProductResponse]
    pagination: PaginationMeta


class ProductDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: ProductResponse


class CartLineResponse(BaseModel):
    """A cart line; `product` is None when the product no longer exists."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str
    quantity: int
    product: Optional[ProductResponse] = None


class CartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    cart: list[CartLineResponse]


class WishlistProductResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str
    product: Optional[ProductResponse] = None


class WishlistResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    products: list[WishlistProductResponse] = []


class WishlistListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    wishlist: list[WishlistResponse]


class WishlistCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    wishlist: WishlistResponse
