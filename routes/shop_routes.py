"""
Product, cart and wishlist endpoints.

/api/products   — public catalogue (paginated list, single product)
/api/cart       — the authenticated user's cart
/api/wishlist   — the authenticated user's named wishlists

Wishlist names travel in the path; clients percent-encode them and FastAPI
decodes them before they reach the handlers.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Query

from dependencies import (
    get_cart_service,
    get_current_user,
    get_product_service,
    get_wishlist_service,
)
from schemas.dto.requests.shop import (
    CartQuantityRequest,
    ListProductsQuery,
    WishlistNameRequest,
)
from schemas.dto.responses.common import MessageResponse, PaginationMeta
from schemas.dto.responses.shop import (
    CartLineResponse,
    CartResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    WishlistCreatedResponse,
    WishlistListResponse,
    WishlistProductResponse,
    WishlistResponse,
)
from schemas.models.user import UserDoc
from services.catalog_service import CartService, ProductService, WishlistService

products_router = APIRouter(prefix="/api/products", tags=["products"])
cart_router = APIRouter(prefix="/api/cart", tags=["cart"])
wishlist_router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


def _quantity(body: Optional[CartQuantityRequest]) -> Optional[int]:
    return body.quantity if body is not None else None


# ── Products ─────────────────────────────────────────────────────────────────


@products_router.get("", response_model=ProductListResponse)
async def list_products(
    query: Annotated[ListProductsQuery, Query()],
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    page, page_size = query.page, query.page_size
    items, total = await service.list_products(page, page_size)
    return ProductListResponse(
        data=[ProductResponse.from_doc(p) for p in items],
        pagination=PaginationMeta(
            page=page,
            page_size=page_size,
            total=total,
            has_next=page * page_size < total,
        ),
    )


@products_router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductDetailResponse:
    product = await service.get_product(product_id)
    return ProductDetailResponse(data=ProductResponse.from_doc(product))


# ── Cart ─────────────────────────────────────────────────────────────────────


@cart_router.get("", response_model=CartResponse)
async def get_cart(
    user: UserDoc = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    lines = await service.get_cart(user)
    return CartResponse(
        cart=[
            CartLineResponse(
                product_id=str(item.product_id),
                quantity=item.quantity,
                product=ProductResponse.from_doc(product) if product else None,
            )
            for item, product in lines
        ]
    )


@cart_router.post("/clear", response_model=MessageResponse)
async def clear_cart(
    user: UserDoc = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    await service.clear(user)
    return MessageResponse(success=True, message="Cart cleared")


@cart_router.post("/{product_id}", response_model=MessageResponse)
async def add_to_cart(
    product_id: str,
    body: Optional[CartQuantityRequest] = Body(None),
    user: UserDoc = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    await service.add_item(user, product_id, _quantity(body))
    return MessageResponse(success=True, message="Product added to cart")


@cart_router.patch("/{product_id}", response_model=MessageResponse)
async def update_cart_item(
    product_id: str,
    body: Optional[CartQuantityRequest] = Body(None),
    user: UserDoc = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    await service.update_item(user, product_id, _quantity(body))
    return MessageResponse(success=True, message="Cart item updated")


@cart_router.delete("/{product_id}", response_model=MessageResponse)
async def remove_from_cart(
    product_id: str,
    user: UserDoc = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    await service.remove_item(user, product_id)
    return MessageResponse(success=True, message="Product removed from cart")


# ── Wishlists ────────────────────────────────────────────────────────────────


@wishlist_router.post("", status_code=201, response_model=WishlistCreatedResponse)
async def create_wishlist(
    body: WishlistNameRequest,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistCreatedResponse:
    wishlist = await service.create(user, body.name)
    return WishlistCreatedResponse(
        message="Wishlist created",
        wishlist=WishlistResponse(name=wishlist.name, products=[]),
    )


@wishlist_router.get("", response_model=WishlistListResponse)
async def get_wishlists(
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistListResponse:
    entries = await service.list_wishlists(user)
    return WishlistListResponse(
        wishlist=[
            WishlistResponse(
                name=wishlist.name,
                products=[
                    WishlistProductResponse(
                        product_id=str(item.product_id),
                        product=ProductResponse.from_doc(products[item.product_id])
                        if item.product_id in products
                        else None,
                    )
                    for item in wishlist.products
                ],
            )
            for wishlist, products in entries
        ]
    )


@wishlist_router.patch("/{wishlist_name}", response_model=MessageResponse)
async def rename_wishlist(
    wishlist_name: str,
    body: WishlistNameRequest,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    await service.rename(user, wishlist_name, body.name)
    return MessageResponse(success=True, message="Wishlist name updated")


@wishlist_router.delete("/{wishlist_name}", response_model=MessageResponse)
async def delete_wishlist(
    wishlist_name: str,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    await service.delete(user, wishlist_name)
    return MessageResponse(success=True, message="Wishlist deleted")


@wishlist_router.post("/{wishlist_name}/clear", response_model=MessageResponse)
async def clear_wishlist(
    wishlist_name: str,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    await service.clear(user, wishlist_name)
    return MessageResponse(success=True, message="Wishlist cleared")


@wishlist_router.post("/{wishlist_name}/{product_id}", response_model=MessageResponse)
async def add_to_wishlist(
    wishlist_name: str,
    product_id: str,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    await service.add_product(user, wishlist_name, product_id)
    return MessageResponse(success=True, message="Product added to wishlist")


@wishlist_router.delete("/{wishlist_name}/{product_id}", response_model=MessageResponse)
async def remove_from_wishlist(
    wishlist_name: str,
    product_id: str,
    user: UserDoc = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    await service.remove_product(user, wishlist_name, product_id)
    return MessageResponse(success=True, message="Product removed from wishlist")
