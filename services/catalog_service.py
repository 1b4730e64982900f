"""
Product catalogue, cart and wishlist services.

Carts and wishlists live on the user document and are mutated with plain
read-modify-write: load the account, change the list in memory, write the
whole list back. Concurrent edits of the same account are last-write-wins.
"""

from __future__ import annotations

from typing import Any, Optional

from errors import NotFoundError, ValidationError
from repositories.product_repository import ProductRepository
from repositories.user_repository import UserRepository
from schemas.models.base import parse_object_id
from schemas.models.product import ProductDoc
from schemas.models.user import CartItem, UserDoc, Wishlist, WishlistItem
from shared.logging import get_logger

log = get_logger(__name__)


class ProductService:
    def __init__(self, products: ProductRepository) -> None:
        self._products = products

    async def list_products(
        self, page: int = 1, page_size: int = 20
    ) -> tuple[list[ProductDoc], int]:
        return await self._products.list_page((page - 1) * page_size, page_size)

    async def get_product(self, product_id: Any) -> ProductDoc:
        product = await self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product


class CartService:
    def __init__(self, users: UserRepository, products: ProductRepository) -> None:
        self._users = users
        self._products = products

    async def _load(self, user: UserDoc) -> UserDoc:
        fresh = await self._users.find_by_id(user.id)
        if fresh is None:
            raise NotFoundError("User not found")
        return fresh

    async def get_cart(
        self, user: UserDoc
    ) -> list[tuple[CartItem, Optional[ProductDoc]]]:
        fresh = await self._load(user)
        products = await self._products.find_by_ids(
            item.product_id for item in fresh.cart
        )
        return [(item, products.get(item.product_id)) for item in fresh.cart]

    async def add_item(self, user: UserDoc, product_id: str, quantity: Optional[int]) -> None:
        quantity = quantity or 1
        if quantity < 1:
            raise ValidationError("Quantity must be positive", field="quantity")

        product = await self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        fresh = await self._load(user)
        for item in fresh.cart:
            if item.product_id == product.id:
                item.quantity += quantity
                break
        else:
            fresh.cart.append(CartItem(product_id=product.id, quantity=quantity))

        await self._users.save_cart(fresh.id, fresh.cart)
        log.info("cart_item_added", user_id=str(fresh.id), product_id=str(product.id))

    async def update_item(
        self, user: UserDoc, product_id: str, quantity: Optional[int]
    ) -> None:
        quantity = 1 if quantity is None else quantity
        fresh = await self._load(user)
        index = _cart_index(fresh, product_id)
        if index is None:
            raise NotFoundError("Product not found in cart")

        if quantity <= 0:
            del fresh.cart[index]
        else:
            fresh.cart[index].quantity = quantity
        await self._users.save_cart(fresh.id, fresh.cart)

    async def remove_item(self, user: UserDoc, product_id: str) -> None:
        fresh = await self._load(user)
        index = _cart_index(fresh, product_id)
        if index is None:
            raise NotFoundError("Product not found in cart")
        del fresh.cart[index]
        await self._users.save_cart(fresh.id, fresh.cart)

    async def clear(self, user: UserDoc) -> None:
        await self._users.save_cart(user.id, [])


def _cart_index(user: UserDoc, product_id: str) -> Optional[int]:
    oid = parse_object_id(product_id)
    if oid is None:
        return None
    for index, item in enumerate(user.cart):
        if item.product_id == oid:
            return index
    return None


class WishlistService:
    def __init__(self, users: UserRepository, products: ProductRepository) -> None:
        self._users = users
        self._products = products

    async def _load(self, user: UserDoc) -> UserDoc:
        fresh = await self._users.find_by_id(user.id)
        if fresh is None:
            raise NotFoundError("User not found")
        return fresh

    @staticmethod
    def _require(user: UserDoc, name: str) -> Wishlist:
        wishlist = user.find_wishlist(name)
        if wishlist is None:
            raise NotFoundError("Wishlist not found")
        return wishlist

    async def list_wishlists(
        self, user: UserDoc
    ) -> list[tuple[Wishlist, dict]]:
        """Return each wishlist with a product_id → ProductDoc lookup."""
        fresh = await self._load(user)
        products = await self._products.find_by_ids(
            item.product_id for wishlist in fresh.wishlists for item in wishlist.products
        )
        return [(wishlist, products) for wishlist in fresh.wishlists]

    async def create(self, user: UserDoc, name: Optional[str]) -> Wishlist:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")

        fresh = await self._load(user)
        if fresh.find_wishlist(name) is not None:
            raise ValidationError("Wishlist with this name already exists", field="name")

        wishlist = Wishlist(name=name, products=[])
        fresh.wishlists.append(wishlist)
        await self._users.save_wishlists(fresh.id, fresh.wishlists)
        log.info("wishlist_created", user_id=str(fresh.id))
        return wishlist

    async def add_product(self, user: UserDoc, name: str, product_id: str) -> None:
        product = await self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        fresh = await self._load(user)
        wishlist = self._require(fresh, name)
        if any(item.product_id == product.id for item in wishlist.products):
            raise ValidationError("Product already in wishlist")

        wishlist.products.append(WishlistItem(product_id=product.id))
        await self._users.save_wishlists(fresh.id, fresh.wishlists)

    async def remove_product(self, user: UserDoc, name: str, product_id: str) -> None:
        fresh = await self._load(user)
        wishlist = self._require(fresh, name)
        oid = parse_object_id(product_id)
        wishlist.products = [item for item in wishlist.products if item.product_id != oid]
        await self._users.save_wishlists(fresh.id, fresh.wishlists)

    async def clear(self, user: UserDoc, name: str) -> None:
        fresh = await self._load(user)
        self._require(fresh, name).products = []
        await self._users.save_wishlists(fresh.id, fresh.wishlists)

    async def rename(self, user: UserDoc, name: str, new_name: Optional[str]) -> None:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("Name is required", field="name")

        fresh = await self._load(user)
        wishlist = self._require(fresh, name)
        if new_name != name and fresh.find_wishlist(new_name) is not None:
            raise ValidationError("Wishlist with this name already exists", field="name")

        wishlist.name = new_name
        await self._users.save_wishlists(fresh.id, fresh.wishlists)

    async def delete(self, user: UserDoc, name: str) -> None:
        fresh = await self._load(user)
        wishlist = self._require(fresh, name)
        fresh.wishlists.remove(wishlist)
        await self._users.save_wishlists(fresh.id, fresh.wishlists)
