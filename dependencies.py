"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived clients (Mongo, email provider, token
signer) are created in the app lifespan and read from app.state; tests
replace them through app.dependency_overrides.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from config import AppSettings
from infrastructure.email.protocol import EmailProvider
from infrastructure.signing.protocol import TokenSigner
from repositories.product_repository import ProductRepository
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from services.auth_service import AuthenticatedRequest, AuthService
from services.catalog_service import CartService, ProductService, WishlistService

USERS_COLLECTION = "users"
PRODUCTS_COLLECTION = "products"


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


async def get_user_repository(db=Depends(get_db)) -> UserRepository:
    return UserRepository(db[USERS_COLLECTION])


async def get_product_repository(db=Depends(get_db)) -> ProductRepository:
    return ProductRepository(db[PRODUCTS_COLLECTION])


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


async def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    email_provider: EmailProvider = Depends(get_email_provider),
    signer: TokenSigner = Depends(get_token_signer),
    settings: AppSettings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        users=users,
        email_provider=email_provider,
        signer=signer,
        settings=settings.account,
        app_url=settings.app_url,
    )


async def get_product_service(
    products: ProductRepository = Depends(get_product_repository),
) -> ProductService:
    return ProductService(products)


async def get_cart_service(
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
) -> CartService:
    return CartService(users, products)


async def get_wishlist_service(
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
) -> WishlistService:
    return WishlistService(users, products)


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        return token or None
    return None


async def get_authenticated_request(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticatedRequest:
    """Authenticate the request; raises AuthenticationError (401) on any failure."""
    return await auth_service.authenticate(token)


async def get_current_user(
    auth: AuthenticatedRequest = Depends(get_authenticated_request),
) -> UserDoc:
    return auth.account
