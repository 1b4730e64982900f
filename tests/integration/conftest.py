"""
Integration test configuration.

Builds the real routers, error handlers and request logging on top of the
in-memory repositories. Long-lived collaborators are injected through a test
lifespan, exactly where create_app() puts the real ones; repositories are
swapped with dependency_overrides. No network connections are made.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import AccountSettings, AppSettings, JWTSettings
from dependencies import get_product_repository, get_user_repository
from errors import register_error_handlers
from fakes import TEST_APP_URL, TEST_JWT_SECRET
from infrastructure.signing.jwt_signer import JwtTokenSigner
from middleware.request_logging import register_request_logging
from routes.health_routes import router as health_router
from routes.shop_routes import cart_router, products_router, wishlist_router
from routes.user_routes import router as user_router


def build_test_app(
    user_repo,
    product_repo,
    email_provider,
    enforce_session_revocation: bool = False,
    mongo_ok: bool = True,
) -> FastAPI:
    settings = AppSettings(
        app_url=TEST_APP_URL,
        jwt=JWTSettings(
            jwt_secret=TEST_JWT_SECRET,
            jwt_private_key="",
            jwt_public_key="",
            cookie_secure=False,
        ),
        account=AccountSettings(enforce_session_revocation=enforce_session_revocation),
    )

    mock_db = MagicMock()
    if mongo_ok:
        mock_db.client.admin.command = AsyncMock(return_value={"ok": 1})
    else:
        mock_db.client.admin.command = AsyncMock(
            side_effect=Exception("connection refused")
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db = mock_db
        app.state.settings = settings
        app.state.email_provider = email_provider
        app.state.token_signer = JwtTokenSigner(settings.jwt)
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    register_request_logging(app)
    app.include_router(health_router)
    app.include_router(user_router)
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(wishlist_router)

    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_product_repository] = lambda: product_repo
    return app


@pytest.fixture
def build_app(user_repo, product_repo, email_provider):
    """Return a builder for apps sharing this test's repositories and email double."""

    def _build(**kwargs) -> FastAPI:
        return build_test_app(user_repo, product_repo, email_provider, **kwargs)

    return _build


@pytest.fixture
def app(build_app):
    return build_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
