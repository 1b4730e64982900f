"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from dependencies import PRODUCTS_COLLECTION, USERS_COLLECTION
from errors import register_error_handlers
from infrastructure.email.sendgrid import SendGridEmailProvider
from infrastructure.http_client import HttpClient
from infrastructure.signing.jwt_signer import JwtTokenSigner
from middleware.request_logging import register_request_logging
from repositories.product_repository import ProductRepository
from repositories.user_repository import UserRepository
from routes.health_routes import router as health_router
from routes.shop_routes import cart_router, products_router, wishlist_router
from routes.user_routes import router as user_router
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


async def ensure_indexes(db) -> None:
    """Create collection indexes.

    The unique email/username indexes back the duplicate-identity check, so a
    failure here aborts startup.
    """
    await UserRepository(db[USERS_COLLECTION]).ensure_indexes()
    await ProductRepository(db[PRODUCTS_COLLECTION]).ensure_indexes()


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(
        log_level=settings.logging.log_level,
        log_format=settings.logging.log_format,
        env=settings.env,
    )

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings

        email_http = HttpClient(timeout=10.0)
        app.state.email_provider = SendGridEmailProvider(
            settings.email,
            email_http,
            app_name=settings.email.email_from_name,
        )
        app.state.token_signer = JwtTokenSigner(settings.jwt)

        await ensure_indexes(app.state.db)
        log.info("app_started", env=settings.env, db=settings.db.db_name)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await email_http.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_request_logging(app)

    app.include_router(health_router)
    app.include_router(user_router)
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(wishlist_router)

    return app
