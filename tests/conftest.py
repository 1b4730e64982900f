"""Shared fixtures: in-memory repositories, a recording email provider, a real signer."""

import os

import pytest

from config import AccountSettings, JWTSettings
from fakes import (
    TEST_APP_URL,
    TEST_JWT_SECRET,
    FakeEmailProvider,
    FakeProductRepository,
    FakeUserRepository,
)
from infrastructure.signing.jwt_signer import JwtTokenSigner
from services.auth_service import AuthService

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def product_repo():
    return FakeProductRepository()


@pytest.fixture
def email_provider():
    return FakeEmailProvider()


@pytest.fixture
def jwt_settings():
    return JWTSettings(jwt_secret=TEST_JWT_SECRET, jwt_private_key="", jwt_public_key="")


@pytest.fixture
def signer(jwt_settings):
    return JwtTokenSigner(jwt_settings)


@pytest.fixture
def account_settings():
    return AccountSettings(enforce_session_revocation=False)


@pytest.fixture
def auth_service(user_repo, email_provider, signer, account_settings):
    return AuthService(
        users=user_repo,
        email_provider=email_provider,
        signer=signer,
        settings=account_settings,
        app_url=TEST_APP_URL,
    )
