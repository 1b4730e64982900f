"""Unit tests for the AppError hierarchy and the registered exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    EmailDeliveryError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ValidationError,
    register_error_handlers,
)


@pytest.mark.parametrize(
    "cls, status_code, error_code",
    [
        (ValidationError, 400, "validation_error"),
        (InvalidOrExpiredTokenError, 400, "invalid_or_expired_token"),
        (AuthenticationError, 401, "authentication_error"),
        (InvalidCredentialsError, 401, "invalid_credentials"),
        (EmailNotConfirmedError, 401, "email_not_confirmed"),
        (NotFoundError, 404, "not_found"),
        (ConflictError, 409, "conflict"),
        (EmailDeliveryError, 500, "email_delivery_failed"),
        (AppError, 500, "internal_error"),
    ],
)
def test_status_and_code(cls, status_code, error_code):
    e = cls("boom")
    assert e.status_code == status_code
    assert e.error_code == error_code
    assert e.message == "boom"


def test_credential_errors_are_authentication_errors():
    assert issubclass(InvalidCredentialsError, AuthenticationError)
    assert issubclass(EmailNotConfirmedError, AuthenticationError)


class TestAppErrorToDict:
    def test_basic(self):
        e = NotFoundError("User not found")
        assert e.to_dict() == {
            "success": False,
            "message": "User not found",
            "code": "not_found",
        }

    @pytest.mark.parametrize(
        "kwargs, key, value",
        [
            ({"field": "password"}, "field", "password"),
            ({"details": ["At least 6 characters"]}, "details", ["At least 6 characters"]),
        ],
        ids=["with_field", "with_details"],
    )
    def test_optional_key_present(self, kwargs, key, value):
        e = ValidationError("invalid", **kwargs)
        assert e.to_dict()[key] == value

    def test_no_optional_keys_when_absent(self):
        d = NotFoundError("missing").to_dict()
        assert "field" not in d
        assert "details" not in d


class _Body(BaseModel):
    email: str


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("taken")

    @app.get("/crash/confirm-email/{token}")
    async def crash(token: str):
        raise RuntimeError("database exploded")

    @app.post("/body")
    async def body(payload: _Body):
        return {"ok": True}

    return app


class TestHandlers:
    def test_app_error_rendered(self):
        with TestClient(_app()) as client:
            resp = client.get("/conflict")
        assert resp.status_code == 409
        assert resp.json() == {"success": False, "message": "taken", "code": "conflict"}

    def test_request_validation_is_400(self):
        with TestClient(_app()) as client:
            resp = client.post("/body", json={})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert body["success"] is False
        assert isinstance(body["details"], list)

    def test_unhandled_exception_is_generic_500(self):
        with TestClient(_app(), raise_server_exceptions=False) as client:
            resp = client.get("/crash/confirm-email/secret-token")
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "message": "Internal server error",
            "code": "internal_error",
        }
