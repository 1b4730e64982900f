"""
Unit tests for the shared/ utility modules.

Covers:
- shared.validators      (normalize_email, validate_email, validate_username,
                          validate_password, validate_registration)
- shared.generators      (generate_secure_token, generate_token_id)
- shared.datetime_utils  (expires_in)
- shared.crypto          (hash_password, verify_password, async wrappers, hash_token)
- shared.logging         (redact_sensitive_fields)
- middleware.request_logging (redact_path)
"""

from __future__ import annotations

import asyncio
import hashlib
import re
from datetime import datetime, timedelta, timezone

import pytest

from middleware.request_logging import generate_request_id, redact_path
from shared import crypto
from shared.crypto import (
    hash_password,
    hash_password_async,
    hash_token,
    verify_password,
    verify_password_async,
)
from shared.datetime_utils import expires_in
from shared.generators import generate_secure_token, generate_token_id
from shared.logging import redact_sensitive_fields
from shared.validators import (
    normalize_email,
    validate_email,
    validate_password,
    validate_registration,
    validate_username,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# shared.validators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "email, expected",
    [("  Alice@Example.COM ", "alice@example.com"), ("", ""), (None, "")],
    ids=["trim_lower", "empty", "none"],
)
def test_normalize_email(email, expected):
    assert normalize_email(email) == expected


@pytest.mark.parametrize(
    "email, expected",
    [
        ("alice@example.com", True),
        ("alice.smith+shop@mail.example.org", True),
        ("alice@", False),
        ("alice", False),
        ("", False),
    ],
)
def test_validate_email(email, expected):
    assert validate_email(email) is expected


@pytest.mark.parametrize(
    "username, expected",
    [("alice", True), ("   ", False), ("", False), (None, False)],
)
def test_validate_username(username, expected):
    assert validate_username(username) is expected


@pytest.mark.parametrize(
    "password, expected",
    [
        ("123456", []),
        ("12345", ["At least 6 characters"]),
        ("x" * 128, []),
        ("x" * 129, ["Maximum 128 characters"]),
        ("", ["Password is required"]),
        (None, ["Password is required"]),
    ],
    ids=["min_ok", "too_short", "max_ok", "too_long", "empty", "none"],
)
def test_validate_password(password, expected):
    assert validate_password(password) == expected


def test_validate_password_custom_bounds():
    assert validate_password("abcdefgh", min_length=10) == ["At least 10 characters"]


def test_validate_registration_collects_everything():
    errors = validate_registration("", "nope", "1")
    assert errors == [
        "Please provide a username",
        "Please provide a valid email",
        "At least 6 characters",
    ]


def test_validate_registration_ok():
    assert validate_registration("alice", "alice@example.com", "Password123") == []


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerateSecureToken:
    def test_default_is_40_hex_chars(self):
        token = generate_secure_token()
        assert re.fullmatch(r"[0-9a-f]{40}", token)

    def test_custom_length(self):
        assert len(generate_secure_token(8)) == 16

    def test_unique(self):
        assert len({generate_secure_token() for _ in range(50)}) == 50


def test_generate_token_id_unique_and_urlsafe():
    ids = {generate_token_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"[A-Za-z0-9_-]+", i) for i in ids)


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


def test_expires_in():
    assert expires_in(600, now=NOW) == NOW + timedelta(minutes=10)


# ---------------------------------------------------------------------------
# shared.crypto
# ---------------------------------------------------------------------------


class TestHashPassword:
    def test_returns_argon2_string(self):
        assert hash_password("secret").startswith("$argon2")

    def test_differs_from_input(self):
        assert hash_password("secret") != "secret"

    def test_unique_salts(self):
        # argon2 produces a new salt each call
        assert hash_password("same") != hash_password("same")


class TestVerifyPassword:
    @pytest.mark.parametrize(
        "candidate, expected",
        [("correct_password", True), ("wrong_password", False)],
        ids=["correct", "wrong"],
    )
    def test_verify(self, candidate, expected):
        h = hash_password("correct_password")
        assert verify_password(candidate, h) is expected

    def test_invalid_hash_returns_false(self):
        assert verify_password("any", "not-a-valid-hash") is False

    def test_missing_hash_still_runs_argon2(self, mocker):
        hasher = mocker.patch.object(
            crypto, "_password_hasher", wraps=crypto._password_hasher
        )
        assert verify_password("storefront-dummy-password", None) is False
        hasher.verify.assert_called_once_with(
            crypto._DUMMY_PASSWORD_HASH, "storefront-dummy-password"
        )


class TestAsyncPasswordHashing:
    async def test_round_trip(self):
        h = await hash_password_async("correct_password")
        assert await verify_password_async("correct_password", h) is True
        assert await verify_password_async("wrong_password", h) is False

    async def test_runs_in_worker_thread(self, mocker):
        to_thread = mocker.spy(asyncio, "to_thread")
        await hash_password_async("secret")
        to_thread.assert_called_once_with(hash_password, "secret")

    async def test_event_loop_keeps_running_while_hashing(self):
        ticks = 0
        done = asyncio.Event()

        async def heartbeat():
            nonlocal ticks
            while not done.is_set():
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(heartbeat())
        await asyncio.gather(*(hash_password_async("secret") for _ in range(3)))
        done.set()
        await task

        assert ticks > 10


def test_hash_token_is_hex64():
    h = hash_token(generate_secure_token())
    assert re.fullmatch(r"[0-9a-f]{64}", h)


def test_hash_token_known_value():
    assert hash_token("test") == hashlib.sha256(b"test").hexdigest()


def test_hash_token_distinct_inputs():
    assert hash_token("token_a") != hash_token("token_b")


# ---------------------------------------------------------------------------
# Log redaction
# ---------------------------------------------------------------------------


def test_redact_sensitive_fields():
    event = {
        "event": "login_success",
        "level": "info",
        "user_id": "abc",
        "password": "hunter2",
        "reset_token": "plaintext",
        "api_key": "SG.xyz",
        "Authorization": "Bearer abc",
    }
    out = redact_sensitive_fields(None, "info", dict(event))
    assert out["event"] == "login_success"
    assert out["user_id"] == "abc"
    for key in ("password", "reset_token", "api_key", "Authorization"):
        assert out[key] == "***REDACTED***"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/user/confirm-email/abc123", "/api/user/confirm-email/***"),
        ("/api/user/resetpassword/abc123", "/api/user/resetpassword/***"),
        ("/api/user/login", "/api/user/login"),
    ],
)
def test_redact_path(path, expected):
    assert redact_path(path) == expected


def test_generate_request_id():
    assert re.fullmatch(r"req_[0-9a-f]{12}", generate_request_id())
