"""
Cryptographic helpers — password hashing and token hashing.

Uses argon2 for passwords (via argon2-cffi) and SHA-256 for token hashing.
argon2 is CPU-bound; async callers use hash_password_async /
verify_password_async, which run it in a worker thread.
"""

from __future__ import annotations

import asyncio
import hashlib
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher()

# Verified against when no account matches, so a miss costs one argon2 verify
_DUMMY_PASSWORD_HASH = _password_hasher.hash("storefront-dummy-password")


def hash_password(plain_password: str) -> str:
    """Hash *plain_password* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    argon2's verify compares in constant time. A ``None`` hash (no such
    account) still runs a full verify against a dummy hash and then fails.

    Returns:
        ``True`` if the password matches, ``False`` for a wrong password,
        a missing hash or an unparseable hash.
    """
    try:
        if password_hash is None:
            _password_hasher.verify(_DUMMY_PASSWORD_HASH, plain_password)
            return False
        return _password_hasher.verify(password_hash, plain_password)
    except (VerificationError, InvalidHashError):
        return False


async def hash_password_async(plain_password: str) -> str:
    return await asyncio.to_thread(hash_password, plain_password)


async def verify_password_async(
    plain_password: str, password_hash: Optional[str]
) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, password_hash)


def hash_token(token: str) -> str:
    """Return the hex-encoded SHA-256 digest of *token*.

    Confirmation, reset and session tokens are hashed with this before
    they are stored, so the plaintext is never persisted.

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
