"""
Random token generators — pure, side-effect-free functions.

All generators use the ``secrets`` module.
"""

from __future__ import annotations

import secrets


def generate_secure_token(length: int = 20) -> str:
    """Generate a cryptographically secure hex token.

    Used for email-confirmation and password-reset links, so the result is
    URL-safe without further encoding.

    Args:
        length: Number of random bytes (default 20). The resulting string is
            ``2 * length`` hex characters.
    """
    return secrets.token_hex(length)


def generate_token_id() -> str:
    """Generate a unique identifier for a session token (``jti`` claim)."""
    return secrets.token_urlsafe(16)
