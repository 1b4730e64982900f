"""
Input validators — framework-agnostic, pure functions.

Validators return the list of failed requirements rather than raising, so
the service layer decides how to report them.
"""

from __future__ import annotations

from typing import List

import validators as _validators


def normalize_email(email: str) -> str:
    """Return *email* trimmed and lower-cased, the form stored in the database."""
    return (email or "").strip().lower()


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address."""
    if not email:
        return False
    return bool(_validators.email(email))


def validate_username(username: str) -> bool:
    """Return True if *username* is non-empty after trimming."""
    return bool((username or "").strip())


def validate_password(
    password: str, min_length: int = 6, max_length: int = 128
) -> List[str]:
    """Validate *password* length bounds.

    Returns:
        List of missing requirements; empty when the password is acceptable.
    """
    if not password:
        return ["Password is required"]

    missing = []
    if len(password) < min_length:
        missing.append(f"At least {min_length} characters")
    if len(password) > max_length:
        missing.append(f"Maximum {max_length} characters")
    return missing


def validate_registration(
    username: str,
    email: str,
    password: str,
    min_length: int = 6,
    max_length: int = 128,
) -> List[str]:
    """Collect every failed registration requirement in one pass."""
    errors = []
    if not validate_username(username):
        errors.append("Please provide a username")
    if not validate_email(email):
        errors.append("Please provide a valid email")
    errors.extend(validate_password(password, min_length, max_length))
    return errors
