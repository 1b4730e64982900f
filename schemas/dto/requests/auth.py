"""
Request DTOs for the /api/user endpoints.

RegisterRequest        — POST  /api/user/register
LoginRequest           — POST  /api/user/login
ForgotPasswordRequest  — POST  /api/user/forgotpassword
ResetPasswordRequest   — PUT   /api/user/resetpassword/{token}
UpdateUserRequest      — PATCH /api/user/update-user

Only shape is enforced here; content rules (email syntax, password length,
uniqueness) belong to AuthService so they surface as typed AppErrors.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    """Request body for POST /api/user/register."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Request body for POST /api/user/login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    """Request body for POST /api/user/forgotpassword."""

    model_config = ConfigDict(populate_by_name=True)

    email: str


class ResetPasswordRequest(BaseModel):
    """Request body for PUT /api/user/resetpassword/{token}."""

    model_config = ConfigDict(populate_by_name=True)

    password: str


class UpdateUserRequest(BaseModel):
    """Request body for PATCH /api/user/update-user.

    Both fields are optional but at least one must be supplied.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    username: Optional[str] = None
