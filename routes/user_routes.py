"""
Account endpoints under /api/user.

POST   /register                 — create an unconfirmed account, email a confirmation link
GET    /confirm-email/{token}    — confirm the account's email
POST   /login                    — exchange credentials for a session token
POST   /logout                   — drop the presented session token (Bearer)
POST   /forgotpassword           — email a password reset link
PUT    /resetpassword/{token}    — set a new password with a reset token
DELETE /delete-profile           — hard-delete the account (Bearer)
PATCH  /update-user              — change email and/or username (Bearer)
GET    /me                       — the authenticated account (Bearer)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from config import AppSettings
from dependencies import (
    get_auth_service,
    get_authenticated_request,
    get_current_user,
    get_settings,
)
from schemas.dto.requests.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateUserRequest,
)
from schemas.dto.responses.auth import (
    ForgotPasswordResponse,
    LoginResponse,
    ProfileResponse,
    UpdateProfileResponse,
    UserProfileResponse,
)
from schemas.dto.responses.common import MessageResponse
from schemas.models.user import UserDoc
from services.auth_service import AuthenticatedRequest, AuthService

router = APIRouter(prefix="/api/user", tags=["user"])

SESSION_COOKIE = "token"


def clear_session_cookie(response: Response, settings: AppSettings) -> None:
    response.delete_cookie(
        SESSION_COOKIE,
        path="/",
        secure=settings.jwt.cookie_secure,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", status_code=201, response_model=MessageResponse)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.register(body.username, body.email, body.password)
    return MessageResponse(
        success=True,
        message="User registered. Please check your email for confirmation link.",
    )


@router.get("/confirm-email/{token}", response_model=MessageResponse)
async def confirm_email(
    token: str,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.confirm_email(token)
    return MessageResponse(success=True, message="Email confirmed")


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    token = await auth_service.login(body.email, body.password)
    return LoginResponse(success=True, token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    auth: AuthenticatedRequest = Depends(get_authenticated_request),
    auth_service: AuthService = Depends(get_auth_service),
    settings: AppSettings = Depends(get_settings),
) -> MessageResponse:
    await auth_service.logout(auth)
    clear_session_cookie(response, settings)
    return MessageResponse(success=True, message="Logged out successfully")


@router.post("/forgotpassword", response_model=ForgotPasswordResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ForgotPasswordResponse:
    await auth_service.forgot_password(body.email)
    return ForgotPasswordResponse(success=True, data="Email sent")


@router.put("/resetpassword/{token}", response_model=MessageResponse)
async def reset_password(
    token: str,
    body: ResetPasswordRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: AppSettings = Depends(get_settings),
) -> MessageResponse:
    await auth_service.reset_password(token, body.password)
    clear_session_cookie(response, settings)
    return MessageResponse(success=True, message="Password updated successfully")


@router.delete("/delete-profile", response_model=MessageResponse)
async def delete_profile(
    response: Response,
    user: UserDoc = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
    settings: AppSettings = Depends(get_settings),
) -> MessageResponse:
    await auth_service.delete_account(user)
    clear_session_cookie(response, settings)
    return MessageResponse(success=True, message="User deleted successfully")


@router.patch("/update-user", response_model=UpdateProfileResponse)
async def update_user(
    body: UpdateUserRequest,
    user: UserDoc = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> UpdateProfileResponse:
    updated = await auth_service.update_profile(
        user, email=body.email, username=body.username
    )
    return UpdateProfileResponse(
        success=True,
        message="User updated successfully",
        data=UserProfileResponse.from_user(updated),
    )


@router.get("/me", response_model=ProfileResponse)
async def me(
    user: UserDoc = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    fresh = await auth_service.get_profile(user)
    return ProfileResponse(success=True, data=UserProfileResponse.from_user(fresh))
