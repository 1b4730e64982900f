"""
Identity & credential management.

AuthService owns the account lifecycle: registration with email confirmation,
login and logout, request authentication, password reset, profile updates and
account deletion. Collaborators are injected so tests can swap in doubles:

- UserRepository  — persistence of UserDoc
- EmailProvider   — transactional email delivery
- TokenSigner     — session token minting and verification

Plaintext confirmation, reset and session tokens only ever leave this module
towards the user (email link or login response). What is stored is their
SHA-256 digest.

Known gap: by default authenticate() trusts a session token on signature and
expiry alone. Logging out removes the session hash from the account but the
token itself stays valid until it expires. Setting
AccountSettings.enforce_session_revocation makes authenticate() also require
the hash to be present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import jwt
from pymongo.errors import DuplicateKeyError

from config import AccountSettings
from errors import (
    AuthenticationError,
    ConflictError,
    EmailDeliveryError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from infrastructure.signing.protocol import TokenSigner
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from shared.crypto import hash_password_async, hash_token, verify_password_async
from shared.datetime_utils import expires_in, utcnow
from shared.generators import generate_secure_token
from shared.logging import get_logger
from shared.validators import (
    normalize_email,
    validate_email,
    validate_password,
    validate_registration,
    validate_username,
)

log = get_logger(__name__)

DUPLICATE_IDENTITY_MESSAGE = "User with this email or username already exists."
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
UNAUTHORIZED_MESSAGE = "Not authorized to access this route"


@dataclass(frozen=True)
class AuthenticatedRequest:
    """The result of authenticating a request: the account and the exact token used."""

    account: UserDoc
    token: str


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        email_provider: EmailProvider,
        signer: TokenSigner,
        settings: AccountSettings,
        app_url: str,
    ) -> None:
        self._users = users
        self._email = email_provider
        self._signer = signer
        self._settings = settings
        self._app_url = app_url.rstrip("/")

    # ── URLs ────────────────────────────────────────────────────────────────

    def confirmation_url(self, token: str) -> str:
        return f"{self._app_url}/api/user/confirm-email/{quote(token, safe='')}"

    def reset_url(self, token: str) -> str:
        return f"{self._app_url}/api/user/resetpassword/{quote(token, safe='')}"

    # ── Registration & confirmation ─────────────────────────────────────────

    def _new_confirmation_token(self) -> tuple[str, dict]:
        """Return (plaintext, fields to store) for a fresh confirmation token."""
        token = generate_secure_token()
        fields = {
            "email_confirmation_token_hash": hash_token(token),
            "email_confirmation_expires_at": expires_in(
                self._settings.email_confirmation_ttl_seconds
            ),
        }
        return token, fields

    async def register(self, username: str, email: str, password: str) -> UserDoc:
        username = (username or "").strip()
        email = normalize_email(email)

        errors = validate_registration(
            username,
            email,
            password,
            self._settings.password_min_length,
            self._settings.password_max_length,
        )
        if errors:
            raise ValidationError("Invalid registration data", details=errors)

        if await self._users.exists_with_email_or_username(email, username):
            log.warning("registration_failed", reason="duplicate_identity")
            raise ConflictError(DUPLICATE_IDENTITY_MESSAGE)

        token, confirmation_fields = self._new_confirmation_token()
        password_hash = await hash_password_async(password)
        now = utcnow()
        user = UserDoc(
            email=email,
            username=username,
            password_hash=password_hash,
            is_email_confirmed=False,
            created_at=now,
            updated_at=now,
            **confirmation_fields,
        )
        try:
            user.id = await self._users.insert(user)
        except DuplicateKeyError:
            # Registered between the existence check and the insert
            log.warning("registration_failed", reason="race_condition_duplicate")
            raise ConflictError(DUPLICATE_IDENTITY_MESSAGE)

        log.info("user_registered", user_id=str(user.id))

        sent = await self._send_quietly(
            "confirmation",
            self._email.send_confirmation_email(
                user.email, user.username, self.confirmation_url(token)
            ),
        )
        if not sent:
            # No confirmation link went out; free the identity for a retry
            await self._users.delete(user.id)
            log.error(
                "registration_rolled_back", reason="email_not_sent", user_id=str(user.id)
            )
            raise EmailDeliveryError("Email could not be sent")
        return user

    async def confirm_email(self, token: str) -> UserDoc:
        user = await self._users.consume_confirmation_token(hash_token(token), utcnow())
        if user is None:
            log.warning("email_confirmation_failed", reason="invalid_or_expired")
            raise InvalidOrExpiredTokenError("Invalid or expired confirmation token")
        log.info("email_confirmed", user_id=str(user.id))
        return user

    # ── Sessions ────────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> str:
        user = await self._users.find_by_email(normalize_email(email))
        password_hash = user.password_hash if user is not None else None
        # An unknown email still pays for a full argon2 verify
        if not await verify_password_async(password or "", password_hash):
            # Do not reveal which part failed
            log.warning("login_failed", reason="invalid_credentials")
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_email_confirmed:
            log.warning("login_failed", reason="email_not_confirmed", user_id=str(user.id))
            raise EmailNotConfirmedError("Please confirm your email before logging in")

        token = self._signer.issue(str(user.id))
        await self._users.add_session(user.id, hash_token(token))
        log.info("login_success", user_id=str(user.id))
        return token

    async def authenticate(self, token: Optional[str]) -> AuthenticatedRequest:
        if not token:
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        try:
            claims = self._signer.verify(token)
        except jwt.InvalidTokenError as e:
            log.info("authentication_failed", reason=type(e).__name__)
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        user = await self._users.find_by_id(claims.get("sub"))
        if user is None:
            log.info("authentication_failed", reason="account_not_found")
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        if self._settings.enforce_session_revocation and not user.has_session(
            hash_token(token)
        ):
            log.info("authentication_failed", reason="session_revoked", user_id=str(user.id))
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)

        return AuthenticatedRequest(account=user, token=token)

    async def logout(self, auth: AuthenticatedRequest) -> None:
        await self._users.remove_session(auth.account.id, hash_token(auth.token))
        log.info("logout", user_id=str(auth.account.id))

    # ── Password reset ──────────────────────────────────────────────────────

    async def forgot_password(self, email: str) -> None:
        user = await self._users.find_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("User not found")

        token = generate_secure_token()
        await self._users.update_fields(
            user.id,
            {
                "reset_password_token_hash": hash_token(token),
                "reset_password_expires_at": expires_in(
                    self._settings.password_reset_ttl_seconds
                ),
            },
        )

        sent = await self._send_quietly(
            "password_reset",
            self._email.send_password_reset_email(
                user.email, user.username, self.reset_url(token)
            ),
        )
        if not sent:
            # No usable reset token may outlive a failed delivery
            await self._users.update_fields(
                user.id,
                unset_fields=["reset_password_token_hash", "reset_password_expires_at"],
            )
            log.error("password_reset_email_failed", user_id=str(user.id))
            raise EmailDeliveryError("Email could not be sent")

        log.info("password_reset_requested", user_id=str(user.id))

    async def reset_password(self, token: str, new_password: str) -> UserDoc:
        missing = validate_password(
            new_password,
            self._settings.password_min_length,
            self._settings.password_max_length,
        )
        if missing:
            raise ValidationError(
                "Password does not meet requirements", field="password", details=missing
            )

        new_hash = await hash_password_async(new_password)
        user = await self._users.consume_reset_token(hash_token(token), utcnow(), new_hash)
        if user is None:
            log.warning("password_reset_failed", reason="invalid_or_expired")
            raise InvalidOrExpiredTokenError("Invalid or expired token")

        log.info("password_reset_completed", user_id=str(user.id))
        await self._send_quietly(
            "password_changed",
            self._email.send_password_changed_email(user.email, user.username),
        )
        return user

    # ── Profile ─────────────────────────────────────────────────────────────

    async def get_profile(self, user: UserDoc) -> UserDoc:
        fresh = await self._users.find_by_id(user.id)
        if fresh is None:
            raise NotFoundError("User not found")
        return fresh

    async def update_profile(
        self,
        user: UserDoc,
        email: Optional[str] = None,
        username: Optional[str] = None,
    ) -> UserDoc:
        if email is None and username is None:
            raise ValidationError("At least one field is required for update")

        updates: dict = {}
        if email is not None:
            email = normalize_email(email)
            if not validate_email(email):
                raise ValidationError("Please provide a valid email", field="email")
            if email != user.email:
                updates["email"] = email
        if username is not None:
            username = username.strip()
            if not validate_username(username):
                raise ValidationError("Please provide a username", field="username")
            if username != user.username:
                updates["username"] = username

        if not updates:
            return await self.get_profile(user)

        if await self._users.exists_with_email_or_username(
            updates.get("email"), updates.get("username"), exclude_id=user.id
        ):
            raise ConflictError(DUPLICATE_IDENTITY_MESSAGE)

        token = None
        if "email" in updates:
            token, confirmation_fields = self._new_confirmation_token()
            updates["is_email_confirmed"] = False
            updates.update(confirmation_fields)

        try:
            await self._users.update_fields(user.id, updates)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_IDENTITY_MESSAGE)

        updated = await self.get_profile(user)

        if token is not None:
            sent = await self._send_quietly(
                "confirmation",
                self._email.send_confirmation_email(
                    updated.email, updated.username, self.confirmation_url(token)
                ),
            )
            if not sent:
                await self._restore_fields(user, updates)
                log.error(
                    "profile_update_rolled_back",
                    reason="email_not_sent",
                    user_id=str(user.id),
                )
                raise EmailDeliveryError("Email could not be sent")

        log.info(
            "profile_updated",
            user_id=str(user.id),
            fields=sorted(k for k in updates if k in ("email", "username")),
        )
        return updated

    async def delete_account(self, user: UserDoc) -> None:
        if not await self._users.delete(user.id):
            raise NotFoundError("User not found")
        log.info("account_deleted", user_id=str(user.id))

        # The delete is irreversible; a failed goodbye email is only logged
        await self._send_quietly(
            "cancellation",
            self._email.send_cancellation_email(user.email, user.username),
        )

    # ── Helpers ─────────────────────────────────────────────────────────────

    async def _restore_fields(self, user: UserDoc, fields: dict) -> None:
        """Put *fields* back to their values on *user*, unsetting absent ones."""
        previous = {name: getattr(user, name) for name in fields}
        await self._users.update_fields(
            user.id,
            {name: value for name, value in previous.items() if value is not None},
            unset_fields=[name for name, value in previous.items() if value is None],
        )

    async def _send_quietly(self, kind: str, send) -> bool:
        """Await an EmailProvider call, turning any exception into False."""
        try:
            sent = await send
        except Exception as e:
            log.error(
                "email_send_error",
                kind=kind,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        if not sent:
            log.warning("email_not_delivered", kind=kind)
        return bool(sent)
