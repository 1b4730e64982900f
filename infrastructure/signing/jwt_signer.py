"""PyJWT implementation of TokenSigner.

RS256 is used when both PEM keys are configured; otherwise HS256 with
JWT_SECRET. Keys supplied through env vars may contain literal ``\\n``
sequences, which are expanded.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

import jwt

from config import JWTSettings
from shared.datetime_utils import utcnow
from shared.generators import generate_token_id


class JwtTokenSigner:
    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings
        if settings.use_rs256:
            self._algorithm = "RS256"
            self._signing_key: Any = settings.jwt_private_key.replace("\\n", "\n")
            self._verify_key: Any = settings.jwt_public_key.replace("\\n", "\n")
        else:
            if not settings.jwt_secret:
                raise RuntimeError(
                    "JWT_SECRET must be set when RS256 keys are not provided"
                )
            self._algorithm = "HS256"
            self._signing_key = settings.jwt_secret
            self._verify_key = settings.jwt_secret

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue(self, subject: str, ttl_seconds: Optional[int] = None) -> str:
        now = utcnow()
        ttl = ttl_seconds if ttl_seconds is not None else self._settings.session_token_ttl_seconds
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
            # Two logins within the same second must still yield distinct
            # tokens, otherwise their session hashes would collide.
            "jti": generate_token_id(),
        }
        return jwt.encode(claims, self._signing_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        return jwt.decode(
            token,
            self._verify_key,
            algorithms=[self._algorithm],
            audience=self._settings.jwt_audience,
            issuer=self._settings.jwt_issuer,
            options={"require": ["exp", "sub"]},
        )
