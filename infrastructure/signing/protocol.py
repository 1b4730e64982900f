"""TokenSigner protocol — AuthService mints and verifies session tokens through this."""

from typing import Any, Protocol


class TokenSigner(Protocol):
    def issue(self, subject: str) -> str:
        """Return a signed, time-bounded token whose subject is *subject*."""
        ...

    def verify(self, token: str) -> dict[str, Any]:
        """Return the token's claims.

        Raises jwt.InvalidTokenError (or a subclass) for a malformed,
        expired or badly signed token.
        """
        ...
