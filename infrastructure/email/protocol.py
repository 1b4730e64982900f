"""EmailProvider protocol — services depend on this, not the concrete implementation.

Every method returns True when the provider accepted the message and False
otherwise; providers never raise for delivery failures.
"""

from typing import Protocol


class EmailProvider(Protocol):
    async def send_confirmation_email(
        self, email: str, username: str, confirmation_url: str
    ) -> bool: ...

    async def send_password_reset_email(
        self, email: str, username: str, reset_url: str
    ) -> bool: ...

    async def send_password_changed_email(self, email: str, username: str) -> bool: ...

    async def send_cancellation_email(self, email: str, username: str) -> bool: ...
