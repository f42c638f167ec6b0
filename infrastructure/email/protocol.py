"""EmailProvider protocol. Services depend on this, not on the SMTP implementation."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    text_body: str
    html_body: Optional[str] = None


@dataclass(frozen=True)
class EmailResult:
    """Outcome of a send. Providers report failures here instead of raising,
    so callers can run compensating actions."""

    success: bool
    error: Optional[str] = None


class EmailProvider(Protocol):
    async def send(self, message: OutgoingEmail) -> EmailResult: ...
