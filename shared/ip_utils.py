"""
Client identity resolution for FastAPI requests.

Takes an explicit ``Request`` parameter so the function is testable without
a running server.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request


def resolve_client_identity(request: Request) -> Optional[str]:
    """Extract the client IP used as the rate-limit identity.

    Checks proxy headers in priority order:

    1. ``X-Forwarded-For`` - first entry of the comma-separated list
    2. ``X-Real-IP`` - nginx / other reverse proxies

    Args:
        request: The current FastAPI ``Request`` object.

    Returns:
        The resolved client IP string, or ``None`` when it cannot be
        determined. Callers decide per endpoint what an unknown identity means.
    """
    forwarded: Optional[str] = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip: Optional[str] = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return None
