"""
Random code and token generators.

All generators use cryptographically secure sources (``secrets`` module).
"""

from __future__ import annotations

import secrets

VERIFICATION_CODE_MIN = 100_000
VERIFICATION_CODE_MAX = 999_999


def generate_verification_code() -> str:
    """Generate a uniformly random 6-digit code in 100000–999999.

    The leading digit is never zero, so the code always has six characters.
    """
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(span))


def generate_reset_token(num_bytes: int = 32) -> str:
    """Generate a hex-encoded random token.

    Args:
        num_bytes: Number of random bytes (default 32, i.e. 256 bits).

    Returns:
        Lowercase hex string of ``2 * num_bytes`` characters.
    """
    return secrets.token_hex(num_bytes)
