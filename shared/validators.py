"""
Input validators. Pure functions with no framework imports.
"""

from __future__ import annotations

import re
from typing import List, Tuple


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address for storage and lookups."""
    return email.strip().lower()


def validate_password(password: str) -> Tuple[bool, List[str]]:
    """Check a new account password against the strength policy.

    Rules:
    - At least 8 characters
    - At least one uppercase letter, one lowercase letter and one digit
    - At least one character that is neither a word character nor whitespace

    Returns:
        ``(is_valid, missing_requirements)``
    """
    if not password:
        return False, ["Password is required"]

    missing: List[str] = []
    if len(password) < 8:
        missing.append("At least 8 characters")
    if not re.search(r"[A-Z]", password):
        missing.append("At least one uppercase letter")
    if not re.search(r"[a-z]", password):
        missing.append("At least one lowercase letter")
    if not re.search(r"\d", password):
        missing.append("At least one number")
    if not re.search(r"[^\w\s]", password):
        missing.append("At least one special character")

    return not missing, missing
