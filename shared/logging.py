"""
Logger factory and helpers.

Provides:
- get_logger(): Get a configured logger instance
- hash_ip(): Hash IP addresses for privacy
"""

from __future__ import annotations

from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from shared import logging_config


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("verification_code_sent", email="a@b.co", purpose="generic")
    """
    return structlog.get_logger(name)


def hash_ip(ip_address: Optional[str]) -> Optional[str]:
    """Hash an IP address for logging; ``None`` passes through."""
    if ip_address is None:
        return None
    return logging_config.hash_ip(ip_address)


__all__ = ["get_logger", "hash_ip"]
