"""Core primitives shared across sharecite."""

from sharecite.core.exceptions import (
    ShareciteError,
    ShareLinkAPIError,
    StreamError,
)

__all__ = [
    "ShareciteError",
    "ShareLinkAPIError",
    "StreamError",
]
