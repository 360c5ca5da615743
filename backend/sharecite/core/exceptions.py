"""Custom exceptions for sharecite."""

from typing import Optional


class ShareciteError(Exception):
    """Base exception for sharecite errors."""
    pass


class ShareLinkAPIError(ShareciteError):
    """Raised when the backend share link API call fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class StreamError(ShareciteError):
    """Raised when an assistant message stream cannot be read."""
    pass
