"""Errors raised by the EGA adapter."""

from __future__ import annotations


class EGAAPIError(RuntimeError):
    """Raised when the EGA API answers with a non-OK status code."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class EGASessionExpiredError(EGAAPIError):
    """Raised when a request still reports an expired session after re-login."""
