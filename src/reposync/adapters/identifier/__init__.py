"""Public interface for the identity service adapter."""

from __future__ import annotations

from .client import IdentifierClient, IdentifierServiceError

__all__ = ["IdentifierClient", "IdentifierServiceError"]
