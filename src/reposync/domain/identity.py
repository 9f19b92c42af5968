"""Deterministic identifiers derived from natural-key components.

Identifiers are UUIDv5 values (SHA-1 based) computed over an escaped, ``/``-joined
encoding of the components. Escaping keeps the encoding injective, so
``("ab", "c")`` and ``("a", "bc")`` or ``("a/b",)`` and ``("a", "b")`` never share
an identifier. The namespace, separator and escaping rules are part of the stored
data contract: changing any of them re-keys every published record.
"""

from __future__ import annotations

from typing import Final
from uuid import UUID, uuid5

IDENTITY_VERSION: Final[int] = 1
IDENTITY_NAMESPACE: Final[UUID] = UUID("6b1c3a52-8e0f-5d1e-9c47-3f2a8d6e4b10")
SEPARATOR: Final[str] = "/"
_ESCAPE: Final[str] = "\\"


def _escape(component: str) -> str:
    return component.replace(_ESCAPE, _ESCAPE * 2).replace(SEPARATOR, _ESCAPE + SEPARATOR)


def encode_components(components: tuple[str, ...]) -> str:
    """Return the canonical text encoding hashed by :func:`resolve_id`."""

    return SEPARATOR.join(_escape(component) for component in components)


def resolve_id(*components: str) -> str:
    """Return the deterministic identifier for the ordered ``components``."""

    if not components:
        raise ValueError("At least one identity component is required")
    for component in components:
        if not isinstance(component, str):
            raise TypeError(f"Identity components must be strings, got {type(component).__name__}")
    return str(uuid5(IDENTITY_NAMESPACE, encode_components(components)))


def file_id(analysis_id: str, file_name: str) -> str:
    return resolve_id("file", analysis_id, file_name)


def observation_id(repo_code: str, repo_file_id: str) -> str:
    return resolve_id("observation", repo_code, repo_file_id)
