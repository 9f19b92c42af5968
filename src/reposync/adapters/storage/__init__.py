"""Public interface for the object-storage listing adapter."""

from __future__ import annotations

from .client import StorageListingClient, StorageListingError
from .importer import StorageListingImporter
from .schema import EntityPage, EntityPayload
from .translator import parse_entities, parse_entity

__all__ = [
    "EntityPage",
    "EntityPayload",
    "StorageListingClient",
    "StorageListingError",
    "StorageListingImporter",
    "parse_entities",
    "parse_entity",
]
