"""Public interface for the EGA adapter."""

from __future__ import annotations

from .client import DatasetFiles, EGAClient
from .errors import EGAAPIError, EGASessionExpiredError
from .importer import EGAImporter
from .schema import EGAFilePayload, EGAResponse
from .translator import parse_datasets, parse_file, split_file_name

__all__ = [
    "DatasetFiles",
    "EGAAPIError",
    "EGAClient",
    "EGAFilePayload",
    "EGAImporter",
    "EGAResponse",
    "EGASessionExpiredError",
    "parse_datasets",
    "parse_file",
    "split_file_name",
]
