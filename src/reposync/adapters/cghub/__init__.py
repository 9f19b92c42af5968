"""Public interface for the CGHub adapter."""

from __future__ import annotations

from .client import CGHubAPIError, CGHubClient
from .importer import CGHubImporter
from .schema import AnalysisDetail, AnalysisDetailResponse
from .translator import parse_analyses, parse_analysis

__all__ = [
    "AnalysisDetail",
    "AnalysisDetailResponse",
    "CGHubAPIError",
    "CGHubClient",
    "CGHubImporter",
    "parse_analyses",
    "parse_analysis",
]
