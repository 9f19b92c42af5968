"""Search index adapter."""

from __future__ import annotations

from .indexer import ElasticsearchFileIndexer, IndexBuildError, index_name

__all__ = ["ElasticsearchFileIndexer", "IndexBuildError", "index_name"]
