"""Application configuration helpers."""

from __future__ import annotations

from .cghub import CGHubConfig, get_cghub_config
from .ega import EGAConfig, get_ega_config
from .env import env_flag, env_list, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .identifier import IdentifierConfig, get_identifier_config
from .importer import ImportConfig, get_import_config, parse_sources
from .index import IndexConfig, get_index_config
from .logging import configure_logging
from .notification import NotificationConfig, get_notification_config
from .object_store import ObjectStoreConfig, get_object_store_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "NO_RETRY",
    "CGHubConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "EGAConfig",
    "IdentifierConfig",
    "ImportConfig",
    "IndexConfig",
    "MissingConfigurationError",
    "NotificationConfig",
    "ObjectStoreConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "get_cghub_config",
    "get_database_config",
    "get_ega_config",
    "get_identifier_config",
    "get_import_config",
    "get_index_config",
    "get_notification_config",
    "get_object_store_config",
    "get_storage_config",
    "optional_env_var",
    "parse_sources",
    "require_env_var",
    "require_env_vars",
]
