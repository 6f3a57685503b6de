"""Application configuration helpers."""

from __future__ import annotations

from .env import bool_env, positive_int_env
from .errors import ConfigurationError, InvalidConfigurationValueError
from .gates import GateConfig, get_gate_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "GateConfig",
    "InvalidConfigurationValueError",
    "StorageConfig",
    "bool_env",
    "configure_logging",
    "get_database_config",
    "get_gate_config",
    "get_storage_config",
    "positive_int_env",
]
