"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .reconciliation import (
    JobConfig,
    ReconciliationConfig,
    get_job_config,
    get_reconciliation_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "JobConfig",
    "ReconciliationConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_job_config",
    "get_reconciliation_config",
    "get_storage_config",
]
