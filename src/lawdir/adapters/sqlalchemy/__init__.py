"""SQLAlchemy adapter package for lawdir."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCaseLawyerRepository,
    SqlAlchemyFactAssertionRepository,
    SqlAlchemyFirmHistoryRepository,
    SqlAlchemyFirmRepository,
    SqlAlchemyLawyerRepository,
    SqlAlchemyScrapingLogRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    create_database_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCaseLawyerRepository",
    "SqlAlchemyFactAssertionRepository",
    "SqlAlchemyFirmHistoryRepository",
    "SqlAlchemyFirmRepository",
    "SqlAlchemyLawyerRepository",
    "SqlAlchemyScrapingLogRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_database_engine",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
