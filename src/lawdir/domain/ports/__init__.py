"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import FactExtractor, RecordFetcher
from .persistence import (
    CaseLawyerRepository,
    ContactProjection,
    FactAssertionRepository,
    FirmHistoryRepository,
    FirmRepository,
    LawyerRepository,
    NameCandidate,
    Repository,
    ScrapingLogRepository,
)
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CaseLawyerRepository",
    "ContactProjection",
    "FactAssertionRepository",
    "FactExtractor",
    "FirmHistoryRepository",
    "FirmRepository",
    "LawyerRepository",
    "NameCandidate",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "RecordFetcher",
    "Repository",
    "RepositoryCollection",
    "ScrapingLogRepository",
    "UnitOfWork",
]
