"""Public domain model surface."""

from __future__ import annotations

from lawdir.domain.model.case import CaseLawyer, FactAssertion
from lawdir.domain.model.entity import Entity, new_id, utcnow
from lawdir.domain.model.enums import (
    BarStatus,
    FirmMatchType,
    JobStatus,
    JobType,
    LawyerRole,
    MatchType,
    SourceType,
    UpsertAction,
)
from lawdir.domain.model.firm import Firm
from lawdir.domain.model.job import ScrapingLog
from lawdir.domain.model.lawyer import FirmHistoryEntry, Lawyer

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utcnow",
    # canonical entities
    "Lawyer",
    "FirmHistoryEntry",
    "Firm",
    # facts
    "CaseLawyer",
    "FactAssertion",
    # jobs
    "ScrapingLog",
    # enums
    "BarStatus",
    "FirmMatchType",
    "JobStatus",
    "JobType",
    "LawyerRole",
    "MatchType",
    "SourceType",
    "UpsertAction",
]
