"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceType(StrEnum):
    """Provenance of a fact, listed from most to least trusted."""

    COURT_RECORD = "court_record"
    MANUAL = "manual"
    BAR_COUNCIL = "bar_council"
    LAW_FIRM = "law_firm"
    NEWS = "news"

    @property
    def is_privileged(self) -> bool:
        """Court records and human entry are never overwritten by scraped data."""
        return self in (SourceType.COURT_RECORD, SourceType.MANUAL)

    @property
    def base_reliability(self) -> float:
        return _BASE_RELIABILITY[self]


class LawyerRole(StrEnum):
    PROSECUTION = "prosecution"
    DEFENSE = "defense"
    JUDGE = "judge"
    OTHER = "other"


class BarStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    DECEASED = "deceased"


class MatchType(StrEnum):
    """How the identity resolver arrived at a canonical lawyer."""

    BAR_NUMBER = "bar_number"
    NAME_EXACT = "name_exact"
    NAME_FUZZY = "name_fuzzy"
    CREATED = "created"
    DIRECT = "direct"


class FirmMatchType(StrEnum):
    ADDRESS = "address"
    NAME_CITY = "name_city"
    CREATED = "created"


class UpsertAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


class JobStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIAL = "partial"


class JobType(StrEnum):
    LAWYER_PROFILE = "lawyer_profile"
    CASE_LAWYER = "case_lawyer"
    FIRM = "firm"
    NEWS_EXTRACTION = "news_extraction"


_BASE_RELIABILITY: dict[SourceType, float] = {
    SourceType.COURT_RECORD: 1.00,
    SourceType.MANUAL: 1.00,
    SourceType.BAR_COUNCIL: 0.95,
    SourceType.LAW_FIRM: 0.85,
    SourceType.NEWS: 0.70,
}
