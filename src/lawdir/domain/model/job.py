"""Persisted job log for batch reconciliation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.model.entity import Entity, utcnow
from lawdir.domain.model.enums import JobStatus

if TYPE_CHECKING:
    from datetime import datetime

    from lawdir.domain.model.enums import JobType, SourceType


@dataclass(eq=False, kw_only=True)
class ScrapingLog(Entity):
    job_type: JobType
    source_type: SourceType | None = None
    source_url: str | None = None
    status: JobStatus = JobStatus.RUNNING
    records_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    error_count: int = 0
    errors: list[dict[str, str]] = field(default_factory=list["dict[str, str]"])
    started_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None
    duration_ms: int | None = None
