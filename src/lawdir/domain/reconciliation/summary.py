"""Aggregation of per-record outcomes into a job summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.model import JobStatus, UpsertAction, utcnow

from .contracts import ErrorKind, RecordError

if TYPE_CHECKING:
    from datetime import datetime

    from lawdir.domain.model import JobType, ScrapingLog, SourceType

    from .contracts import RecordOutcome, UpsertResult

DEFAULT_SUCCESS_ERROR_RATIO = 0.10
DEFAULT_MAX_LOGGED_ERRORS = 50


@dataclass(slots=True, kw_only=True)
class JobSummary:
    """Counters for one job run.

    Every handled record counts as processed, skips and failures included.
    ``errors`` keeps only the first ``max_logged_errors`` entries while
    ``error_count`` stays exact.
    """

    job_type: JobType
    source_type: SourceType | None = None
    status: JobStatus = JobStatus.RUNNING
    records_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    error_count: int = 0
    errors: list[RecordError] = field(default_factory=list["RecordError"])
    started_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None
    duration_ms: int | None = None
    success_error_ratio: float = DEFAULT_SUCCESS_ERROR_RATIO
    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS

    def record(self, outcome: RecordOutcome) -> None:
        self.records_processed += 1
        if isinstance(outcome, RecordError):
            if outcome.kind is ErrorKind.UNRESOLVED:
                self.records_skipped += 1
            self._add_error(outcome)
            return
        self._count_action(outcome)

    def _count_action(self, result: UpsertResult) -> None:
        if result.action is UpsertAction.CREATED:
            self.records_created += 1
        elif result.action is UpsertAction.UPDATED:
            self.records_updated += 1
        else:
            self.records_skipped += 1

    def record_error(
        self,
        subject: str,
        error: BaseException | str,
        *,
        kind: ErrorKind = ErrorKind.FAILED,
    ) -> None:
        """Count a failure that happened outside of any single record, e.g. a page fetch."""
        self._add_error(RecordError(subject=subject, error=str(error), kind=kind))

    def _add_error(self, error: RecordError) -> None:
        self.error_count += 1
        if len(self.errors) < self.max_logged_errors:
            self.errors.append(error)

    @property
    def success(self) -> bool:
        return self.error_count < self.success_error_ratio * self.records_processed

    def finish(self, *, now: datetime | None = None) -> JobStatus:
        self.completed_at = now or utcnow()
        self.duration_ms = int((self.completed_at - self.started_at).total_seconds() * 1000)
        if self.error_count == 0:
            self.status = JobStatus.COMPLETED
        elif self.success:
            self.status = JobStatus.PARTIAL
        else:
            self.status = JobStatus.FAILED
        return self.status

    def fail(self, error: BaseException | str, *, now: datetime | None = None) -> None:
        """Mark the whole job failed after a setup-level error."""
        self.record_error("job", error)
        self.finish(now=now)
        self.status = JobStatus.FAILED

    def apply_to(self, entry: ScrapingLog) -> None:
        """Copy counters onto the persisted job log."""
        entry.status = self.status
        entry.records_processed = self.records_processed
        entry.records_created = self.records_created
        entry.records_updated = self.records_updated
        entry.records_skipped = self.records_skipped
        entry.error_count = self.error_count
        entry.errors = [error.as_dict() for error in self.errors]
        entry.completed_at = self.completed_at
        entry.duration_ms = self.duration_ms
