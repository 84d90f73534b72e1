"""Batch job runners wrapping record streams with a persisted job log.

Records are handled sequentially in source order. Per-record exceptions are
caught here and only here; a store failure while opening the job log is
fatal to the whole job.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

from lawdir.domain.errors import StoreUnavailableError
from lawdir.domain.model import JobType, ScrapingLog, SourceType
from lawdir.domain.reconciliation.contracts import RecordError
from lawdir.domain.reconciliation.summary import (
    DEFAULT_MAX_LOGGED_ERRORS,
    DEFAULT_SUCCESS_ERROR_RATIO,
    JobSummary,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from uuid import UUID

    from lawdir.domain.ports import FactExtractor, RecordFetcher
    from lawdir.domain.reconciliation.contracts import RecordOutcome
    from lawdir.domain.reconciliation.engine import ReconciliationEngine, UnitOfWorkFactory
    from lawdir.domain.reconciliation.records import AssociationRecord


type RecordHandler[TRecord] = Callable[[TRecord], RecordOutcome]

DEFAULT_REQUEST_DELAY_SECONDS = 1.0
DEFAULT_MAX_PAGES = 100
DEFAULT_PAGE_SIZE = 50

log = logging.getLogger(__name__)


def describe_record(record: object) -> str:
    """Human-readable subject used to key per-record errors."""
    subject = getattr(record, "subject", None)
    if isinstance(subject, str) and subject:
        return subject
    if isinstance(record, Mapping):
        for key in ("name", "subject", "subject_id", "subjectId"):
            value = record.get(key)  # pyright: ignore[reportUnknownMemberType]
            if value:
                return str(value)  # pyright: ignore[reportUnknownArgumentType]
    return repr(record)[:80]


def run_job[TRecord](
    unit_of_work: UnitOfWorkFactory,
    records: Iterable[TRecord],
    handler: RecordHandler[TRecord],
    *,
    job_type: JobType,
    source_type: SourceType | None = None,
    source_url: str | None = None,
    success_error_ratio: float = DEFAULT_SUCCESS_ERROR_RATIO,
    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS,
) -> JobSummary:
    """Feed ``records`` through ``handler`` and persist the resulting job summary."""
    summary = JobSummary(
        job_type=job_type,
        source_type=source_type,
        success_error_ratio=success_error_ratio,
        max_logged_errors=max_logged_errors,
    )
    return _execute(unit_of_work, summary, records, handler, source_url=source_url)


def run_paged_job[TRecord](
    unit_of_work: UnitOfWorkFactory,
    fetcher: RecordFetcher[TRecord],
    sources: Sequence[str],
    handler: RecordHandler[TRecord],
    *,
    job_type: JobType,
    source_type: SourceType | None = None,
    max_pages: int = DEFAULT_MAX_PAGES,
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS,
    sleeper: Callable[[float], None] = time.sleep,
    success_error_ratio: float = DEFAULT_SUCCESS_ERROR_RATIO,
    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS,
) -> JobSummary:
    """Pull pages from ``fetcher`` for each source until an empty page or ``max_pages``.

    Consecutive fetches are throttled by ``request_delay_seconds``. A failed
    fetch is recorded as an error and the runner moves on to the next source.
    """
    summary = JobSummary(
        job_type=job_type,
        source_type=source_type,
        success_error_ratio=success_error_ratio,
        max_logged_errors=max_logged_errors,
    )

    def pages() -> Iterator[TRecord]:
        fetched_once = False
        for source in sources:
            for page in range(1, max_pages + 1):
                if fetched_once and request_delay_seconds > 0:
                    sleeper(request_delay_seconds)
                fetched_once = True
                try:
                    batch = fetcher.fetch_records(source, page)
                except Exception as exc:
                    log.warning("Fetching %s page %d failed: %s", source, page, exc)
                    summary.record_error(f"{source} page {page}", exc)
                    break
                if not batch:
                    break
                log.info("Fetched %d records from %s page %d", len(batch), source, page)
                yield from batch

    return _execute(unit_of_work, summary, pages(), handler)


def run_extraction_job(
    unit_of_work: UnitOfWorkFactory,
    texts: Iterable[str],
    extractor: FactExtractor,
    engine: ReconciliationEngine,
    *,
    success_error_ratio: float = DEFAULT_SUCCESS_ERROR_RATIO,
    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS,
) -> JobSummary:
    """Extract case-lawyer claims from free text and reconcile them as news-sourced facts."""
    summary = JobSummary(
        job_type=JobType.NEWS_EXTRACTION,
        source_type=SourceType.NEWS,
        success_error_ratio=success_error_ratio,
        max_logged_errors=max_logged_errors,
    )

    def extracted() -> Iterator[AssociationRecord]:
        for index, text in enumerate(texts, start=1):
            try:
                associations = extractor.extract_facts(text)
            except Exception as exc:
                log.warning("Extraction failed for text %d: %s", index, exc)
                summary.record_error(f"text {index}", exc)
                continue
            for association in associations:
                yield dataclasses.replace(association, source_type=SourceType.NEWS)

    return _execute(unit_of_work, summary, extracted(), engine.process_association)


def _execute[TRecord](
    unit_of_work: UnitOfWorkFactory,
    summary: JobSummary,
    records: Iterable[TRecord],
    handler: RecordHandler[TRecord],
    *,
    source_url: str | None = None,
) -> JobSummary:
    try:
        log_id = _open_log(unit_of_work, summary, source_url)
    except StoreUnavailableError as exc:
        log.error("Cannot start %s job: %s", summary.job_type, exc)
        summary.fail(exc)
        raise

    log.info("Started %s job", summary.job_type)
    for record in records:
        summary.record(_handle(handler, record))

    summary.finish()
    _close_log(unit_of_work, summary, log_id)
    log.info(
        "Finished %s job: %s, processed=%d created=%d updated=%d skipped=%d errors=%d",
        summary.job_type,
        summary.status,
        summary.records_processed,
        summary.records_created,
        summary.records_updated,
        summary.records_skipped,
        summary.error_count,
    )
    return summary


def _handle[TRecord](handler: RecordHandler[TRecord], record: TRecord) -> RecordOutcome:
    try:
        return handler(record)
    except Exception as exc:
        subject = describe_record(record)
        log.warning("Failed to reconcile %s: %s", subject, exc)
        return RecordError(subject=subject, error=str(exc) or type(exc).__name__)


def _open_log(
    unit_of_work: UnitOfWorkFactory,
    summary: JobSummary,
    source_url: str | None,
) -> UUID:
    entry = ScrapingLog(
        job_type=summary.job_type,
        source_type=summary.source_type,
        source_url=source_url,
        started_at=summary.started_at,
    )
    with unit_of_work() as uow:
        uow.repositories.scraping_logs.add(entry)
        uow.commit()
    return entry.id


def _close_log(unit_of_work: UnitOfWorkFactory, summary: JobSummary, log_id: UUID) -> None:
    with unit_of_work() as uow:
        entry = uow.repositories.scraping_logs.get(log_id)
        if entry is None:
            raise StoreUnavailableError(f"Job log {log_id} disappeared")
        summary.apply_to(entry)
        uow.commit()
