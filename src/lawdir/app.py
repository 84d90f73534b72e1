"""Application orchestration entry points."""

from __future__ import annotations

import dataclasses
import time
from logging import getLogger
from typing import TYPE_CHECKING

from lawdir.adapters.jsonl import (
    JsonlRecordSource,
    parse_association,
    parse_fact,
    parse_firm,
    parse_person,
)
from lawdir.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from lawdir.config import get_job_config, get_reconciliation_config
from lawdir.domain.jobs import run_job, run_paged_job
from lawdir.domain.model import JobType, SourceType
from lawdir.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from lawdir.adapters.jsonl import RawLine
    from lawdir.config import JobConfig, ReconciliationConfig
    from lawdir.domain.reconciliation import JobSummary, RecordOutcome, UnitOfWorkFactory

    type LineHandler = Callable[[RawLine], RecordOutcome]


log = getLogger(__name__)


def import_profiles(
    path: str | Path,
    *,
    source_type: SourceType = SourceType.BAR_COUNCIL,
    paged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reconciliation_config: ReconciliationConfig | None = None,
    job_config: JobConfig | None = None,
    sleeper: Callable[[float], None] = time.sleep,
) -> JobSummary:
    """Reconcile lawyer profile rows (e.g. a Bar Council directory dump)."""

    def handler_for(engine: ReconciliationEngine) -> LineHandler:
        def handle(line: RawLine) -> RecordOutcome:
            return engine.process_profile(parse_person(line.text), source_type=source_type)

        return handle

    return _run_import(
        path,
        job_type=JobType.LAWYER_PROFILE,
        source_type=source_type,
        handler_for=handler_for,
        paged=paged,
        unit_of_work_factory=unit_of_work_factory,
        reconciliation_config=reconciliation_config,
        job_config=job_config,
        sleeper=sleeper,
    )


def import_associations(
    path: str | Path,
    *,
    source_type: SourceType | None = None,
    paged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reconciliation_config: ReconciliationConfig | None = None,
    job_config: JobConfig | None = None,
    sleeper: Callable[[float], None] = time.sleep,
) -> JobSummary:
    """Reconcile case-lawyer claims that describe the lawyer by name.

    ``source_type`` overrides the source named by each record when given.
    """

    def handler_for(engine: ReconciliationEngine) -> LineHandler:
        def handle(line: RawLine) -> RecordOutcome:
            record = parse_association(line.text)
            if source_type is not None:
                record = dataclasses.replace(record, source_type=source_type)
            return engine.process_association(record)

        return handle

    return _run_import(
        path,
        job_type=JobType.CASE_LAWYER,
        source_type=source_type,
        handler_for=handler_for,
        paged=paged,
        unit_of_work_factory=unit_of_work_factory,
        reconciliation_config=reconciliation_config,
        job_config=job_config,
        sleeper=sleeper,
    )


def import_facts(
    path: str | Path,
    *,
    source_type: SourceType | None = None,
    paged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reconciliation_config: ReconciliationConfig | None = None,
    job_config: JobConfig | None = None,
    sleeper: Callable[[float], None] = time.sleep,
) -> JobSummary:
    """Reconcile case-lawyer claims that already carry the lawyer id."""

    def handler_for(engine: ReconciliationEngine) -> LineHandler:
        def handle(line: RawLine) -> RecordOutcome:
            record = parse_fact(line.text)
            if source_type is not None:
                record = dataclasses.replace(record, source_type=source_type)
            return engine.process_fact(record)

        return handle

    return _run_import(
        path,
        job_type=JobType.CASE_LAWYER,
        source_type=source_type,
        handler_for=handler_for,
        paged=paged,
        unit_of_work_factory=unit_of_work_factory,
        reconciliation_config=reconciliation_config,
        job_config=job_config,
        sleeper=sleeper,
    )


def import_firms(
    path: str | Path,
    *,
    source_type: SourceType | None = None,
    paged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reconciliation_config: ReconciliationConfig | None = None,
    job_config: JobConfig | None = None,
    sleeper: Callable[[float], None] = time.sleep,
) -> JobSummary:
    """Reconcile firm rows, backfilling known firms."""

    def handler_for(engine: ReconciliationEngine) -> LineHandler:
        def handle(line: RawLine) -> RecordOutcome:
            return engine.process_firm(parse_firm(line.text))

        return handle

    return _run_import(
        path,
        job_type=JobType.FIRM,
        source_type=source_type,
        handler_for=handler_for,
        paged=paged,
        unit_of_work_factory=unit_of_work_factory,
        reconciliation_config=reconciliation_config,
        job_config=job_config,
        sleeper=sleeper,
    )


def _default_unit_of_work() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def _run_import(
    path: str | Path,
    *,
    job_type: JobType,
    source_type: SourceType | None,
    handler_for: Callable[[ReconciliationEngine], LineHandler],
    paged: bool,
    unit_of_work_factory: UnitOfWorkFactory | None,
    reconciliation_config: ReconciliationConfig | None,
    job_config: JobConfig | None,
    sleeper: Callable[[float], None],
) -> JobSummary:
    settings = reconciliation_config or get_reconciliation_config()
    jobs = job_config or get_job_config()
    effective_uow = unit_of_work_factory or _default_unit_of_work()
    engine = ReconciliationEngine(
        unit_of_work=effective_uow,
        fuzzy_threshold=settings.fuzzy_match_threshold,
    )
    handler = handler_for(engine)
    log.info("Importing %s records from %s (paged=%s)", job_type, path, paged)

    with JsonlRecordSource(path, page_size=jobs.page_size) as source:
        if paged:
            return run_paged_job(
                effective_uow,
                source,
                [source.name],
                handler,
                job_type=job_type,
                source_type=source_type,
                max_pages=jobs.max_pages,
                request_delay_seconds=jobs.request_delay_seconds,
                sleeper=sleeper,
                success_error_ratio=settings.success_error_ratio,
                max_logged_errors=settings.max_logged_errors,
            )
        return run_job(
            effective_uow,
            source.lines(),
            handler,
            job_type=job_type,
            source_type=source_type,
            source_url=source.name,
            success_error_ratio=settings.success_error_ratio,
            max_logged_errors=settings.max_logged_errors,
        )
