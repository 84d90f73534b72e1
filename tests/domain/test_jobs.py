from __future__ import annotations

from typing import TYPE_CHECKING, Literal
from uuid import uuid4

import pytest
from sqlalchemy import select

from lawdir.domain.errors import StoreUnavailableError
from lawdir.domain.jobs import describe_record, run_extraction_job, run_job, run_paged_job
from lawdir.domain.model import (
    JobStatus,
    JobType,
    ScrapingLog,
    SourceType,
    UpsertAction,
)
from lawdir.domain.reconciliation import RecordError, UpsertResult
from tests.helpers.records import make_association, make_person_record

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from lawdir.adapters.sqlalchemy import SqlAlchemyUnitOfWork
    from lawdir.domain.reconciliation import AssociationRecord, ReconciliationEngine

    type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


class FakeFetcher:
    def __init__(
        self,
        pages: dict[str, list[list[str]]],
        *,
        failing: frozenset[tuple[str, int]] = frozenset(),
    ) -> None:
        self.pages = pages
        self.failing = failing
        self.calls: list[tuple[str, int]] = []

    def fetch_records(self, source: str, page: int) -> list[str]:
        self.calls.append((source, page))
        if (source, page) in self.failing:
            raise TimeoutError(f"{source} timed out")
        batches = self.pages.get(source, [])
        return batches[page - 1] if page <= len(batches) else []


class EndlessFetcher:
    def __init__(self) -> None:
        self.calls = 0

    def fetch_records(self, source: str, page: int) -> list[str]:
        self.calls += 1
        return [f"{source}-{page}"]


class FakeExtractor:
    def __init__(self, facts: dict[str, Sequence[AssociationRecord]]) -> None:
        self.facts = facts

    def extract_facts(self, text: str) -> Sequence[AssociationRecord]:
        if text not in self.facts:
            raise ValueError("extraction service returned garbage")
        return self.facts[text]


class UnreachableUnitOfWork:
    def __enter__(self) -> UnreachableUnitOfWork:
        raise StoreUnavailableError("connection refused")

    def __exit__(self, *_exc: object) -> Literal[False]:
        return False


def _created(_record: object) -> UpsertResult:
    return UpsertResult(action=UpsertAction.CREATED)


def _job_logs(unit_of_work: UnitOfWorkFactory) -> list[ScrapingLog]:
    with unit_of_work() as uow:
        return list(uow.session.execute(select(ScrapingLog)).scalars())


def test_run_job_persists_summary_and_isolates_failures(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    records = [
        make_person_record("Ahmad bin Ali", bar_membership_number="BC1"),
        make_person_record("Siti Aminah", bar_membership_number=None),
        make_person_record("Lim Wei", bar_membership_number="BC2"),
        make_person_record("Ahmad bin Ali", bar_membership_number="BC1"),
    ]

    summary = run_job(
        sqlite_unit_of_work,
        records,
        reconciler.process_profile,
        job_type=JobType.LAWYER_PROFILE,
        source_type=SourceType.BAR_COUNCIL,
        source_url="https://directory.example.my",
        success_error_ratio=0.5,
    )

    assert summary.records_processed == 4
    assert summary.records_created == 2
    assert summary.records_skipped == 2
    assert summary.error_count == 1
    assert summary.status is JobStatus.PARTIAL
    (entry,) = _job_logs(sqlite_unit_of_work)
    assert entry.status is JobStatus.PARTIAL
    assert entry.source_url == "https://directory.example.my"
    assert entry.records_processed == 4
    assert entry.errors == [
        {"subject": "Siti Aminah", "error": "no match and no bar number", "kind": "unresolved"}
    ]
    assert entry.completed_at is not None


def test_run_job_turns_handler_exceptions_into_record_errors(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    def handler(record: dict[str, str]) -> UpsertResult:
        if record["name"] == "broken":
            raise ValueError("bad phone number")
        return UpsertResult(action=UpsertAction.UPDATED)

    summary = run_job(
        sqlite_unit_of_work,
        [{"name": "ok"}, {"name": "broken"}, {"name": "fine"}],
        handler,
        job_type=JobType.FIRM,
    )

    assert summary.records_processed == 3
    assert summary.records_updated == 2
    assert summary.errors == [RecordError(subject="broken", error="bad phone number")]
    assert summary.status is JobStatus.FAILED


def test_empty_job_completes(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    summary = run_job(sqlite_unit_of_work, [], _created, job_type=JobType.FIRM)

    assert summary.status is JobStatus.COMPLETED
    assert summary.records_processed == 0


def test_unreachable_store_fails_the_job() -> None:
    with pytest.raises(StoreUnavailableError):
        run_job(
            UnreachableUnitOfWork,  # type: ignore[arg-type]
            [{"name": "x"}],
            _created,
            job_type=JobType.FIRM,
        )


def test_paged_job_walks_sources_and_throttles(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    fetcher = FakeFetcher(
        {"johor": [["a", "b"], ["c"]], "penang": [["d"]]},
        failing=frozenset({("selangor", 1)}),
    )
    sleeps: list[float] = []
    seen: list[str] = []

    def handler(record: str) -> UpsertResult:
        seen.append(record)
        return UpsertResult(action=UpsertAction.CREATED)

    summary = run_paged_job(
        sqlite_unit_of_work,
        fetcher,
        ["johor", "selangor", "penang"],
        handler,
        job_type=JobType.LAWYER_PROFILE,
        request_delay_seconds=1.5,
        sleeper=sleeps.append,
    )

    assert seen == ["a", "b", "c", "d"]
    assert fetcher.calls == [
        ("johor", 1),
        ("johor", 2),
        ("johor", 3),
        ("selangor", 1),
        ("penang", 1),
        ("penang", 2),
    ]
    assert sleeps == [1.5] * 5
    assert summary.records_created == 4
    assert summary.error_count == 1
    assert summary.errors[0].subject == "selangor page 1"


def test_paged_job_stops_at_max_pages(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    fetcher = EndlessFetcher()

    summary = run_paged_job(
        sqlite_unit_of_work,
        fetcher,
        ["kedah"],
        _created,
        job_type=JobType.LAWYER_PROFILE,
        max_pages=3,
        request_delay_seconds=0,
    )

    assert fetcher.calls == 3
    assert summary.records_processed == 3


def test_extraction_job_stores_news_facts(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    created = reconciler.process_profile(make_person_record())
    assert isinstance(created, UpsertResult)
    assert created.id is not None
    case_id = uuid4()
    extractor = FakeExtractor(
        {
            "Ahmad bin Ali acted for the accused.": [
                make_association(
                    make_person_record(bar_membership_number=None),
                    case_id=case_id,
                    source_type=SourceType.COURT_RECORD,
                )
            ],
        }
    )

    summary = run_extraction_job(
        sqlite_unit_of_work,
        ["Ahmad bin Ali acted for the accused.", "unparseable"],
        extractor,
        reconciler,
    )

    assert summary.job_type is JobType.NEWS_EXTRACTION
    assert summary.records_created == 1
    assert summary.error_count == 1
    assert summary.errors[0].subject == "text 2"
    with sqlite_unit_of_work() as uow:
        fact = uow.repositories.case_lawyers.get(case_id, created.id)
    assert fact is not None
    assert fact.source_type is SourceType.NEWS
    assert fact.is_verified is False


def test_describe_record() -> None:
    assert describe_record(make_person_record("Lim Wei")) == "Lim Wei"
    assert describe_record({"subjectId": "abc"}) == "abc"
    assert describe_record(42) == "42"
