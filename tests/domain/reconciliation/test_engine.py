from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from lawdir.domain.model import LawyerRole, SourceType, UpsertAction
from lawdir.domain.reconciliation import ErrorKind, RecordError, UpsertResult
from tests.helpers.records import (
    make_association,
    make_fact,
    make_firm_record,
    make_person_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from lawdir.adapters.sqlalchemy import SqlAlchemyUnitOfWork
    from lawdir.domain.model import CaseLawyer, Lawyer
    from lawdir.domain.reconciliation import ReconciliationEngine, RecordOutcome
    from tests.helpers.clock import FixedClock

    type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def _result(outcome: RecordOutcome) -> UpsertResult:
    assert isinstance(outcome, UpsertResult), outcome
    return outcome


def _lawyer(unit_of_work: UnitOfWorkFactory, lawyer_id: UUID) -> Lawyer:
    with unit_of_work() as uow:
        lawyer = uow.repositories.lawyers.get(lawyer_id)
    assert lawyer is not None
    return lawyer


def _case_fact(unit_of_work: UnitOfWorkFactory, case_id: UUID, lawyer_id: UUID) -> CaseLawyer:
    with unit_of_work() as uow:
        fact = uow.repositories.case_lawyers.get(case_id, lawyer_id)
    assert fact is not None
    return fact


def _create_lawyer(reconciler: ReconciliationEngine, **values: str) -> UUID:
    created = _result(reconciler.process_profile(make_person_record(**values)))
    assert created.id is not None
    return created.id


def test_same_profile_twice_creates_then_skips(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    record = make_person_record("Ahmad bin Ali", bar_membership_number="BC999")

    first = _result(reconciler.process_profile(record))
    second = _result(reconciler.process_profile(record))

    assert first.action is UpsertAction.CREATED
    assert second.action is UpsertAction.SKIPPED
    assert first.id == second.id
    with sqlite_unit_of_work() as uow:
        assert len(uow.repositories.lawyers.name_candidates()) == 1


def test_bar_council_profile_creation_is_verified_by_the_directory(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    clock: FixedClock,
) -> None:
    result = _result(reconciler.process_profile(make_person_record()))

    assert result.action is UpsertAction.CREATED
    assert result.confidence is not None
    assert 0.80 <= result.confidence <= 0.81
    assert result.id is not None
    lawyer = _lawyer(sqlite_unit_of_work, result.id)
    assert lawyer.is_verified is True
    assert lawyer.verified_at == clock.now
    assert lawyer.profile_source is SourceType.BAR_COUNCIL


def test_repeat_bar_council_profile_earns_full_bar_number_credit(
    reconciler: ReconciliationEngine,
    clock: FixedClock,
) -> None:
    _create_lawyer(reconciler)
    clock.advance(days=1)

    result = _result(reconciler.process_profile(make_person_record()))

    assert result.confidence is not None
    assert 0.90 <= result.confidence <= 0.91


def test_created_lawyer_gets_half_bar_number_credit_on_association(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    association = make_association(
        make_person_record("Siti binti Hassan", bar_membership_number="BC777"),
        source_type=SourceType.BAR_COUNCIL,
    )

    result = _result(reconciler.process_association(association))

    assert result.action is UpsertAction.CREATED
    assert result.confidence is not None
    assert 0.80 <= result.confidence <= 0.81
    assert result.id is not None
    stored = _case_fact(sqlite_unit_of_work, association.case_id, result.id)
    assert stored.confidence_score == result.confidence
    assert stored.is_verified is False


def test_changed_profile_fields_update_the_same_lawyer(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    lawyer_id = _create_lawyer(reconciler)

    result = _result(
        reconciler.process_profile(make_person_record(phone="+60 3-2161 0000", city="Ipoh"))
    )

    assert result.action is UpsertAction.UPDATED
    assert result.id == lawyer_id
    lawyer = _lawyer(sqlite_unit_of_work, lawyer_id)
    assert lawyer.phone == "+60 3-2161 0000"
    assert lawyer.city == "Ipoh"


def test_profile_without_bar_number_or_match_is_unresolved(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    outcome = reconciler.process_profile(
        make_person_record("Siti Aminah", bar_membership_number=None)
    )

    assert isinstance(outcome, RecordError)
    assert outcome.kind is ErrorKind.UNRESOLVED
    assert outcome.subject == "Siti Aminah"
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.lawyers.name_candidates() == []


def test_profile_links_firm_history_and_backfills_firm_contacts(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    record = make_person_record(
        firm_name="Ali & Partners",
        firm_address="No. 5, Jalan Ampang, 50450 Kuala Lumpur",
        phone="+60 3-2161 0000",
        email="ahmad@ali.my",
    )

    result = _result(reconciler.process_profile(record))

    assert result.id is not None
    lawyer = _lawyer(sqlite_unit_of_work, result.id)
    assert lawyer.primary_firm_id is not None
    assert lawyer.city == "Kuala Lumpur"
    with sqlite_unit_of_work() as uow:
        firm = uow.repositories.firms.get(lawyer.primary_firm_id)
        current = uow.repositories.firm_history.current_for(lawyer.id)
    assert firm is not None
    assert firm.name == "Ali & Partners"
    assert firm.phone == "+60 3-2161 0000"
    assert firm.email == "ahmad@ali.my"
    assert current is not None
    assert current.firm_id == firm.id


def test_court_record_fact_is_not_overwritten_by_news(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    lawyer_id = _create_lawyer(reconciler)
    case_id = uuid4()

    news = _result(reconciler.process_fact(make_fact(lawyer_id, case_id=case_id)))
    court = _result(
        reconciler.process_fact(
            make_fact(lawyer_id, case_id=case_id, source_type=SourceType.COURT_RECORD)
        )
    )
    late_news = _result(
        reconciler.process_fact(
            make_fact(
                lawyer_id,
                case_id=case_id,
                role=LawyerRole.PROSECUTION,
                source_url="https://news.example.my/a",
            )
        )
    )

    assert news.action is UpsertAction.CREATED
    assert news.confidence is not None
    assert news.confidence < 0.9
    assert court.action is UpsertAction.UPDATED
    assert late_news.action is UpsertAction.SKIPPED
    stored = _case_fact(sqlite_unit_of_work, case_id, lawyer_id)
    assert stored.source_type is SourceType.COURT_RECORD
    assert stored.role is LawyerRole.DEFENSE
    assert stored.is_verified is True


def test_independent_sources_raise_confidence(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    lawyer_id = _create_lawyer(reconciler)
    case_id = uuid4()

    first = _result(
        reconciler.process_fact(
            make_fact(lawyer_id, case_id=case_id, source_url="https://news.example.my/a")
        )
    )
    repeat = _result(
        reconciler.process_fact(
            make_fact(lawyer_id, case_id=case_id, source_url="https://news.example.my/a")
        )
    )
    second = _result(
        reconciler.process_fact(
            make_fact(lawyer_id, case_id=case_id, source_url="https://news.example.my/b")
        )
    )

    assert repeat.action is UpsertAction.SKIPPED
    assert second.action is UpsertAction.UPDATED
    assert first.confidence is not None
    assert second.confidence is not None
    assert second.confidence > first.confidence
    stored = _case_fact(sqlite_unit_of_work, case_id, lawyer_id)
    assert stored.source_url == "https://news.example.my/b"
    assert stored.confidence_score == second.confidence


def test_fact_for_unknown_lawyer_is_unresolved(reconciler: ReconciliationEngine) -> None:
    outcome = reconciler.process_fact(make_fact(uuid4()))

    assert isinstance(outcome, RecordError)
    assert outcome.kind is ErrorKind.UNRESOLVED


def test_association_resolves_person_then_stores_fact(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    lawyer_id = _create_lawyer(reconciler)
    association = make_association(
        make_person_record("AHMAD BIN ALI", bar_membership_number=None),
        source_type=SourceType.COURT_RECORD,
    )

    result = _result(reconciler.process_association(association))

    assert result.action is UpsertAction.CREATED
    assert result.id == lawyer_id
    stored = _case_fact(sqlite_unit_of_work, association.case_id, lawyer_id)
    assert stored.source_type is SourceType.COURT_RECORD
    assert stored.is_verified is True


def test_association_for_unknown_person_is_unresolved(reconciler: ReconciliationEngine) -> None:
    outcome = reconciler.process_association(
        make_association(make_person_record("Siti Aminah", bar_membership_number=None))
    )

    assert isinstance(outcome, RecordError)
    assert outcome.kind is ErrorKind.UNRESOLVED
    assert outcome.subject == "Siti Aminah"


def test_firm_record_is_created_then_backfilled(
    reconciler: ReconciliationEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    created = _result(reconciler.process_firm(make_firm_record()))
    backfilled = _result(
        reconciler.process_firm(make_firm_record(phone="+60 3-2161 0000", city=None))
    )
    repeated = _result(reconciler.process_firm(make_firm_record(phone="+60 3-9999 9999")))

    assert created.action is UpsertAction.CREATED
    assert backfilled.action is UpsertAction.UPDATED
    assert repeated.action is UpsertAction.SKIPPED
    assert created.id == backfilled.id == repeated.id
    with sqlite_unit_of_work() as uow:
        assert created.id is not None
        firm = uow.repositories.firms.get(created.id)
    assert firm is not None
    assert firm.phone == "+60 3-2161 0000"


def test_same_named_firms_without_location_stay_separate(
    reconciler: ReconciliationEngine,
) -> None:
    first = _result(reconciler.process_firm(make_firm_record("Lee & Co", address=None, city=None)))
    second = _result(
        reconciler.process_firm(make_firm_record("Lee & Co", address=None, city=None))
    )

    assert first.action is UpsertAction.CREATED
    assert second.action is UpsertAction.CREATED
    assert first.id != second.id
