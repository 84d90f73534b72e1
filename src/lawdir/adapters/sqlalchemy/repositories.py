"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from lawdir.adapters.sqlalchemy.mappings import (
    case_lawyer_table,
    fact_assertion_table,
    firm_history_table,
    firm_table,
    lawyer_table,
)
from lawdir.domain.errors import PersistenceConflictError, StoreUnavailableError
from lawdir.domain.model import (
    CaseLawyer,
    FactAssertion,
    Firm,
    FirmHistoryEntry,
    Lawyer,
    ScrapingLog,
)
from lawdir.domain.ports import ContactProjection, NameCandidate

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from lawdir.domain.model import LawyerRole


class _SqlAlchemyRepository[TEntity]:
    """Shared ``add`` that flushes inside a savepoint.

    A rejected insert rolls back only its savepoint, so the caller can retry
    within the same unit of work.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: TEntity) -> None:
        try:
            with self.session.begin_nested():
                self.session.add(entity)
        except IntegrityError as exc:
            raise PersistenceConflictError(str(exc.orig)) from exc
        except OperationalError as exc:
            raise StoreUnavailableError(str(exc.orig)) from exc


class SqlAlchemyLawyerRepository(_SqlAlchemyRepository[Lawyer]):
    def get(self, lawyer_id: uuid.UUID) -> Lawyer | None:
        return self.session.get(Lawyer, lawyer_id)

    def get_by_bar_number(self, bar_membership_number: str) -> Lawyer | None:
        stmt = select(Lawyer).where(lawyer_table.c.bar_membership_number == bar_membership_number)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_name(self, name: str) -> Lawyer | None:
        stmt = (
            select(Lawyer)
            .where(func.lower(lawyer_table.c.name) == func.lower(name))
            .order_by(lawyer_table.c.created_at, lawyer_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def name_candidates(self) -> list[NameCandidate]:
        stmt = select(lawyer_table.c.id, lawyer_table.c.name).order_by(
            lawyer_table.c.created_at, lawyer_table.c.id
        )
        return [
            NameCandidate(lawyer_id=row.id, name=row.name) for row in self.session.execute(stmt)
        ]

    def contacts_for_firm(self, firm_id: uuid.UUID) -> list[ContactProjection]:
        stmt = (
            select(lawyer_table.c.phone, lawyer_table.c.email)
            .where(lawyer_table.c.primary_firm_id == firm_id)
            .where(lawyer_table.c.is_active.is_(True))
        )
        return [
            ContactProjection(phone=row.phone, email=row.email)
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyFirmRepository(_SqlAlchemyRepository[Firm]):
    def get(self, firm_id: uuid.UUID) -> Firm | None:
        return self.session.get(Firm, firm_id)

    def find_by_normalized_address(self, normalized_address: str) -> Firm | None:
        stmt = (
            select(Firm)
            .where(firm_table.c.normalized_address == normalized_address)
            .order_by(firm_table.c.created_at, firm_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def find_by_name_in_city(self, name: str, city: str) -> Firm | None:
        stmt = (
            select(Firm)
            .where(firm_table.c.name == name)
            .where(firm_table.c.city == city)
            .order_by(firm_table.c.created_at, firm_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()


class SqlAlchemyFirmHistoryRepository(_SqlAlchemyRepository[FirmHistoryEntry]):
    def current_for(self, lawyer_id: uuid.UUID) -> FirmHistoryEntry | None:
        stmt = (
            select(FirmHistoryEntry)
            .where(firm_history_table.c.lawyer_id == lawyer_id)
            .where(firm_history_table.c.is_current.is_(True))
            .order_by(firm_history_table.c.first_seen.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_for(self, lawyer_id: uuid.UUID) -> list[FirmHistoryEntry]:
        stmt = (
            select(FirmHistoryEntry)
            .where(firm_history_table.c.lawyer_id == lawyer_id)
            .order_by(firm_history_table.c.first_seen, firm_history_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyCaseLawyerRepository(_SqlAlchemyRepository[CaseLawyer]):
    def get(self, case_id: uuid.UUID, lawyer_id: uuid.UUID) -> CaseLawyer | None:
        stmt = (
            select(CaseLawyer)
            .where(case_lawyer_table.c.case_id == case_id)
            .where(case_lawyer_table.c.lawyer_id == lawyer_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyFactAssertionRepository(_SqlAlchemyRepository[FactAssertion]):
    def exists(
        self,
        *,
        case_id: uuid.UUID,
        lawyer_id: uuid.UUID,
        role: LawyerRole,
        source_key: str,
    ) -> bool:
        stmt = (
            select(fact_assertion_table.c.id)
            .where(fact_assertion_table.c.case_id == case_id)
            .where(fact_assertion_table.c.lawyer_id == lawyer_id)
            .where(fact_assertion_table.c.role == role)
            .where(fact_assertion_table.c.source_key == source_key)
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def count_sources(self, *, case_id: uuid.UUID, lawyer_id: uuid.UUID, role: LawyerRole) -> int:
        stmt = (
            select(func.count(func.distinct(fact_assertion_table.c.source_key)))
            .where(fact_assertion_table.c.case_id == case_id)
            .where(fact_assertion_table.c.lawyer_id == lawyer_id)
            .where(fact_assertion_table.c.role == role)
        )
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyScrapingLogRepository(_SqlAlchemyRepository[ScrapingLog]):
    def get(self, log_id: uuid.UUID) -> ScrapingLog | None:
        return self.session.get(ScrapingLog, log_id)


if TYPE_CHECKING:
    from lawdir.domain.ports import (
        CaseLawyerRepository,
        FactAssertionRepository,
        FirmHistoryRepository,
        FirmRepository,
        LawyerRepository,
        ScrapingLogRepository,
    )

    def _check_ports(session: Session) -> None:
        _lawyers: LawyerRepository = SqlAlchemyLawyerRepository(session)
        _firms: FirmRepository = SqlAlchemyFirmRepository(session)
        _history: FirmHistoryRepository = SqlAlchemyFirmHistoryRepository(session)
        _facts: CaseLawyerRepository = SqlAlchemyCaseLawyerRepository(session)
        _assertions: FactAssertionRepository = SqlAlchemyFactAssertionRepository(session)
        _logs: ScrapingLogRepository = SqlAlchemyScrapingLogRepository(session)
