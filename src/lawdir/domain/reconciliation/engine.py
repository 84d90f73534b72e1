"""Per-record orchestration of resolve, score and upsert.

Every record gets its own unit of work. The resolve step and the upsert step
commit separately so no transaction spans more than one decision.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lawdir.domain.model import SourceType, utcnow
from lawdir.domain.normalization import trigram_similarity

from .contracts import ErrorKind, RecordError
from .resolve import (
    DEFAULT_FUZZY_THRESHOLD,
    resolve_firm,
    resolve_person,
    resolve_subject,
)
from .upsert import backfill_firm_contacts, upsert_fact, upsert_firm, upsert_profile

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from lawdir.domain.ports import ReconciliationRepositories, ReconciliationUnitOfWork

    from .contracts import PersonMatch, RecordOutcome
    from .records import AssociationRecord, FactRecord, FirmRecord, PersonRecord
    from .resolve import Similarity


type UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ReconciliationEngine:
    """Reconcile one record at a time against the canonical store."""

    unit_of_work: UnitOfWorkFactory
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    similarity: Similarity = trigram_similarity
    clock: Callable[[], datetime] = utcnow

    def process_profile(
        self,
        record: PersonRecord,
        *,
        source_type: SourceType = SourceType.BAR_COUNCIL,
    ) -> RecordOutcome:
        """Resolve a directory row, link its firm and apply the profile fields."""
        now = self.clock()
        with self.unit_of_work() as uow:
            repos = uow.repositories
            firm_id = None
            firm_record = record.firm_record()
            if firm_record is not None:
                firm_id = resolve_firm(repos, firm_record, now=now).firm_id
                uow.commit()

            match = self._resolve(repos, record, firm_id=firm_id, now=now)
            uow.commit()
            if match is None:
                return _unresolved(record.name)

            result = upsert_profile(
                repos,
                match,
                record,
                source_type=source_type,
                firm_id=firm_id,
                now=now,
            )
            uow.commit()

            if firm_id is not None and backfill_firm_contacts(repos, firm_id):
                uow.commit()
        log.debug("%s: %s", record.name, result.action)
        return result

    def process_association(self, record: AssociationRecord) -> RecordOutcome:
        """Resolve the described lawyer, then upsert the case-lawyer fact."""
        now = self.clock()
        with self.unit_of_work() as uow:
            repos = uow.repositories
            match = self._resolve(repos, record.person, firm_id=None, now=now)
            uow.commit()
            if match is None:
                return _unresolved(record.subject)

            result = upsert_fact(repos, match, record.to_fact(match.lawyer_id))
            uow.commit()
        log.debug("%s in case %s: %s", record.subject, record.case_id, result.action)
        return result

    def process_fact(self, record: FactRecord) -> RecordOutcome:
        """Upsert a fact that already names its lawyer by id."""
        with self.unit_of_work() as uow:
            repos = uow.repositories
            match = resolve_subject(repos, record.subject_id)
            if match is None:
                return _unresolved(record.subject, reason="unknown lawyer id")

            result = upsert_fact(repos, match, record)
            uow.commit()
        return result

    def process_firm(self, record: FirmRecord) -> RecordOutcome:
        now = self.clock()
        with self.unit_of_work() as uow:
            repos = uow.repositories
            match = resolve_firm(repos, record, now=now)
            uow.commit()
            result = upsert_firm(repos, match, record)
            uow.commit()
        return result

    def _resolve(
        self,
        repos: ReconciliationRepositories,
        record: PersonRecord,
        *,
        firm_id: UUID | None,
        now: datetime,
    ) -> PersonMatch | None:
        return resolve_person(
            repos,
            record,
            firm_id=firm_id,
            threshold=self.fuzzy_threshold,
            similarity=self.similarity,
            now=now,
        )


def _unresolved(subject: str, *, reason: str = "no match and no bar number") -> RecordError:
    log.info("Skipping %s: %s", subject, reason)
    return RecordError(subject=subject, error=reason, kind=ErrorKind.UNRESOLVED)
