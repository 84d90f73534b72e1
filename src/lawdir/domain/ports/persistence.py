"""Ports for persisting the canonical directory graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from lawdir.domain.model import (
    CaseLawyer,
    FactAssertion,
    Firm,
    FirmHistoryEntry,
    Lawyer,
    ScrapingLog,
)

if TYPE_CHECKING:
    from uuid import UUID

    from lawdir.domain.model import LawyerRole


class NameCandidate(NamedTuple):
    """Projection used for fuzzy name matching."""

    lawyer_id: UUID
    name: str


class ContactProjection(NamedTuple):
    phone: str | None
    email: str | None


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store.

    ``add`` flushes immediately and raises ``PersistenceConflictError`` when a
    unique constraint rejects the entity.
    """

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class LawyerRepository(Repository[Lawyer], Protocol):
    def get(self, lawyer_id: UUID) -> Lawyer | None: ...

    def get_by_bar_number(self, bar_membership_number: str) -> Lawyer | None: ...

    def find_by_name(self, name: str) -> Lawyer | None:
        """Case-insensitive exact match on the full name."""
        ...

    def name_candidates(self) -> list[NameCandidate]: ...

    def contacts_for_firm(self, firm_id: UUID) -> list[ContactProjection]:
        """Phone and email of the firm's active lawyers."""
        ...


@runtime_checkable
class FirmRepository(Repository[Firm], Protocol):
    def get(self, firm_id: UUID) -> Firm | None: ...

    def find_by_normalized_address(self, normalized_address: str) -> Firm | None: ...

    def find_by_name_in_city(self, name: str, city: str) -> Firm | None: ...


@runtime_checkable
class FirmHistoryRepository(Repository[FirmHistoryEntry], Protocol):
    def current_for(self, lawyer_id: UUID) -> FirmHistoryEntry | None: ...

    def list_for(self, lawyer_id: UUID) -> list[FirmHistoryEntry]: ...


@runtime_checkable
class CaseLawyerRepository(Repository[CaseLawyer], Protocol):
    def get(self, case_id: UUID, lawyer_id: UUID) -> CaseLawyer | None:
        """Re-read the stored fact, discarding any state cached by the session."""
        ...


@runtime_checkable
class FactAssertionRepository(Repository[FactAssertion], Protocol):
    def exists(
        self,
        *,
        case_id: UUID,
        lawyer_id: UUID,
        role: LawyerRole,
        source_key: str,
    ) -> bool: ...

    def count_sources(self, *, case_id: UUID, lawyer_id: UUID, role: LawyerRole) -> int: ...


@runtime_checkable
class ScrapingLogRepository(Repository[ScrapingLog], Protocol):
    def get(self, log_id: UUID) -> ScrapingLog | None: ...
