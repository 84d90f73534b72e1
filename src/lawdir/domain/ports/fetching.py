"""Ports for the scraping and extraction collaborators feeding the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lawdir.domain.reconciliation.records import AssociationRecord


@runtime_checkable
class RecordFetcher[TRecord](Protocol):
    """Returns one page of already-parsed records for ``source``.

    An empty page means the source is exhausted.
    """

    def fetch_records(self, source: str, page: int) -> Sequence[TRecord]: ...


@runtime_checkable
class FactExtractor(Protocol):
    """Turns free text (e.g. a news article) into case-lawyer claims."""

    def extract_facts(self, text: str) -> Sequence[AssociationRecord]: ...


__all__ = ["FactExtractor", "RecordFetcher"]
