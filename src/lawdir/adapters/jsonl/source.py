"""Read input records from JSON Lines files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO

from lawdir.domain.jobs import DEFAULT_PAGE_SIZE

from .translator import peek_name

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class RawLine:
    """One non-blank line of a JSON Lines file, parsed later by the record handler."""

    line_number: int
    text: str

    @property
    def subject(self) -> str:
        name = peek_name(self.text)
        return f"line {self.line_number}" if name is None else f"{name} (line {self.line_number})"


class JsonlRecordSource:
    """Context manager over a JSON Lines file.

    Lines are handed out raw so that malformed rows surface as per-record
    errors instead of aborting the whole job. Also serves pages of lines
    through ``fetch_records`` for paged jobs.
    """

    def __init__(self, path: str | Path, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.path = Path(path)
        self.page_size = page_size
        self._handle: TextIO | None = None
        self._next_line = 1

    @property
    def name(self) -> str:
        return str(self.path)

    def __enter__(self) -> JsonlRecordSource:
        self._handle = self.path.open(encoding="utf-8")
        self._next_line = 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def lines(self) -> Iterator[RawLine]:
        handle = self._require_handle()
        while text := handle.readline():
            line_number = self._next_line
            self._next_line += 1
            stripped = text.strip()
            if stripped:
                yield RawLine(line_number=line_number, text=stripped)

    def fetch_records(self, source: str, page: int) -> list[RawLine]:
        """Return the ``page``-th batch of non-blank lines (1-based)."""
        if source != self.name:
            raise ValueError(f"Unknown source {source!r}; this reader serves {self.name!r}")
        if page < 1:
            raise ValueError("page must be at least 1")
        handle = self._require_handle()
        handle.seek(0)
        self._next_line = 1
        batch: list[RawLine] = []
        skip = (page - 1) * self.page_size
        for raw in self.lines():
            if skip:
                skip -= 1
                continue
            batch.append(raw)
            if len(batch) == self.page_size:
                break
        log.debug("Read %d lines from %s page %d", len(batch), self.name, page)
        return batch

    def _require_handle(self) -> TextIO:
        if self._handle is None:
            raise RuntimeError(
                f"{self.name} is not open; use JsonlRecordSource as a context manager"
            )
        return self._handle


if TYPE_CHECKING:
    from lawdir.domain.ports import RecordFetcher

    _fetcher_check: RecordFetcher[RawLine] = JsonlRecordSource("records.jsonl")
