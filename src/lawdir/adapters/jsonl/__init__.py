"""JSON Lines input adapter."""

from __future__ import annotations

from .schema import AssociationPayload, FactPayload, FirmPayload, PersonPayload
from .source import DEFAULT_PAGE_SIZE, JsonlRecordSource, RawLine
from .translator import parse_association, parse_fact, parse_firm, parse_person

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "AssociationPayload",
    "FactPayload",
    "FirmPayload",
    "JsonlRecordSource",
    "PersonPayload",
    "RawLine",
    "parse_association",
    "parse_fact",
    "parse_firm",
    "parse_person",
]
