"""Precedence policy deciding whether an incoming fact replaces a stored one.

Source type decides first: ``court_record`` beats every other source and
``manual`` beats every scraped source. Only when both sides share a privileged
tier, or both are scraped, does the numeric score decide, and then the
incoming score must be strictly higher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lawdir.domain.model import SourceType

if TYPE_CHECKING:
    from collections.abc import Sequence

_TIERS: Sequence[SourceType] = (SourceType.COURT_RECORD, SourceType.MANUAL)


def compare_precedence(
    incoming_source: SourceType,
    incoming_score: float,
    stored_source: SourceType,
    stored_score: float,
) -> float:
    """Positive when the incoming side wins, negative when the stored side wins."""
    for tier in _TIERS:
        incoming_in_tier = incoming_source is tier
        stored_in_tier = stored_source is tier
        if incoming_in_tier and not stored_in_tier:
            return 1.0
        if stored_in_tier and not incoming_in_tier:
            return -1.0
    return incoming_score - stored_score


def supersedes(
    incoming_source: SourceType,
    incoming_score: float,
    stored_source: SourceType,
    stored_score: float,
) -> bool:
    """Whether the incoming fact should overwrite the stored one. Ties keep the stored fact."""
    return compare_precedence(incoming_source, incoming_score, stored_source, stored_score) > 0
