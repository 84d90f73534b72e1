"""Confidence scoring for incoming facts.

The score is a fixed-weight sum of four terms, each reported separately so a
stored confidence can be audited:

- source reliability (0.40): ``SourceType.base_reliability``
- name match quality (0.25): the resolver's match score
- bar number presence (0.20): 1.0 when the subject carries a bar number, else 0.5
- multi-source agreement (0.15): ``min(1, 0.5 + 0.25 * log2(n))``
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lawdir.domain.model import SourceType

if TYPE_CHECKING:
    from collections.abc import Mapping

SOURCE_WEIGHT = 0.40
NAME_MATCH_WEIGHT = 0.25
BAR_NUMBER_WEIGHT = 0.20
AGREEMENT_WEIGHT = 0.15

BAR_COUNCIL_AUTO_VERIFY = 0.90
DEFAULT_AUTO_VERIFY = 0.95


def round_score(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def agreement_factor(agreement_count: int) -> float:
    count = max(1, agreement_count)
    return min(1.0, 0.5 + 0.25 * math.log2(count))


@dataclass(slots=True, frozen=True, kw_only=True)
class ConfidenceBreakdown:
    source_type: float
    name_match: float
    bar_number: float
    agreement: float

    def as_dict(self) -> Mapping[str, float]:
        return {
            "source_type": self.source_type,
            "name_match": self.name_match,
            "bar_number": self.bar_number,
            "agreement": self.agreement,
        }


@dataclass(slots=True, frozen=True, kw_only=True)
class ConfidenceResult:
    score: float
    breakdown: ConfidenceBreakdown


def score_confidence(
    source_type: SourceType,
    *,
    match_score: float = 1.0,
    has_bar_number: bool,
    agreement_count: int = 1,
) -> ConfidenceResult:
    """Trust score in [0, 1] for a fact, rounded to two decimals.

    Out-of-range inputs are clamped, so the score stays bounded for any input.
    """
    source_term = SourceType(source_type).base_reliability * SOURCE_WEIGHT
    name_term = _clamp(match_score) * NAME_MATCH_WEIGHT
    bar_term = (1.0 if has_bar_number else 0.5) * BAR_NUMBER_WEIGHT
    agreement_term = agreement_factor(agreement_count) * AGREEMENT_WEIGHT

    total = min(1.0, source_term + name_term + bar_term + agreement_term)
    return ConfidenceResult(
        score=round_score(total),
        breakdown=ConfidenceBreakdown(
            source_type=round_score(source_term),
            name_match=round_score(name_term),
            bar_number=round_score(bar_term),
            agreement=round_score(agreement_term),
        ),
    )


def should_auto_verify(source_type: SourceType, score: float, *, has_bar_number: bool) -> bool:
    source_type = SourceType(source_type)
    if source_type is SourceType.COURT_RECORD:
        return True
    if not has_bar_number:
        return False
    if source_type is SourceType.MANUAL:
        return True
    if source_type is SourceType.BAR_COUNCIL:
        return score >= BAR_COUNCIL_AUTO_VERIFY
    return score >= DEFAULT_AUTO_VERIFY
