from __future__ import annotations

import pytest

from lawdir.domain.model import SourceType
from lawdir.domain.reconciliation.policy import compare_precedence, supersedes

SCRAPED = (SourceType.BAR_COUNCIL, SourceType.LAW_FIRM, SourceType.NEWS)


@pytest.mark.parametrize("incoming", SCRAPED)
@pytest.mark.parametrize("incoming_score", [0.0, 0.5, 1.0])
def test_court_record_is_never_overwritten_by_scraped_sources(
    incoming: SourceType,
    incoming_score: float,
) -> None:
    assert not supersedes(incoming, incoming_score, SourceType.COURT_RECORD, 0.1)


@pytest.mark.parametrize("incoming", SCRAPED)
def test_manual_is_never_overwritten_by_scraped_sources(incoming: SourceType) -> None:
    assert not supersedes(incoming, 1.0, SourceType.MANUAL, 0.1)


def test_court_record_beats_manual_regardless_of_score() -> None:
    assert supersedes(SourceType.COURT_RECORD, 0.1, SourceType.MANUAL, 1.0)
    assert not supersedes(SourceType.MANUAL, 1.0, SourceType.COURT_RECORD, 0.1)


@pytest.mark.parametrize("stored", SCRAPED)
def test_privileged_sources_beat_scraped_regardless_of_score(stored: SourceType) -> None:
    assert supersedes(SourceType.COURT_RECORD, 0.1, stored, 1.0)
    assert supersedes(SourceType.MANUAL, 0.1, stored, 1.0)


def test_scraped_sources_compare_scores_strictly() -> None:
    assert supersedes(SourceType.NEWS, 0.81, SourceType.BAR_COUNCIL, 0.80)
    assert not supersedes(SourceType.BAR_COUNCIL, 0.80, SourceType.NEWS, 0.80)
    assert not supersedes(SourceType.BAR_COUNCIL, 0.79, SourceType.NEWS, 0.80)


def test_same_privileged_tier_falls_back_to_scores() -> None:
    assert supersedes(SourceType.COURT_RECORD, 0.97, SourceType.COURT_RECORD, 0.96)
    assert not supersedes(SourceType.COURT_RECORD, 0.96, SourceType.COURT_RECORD, 0.96)


def test_compare_precedence_sign() -> None:
    assert compare_precedence(SourceType.COURT_RECORD, 0.0, SourceType.NEWS, 1.0) > 0
    assert compare_precedence(SourceType.NEWS, 1.0, SourceType.MANUAL, 0.0) < 0
    assert compare_precedence(SourceType.NEWS, 0.7, SourceType.NEWS, 0.7) == 0
