"""Identity resolution for lawyers and firms.

Person lookup runs in strict priority order and stops at the first hit:

1. bar membership number (score 1.0)
2. case-insensitive exact name (score 1.0)
3. best fuzzy name match at or above the threshold (score = similarity)
4. creation, allowed only when the record carries a bar number

Firms match on normalized address, then on exact name within the same city
(skipped when the city is unknown), and are otherwise created. Creation
relies on the store's unique constraints: a conflicting insert is retried
once with a disambiguated slug.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from lawdir.domain.errors import PersistenceConflictError
from lawdir.domain.model import (
    BarStatus,
    Firm,
    FirmHistoryEntry,
    FirmMatchType,
    Lawyer,
    MatchType,
    utcnow,
)
from lawdir.domain.normalization import (
    disambiguate_slug,
    extract_city,
    firm_slug,
    normalize_address,
    normalize_name,
    normalize_state_name,
    slugify,
    trigram_similarity,
)

from .contracts import FirmMatch, PersonMatch

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from lawdir.domain.ports import ReconciliationRepositories

    from .records import FirmRecord, PersonRecord


type Similarity = Callable[[str, str], float]

DEFAULT_FUZZY_THRESHOLD = 0.85
log = logging.getLogger(__name__)


def resolve_person(
    repos: ReconciliationRepositories,
    record: PersonRecord,
    *,
    firm_id: UUID | None = None,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    similarity: Similarity = trigram_similarity,
    now: datetime | None = None,
) -> PersonMatch | None:
    """Map ``record`` to a canonical lawyer, creating one only when a bar number is present.

    Returns ``None`` when nothing matches and creation is not allowed. Any
    resolution of a record naming a firm also updates the lawyer's firm history.
    """
    when = now or utcnow()
    match = _find_person(repos, record, threshold=threshold, similarity=similarity)
    if match is None:
        if record.bar_membership_number is None:
            log.debug("No match for %r and no bar number; not creating", record.name)
            return None
        match = _create_person(repos, record, record.bar_membership_number, when)

    if record.firm_name:
        track_firm_history(
            repos,
            match.lawyer,
            firm_name=record.firm_name,
            firm_address=record.firm_address,
            firm_id=firm_id,
            now=when,
        )
    return match


def resolve_subject(repos: ReconciliationRepositories, lawyer_id: UUID) -> PersonMatch | None:
    """Match for a fact that already names its lawyer by id."""
    lawyer = repos.lawyers.get(lawyer_id)
    if lawyer is None:
        return None
    return PersonMatch(lawyer=lawyer, match_type=MatchType.DIRECT, match_score=1.0)


def _find_person(
    repos: ReconciliationRepositories,
    record: PersonRecord,
    *,
    threshold: float,
    similarity: Similarity,
) -> PersonMatch | None:
    if record.bar_membership_number is not None:
        lawyer = repos.lawyers.get_by_bar_number(record.bar_membership_number)
        if lawyer is not None:
            return PersonMatch(lawyer=lawyer, match_type=MatchType.BAR_NUMBER, match_score=1.0)

    lawyer = repos.lawyers.find_by_name(record.name)
    if lawyer is not None:
        return PersonMatch(lawyer=lawyer, match_type=MatchType.NAME_EXACT, match_score=1.0)

    return _fuzzy_match(repos, record.name, threshold=threshold, similarity=similarity)


def _fuzzy_match(
    repos: ReconciliationRepositories,
    name: str,
    *,
    threshold: float,
    similarity: Similarity,
) -> PersonMatch | None:
    key = normalize_name(name) or name
    best_id: UUID | None = None
    best_score = 0.0
    for candidate in repos.lawyers.name_candidates():
        score = similarity(key, normalize_name(candidate.name) or candidate.name)
        if score >= threshold and score > best_score:
            best_id, best_score = candidate.lawyer_id, score
    if best_id is None:
        return None
    lawyer = repos.lawyers.get(best_id)
    if lawyer is None:
        return None
    log.debug("Fuzzy matched %r to %r (%.2f)", name, lawyer.name, best_score)
    return PersonMatch(lawyer=lawyer, match_type=MatchType.NAME_FUZZY, match_score=best_score)


def _new_lawyer(record: PersonRecord, *, slug: str, now: datetime) -> Lawyer:
    lawyer = Lawyer(
        name=record.name,
        slug=slug,
        bar_membership_number=record.bar_membership_number,
        bar_status=record.bar_status or BarStatus.ACTIVE,
        last_scraped_at=now,
        created_at=now,
        updated_at=now,
    )
    for name, value in record.profile_values(now.date()).items():
        setattr(lawyer, name, value)
    return lawyer


def _create_person(
    repos: ReconciliationRepositories,
    record: PersonRecord,
    bar_number: str,
    now: datetime,
) -> PersonMatch:
    lawyer = _new_lawyer(record, slug=slugify(record.name), now=now)
    try:
        repos.lawyers.add(lawyer)
    except PersistenceConflictError:
        existing = repos.lawyers.get_by_bar_number(bar_number)
        if existing is not None:
            log.info("Bar number %s was created concurrently; reusing it", bar_number)
            return PersonMatch(lawyer=existing, match_type=MatchType.BAR_NUMBER, match_score=1.0)
        lawyer = _new_lawyer(record, slug=disambiguate_slug(lawyer.slug), now=now)
        repos.lawyers.add(lawyer)

    log.info("Created lawyer %s (%s)", lawyer.name, bar_number)
    return PersonMatch(lawyer=lawyer, match_type=MatchType.CREATED, match_score=1.0)


def track_firm_history(
    repos: ReconciliationRepositories,
    lawyer: Lawyer,
    *,
    firm_name: str,
    firm_address: str | None = None,
    firm_id: UUID | None = None,
    now: datetime | None = None,
) -> FirmHistoryEntry:
    """Keep exactly one current firm-history entry per lawyer.

    An unchanged firm only advances ``last_seen``; a different firm closes the
    current entry and opens a new one.
    """
    when = now or utcnow()
    current = repos.firm_history.current_for(lawyer.id)
    if current is not None and current.firm_name == firm_name:
        current.touch(when)
        if current.firm_id is None and firm_id is not None:
            current.firm_id = firm_id
        return current

    if current is not None:
        log.info("%s moved from %s to %s", lawyer.name, current.firm_name, firm_name)
        current.close(when)

    entry = FirmHistoryEntry(
        lawyer_id=lawyer.id,
        firm_id=firm_id,
        firm_name=firm_name,
        firm_address=firm_address,
        first_seen=when,
        last_seen=when,
    )
    repos.firm_history.add(entry)
    return entry


def resolve_firm(
    repos: ReconciliationRepositories,
    record: FirmRecord,
    *,
    now: datetime | None = None,
) -> FirmMatch:
    """Deduplicate ``record`` against stored firms, creating it when unmatched.

    Raises ``PersistenceConflictError`` when the disambiguated retry also conflicts.
    """
    normalized = normalize_address(record.address)
    if normalized is not None:
        firm = repos.firms.find_by_normalized_address(normalized)
        if firm is not None:
            return FirmMatch(firm=firm, match_type=FirmMatchType.ADDRESS)

    state = normalize_state_name(record.state)
    city = record.city or extract_city(record.address, state)
    if city is not None:
        firm = repos.firms.find_by_name_in_city(record.name, city)
        if firm is not None:
            return FirmMatch(firm=firm, match_type=FirmMatchType.NAME_CITY)

    when = now or utcnow()

    def build(slug: str) -> Firm:
        return Firm(
            name=record.name,
            slug=slug,
            address=record.address,
            normalized_address=normalized,
            state=state,
            city=city,
            phone=record.phone,
            email=record.email,
            created_at=when,
            updated_at=when,
        )

    firm = build(firm_slug(record.name, city))
    try:
        repos.firms.add(firm)
    except PersistenceConflictError:
        log.info("Firm slug %s taken; retrying once", firm.slug)
        firm = build(disambiguate_slug(firm.slug))
        repos.firms.add(firm)

    log.info("Created firm %s", firm.name)
    return FirmMatch(firm=firm, match_type=FirmMatchType.CREATED)
