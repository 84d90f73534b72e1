"""Deterministic normalization helpers shared by the resolvers.

Every helper is total: malformed input yields ``None`` (or an empty key), never an exception.
"""

from __future__ import annotations

import re
import time
import unicodedata
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")
_NON_ALNUM_RUNS = re.compile(r"[^a-z0-9]+")
_ADDRESS_PUNCTUATION = re.compile(r"[.,]")
_ADDRESS_ABBREVIATIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:jalan|jln)\b"), "jln"),
    (re.compile(r"\b(?:lorong|lrg)\b"), "lrg"),
    (re.compile(r"\b(?:taman|tmn)\b"), "tmn"),
    (re.compile(r"\b(?:suite|ste)\b"), "ste"),
    (re.compile(r"\b(?:level|lvl)\b"), "lvl"),
    (re.compile(r"\b(?:floor|flr)\b"), "flr"),
)
_TRIGRAM_WORD = re.compile(r"[^\W_]+")

_POSTCODE_CITY = re.compile(r"\d{5}\s+([A-Za-z\s]+?)(?:,|$)")
_NON_CITY_WORDS = frozenset({"Level", "Floor", "Suite", "Block"})

_DATE_DMY = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_DATE_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

_STATE_ALIASES = {
    "Johore": "Johor",
    "Wilayah Persekutuan Kuala Lumpur": "Kuala Lumpur",
    "Wilayah Persekutuan Labuan": "Labuan",
    "Wilayah Persekutuan Putrajaya": "Putrajaya",
}

_FIRM_SLUG_NAME_LIMIT = 50
_FIRM_SLUG_CITY_LIMIT = 20
_DAYS_PER_YEAR = 365.25


def slugify(name: str) -> str:
    """URL slug for a lawyer name."""
    text = _NON_SLUG_CHARS.sub("", name.lower())
    text = _WHITESPACE.sub("-", text.strip())
    return _HYPHEN_RUNS.sub("-", text)


def _slug_part(value: str, limit: int) -> str:
    return _NON_ALNUM_RUNS.sub("-", value.lower()).strip("-")[:limit]


def firm_slug(name: str, city: str | None = None) -> str:
    base = _slug_part(name, _FIRM_SLUG_NAME_LIMIT)
    if city:
        return f"{base}-{_slug_part(city, _FIRM_SLUG_CITY_LIMIT)}"
    return base


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out: list[str] = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def disambiguate_slug(slug: str, *, clock: Callable[[], float] = time.time) -> str:
    """Append a base-36 millisecond timestamp so a colliding slug can be retried."""
    return f"{slug}-{_base36(int(clock() * 1000))}"


def normalize_address(address: str | None) -> str | None:
    """Comparison key for firm addresses.

    Lowercases, drops ``.`` and ``,``, folds common Malay street abbreviations and
    collapses whitespace. Returns ``None`` when nothing usable is left.
    """
    if not address:
        return None
    text = _WHITESPACE.sub(" ", address.lower())
    text = _ADDRESS_PUNCTUATION.sub("", text)
    for pattern, replacement in _ADDRESS_ABBREVIATIONS:
        text = pattern.sub(replacement, text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text or None


def normalize_name(name: str | None) -> str | None:
    if name is None:
        return None
    text = unicodedata.normalize("NFKC", name).casefold()
    text = " ".join(text.split())
    return text or None


def _trigrams(text: str) -> set[str]:
    grams: set[str] = set()
    for word in _TRIGRAM_WORD.findall(text.lower()):
        padded = f"  {word} "
        grams.update(padded[i : i + 3] for i in range(len(padded) - 2))
    return grams


def trigram_similarity(left: str, right: str) -> float:
    """Similarity in [0, 1] computed the way PostgreSQL ``pg_trgm`` does.

    Each alphanumeric word is padded with two leading and one trailing space;
    the result is the Jaccard ratio of the two trigram sets.
    """
    left_grams = _trigrams(left)
    right_grams = _trigrams(right)
    union = left_grams | right_grams
    if not union:
        return 0.0
    return len(left_grams & right_grams) / len(union)


def normalize_state_name(state: str | None) -> str | None:
    if state is None:
        return None
    cleaned = " ".join(state.split())
    if not cleaned:
        return None
    return _STATE_ALIASES.get(cleaned, cleaned)


def extract_city(address: str | None, state: str | None = None) -> str | None:
    """Best-effort city from a Malaysian postal address.

    Tries the words following the five-digit postcode, then the words
    immediately preceding the state name.
    """
    if not address:
        return None
    patterns = [_POSTCODE_CITY]
    if state:
        patterns.append(re.compile(rf"([A-Za-z\s]+?)(?:,\s*)?{re.escape(state)}", re.IGNORECASE))
    for pattern in patterns:
        match = pattern.search(address)
        if match is None:
            continue
        city = match.group(1).strip()
        if len(city) > 2 and city not in _NON_CITY_WORDS:
            return city
    return None


def parse_admission_date(text: str | None) -> date | None:
    """Parse ``DD/MM/YYYY``, ``DD-MM-YYYY`` or ``YYYY-MM-DD``; ISO dates as a fallback."""
    if not text:
        return None
    value = text.strip()
    try:
        if match := _DATE_YMD.match(value):
            year, month, day = (int(part) for part in match.groups())
            return date(year, month, day)
        if match := _DATE_DMY.match(value):
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def years_at_bar(admitted: date | None, today: date | None = None) -> int | None:
    """Whole years since admission; ``None`` for unknown or future dates."""
    if admitted is None:
        return None
    reference = today or date.today()
    years = int((reference - admitted).days // _DAYS_PER_YEAR)
    return years if years >= 0 else None
