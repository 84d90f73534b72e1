"""Tunables for identity resolution and batch jobs."""

from __future__ import annotations

from dataclasses import dataclass

from lawdir.domain.jobs import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, DEFAULT_REQUEST_DELAY_SECONDS
from lawdir.domain.reconciliation.resolve import DEFAULT_FUZZY_THRESHOLD
from lawdir.domain.reconciliation.summary import (
    DEFAULT_MAX_LOGGED_ERRORS,
    DEFAULT_SUCCESS_ERROR_RATIO,
)

from .env import env_float, env_int


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    fuzzy_match_threshold: float = DEFAULT_FUZZY_THRESHOLD
    success_error_ratio: float = DEFAULT_SUCCESS_ERROR_RATIO
    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS


@dataclass(frozen=True, slots=True)
class JobConfig:
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS
    max_pages: int = DEFAULT_MAX_PAGES
    page_size: int = DEFAULT_PAGE_SIZE


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        fuzzy_match_threshold=env_float(
            "LAWDIR_FUZZY_THRESHOLD", DEFAULT_FUZZY_THRESHOLD, maximum=1.0
        ),
        success_error_ratio=env_float(
            "LAWDIR_SUCCESS_ERROR_RATIO", DEFAULT_SUCCESS_ERROR_RATIO, maximum=1.0
        ),
        max_logged_errors=env_int("LAWDIR_MAX_LOGGED_ERRORS", DEFAULT_MAX_LOGGED_ERRORS),
    )


def get_job_config() -> JobConfig:
    return JobConfig(
        request_delay_seconds=env_float("LAWDIR_REQUEST_DELAY", DEFAULT_REQUEST_DELAY_SECONDS),
        max_pages=env_int("LAWDIR_MAX_PAGES", DEFAULT_MAX_PAGES, minimum=1),
        page_size=env_int("LAWDIR_PAGE_SIZE", DEFAULT_PAGE_SIZE, minimum=1),
    )
