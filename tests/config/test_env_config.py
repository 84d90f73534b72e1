from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lawdir.adapters.jsonl import JsonlRecordSource
from lawdir.config import (
    ConfigurationError,
    get_job_config,
    get_reconciliation_config,
)
from lawdir.domain.model import JobType
from lawdir.domain.reconciliation import JobSummary, ReconciliationEngine

if TYPE_CHECKING:
    from pathlib import Path

_TUNABLES = (
    "LAWDIR_FUZZY_THRESHOLD",
    "LAWDIR_SUCCESS_ERROR_RATIO",
    "LAWDIR_MAX_LOGGED_ERRORS",
    "LAWDIR_REQUEST_DELAY",
    "LAWDIR_MAX_PAGES",
    "LAWDIR_PAGE_SIZE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _TUNABLES:
        monkeypatch.delenv(name, raising=False)


def test_reconciliation_defaults() -> None:
    config = get_reconciliation_config()

    assert config.fuzzy_match_threshold == 0.85
    assert config.success_error_ratio == 0.10
    assert config.max_logged_errors == 50


def test_reconciliation_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAWDIR_FUZZY_THRESHOLD", "0.9")
    monkeypatch.setenv("LAWDIR_SUCCESS_ERROR_RATIO", " 0.25 ")
    monkeypatch.setenv("LAWDIR_MAX_LOGGED_ERRORS", "5")

    config = get_reconciliation_config()

    assert config.fuzzy_match_threshold == 0.9
    assert config.success_error_ratio == 0.25
    assert config.max_logged_errors == 5


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LAWDIR_FUZZY_THRESHOLD", "high"),
        ("LAWDIR_FUZZY_THRESHOLD", "1.5"),
        ("LAWDIR_SUCCESS_ERROR_RATIO", "-0.1"),
        ("LAWDIR_MAX_LOGGED_ERRORS", "many"),
    ],
)
def test_invalid_reconciliation_values(
    monkeypatch: pytest.MonkeyPatch,
    name: str,
    value: str,
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_reconciliation_config()


def test_job_config(monkeypatch: pytest.MonkeyPatch) -> None:
    assert get_job_config().request_delay_seconds == 1.0

    monkeypatch.setenv("LAWDIR_REQUEST_DELAY", "0")
    monkeypatch.setenv("LAWDIR_MAX_PAGES", "3")
    monkeypatch.setenv("LAWDIR_PAGE_SIZE", "10")
    config = get_job_config()

    assert config.request_delay_seconds == 0.0
    assert config.max_pages == 3
    assert config.page_size == 10


def test_page_size_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAWDIR_PAGE_SIZE", "0")

    with pytest.raises(ConfigurationError):
        get_job_config()


def test_unset_tunables_fall_back_to_the_domain_defaults(tmp_path: Path) -> None:
    reconciliation = get_reconciliation_config()
    summary = JobSummary(job_type=JobType.FIRM)
    engine = ReconciliationEngine(unit_of_work=lambda: pytest.fail("no unit of work needed"))

    assert reconciliation.success_error_ratio == summary.success_error_ratio
    assert reconciliation.max_logged_errors == summary.max_logged_errors
    assert reconciliation.fuzzy_match_threshold == engine.fuzzy_threshold
    assert get_job_config().page_size == JsonlRecordSource(tmp_path / "x.jsonl").page_size
