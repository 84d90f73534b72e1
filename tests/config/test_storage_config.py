from __future__ import annotations

from typing import TYPE_CHECKING

from lawdir.config import get_database_config, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_database_uri_env_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://localhost/lawdir")

    config = get_database_config()

    assert config.uri == "postgresql+psycopg://localhost/lawdir"


def test_default_database_lives_in_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("LAWDIR_DATA_DIR", str(tmp_path / "data"))

    config = get_database_config()

    assert config.uri == f"sqlite+pysqlite:///{(tmp_path / 'data' / 'lawdir.db').resolve()}"
    assert (tmp_path / "data").is_dir()


def test_xdg_data_home_is_respected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LAWDIR_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    storage = get_storage_config()

    assert storage.resolve_data_dir() == (tmp_path / "lawdir").resolve()
