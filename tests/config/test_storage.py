from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest

from hwinventory.config import StorageConfig, get_database_config, get_storage_config
from hwinventory.config.storage import platform_data_dir

if TYPE_CHECKING:
    from pathlib import Path


def test_storage_config_uses_env_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("HWINVENTORY_DATA_DIR", str(tmp_path / "inventory"))

    config = get_storage_config()

    assert config.data_dir == tmp_path / "inventory"
    assert config.database_path() == (tmp_path / "inventory" / "hwinventory.db").resolve()
    assert (tmp_path / "inventory").is_dir()


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_uri_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    storage = StorageConfig(data_dir=tmp_path)

    uri = get_database_config(storage=storage).uri

    assert uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'hwinventory.db'}"


def test_http_cache_path_lives_next_to_database(tmp_path: Path) -> None:
    storage = StorageConfig(data_dir=tmp_path)

    assert storage.http_cache_path(ensure=False).parent == storage.database_path().parent


@pytest.mark.skipif(sys.platform == "win32", reason="XDG layout")
def test_platform_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("HWINVENTORY_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    assert platform_data_dir() == tmp_path / "share" / "hwinventory"
    assert StorageConfig.from_env().data_dir == tmp_path / "share" / "hwinventory"


def test_from_env_does_not_create_the_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("HWINVENTORY_DATA_DIR", str(tmp_path / "later"))

    config = StorageConfig.from_env()

    assert config.database_path(ensure=False) == (tmp_path / "later" / "hwinventory.db").resolve()
    assert not (tmp_path / "later").exists()
