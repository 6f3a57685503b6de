from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from trustgate.config import InvalidConfigurationValueError, bool_env, storage


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("TRUSTGATE_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.database_path(create_dir=False) == custom.resolve() / "trustgate.db"
    assert not custom.exists()


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("TRUSTGATE_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = storage.get_storage_config()

    assert config.data_dir == tmp_path / storage.APP_DIR_NAME


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")
    monkeypatch.delenv("TRUSTGATE_SQL_ECHO", raising=False)

    config = storage.get_database_config()

    assert config == storage.DatabaseConfig(uri="sqlite:///override.db")


def test_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("TRUSTGATE_DATA_DIR", str(tmp_path / "data-dir"))

    config = storage.get_database_config()

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert config.uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_database_config_accepts_explicit_storage(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    explicit = storage.StorageConfig(data_dir=tmp_path, database_filename="other.db")

    config = storage.get_database_config(storage=explicit)

    assert config.uri.endswith("other.db")


def test_sql_echo_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")
    monkeypatch.setenv("TRUSTGATE_SQL_ECHO", "Yes")

    assert storage.get_database_config().echo is True


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("off", False), ("  ", False)])
def test_bool_env_values(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool  # noqa: FBT001
) -> None:
    monkeypatch.setenv("SOME_FLAG", raw)

    assert bool_env("SOME_FLAG") is expected


def test_bool_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_FLAG", "maybe")

    with pytest.raises(InvalidConfigurationValueError):
        bool_env("SOME_FLAG")
