"""Where the pipeline database lives and how to connect to it."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import bool_env

APP_DIR_NAME: Final[str] = "trustgate"
DEFAULT_DB_FILENAME: Final[str] = "trustgate.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self, *, create_dir: bool = True) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        if create_dir:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def default_data_dir() -> Path:
    """``$XDG_DATA_HOME/trustgate``, or ``%LOCALAPPDATA%\\trustgate`` on Windows."""

    if os.name == "nt":
        env_name, fallback = "LOCALAPPDATA", Path.home() / "AppData" / "Local"
    else:
        env_name, fallback = "XDG_DATA_HOME", Path.home() / ".local" / "share"
    base = os.getenv(env_name)
    return (Path(base) if base else fallback) / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    override = os.getenv("TRUSTGATE_DATA_DIR")
    return StorageConfig(data_dir=Path(override) if override else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv("DATABASE_URI")
    if not uri:
        path = (storage or get_storage_config()).database_path()
        uri = f"sqlite+pysqlite:///{path}"
    return DatabaseConfig(uri=uri, echo=bool_env("TRUSTGATE_SQL_ECHO"))
