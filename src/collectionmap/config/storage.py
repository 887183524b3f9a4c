"""Where the default SQLite database lives and how to reach it."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag

APP_DIR_NAME: Final[str] = "collectionmap"
DEFAULT_DB_FILENAME: Final[str] = "collectionmap.db"
DATA_DIR_ENV: Final[str] = "COLLECTIONMAP_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_ECHO_ENV: Final[str] = "DATABASE_ECHO"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_uri(self) -> str:
        """SQLite URI inside the data directory, creating the directory if needed."""
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{data_dir / self.database_filename}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Engine settings handed to ``startup``."""

    uri: str
    echo: bool = False


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_ENV)
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise use the SQLite file in the data directory."""

    echo = env_flag(DATABASE_ECHO_ENV)
    uri = os.getenv(DATABASE_URI_ENV)
    if not uri:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, echo=echo)
