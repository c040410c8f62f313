"""Where the credential cache and the HTTP cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "vcstatus"
CREDENTIAL_CACHE_FILENAME: Final[str] = "credentials.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DATA_DIR_ENV: Final[str] = "VCSTATUS_DATA_DIR"
CACHE_DATABASE_URI_ENV: Final[str] = "VCSTATUS_CACHE_DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    credential_cache_filename: str = CREDENTIAL_CACHE_FILENAME
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file_path(self, filename: str, *, ensure: bool = True) -> Path:
        """Path of ``filename`` inside the data dir, creating the dir unless ``ensure`` is off."""

        base = self.resolve_data_dir()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base / filename

    def credential_cache_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(self.credential_cache_filename, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(self.http_cache_filename, ensure=ensure)


def _platform_data_home() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_cache_database_uri(*, storage: StorageConfig | None = None) -> str:
    """SQLAlchemy URI of the credential cache; an explicit env override wins."""

    override = optional_env_var(CACHE_DATABASE_URI_ENV)
    if override:
        return override
    path = (storage or get_storage_config()).credential_cache_path()
    return f"sqlite+pysqlite:///{path}"
