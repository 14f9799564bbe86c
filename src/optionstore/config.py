"""Configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str) -> float | None:
    """Read an optional float from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "optionstore"
    DB_FILENAME = "options.db"
    ISOLATION_LEVELS = {
        "SERIALIZABLE",
        "REPEATABLE READ",
        "READ COMMITTED",
        "READ UNCOMMITTED",
        "AUTOCOMMIT",
    }

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("OPTIONSTORE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("OPTIONSTORE_DATABASE_URL", self._build_sqlite_url())
        self.ISOLATION_LEVEL = self._resolve_isolation_level()
        self.CACHE_SECONDS = _env_float("OPTIONSTORE_CACHE_SECONDS")
        if self.CACHE_SECONDS is not None and self.CACHE_SECONDS < 0:
            raise ValueError("OPTIONSTORE_CACHE_SECONDS must not be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("OPTIONSTORE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _resolve_isolation_level(self) -> str | None:
        value = os.getenv("OPTIONSTORE_ISOLATION_LEVEL")
        if not value:
            return None
        level = value.strip().upper().replace("_", " ")
        if level not in self.ISOLATION_LEVELS:
            raise ValueError(
                f"OPTIONSTORE_ISOLATION_LEVEL must be one of {sorted(self.ISOLATION_LEVELS)}, got {value!r}"
            )
        return level

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        if self.ISOLATION_LEVEL:
            engine_options["isolation_level"] = self.ISOLATION_LEVEL
        return engine_options
