"""Environment driven configuration."""

from __future__ import annotations

import pytest

from optionstore.config import BaseConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "OPTIONSTORE_DATABASE_URL",
        "OPTIONSTORE_DEV_MODE",
        "OPTIONSTORE_ISOLATION_LEVEL",
        "OPTIONSTORE_CACHE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPTIONSTORE_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'options.db'}"
    assert config.DEV_MODE is True
    assert config.ISOLATION_LEVEL is None
    assert config.CACHE_SECONDS is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OPTIONSTORE_DATABASE_URL", "postgresql://u:p@db/options")
    monkeypatch.setenv("OPTIONSTORE_DEV_MODE", "off")
    monkeypatch.setenv("OPTIONSTORE_ISOLATION_LEVEL", "read_committed")
    monkeypatch.setenv("OPTIONSTORE_CACHE_SECONDS", "30")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://u:p@db/options"
    assert config.DEV_MODE is False
    assert config.ISOLATION_LEVEL == "READ COMMITTED"
    assert config.CACHE_SECONDS == 30.0
    assert config.sqlalchemy_engine_options() == {"isolation_level": "READ COMMITTED"}


def test_sqlite_engine_options():
    options = BaseConfig().sqlalchemy_engine_options()

    assert options == {"connect_args": {"check_same_thread": False}}


@pytest.mark.parametrize(
    "name, value",
    [
        ("OPTIONSTORE_ISOLATION_LEVEL", "sometimes"),
        ("OPTIONSTORE_CACHE_SECONDS", "soon"),
        ("OPTIONSTORE_CACHE_SECONDS", "-5"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        BaseConfig()
