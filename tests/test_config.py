from __future__ import annotations

import pytest

from budgetsage.config import BaseConfig, _env_bool, _env_int


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "BUDGETSAGE_DATABASE_URL",
        "BUDGETSAGE_DEV_MODE",
        "BUDGETSAGE_LOG_LEVEL",
        "BUDGETSAGE_NOTIFICATION_LIMIT",
        "BUDGETSAGE_INCOME_CATEGORY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BUDGETSAGE_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'budgetsage.db'}"
    assert config.NOTIFICATION_LIMIT == 50
    assert config.INCOME_CATEGORY_NAME == "Income"
    assert config.LOG_LEVEL == "INFO"
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BUDGETSAGE_DATABASE_URL", "postgresql://localhost/budget")
    monkeypatch.setenv("BUDGETSAGE_NOTIFICATION_LIMIT", "20")
    monkeypatch.setenv("BUDGETSAGE_INCOME_CATEGORY", "Salary")
    monkeypatch.setenv("BUDGETSAGE_LOG_LEVEL", "debug")
    monkeypatch.setenv("BUDGETSAGE_DEV_MODE", "off")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://localhost/budget"
    assert config.sqlalchemy_engine_options() == {}
    assert config.NOTIFICATION_LIMIT == 20
    assert config.INCOME_CATEGORY_NAME == "Salary"
    assert config.LOG_LEVEL == "DEBUG"
    assert config.DEV_MODE is False


@pytest.mark.parametrize("value", ["zero", "0", "-3"])
def test_bad_notification_limit(monkeypatch, value):
    monkeypatch.setenv("BUDGETSAGE_NOTIFICATION_LIMIT", value)

    with pytest.raises(ValueError, match="BUDGETSAGE_NOTIFICATION_LIMIT"):
        BaseConfig()


@pytest.mark.parametrize("value, expected", [("1", True), ("YES", True), (" on ", True), ("no", False), ("", False)])
def test_env_bool(monkeypatch, value, expected):
    monkeypatch.setenv("SOME_FLAG", value)

    assert _env_bool("SOME_FLAG") is expected


def test_env_helpers_defaults(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)

    assert _env_bool("SOME_FLAG", default=True) is True
    assert _env_int("SOME_FLAG", 7) == 7
