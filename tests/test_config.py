import logging

from milkbank.config import Settings, get_settings
from milkbank.utils.logger import get_logger, resolve_level, setup_logging


def test_get_settings_returns_fresh_instances():
    first, second = get_settings(), get_settings()
    assert isinstance(first, Settings)
    assert first is not second
    assert first.total_eligible > 0
    assert first.database_url


def test_settings_accept_overrides():
    settings = Settings(database_url="sqlite:///other.db", total_eligible=10, write_workers=4)
    assert settings.database_url == "sqlite:///other.db"
    assert settings.total_eligible == 10
    assert settings.write_workers == 4


def test_get_logger_is_named():
    logger = get_logger("milkbank.test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "milkbank.test"


def test_resolve_level_accepts_names_and_numbers():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level(None) == logging.INFO
    assert resolve_level("chatty") == logging.INFO


def test_setup_logging_quiets_sqlalchemy_engine():
    app_logger = logging.getLogger("milkbank")
    previous = app_logger.level
    try:
        setup_logging("DEBUG")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert app_logger.level == logging.DEBUG
    finally:
        app_logger.setLevel(previous)
