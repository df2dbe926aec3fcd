import logging

import pytest
from flash_queryable import BasicQueryable, QueryableSettings
from flash_queryable import config
from flash_queryable.config import queryable_settings
from flash_queryable.logging import UTCFormatter, get_logger, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("flash_queryable")
    level, propagate = logger.level, logger.propagate
    yield logger
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_returns_named_logger():
    assert get_logger("flash_queryable.basic").name == "flash_queryable.basic"


def test_setup_logging_configures_package_logger(package_logger):
    setup_logging(level="debug")

    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, UTCFormatter)


def test_setup_logging_writes_file(package_logger, tmp_path):
    log_file = tmp_path / "logs" / "queryable.log"
    setup_logging(level=logging.INFO, log_file=log_file)

    get_logger("flash_queryable.test").info("hello file")
    for handler in package_logger.handlers:
        handler.flush()

    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_utc_formatter_uses_iso_timestamp():
    formatter = UTCFormatter("%(asctime)s %(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.created = 0
    record.msecs = 5

    assert formatter.format(record) == "1970-01-01 00:00:00.005Z msg"


def test_composed_expressions_are_logged(numbers, caplog, monkeypatch):
    monkeypatch.setattr(queryable_settings, "LOG_EXPRESSIONS", True)

    with caplog.at_level(logging.DEBUG, logger="flash_queryable.basic"):
        BasicQueryable.take(numbers, 2)

    assert "Composed take[int](Source[int], 2)" in caplog.text


def test_setup_logging_defaults_to_configured_level(package_logger, monkeypatch):
    """FLASH_QUERYABLE_LOG_LEVEL drives the level when none is passed."""
    monkeypatch.setenv("FLASH_QUERYABLE_LOG_LEVEL", "warning")
    monkeypatch.setattr(
        config, "queryable_settings", QueryableSettings(_env_file=None)
    )

    setup_logging()

    assert package_logger.level == logging.WARNING


def test_explicit_level_overrides_setting(package_logger, monkeypatch):
    monkeypatch.setattr(queryable_settings, "LOG_LEVEL", "ERROR")

    setup_logging(level=logging.DEBUG)

    assert package_logger.level == logging.DEBUG
