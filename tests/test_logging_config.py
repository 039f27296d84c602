import logging

import pytest

from ledger_metrics.logging_config import (
    APP_LOGGER_NAME,
    get_logger,
    level_from_name,
    parse_module_levels,
    setup_logging,
)


@pytest.fixture
def restore_loggers():
    names = [APP_LOGGER_NAME, "ledger_metrics.crud.crud_kpi", "ledger_metrics.services", "sqlalchemy.engine"]
    saved = {name: logging.getLogger(name).level for name in names}
    app_handlers = list(logging.getLogger(APP_LOGGER_NAME).handlers)
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.handlers.extend(app_handlers)


def test_level_from_name():
    assert level_from_name("debug", logging.INFO) == logging.DEBUG
    assert level_from_name(" Warning ", logging.INFO) == logging.WARNING
    assert level_from_name("chatty", logging.INFO) == logging.INFO
    assert level_from_name(None, logging.ERROR) == logging.ERROR


def test_parse_module_levels_resolves_names_under_the_app_logger():
    levels = parse_module_levels("crud.crud_kpi=DEBUG, services = warning,ledger_metrics.metrics=ERROR")

    assert levels == {
        "ledger_metrics.crud.crud_kpi": logging.DEBUG,
        "ledger_metrics.services": logging.WARNING,
        "ledger_metrics.metrics": logging.ERROR,
    }


def test_parse_module_levels_skips_malformed_entries():
    assert parse_module_levels("crud,=DEBUG,services=LOUD") == {}
    assert parse_module_levels("") == {}
    assert parse_module_levels(None) == {}


def test_setup_logging_applies_module_overrides(restore_loggers, monkeypatch):
    monkeypatch.delenv("LOG_FILE", raising=False)

    app_logger = setup_logging(
        app_log_level="WARNING",
        third_party_log_level="ERROR",
        module_levels="crud.crud_kpi=DEBUG",
    )

    assert app_logger.level == logging.WARNING
    assert app_logger.propagate is False
    assert get_logger("ledger_metrics.crud.crud_kpi").isEnabledFor(logging.DEBUG)
    assert not get_logger("ledger_metrics.crud.crud_goal").isEnabledFor(logging.INFO)
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR


def test_setup_logging_reads_environment(restore_loggers, monkeypatch, tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    monkeypatch.setenv("APP_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("LOG_LEVELS", "services=DEBUG")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    app_logger = setup_logging()
    get_logger("services.kpi_service").debug("net worth traced")
    for handler in app_logger.handlers:
        handler.flush()

    assert app_logger.level == logging.ERROR
    assert len(app_logger.handlers) == 2
    assert "net worth traced" in log_file.read_text()
