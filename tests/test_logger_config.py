import logging

from rolldown_analyzer.analyzers.logger_config import LOG_LEVEL_ENV, setup_logger


def test_level_name_is_case_insensitive():
    assert setup_logger("rolldown_analyzer.tests.level_name", level="debug").level == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    assert setup_logger("rolldown_analyzer.tests.unknown_level", level="verbose").level == logging.INFO


def test_unknown_level_from_environment_falls_back_to_info(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

    logger = setup_logger("rolldown_analyzer.tests.env_level")

    assert logger.level == logging.INFO
    assert logger.handlers[0].level == logging.INFO


def test_numeric_level_is_kept():
    assert setup_logger("rolldown_analyzer.tests.numeric_level", level=logging.WARNING).level == logging.WARNING
