"""Tests for environment-driven settings"""

import logging

import pytest

from loan_schedule.config import Settings, configure_logging
from loan_schedule.formatter import FormatConfig


def test_defaults_match_turkish_deployment():
    settings = Settings.from_env({})

    assert settings.format_config() == FormatConfig(locale="tr_TR", currency="TRY")
    assert settings.history_limit == 50


def test_values_read_from_environment():
    settings = Settings.from_env(
        {
            "LOAN_LOCALE": "de_DE",
            "LOAN_CURRENCY": "eur",
            "LOAN_HISTORY_DATABASE_URL": "sqlite://",
            "LOAN_HISTORY_LIMIT": "5",
            "LOAN_LOG_LEVEL": "debug",
        }
    )

    assert settings.format_config() == FormatConfig(locale="de_DE", currency="EUR")
    assert settings.database_url == "sqlite://"
    assert settings.history_limit == 5
    assert settings.log_level == "DEBUG"


def test_bad_history_limit():
    with pytest.raises(ValueError):
        Settings.from_env({"LOAN_HISTORY_LIMIT": "many"})


def test_configure_logging_adds_one_handler():
    logger = configure_logging("INFO")
    configure_logging("DEBUG")

    assert logger is logging.getLogger("loan_schedule")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_unknown_locale_rejected():
    with pytest.raises(ValueError, match="locale"):
        Settings.from_env({"LOAN_LOCALE": "xx_YY"})


def test_unknown_currency_rejected():
    with pytest.raises(ValueError, match="currency"):
        Settings(currency="XYZQ")
