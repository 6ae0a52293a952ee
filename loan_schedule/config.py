"""Runtime configuration for the calculator.

Settings are read from environment variables so the CLI and the web app can
share one deployment configuration:

``LOAN_LOCALE``                 locale used for formatting (default ``tr_TR``)
``LOAN_CURRENCY``               ISO 4217 currency code (default ``TRY``)
``LOAN_HISTORY_DATABASE_URL``   SQLAlchemy URL of the history store
``LOAN_HISTORY_LIMIT``          number of calculations kept in history
``LOAN_LOG_LEVEL``              logging level name
``FLASK_SECRET_KEY``            session secret of the web app
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .formatter import FormatConfig, check_currency, check_locale

DEFAULT_LOCALE = "tr_TR"
DEFAULT_CURRENCY = "TRY"
DEFAULT_DATABASE_URL = "sqlite:///loan_history.sqlite3"
DEFAULT_HISTORY_LIMIT = 50

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    locale: str = DEFAULT_LOCALE
    currency: str = DEFAULT_CURRENCY
    database_url: str = DEFAULT_DATABASE_URL
    history_limit: int = DEFAULT_HISTORY_LIMIT
    log_level: str = "WARNING"
    secret_key: str = "dev-secret-key"

    def __post_init__(self) -> None:
        check_locale(self.locale)
        check_currency(self.currency)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        try:
            history_limit = int(env.get("LOAN_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT))
        except ValueError as exc:
            raise ValueError(
                f"LOAN_HISTORY_LIMIT must be an integer; got {env.get('LOAN_HISTORY_LIMIT')}"
            ) from exc
        return cls(
            locale=env.get("LOAN_LOCALE", DEFAULT_LOCALE),
            currency=env.get("LOAN_CURRENCY", DEFAULT_CURRENCY).upper(),
            database_url=env.get("LOAN_HISTORY_DATABASE_URL", DEFAULT_DATABASE_URL),
            history_limit=history_limit,
            log_level=env.get("LOAN_LOG_LEVEL", "WARNING").upper(),
            secret_key=env.get("FLASK_SECRET_KEY", "dev-secret-key"),
        )

    def format_config(self) -> FormatConfig:
        return FormatConfig(locale=self.locale, currency=self.currency)


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = logging.getLogger("loan_schedule")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
