# ocdopts/config/logging_config.py

import logging
import logging.config
import logging.handlers
import os

from ocdopts.config.settings import Settings

OUTPUT_LOGGER = "ocdopts.output"

_output = logging.getLogger(OUTPUT_LOGGER)


def user_output(line: str) -> None:
    """Write one line to the user-facing output channel (stdout, no prefix)."""
    _output.info(line)


def configure_logging(settings: Settings) -> None:
    """
    Configure application-wide logging from Settings.

    - Root logger: console (stderr) + optional rotating file
    - ocdopts.output: bare messages on stdout (help text, banner, listings)
    """

    # ------------------------------------------------------------------ #
    # 1) Global log level
    # ------------------------------------------------------------------ #
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.captureWarnings(True)

    # ------------------------------------------------------------------ #
    # 2) Handlers
    # ------------------------------------------------------------------ #
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
        "output": {
            "class": "logging.StreamHandler",
            "level": logging.INFO,
            "formatter": "bare",
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]

    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers["app_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "standard",
            "filename": settings.log_file,
            "mode": "a",
            "maxBytes": 10_000_000,   # 10 MB
            "backupCount": 5,
            "encoding": "utf-8",
        }
        root_handlers.append("app_file")

    # ------------------------------------------------------------------ #
    # 3) dictConfig
    # ------------------------------------------------------------------ #
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "bare": {
                "format": "%(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            OUTPUT_LOGGER: {
                "handlers": ["output"],
                "level": "INFO",
                "propagate": False,
            },
            "py.warnings": {
                "handlers": root_handlers,
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "handlers": root_handlers,
            "level": level,
        },
    }

    logging.config.dictConfig(config)
