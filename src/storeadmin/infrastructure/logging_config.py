"""Console logging for the CLI.

Modules log through ``logging.getLogger(__name__)``; this installs the
single stderr handler so command output on stdout stays clean.
"""

from __future__ import annotations

import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "console",
                },
            },
            "loggers": {
                "storeadmin": {"handlers": ["stderr"], "level": level.upper(), "propagate": False},
            },
        }
    )
