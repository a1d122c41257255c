import logging.config
from copy import deepcopy
from typing import Any
from typing import Final

from freesoundkit.infrastructure.types import LogHandler
from freesoundkit.infrastructure.types import LogLevel

LOGGER_FREESOUNDKIT: Final[str] = "freesoundkit"

# httpx logs every request line at INFO.
TRANSPORT_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")
TRANSPORT_LOG_LEVEL: Final[LogLevel] = "WARNING"

FORMATTERS: Final[dict[str, dict[str, str]]] = {
    "verbose": {
        "format": "[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
    "message": {
        "format": "%(message)s",
    },
}

HANDLERS: Final[dict[LogHandler, dict[str, Any]]] = {
    "console": {
        "class": "logging.StreamHandler",
        "formatter": "verbose",
        "stream": "ext://sys.stdout",
    },
    "cli": {
        "class": "logging.StreamHandler",
        "formatter": "message",
        "stream": "ext://sys.stdout",
    },
    # Warnings and errors only, kept apart from the command output.
    "cli_alert": {
        "class": "logging.StreamHandler",
        "level": "WARNING",
        "formatter": "verbose",
        "stream": "ext://sys.stderr",
    },
    "rich": {
        "class": "rich.logging.RichHandler",
        "formatter": "message",
        "rich_tracebacks": True,
        "show_path": False,
    },
    "null": {
        "class": "logging.NullHandler",
    },
}


def build_logging_conf(level: LogLevel, handlers: list[LogHandler]) -> dict[str, Any]:
    """
    Logging configuration routing the freesoundkit loggers at ``level`` and the
    transport loggers at WARNING to the selected handlers only.
    """
    selected = list(dict.fromkeys(handlers))

    loggers: dict[str, dict[str, Any]] = {
        LOGGER_FREESOUNDKIT: {"level": level, "handlers": selected, "propagate": False},
    }
    for name in TRANSPORT_LOGGERS:
        loggers[name] = {"level": TRANSPORT_LOG_LEVEL, "handlers": selected, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": deepcopy(FORMATTERS),
        "handlers": {name: deepcopy(HANDLERS[name]) for name in selected},
        "loggers": loggers,
    }


def configure_loggers(level: LogLevel, handlers: list[LogHandler]) -> None:
    logging.config.dictConfig(build_logging_conf(level, handlers))
