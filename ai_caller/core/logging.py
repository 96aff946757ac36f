"""
Logging configuration for AI Caller

All application loggers live under the "ai_caller" namespace. HTTP client
libraries are held at WARNING so request-level chatter from the OpenAI SDK
does not drown out call handling.
"""

import logging
import logging.config
from typing import Optional

LOGGER_NAMESPACE = "ai_caller"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def resolve_level(level: Optional[str]) -> int:
    """Map a level name to its number, falling back to INFO for unknown names"""
    value = logging.getLevelName((level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Optional[str] = "INFO", sql_echo: bool = False) -> logging.Logger:
    """
    Configure logging for the application

    Replaces any handlers already on the root logger, so calling it again
    reconfigures rather than duplicating output.

    Args:
        level: Log level name for the application loggers
        sql_echo: Log SQL statements from the database engine

    Returns:
        The application's namespace logger
    """
    log_level = resolve_level(level)

    loggers = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    loggers[LOGGER_NAMESPACE] = {"level": log_level}
    loggers["sqlalchemy.engine"] = {"level": "INFO" if sql_echo else "WARNING"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "standard",
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
        "loggers": loggers,
    })

    return logging.getLogger(LOGGER_NAMESPACE)


def get_logger(name: str) -> logging.Logger:
    """Logger under the application namespace; module __name__ values are used as-is"""
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
