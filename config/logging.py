"""
Structured logging for the holdings service.

structlog renders JSON lines in production and coloured console output in
development. Stdlib loggers (Django's own) are routed through the same
renderer via ``ProcessorFormatter`` so every line has one shape.

Usage:
    from config.logging import configure_structlog, get_logging_config

    configure_structlog(debug=DEBUG)
    LOGGING = get_logging_config(debug=DEBUG)
"""

import sys
from typing import Any

import structlog

# Applied to records that come from stdlib logging rather than structlog
_FOREIGN_PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def configure_structlog(debug: bool = False) -> None:
    """
    Configure structlog processors.

    Call before anything logs; settings modules do this at import time.

    Args:
        debug: Console renderer with colours when True, JSON otherwise
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,  # request_id from the middleware
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _logger(level: str) -> dict[str, Any]:
    return {"handlers": ["console"], "level": level, "propagate": False}


def get_logging_config(debug: bool = False) -> dict[str, Any]:
    """
    Django ``LOGGING`` dict matching :func:`configure_structlog`.

    Environment settings modules extend the returned dict (extra handlers,
    per-logger levels) rather than building their own.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.processors.JSONRenderer(),
                "foreign_pre_chain": _FOREIGN_PRE_CHAIN,
            },
            "console": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.dev.ConsoleRenderer(colors=True),
                "foreign_pre_chain": _FOREIGN_PRE_CHAIN,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console" if debug else "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "INFO",
        },
        "loggers": {
            "holdings": _logger("DEBUG" if debug else "INFO"),
            "holdings.services": _logger("INFO"),
            "holdings.views": _logger("INFO"),
            "django": _logger("INFO"),
            "django.request": _logger("WARNING"),
            "django.security": _logger("WARNING"),
        },
    }
